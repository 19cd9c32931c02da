"""Project aggregate and partial update models."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from .media import MediaResult
from .profile import PollyEngine, TTSProvider
from .request import AspectRatio
from .scene import Scene, SubtitleTransition, TransitionType

DEFAULT_POLLY_VOICE = "Ruth"
GTTS_VOICE = "gTTS-default"


class Project(BaseModel):
    """A storyboard project, stored as a single document."""

    id: str = Field(..., description="Unique project identifier")
    owner_id: str = Field(..., description="Owner of the project")
    name: str = Field(..., description="Display name")
    prompt: str = Field(..., description="Prompt the scenes were generated from")
    aspect_ratio: AspectRatio = Field(..., description="Output orientation")
    target_duration_seconds: float = Field(..., description="Requested total length")
    desired_scene_count: int = Field(..., description="Requested scene count")
    scenes: List[Scene] = Field(default_factory=list, description="Scenes in playback order")
    global_bg_audio: Optional[MediaResult] = Field(None, description="Background audio for the whole video")
    creation_date: datetime = Field(..., description="When the project was created (UTC)")
    last_modified: datetime = Field(..., description="When the project was last written (UTC)")

    class Config:
        """Pydantic config."""
        frozen = False

    @property
    def total_duration(self) -> float:
        """Sum of the scene durations."""
        return sum(scene.duration_seconds for scene in self.scenes)

    def find_scene(self, scene_id: str) -> Optional[Scene]:
        """Return the scene with `scene_id`, if present."""
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        return None

    def to_document(self) -> dict:
        """Serialize to a JSON-compatible document."""
        return self.model_dump(mode="json", exclude_none=True)


class SceneUpdate(BaseModel):
    """Fields of a scene that may be changed after generation.

    Only fields that were explicitly set are applied.
    """

    title: Optional[str] = None
    narration: Optional[str] = None
    duration_seconds: Optional[float] = Field(None, gt=0)
    visual_keywords: Optional[str] = None
    audio_keywords: Optional[str] = None
    transition_type: Optional[TransitionType] = None
    subtitle_transition: Optional[SubtitleTransition] = None
    selected_visual: Optional[MediaResult] = None
    transition_visual: Optional[MediaResult] = None
    narration_video: Optional[MediaResult] = None
    selected_audio: Optional[MediaResult] = None
    bg_audio: Optional[MediaResult] = None


class ProjectUpdate(BaseModel):
    """Project-level fields that may be changed after creation."""

    name: Optional[str] = None
    global_bg_audio: Optional[MediaResult] = None


class RenderOptions(BaseModel):
    """Options handed to the external rendering backend."""

    tts_provider: TTSProvider = Field(default=TTSProvider.GTTS)
    voice_id: Optional[str] = Field(None, description="Polly voice; ignored for gTTS")
    engine: PollyEngine = Field(default=PollyEngine.GENERATIVE)
    model: Optional[str] = Field(None, description="Text model recorded with the export")
    notes: Optional[str] = Field(None, description="Free-form instructions for the renderer")

    class Config:
        """Pydantic config."""
        protected_namespaces = ()

    def to_payload(self) -> dict:
        """Render options as they appear in the export payload."""
        polly = self.tts_provider == TTSProvider.AMAZON_POLLY
        payload = {
            "tts_provider": self.tts_provider.value,
            "voice_id": (self.voice_id or DEFAULT_POLLY_VOICE) if polly else GTTS_VOICE,
        }
        if polly:
            payload["engine"] = self.engine.value
        if self.model:
            payload["model"] = self.model
        notes = (self.notes or "").strip()
        if notes:
            payload["notes"] = notes
        return payload
