"""Per-user settings document."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class TTSProvider(str, Enum):
    """Text-to-speech backend used by the renderer."""
    GTTS = "gTTS"
    AMAZON_POLLY = "AmazonPolly"


class PollyEngine(str, Enum):
    """Amazon Polly engine selection."""
    STANDARD = "standard"
    NEURAL = "neural"
    GENERATIVE = "generative"
    LONG_FORM = "long-form"


class UserConfig(BaseModel):
    """Settings stored once per owner.

    Every field is optional in storage; missing fields take the defaults
    below when the document is read.
    """

    model_api_key: str = Field(default="", description="Anthropic API key")
    text_model: Optional[str] = Field(None, description="Override for the text model")
    pixabay_key: str = Field(default="", description="Pixabay API key")
    freesound_key: str = Field(default="", description="Freesound API token")
    tts_provider: TTSProvider = Field(default=TTSProvider.GTTS, description="Text-to-speech provider")
    polly_voice: Optional[str] = Field(None, description="Amazon Polly voice id")
    polly_engine: PollyEngine = Field(default=PollyEngine.GENERATIVE, description="Amazon Polly engine")
    aws_access_key_id: Optional[str] = Field(None, description="AWS access key for Polly")
    aws_secret_access_key: Optional[str] = Field(None, description="AWS secret key for Polly")
    aws_region: Optional[str] = Field(None, description="AWS region for Polly")
    output_directory: Optional[str] = Field(None, description="Where the renderer writes output")
    render_backend_url: Optional[str] = Field(None, description="External render backend URL")
    render_backend_api_key: Optional[str] = Field(None, description="External render backend key")

    class Config:
        """Pydantic config."""
        protected_namespaces = ()

    def missing_polly_settings(self) -> list[str]:
        """Return the AWS fields Polly needs but that are not set."""
        if self.tts_provider != TTSProvider.AMAZON_POLLY:
            return []
        missing = []
        if not self.aws_access_key_id:
            missing.append("aws_access_key_id")
        if not self.aws_secret_access_key:
            missing.append("aws_secret_access_key")
        if not self.aws_region:
            missing.append("aws_region")
        return missing
