"""Configuration management."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field

from .errors import ConfigurationError

DEFAULT_MODEL = "claude-sonnet-4-20250514"


class PlanLimits(BaseModel):
    """Bounds applied to scene plan requests before any model call."""

    min_prompt_length: int = Field(default=10, description="Minimum prompt length (stripped)")
    min_duration_seconds: float = Field(default=5, description="Shortest target duration")
    max_duration_seconds: float = Field(default=300, description="Longest target duration")
    min_scene_count: int = Field(default=1, description="Fewest scenes that may be requested")
    max_scene_count: int = Field(default=30, description="Most scenes that may be requested")
    default_scene_count: int = Field(default=6, description="Scene count when none is given")


DEFAULT_LIMITS = PlanLimits()


class Config(BaseModel):
    """Process-level configuration.

    Values default from the environment. Per-user keys stored in the
    document store take precedence, see `Credentials.resolve`.
    """

    # API Keys
    anthropic_api_key: str = Field(
        default_factory=lambda: os.getenv("ANTHROPIC_API_KEY", ""),
        description="Anthropic API key"
    )
    pixabay_api_key: str = Field(
        default_factory=lambda: os.getenv("PIXABAY_API_KEY", ""),
        description="Pixabay API key (images and videos)"
    )
    freesound_api_key: str = Field(
        default_factory=lambda: os.getenv("FREESOUND_API_KEY", ""),
        description="Freesound API token (audio)"
    )
    google_cloud_project: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_PROJECT", ""),
        description="Google Cloud project ID for Firestore"
    )

    # Storage
    workspace: Path = Field(
        default_factory=lambda: Path(os.getenv("STORYBOARD_WORKSPACE", ".storyboard")),
        description="Workspace directory for the local document store"
    )
    store: str = Field(
        default_factory=lambda: os.getenv("STORYBOARD_STORE", "local"),
        description="Document store backend: 'local' or 'firestore'"
    )

    # Model settings
    default_model: str = Field(
        default_factory=lambda: os.getenv("STORYBOARD_MODEL", DEFAULT_MODEL),
        description="Default Claude model"
    )

    limits: PlanLimits = Field(default_factory=PlanLimits)

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_required(self) -> None:
        """Validate that the model credential is set."""
        if not self.anthropic_api_key:
            raise ConfigurationError(
                "ANTHROPIC_API_KEY not set", credential="ANTHROPIC_API_KEY"
            )

    def validate_store(self) -> None:
        """Validate the document store settings.

        Raises:
            ConfigurationError: If the backend is unknown or Firestore is
                selected without a project.
        """
        if self.store not in ("local", "firestore"):
            raise ConfigurationError(
                f"Unknown STORYBOARD_STORE '{self.store}'. Use 'local' or 'firestore'.",
                credential="STORYBOARD_STORE",
            )
        if self.store == "firestore" and not self.google_cloud_project:
            raise ConfigurationError(
                "Missing required Firestore configuration: GOOGLE_CLOUD_PROJECT. "
                "Set the corresponding environment variable.",
                credential="GOOGLE_CLOUD_PROJECT",
            )


class Credentials(BaseModel):
    """Keys used for a single request.

    Built per call and never cached beyond the request that needs it.
    """

    model_api_key: str = ""
    model: str = DEFAULT_MODEL
    pixabay_key: str = ""
    freesound_key: str = ""

    class Config:
        """Pydantic config."""
        frozen = True
        protected_namespaces = ()

    @classmethod
    def resolve(cls, config: Config, profile=None) -> "Credentials":
        """Merge a user's stored keys over the process defaults.

        Args:
            config: Process configuration.
            profile: Optional `UserConfig` loaded from the document store.
        """
        if profile is None:
            return cls(
                model_api_key=config.anthropic_api_key,
                model=config.default_model,
                pixabay_key=config.pixabay_api_key,
                freesound_key=config.freesound_api_key,
            )
        return cls(
            model_api_key=profile.model_api_key or config.anthropic_api_key,
            model=profile.text_model or config.default_model,
            pixabay_key=profile.pixabay_key or config.pixabay_api_key,
            freesound_key=profile.freesound_key or config.freesound_api_key,
        )

    def require_model_key(self) -> str:
        """Return the model API key or raise if it is missing."""
        if not self.model_api_key:
            raise ConfigurationError(
                "Anthropic API key missing. Set ANTHROPIC_API_KEY or save "
                "your model key with 'storyboard configure'.",
                credential="ANTHROPIC_API_KEY",
            )
        return self.model_api_key


def load_config(env_file: Optional[Path] = None) -> Config:
    """Load environment variables and build a `Config`."""
    load_dotenv(env_file)
    return Config()
