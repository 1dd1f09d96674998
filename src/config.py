"""Application configuration using Pydantic Settings."""

from pathlib import Path
from dotenv import load_dotenv
from pydantic_settings import BaseSettings
from pydantic import Field

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

# Explicitly load .env into os.environ BEFORE Pydantic reads them
_ENV_FILE = _PROJECT_ROOT / ".env"
load_dotenv(_ENV_FILE, override=False)


class Settings(BaseSettings):
    """Centralized configuration loaded from environment variables.

    Every field has a default, so provisioning runs without any
    environment at all.
    """

    # --- Models ---
    embedding_quality: str = Field(
        default="balanced",
        description="Embedding model preset to provision (fast, balanced, quality)",
    )
    device: str = Field(default="cpu", description="Device the model is loaded on")

    # --- Cache ---
    local_cache_dir: Path = Field(
        default=_PROJECT_ROOT / "models",
        description="Project-local model cache checked before the Hugging Face cache",
    )

    # --- Logging ---
    log_level: str = Field(default="WARNING", description="Root logging level")

    model_config = {"extra": "ignore", "env_prefix": "PROVISIONER_"}


# Singleton instance
settings = Settings()
