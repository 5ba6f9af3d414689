from pathlib import Path
import os

from dotenv import dotenv_values
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# Explicitly load .env for local/dev environments only if values are missing from the environment
BASE_DIR = Path(__file__).resolve().parent.parent.parent
env_file = BASE_DIR / ".env"

if env_file.exists():
    file_env = dotenv_values(env_file)
    missing_keys = {k: v for k, v in file_env.items() if k not in os.environ}
    for k, v in missing_keys.items():
        os.environ[k] = v


class Settings(BaseSettings):
    """Process settings pulled from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CIRCUIT_FIELD_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # API Configuration
    api_host: str = Field(default="0.0.0.0", description="API host")
    api_port: int = Field(default=8000, description="API port")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_format: str = Field(default="json", description="Logging format (json or console)")

    # Field Limits
    max_viewport_width: int = Field(default=4000, description="Max allowed viewport width in pixels")
    max_viewport_height: int = Field(default=4000, description="Max allowed viewport height in pixels")

    # Rendering
    render_dpi: int = Field(default=100, description="Dots per inch for PNG export")


# Instantiate singleton settings object
settings = Settings()
