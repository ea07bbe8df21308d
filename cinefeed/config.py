from __future__ import annotations

from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from cinefeed.models import CompressionPolicy

# Load environment variables from a .env file if present (local dev only)
load_dotenv()


class Settings(BaseSettings):
    """Application configuration loaded from environment variables or .env file."""

    # Supabase
    supabase_url: Optional[str] = Field(default=None, description="Project URL, e.g. https://xyz.supabase.co")
    supabase_key: Optional[str] = Field(default=None, description="Anon or service-role key.")

    # Storage
    storage_bucket: str = Field("post-images", description="Bucket holding post and comment images.")

    # Image processing
    image_max_bytes: int = Field(800 * 1024, gt=0, description="Byte budget for a compressed image.")
    image_max_dim: int = Field(1280, gt=0, description="Maximum width or height for uploaded images (pixels).")
    image_initial_quality: float = Field(0.8, gt=0, le=1, description="First JPEG quality tried (0-1).")
    image_min_quality: float = Field(0.5, gt=0, le=1, description="Lowest JPEG quality tried (0-1).")
    image_quality_step: float = Field(0.1, gt=0, le=1, description="Quality decrement between passes.")
    image_temp_dir: Optional[str] = Field(default=None, description="Directory for encoded files; system temp if unset.")

    # Remote sources
    http_timeout: float = Field(10.0, gt=0, description="Timeout (seconds) when fetching http(s) image sources.")

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    def compression_policy(self) -> CompressionPolicy:
        return CompressionPolicy(
            max_bytes=self.image_max_bytes,
            max_dimension=self.image_max_dim,
            initial_quality=self.image_initial_quality,
            min_quality=self.image_min_quality,
            quality_step=self.image_quality_step,
        )


@lru_cache()
def get_settings() -> Settings:  # pragma: no cover
    """Return a cached Settings instance so it is only parsed once."""

    return Settings()
