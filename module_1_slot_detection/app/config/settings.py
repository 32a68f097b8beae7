"""Configuration utilities for Module 1 slot and vehicle detection."""
from __future__ import annotations

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class DetectionSettings(BaseSettings):
    """Detection service configuration sourced from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="PARKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    api_key: Optional[str] = Field(default=None, description="Caller-supplied detection API key.")
    base_url: str = Field(default="https://detect.roboflow.com", description="Hosted inference endpoint.")
    slot_model_id: str = Field(default="parking-space-finder-wjxkw-sqkag/1")
    vehicle_model_id: str = Field(default="vehicle-classification-v2/1")
    slot_confidence: int = Field(default=40, ge=0, le=100)
    slot_overlap: int = Field(default=30, ge=0, le=100)
    vehicle_confidence: int = Field(default=50, ge=0, le=100)
    request_timeout_seconds: float = Field(default=30.0, gt=0.0)
    log_format: str = Field(default="text")
    annotated_output_dir: Path = Field(
        default=Path(__file__).resolve().parents[2] / "output_frames",
        description="Directory for annotated detection images written by the CLI.",
    )

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("annotated_output_dir", mode="before")
    @classmethod
    def _expand_dir(cls, value: str | Path) -> Path:
        return Path(value).expanduser()


def load_settings(**overrides: object) -> DetectionSettings:
    """Return detection settings, applying optional overrides."""

    return DetectionSettings(**overrides)
