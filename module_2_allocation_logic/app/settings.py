from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from module_2_allocation_logic.core.models import ScoringWeights


class AppSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="PARKING_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    distance_weight: float = 0.1
    junction_weight: float = 0.6
    intensity_weight: float = 0.3
    comparison_distance_weight: float = 0.4
    comparison_junction_weight: float = 1.2
    comparison_intensity_weight: float = 0.8
    intensity_delay_seconds: float = Field(default=2.0, ge=0.0)
    random_seed: Optional[int] = None
    log_format: str = "text"

    @model_validator(mode="after")
    def _weights_non_negative(self) -> "AppSettings":
        weights = (
            self.distance_weight,
            self.junction_weight,
            self.intensity_weight,
            self.comparison_distance_weight,
            self.comparison_junction_weight,
            self.comparison_intensity_weight,
        )
        if any(weight < 0 for weight in weights):
            raise ValueError("Scoring weights must be non-negative")
        return self

    @property
    def scoring_weights(self) -> ScoringWeights:
        return ScoringWeights(
            distance=self.distance_weight,
            junctions=self.junction_weight,
            intensity=self.intensity_weight,
        )

    @property
    def comparison_weights(self) -> ScoringWeights:
        return ScoringWeights(
            distance=self.comparison_distance_weight,
            junctions=self.comparison_junction_weight,
            intensity=self.comparison_intensity_weight,
        )


def get_settings() -> AppSettings:
    return AppSettings()
