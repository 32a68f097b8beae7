"""Shared data models for Module 1."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional


@dataclass(frozen=True)
class Detection:
    """Represents a single detected object, box given as center and size in pixels."""

    x: float
    y: float
    width: float
    height: float
    confidence: float
    class_label: str

    @classmethod
    def from_prediction(cls, payload: Mapping[str, Any]) -> "Detection":
        return cls(
            x=float(payload.get("x", 0.0)),
            y=float(payload.get("y", 0.0)),
            width=float(payload.get("width", 0.0)),
            height=float(payload.get("height", 0.0)),
            confidence=float(payload.get("confidence", 0.0)),
            class_label=str(payload.get("class", "")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "class": self.class_label,
            "confidence": self.confidence,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
        }


@dataclass
class DetectionBatch:
    """All predictions returned for one image."""

    predictions: List[Detection] = field(default_factory=list)
    image_width: Optional[float] = None
    image_height: Optional[float] = None
    annotated_image: Optional[str] = None

    def __len__(self) -> int:
        return len(self.predictions)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "predictions": [prediction.to_dict() for prediction in self.predictions],
            "image": {"width": self.image_width, "height": self.image_height},
            "has_annotated_image": self.annotated_image is not None,
        }
