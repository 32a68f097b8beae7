"""Hosted object-detection service wrapper."""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping, Optional, Protocol

import requests

from ..config.settings import DetectionSettings
from ..errors import ConfigurationError, DetectionFailure
from ..models import Detection, DetectionBatch
from ..utils.image import image_size

LOGGER = logging.getLogger(__name__)


class DetectionService(Protocol):
    """Anything that turns image bytes into a batch of detections."""

    def detect(self, image: bytes) -> DetectionBatch:
        ...


class RoboflowDetector:
    """Encapsulates one hosted detection model reached over HTTP."""

    def __init__(
        self,
        model_id: str,
        api_key: Optional[str],
        confidence: int,
        overlap: Optional[int] = None,
        base_url: str = "https://detect.roboflow.com",
        session: Optional[requests.Session] = None,
        timeout: float = 30.0,
        empty_message: str = "No objects detected in the image",
    ) -> None:
        self.model_id = model_id
        self.api_key = api_key
        self.confidence = confidence
        self.overlap = overlap
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.empty_message = empty_message
        self._session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model_id}"

    def _params(self) -> Dict[str, Any]:
        params: Dict[str, Any] = {"api_key": self.api_key, "confidence": self.confidence}
        if self.overlap is not None:
            params["overlap"] = self.overlap
        return params

    def detect(self, image: bytes) -> DetectionBatch:
        """Send one image to the model and return its predictions."""

        if not self.api_key:
            raise ConfigurationError("Please provide a detection API key")

        LOGGER.info("Requesting detections from %s", self.model_id)
        try:
            response = self._session.post(
                self.endpoint,
                params=self._params(),
                files={"file": ("image.jpg", image, "image/jpeg")},
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise DetectionFailure(f"Detection request failed: {exc}") from exc

        if response.status_code >= 400:
            raise DetectionFailure(
                f"API Error: {response.status_code} - {response.reason}",
                status_code=response.status_code,
            )

        try:
            payload = response.json()
        except ValueError as exc:
            raise DetectionFailure("Detection service returned malformed JSON") from exc

        batch = self._parse(payload, image)
        if not batch.predictions:
            raise DetectionFailure(self.empty_message)
        LOGGER.debug("Model %s returned %d predictions", self.model_id, len(batch))
        return batch

    def _parse(self, payload: object, image: bytes) -> DetectionBatch:
        if not isinstance(payload, Mapping):
            return DetectionBatch()
        raw_predictions = payload.get("predictions") or []
        try:
            predictions: List[Detection] = [
                Detection.from_prediction(item) for item in raw_predictions if isinstance(item, Mapping)
            ]
        except (TypeError, ValueError) as exc:
            raise DetectionFailure("Detection service returned a malformed prediction") from exc

        width: Optional[float] = None
        height: Optional[float] = None
        image_info = payload.get("image")
        if isinstance(image_info, Mapping):
            width = _coerce_optional_float(image_info.get("width"))
            height = _coerce_optional_float(image_info.get("height"))
        if (width is None or height is None) and predictions:
            size = image_size(image)
            if size is not None:
                width = width if width is not None else float(size[0])
                height = height if height is not None else float(size[1])

        annotated = payload.get("visualization")
        return DetectionBatch(
            predictions=predictions,
            image_width=width,
            image_height=height,
            annotated_image=annotated if isinstance(annotated, str) else None,
        )

    def close(self) -> None:
        self._session.close()


def _coerce_optional_float(value: object) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def build_slot_detector(
    settings: DetectionSettings, session: Optional[requests.Session] = None
) -> RoboflowDetector:
    """Detector for parking-space occupancy."""

    return RoboflowDetector(
        model_id=settings.slot_model_id,
        api_key=settings.api_key,
        confidence=settings.slot_confidence,
        overlap=settings.slot_overlap,
        base_url=settings.base_url,
        session=session,
        timeout=settings.request_timeout_seconds,
        empty_message="No parking slots detected. Try adjusting the image or confidence threshold.",
    )


def build_vehicle_detector(
    settings: DetectionSettings, session: Optional[requests.Session] = None
) -> RoboflowDetector:
    """Detector for vehicle classification."""

    return RoboflowDetector(
        model_id=settings.vehicle_model_id,
        api_key=settings.api_key,
        confidence=settings.vehicle_confidence,
        base_url=settings.base_url,
        session=session,
        timeout=settings.request_timeout_seconds,
        empty_message="No vehicle detected in the image",
    )
