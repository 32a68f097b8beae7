"""Image helpers for uploaded and annotated detection images."""
from __future__ import annotations

import base64
import binascii
import logging
from pathlib import Path
from typing import Optional, Tuple

try:  # pragma: no cover - import guarded for optional dependency
    import cv2
    import numpy as np
except ImportError as exc:  # pragma: no cover
    raise ImportError(
        "opencv-python is required for image utilities. Install the project with "
        "`pip install -e .` first."
    ) from exc

LOGGER = logging.getLogger(__name__)


def decode_image(data: bytes) -> Optional[np.ndarray]:
    """Decode encoded image bytes into a BGR array, or None when undecodable."""

    if not data:
        return None
    buffer = np.frombuffer(data, dtype=np.uint8)
    image = cv2.imdecode(buffer, cv2.IMREAD_COLOR)
    if image is None:
        LOGGER.debug("Unable to decode %d image bytes", len(data))
    return image


def image_size(data: bytes) -> Optional[Tuple[int, int]]:
    """Return (width, height) of encoded image bytes."""

    image = decode_image(data)
    if image is None:
        return None
    height, width = image.shape[:2]
    return int(width), int(height)


def save_annotated_image(encoded: str, target: Path) -> Optional[Path]:
    """Decode a base64 annotated image returned by the service and write it to disk."""

    if "," in encoded and encoded.lstrip().startswith("data:"):
        encoded = encoded.split(",", 1)[1]
    try:
        raw = base64.b64decode(encoded, validate=False)
    except (binascii.Error, ValueError) as exc:
        LOGGER.warning("Annotated image is not valid base64: %s", exc)
        return None
    image = decode_image(raw)
    if image is None:
        return None
    target.parent.mkdir(parents=True, exist_ok=True)
    cv2.imwrite(str(target), image)
    LOGGER.debug("Saved annotated image %s", target)
    return target
