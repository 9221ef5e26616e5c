"""
Face embedding extraction using the face_recognition (dlib) models.

Installed with the `face` extra.
"""

from __future__ import annotations

from typing import Optional

import cv2
import face_recognition
import numpy as np

from ..core.exceptions import ValidationError
from ..core.logging_config import get_logger
from .base import EmbeddingExtractor

logger = get_logger(__name__)


class FaceRecognitionExtractor(EmbeddingExtractor):
    """128-d dlib embeddings of the first detected face."""

    def __init__(self, model: str = "hog", num_jitters: int = 1):
        """
        Args:
            model: Face detector, "hog" (CPU) or "cnn"
            num_jitters: Re-sampling count when computing the encoding
        """
        self.model = model
        self.num_jitters = int(num_jitters)

    @staticmethod
    def decode_image(image_bytes: bytes) -> np.ndarray:
        """Decode image bytes into a contiguous RGB uint8 array."""
        nparr = np.frombuffer(image_bytes, np.uint8)
        img = cv2.imdecode(nparr, cv2.IMREAD_UNCHANGED)
        if img is None:
            raise ValidationError("image could not be decoded")

        # RGBA / grayscale -> BGR
        if len(img.shape) == 3 and img.shape[2] == 4:
            img = cv2.cvtColor(img, cv2.COLOR_BGRA2BGR)
        elif len(img.shape) == 2:
            img = cv2.cvtColor(img, cv2.COLOR_GRAY2BGR)

        # dlib needs contiguous RGB
        rgb = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
        return np.ascontiguousarray(rgb, dtype=np.uint8)

    def extract(self, image_bytes: bytes) -> Optional[tuple[float, ...]]:
        rgb = self.decode_image(image_bytes)

        boxes = face_recognition.face_locations(rgb, model=self.model)
        if not boxes:
            logger.debug("No face detected")
            return None

        encodings = face_recognition.face_encodings(rgb, boxes, num_jitters=self.num_jitters)
        if not encodings:
            return None

        if len(boxes) > 1:
            logger.debug(f"{len(boxes)} faces detected, using the first")
        return tuple(float(v) for v in encodings[0])
