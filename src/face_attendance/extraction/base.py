from __future__ import annotations

import base64
import binascii
from typing import Optional, Protocol

from ..core.exceptions import ValidationError


class EmbeddingExtractor(Protocol):
    """Turns an image into a face embedding.

    Returns None when no face is detected.
    """

    def extract(self, image_bytes: bytes) -> Optional[tuple[float, ...]]:
        raise NotImplementedError


def decode_data_url(data_url: str) -> bytes:
    """Decode a `data:image/...;base64,` payload (or bare base64) into bytes."""
    if not data_url or not isinstance(data_url, str):
        raise ValidationError("image must be a base64 string")
    payload = data_url.split(",", 1)[1] if data_url.startswith("data:") else data_url
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("image is not valid base64") from exc


def read_embedding(data: dict, extractor: Optional[EmbeddingExtractor]):
    """Embedding from a JSON payload: either `embedding` or a base64 `image`."""
    if data.get("embedding") is not None:
        return data["embedding"]

    image = data.get("image")
    if not image:
        raise ValidationError("embedding or image is required")
    if extractor is None:
        raise ValidationError("image upload is not enabled on this server")

    embedding = extractor.extract(decode_data_url(image))
    if embedding is None:
        raise ValidationError("No face detected")
    return embedding
