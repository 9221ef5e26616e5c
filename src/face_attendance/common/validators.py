from __future__ import annotations

import re
from typing import Iterable

import numpy as np

from ..core.exceptions import InvalidEmbedding, ValidationError

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def require_non_empty(value: str, field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    if not value or not value.strip():
        raise ValidationError(f"{field_name} must not be empty")
    return value.strip()


def normalize_email(value: str) -> str:
    email = require_non_empty(value, "email").lower()
    if not _EMAIL_RE.match(email):
        raise ValidationError(f"email is not valid: {value!r}")
    return email


def require_embedding(values: Iterable[float], dimension: int) -> tuple[float, ...]:
    """Validate an embedding and return it as a tuple of floats.

    Raises InvalidEmbedding on wrong length, non-numeric or non-finite values.
    """
    if values is None or isinstance(values, (str, bytes)):
        raise InvalidEmbedding("embedding must be a sequence of numbers")

    try:
        arr = np.asarray(values, dtype=np.float64)
    except (TypeError, ValueError) as exc:
        raise InvalidEmbedding("embedding must be a sequence of numbers") from exc

    if arr.ndim != 1:
        raise InvalidEmbedding(f"embedding must be one-dimensional, got shape {arr.shape}")
    if arr.shape[0] != dimension:
        raise InvalidEmbedding(f"embedding must have {dimension} values, got {arr.shape[0]}")
    if not np.all(np.isfinite(arr)):
        raise InvalidEmbedding("embedding contains non-finite values")

    return tuple(float(v) for v in arr)
