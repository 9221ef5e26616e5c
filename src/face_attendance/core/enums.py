from __future__ import annotations

from enum import Enum


class DistanceMetric(str, Enum):
    """Distance used to compare a query embedding with stored ones."""

    EUCLIDEAN = "euclidean"
    COSINE = "cosine"
