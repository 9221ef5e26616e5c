"""
Embedding matching module.

Nearest-neighbor matching of a query embedding against labeled reference
embeddings under a distance threshold.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

import numpy as np

from ..core.constants import DEFAULT_DISTANCE_THRESHOLD, UNKNOWN_DISTANCE, UNKNOWN_LABEL
from ..core.enums import DistanceMetric
from ..core.logging_config import get_logger

logger = get_logger(__name__)

Candidate = Tuple[str, Sequence[float]]


@dataclass(frozen=True)
class MatchResult:
    label: str
    distance: float

    @property
    def is_unknown(self) -> bool:
        return self.label == UNKNOWN_LABEL

    def to_dict(self) -> dict:
        return {"label": self.label, "distance": self.distance}


UNKNOWN = MatchResult(label=UNKNOWN_LABEL, distance=UNKNOWN_DISTANCE)


def euclidean_distances(query: np.ndarray, refs: np.ndarray) -> np.ndarray:
    return np.linalg.norm(refs - query, axis=1)


def cosine_distances(query: np.ndarray, refs: np.ndarray) -> np.ndarray:
    """1 - cosine similarity, for each row of `refs`."""
    norms = np.linalg.norm(refs, axis=1) * np.linalg.norm(query)
    similarities = (refs @ query) / (norms + 1e-8)
    return 1.0 - similarities


_DISTANCES = {
    DistanceMetric.EUCLIDEAN: euclidean_distances,
    DistanceMetric.COSINE: cosine_distances,
}


class Matcher:
    """
    Linear-scan nearest-neighbor matcher.

    Stateless: safe to share between threads.
    """

    def __init__(
        self,
        distance_threshold: float = DEFAULT_DISTANCE_THRESHOLD,
        metric: DistanceMetric | str = DistanceMetric.EUCLIDEAN,
    ):
        """
        Args:
            distance_threshold: A candidate matches only if its distance is strictly below this
            metric: Distance metric (euclidean or cosine)
        """
        self.distance_threshold = float(distance_threshold)
        self.metric = DistanceMetric(metric)
        self._distance = _DISTANCES[self.metric]

    def match(self, query_embedding: Sequence[float], candidates: Sequence[Candidate]) -> MatchResult:
        """
        Match a query embedding against labeled candidates.

        Args:
            query_embedding: Embedding to identify
            candidates: (label, embedding) pairs

        Returns:
            MatchResult of the closest candidate, or ("unknown", 1.0) if no
            candidate is closer than the threshold. Ties go to the earliest
            candidate; candidates of a different length than the query are
            skipped.
        """
        if len(candidates) == 0:
            return UNKNOWN

        query = np.asarray(query_embedding, dtype=np.float64)
        labels = []
        vectors = []
        for label, emb in candidates:
            vec = np.asarray(emb, dtype=np.float64)
            if vec.shape != query.shape:
                logger.warning(f"Skipping candidate {label}: shape {vec.shape} does not match query {query.shape}")
                continue
            labels.append(label)
            vectors.append(vec)

        if not vectors:
            return UNKNOWN

        refs = np.stack(vectors)

        distances = self._distance(query, refs)

        # argmin returns the first index among equal minima
        best_idx = int(np.argmin(distances))
        best_distance = float(distances[best_idx])

        if best_distance < self.distance_threshold:
            return MatchResult(label=labels[best_idx], distance=best_distance)

        return UNKNOWN
