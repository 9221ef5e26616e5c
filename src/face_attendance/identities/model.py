from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class Identity:
    """Domain entity: a registered person and their reference embedding.

    Plain data object, no DB access.
    """

    identity_id: str
    name: str
    email: str
    embedding: tuple[float, ...]
    registered_at: datetime

    def summary(self) -> "IdentitySummary":
        return IdentitySummary(
            identity_id=self.identity_id,
            name=self.name,
            email=self.email,
            registered_at=self.registered_at,
        )


@dataclass(frozen=True)
class IdentitySummary:
    """Display projection of an Identity, without biometric data."""

    identity_id: str
    name: str
    email: str
    registered_at: datetime

    def to_dict(self) -> dict:
        return {
            "id": self.identity_id,
            "name": self.name,
            "email": self.email,
            "registeredAt": self.registered_at.isoformat(),
        }
