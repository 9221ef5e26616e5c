from __future__ import annotations

import threading
import uuid
from typing import Callable, Optional, Sequence

from ..common.datetime_utils import now_utc
from ..common.validators import normalize_email, require_embedding, require_non_empty
from ..core.constants import DEFAULT_EMBEDDING_DIMENSION
from ..core.logging_config import get_logger
from .model import Identity
from .repository import IdentityRepository

logger = get_logger(__name__)


class EmbeddingStore:
    """Registered identities and their reference embeddings.

    Email is the dedup key: registering an existing email updates that
    identity in place. Writes are serialized, and each one is persisted by
    the repository before the call returns.
    """

    def __init__(
        self,
        identities: IdentityRepository,
        *,
        embedding_dimension: int = DEFAULT_EMBEDDING_DIMENSION,
        clock: Optional[Callable] = None,
    ):
        self._identities = identities
        self._dimension = int(embedding_dimension)
        self._clock = clock or now_utc
        self._write_lock = threading.Lock()

    @property
    def embedding_dimension(self) -> int:
        return self._dimension

    def validate_embedding(self, embedding) -> tuple[float, ...]:
        return require_embedding(embedding, self._dimension)

    def upsert_identity(self, name: str, email: str, embedding) -> Identity:
        name = require_non_empty(name, "name")
        email = normalize_email(email)
        vector = self.validate_embedding(embedding)

        with self._write_lock:
            now = self._clock()
            existing = self._identities.get_by_email(email)
            if existing:
                updated = Identity(
                    identity_id=existing.identity_id,
                    name=name,
                    email=existing.email,
                    embedding=vector,
                    registered_at=now,
                )
                if self._identities.update(updated):
                    logger.info(f"Re-registered identity {updated.identity_id} ({email})")
                    return updated
                logger.warning(f"Identity {existing.identity_id} vanished before update, re-creating")

            created = self._identities.create(
                Identity(
                    identity_id=uuid.uuid4().hex,
                    name=name,
                    email=email,
                    embedding=vector,
                    registered_at=now,
                )
            )
            logger.info(f"Registered identity {created.identity_id} ({email})")
            return created

    def list_identities(self) -> Sequence[Identity]:
        return list(self._identities.list_all())

    def find_by_id(self, identity_id: str) -> Optional[Identity]:
        return self._identities.get_by_id(identity_id)

    def labeled_embeddings(self) -> list[tuple[str, tuple[float, ...]]]:
        """(identity_id, embedding) pairs in registration order."""
        return [(i.identity_id, i.embedding) for i in self._identities.list_all()]
