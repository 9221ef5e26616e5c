from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Identity


class IdentityRepository(Protocol):
    """Repository interface for Identity records.

    Note (DIP): the store depends on this interface, not on a concrete database.
    """

    def get_by_id(self, identity_id: str) -> Optional[Identity]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Identity]:
        raise NotImplementedError

    def create(self, identity: Identity) -> Identity:
        raise NotImplementedError

    def update(self, identity: Identity) -> bool:
        """Replace name, embedding and registered_at of an existing record."""

        raise NotImplementedError

    def list_all(self) -> Sequence[Identity]:
        """All identities in registration order."""

        raise NotImplementedError
