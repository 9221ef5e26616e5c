class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class InvalidEmbedding(ValidationError):
    """Raised when an embedding has the wrong length or non-finite values."""


class IdentityNotFound(DomainError):
    """Raised when an identity id cannot be resolved."""

    def __init__(self, identity_id: str):
        super().__init__(f"Identity not found: {identity_id}")
        self.identity_id = identity_id


class StorageUnavailable(DomainError):
    """Raised when the persistence medium cannot be read or written."""
