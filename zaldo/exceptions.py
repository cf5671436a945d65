"""Custom exception hierarchy for zaldo."""


class ZaldoError(Exception):
    """Base exception for all zaldo errors."""


class EntityNotFoundError(ZaldoError):
    """Raised when a referenced entity does not exist."""


class ReferentialIntegrityError(EntityNotFoundError):
    """Raised when a foreign key reference is violated."""


class InvalidEntityStateError(ZaldoError):
    """Raised when an entity is in an invalid state for the operation."""


class ConfigurationError(ZaldoError):
    """Raised when configuration is invalid or missing."""


class StoreError(ZaldoError):
    """Raised when the backing data store fails."""
