"""
Durable storage exceptions.
"""

from .base import CartEngineException


class StorageException(CartEngineException):
    """Base exception for durable storage errors."""
    pass


class PersistenceFailedException(StorageException):
    """
    Raised when a durable-storage operation errors or exceeds its timeout.

    Non-fatal for cart mutations (the in-memory state is kept and this is
    reported as a warning), fatal for cart restoration (falls back to an
    empty cart).
    """

    def __init__(self, operation: str, key: str, reason: str):
        super().__init__(
            f"Storage {operation} failed for key '{key}': {reason}",
            details={'operation': operation, 'key': key, 'reason': reason}
        )
        self.operation = operation
        self.key = key
        self.reason = reason
