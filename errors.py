"""
Error taxonomy for the quoting/ordering data layer.

Repositories and services raise these; nothing in the data layer catches
and swallows them. Callers surface them to the end user.
"""
from typing import Any, Optional


class AppError(Exception):
    """Base class for all data layer errors"""


class ValidationError(AppError):
    """Caller-supplied data violates a precondition. The store is untouched."""
    def __init__(self, message: str, field: Optional[str] = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class NotFoundError(AppError):
    """An operation referenced an id that does not exist"""
    def __init__(self, entity: str, entity_id: Any):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConflictError(AppError):
    """The write would create a second record where only one may exist"""


class StorageIOError(AppError, IOError):
    """The underlying storage failed (quota, serialization, lost connection)"""


class StorageUnavailable(StorageIOError):
    """The store could not be opened at startup"""
