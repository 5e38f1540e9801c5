"""
Public surface for changestore.
Importing this module does **not** touch the database; build an
AsyncEngine and call `await changestore.init_changestore(engine)`.
"""

from .bootstrap import init_changestore
from .core.record import ChangeRecord, DocumentChanges
from .errors import (
    ChangeStoreError,
    InvalidArgumentError,
    SerializationError,
    StorageError,
    VersionConflictError,
)
from .persistence.store import ChangeStore

__all__ = [
    "ChangeStore",
    "ChangeRecord",
    "DocumentChanges",
    "init_changestore",
    "ChangeStoreError",
    "InvalidArgumentError",
    "StorageError",
    "VersionConflictError",
    "SerializationError",
]
