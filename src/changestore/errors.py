"""
Error types raised by changestore.

- ChangeStoreError: base exception
- StorageError: the database (or its driver) failed
- VersionConflictError: another writer already holds the position
- SerializationError: a change payload could not be encoded or decoded
- InvalidArgumentError: bad caller input (also a ValueError)

Every datastore failure reaches the caller as a StorageError with the
driver exception chained; nothing is retried.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class ChangeStoreError(Exception):
    """Base exception for all changestore errors.

    Attributes:
        message: Error message
        code: Error code for programmatic handling
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or "CHANGESTORE_ERROR"
        self.details = details or {}


class StorageError(ChangeStoreError):
    """The underlying SQL engine rejected or failed a statement.

    Raised when:
    - The database is unreachable
    - The `changes` table is missing or malformed
    - A constraint is violated
    """

    def __init__(
        self,
        message: str,
        document_id: Optional[str] = None,
        operation: Optional[str] = None,
        original: Optional[BaseException] = None,
        code: str = "STORAGE_ERROR",
    ) -> None:
        super().__init__(
            message,
            code=code,
            details={"document_id": document_id, "operation": operation},
        )
        self.document_id = document_id
        self.operation = operation
        self.original = original


class VersionConflictError(StorageError):
    """Two writers computed the same version for one document.

    The losing insert hits the primary key on `id` (or the unique
    `(document, pos)` pair) and is rolled back.
    """

    def __init__(
        self,
        message: str,
        document_id: Optional[str] = None,
        operation: Optional[str] = None,
        original: Optional[BaseException] = None,
    ) -> None:
        super().__init__(
            message,
            document_id=document_id,
            operation=operation,
            original=original,
            code="VERSION_CONFLICT",
        )


class SerializationError(ChangeStoreError):
    """A change payload could not be converted to or from JSON text."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="SERIALIZATION_ERROR")


class InvalidArgumentError(ChangeStoreError, ValueError):
    """A caller passed an argument no statement can be built from.

    Raised when:
    - document_id is empty
    - since_version is negative
    """

    def __init__(self, message: str, argument: Optional[str] = None) -> None:
        super().__init__(
            message,
            code="INVALID_ARGUMENT",
            details={"argument": argument},
        )
        self.argument = argument
