"""
Thin data-access layer around the `changes` table.
Every statement runs on the injected AsyncEngine; nothing is cached here.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import contextmanager
from typing import Any, Iterator, List, Mapping

from sqlalchemy import delete, func, insert, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine

from ..core.codec import decode_change
from ..core.record import ChangeRecord, DocumentChanges
from ..errors import InvalidArgumentError, StorageError, VersionConflictError
from .models import ChangeRow

logger = logging.getLogger(__name__)


@contextmanager
def _storage_errors(operation: str, document_id: str) -> Iterator[None]:
    """Re-raise SQLAlchemy failures as StorageError (driver error chained)."""
    try:
        yield
    except IntegrityError as exc:
        logger.warning(
            "Version conflict",
            extra={"operation": operation, "document_id": document_id},
        )
        raise VersionConflictError(
            f"{operation} for document {document_id!r} lost a version race: {exc.orig}",
            document_id=document_id,
            operation=operation,
            original=exc,
        ) from exc
    except SQLAlchemyError as exc:
        logger.warning(
            "Storage failure",
            extra={"operation": operation, "document_id": document_id, "error": str(exc)},
        )
        raise StorageError(
            f"{operation} for document {document_id!r} failed: {exc}",
            document_id=document_id,
            operation=operation,
            original=exc,
        ) from exc


class ChangeStore:
    """Thin data‑access layer around the `changes` table."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine

    @staticmethod
    async def _count(conn: AsyncConnection, document_id: str) -> int:
        # version == number of rows, there is no stored version column
        q = (
            select(func.count())
            .select_from(ChangeRow)
            .where(ChangeRow.document == document_id)
        )
        return (await conn.execute(q)).scalar_one()

    # ---- writes ---------------------------------------------------------

    async def add_change(self, document_id: str, change: Any) -> int:
        """
        Append `change` as the next version of `document_id`.

        The count and the insert run in one transaction, but the transaction
        takes no lock: two writers can read the same count. The unique
        `(document, pos)` pair and the `id` primary key reject the second
        insert, which surfaces as VersionConflictError instead of a lost
        update. Nothing is retried.
        """
        if not document_id:
            raise InvalidArgumentError("document_id must be a non-empty string", "document_id")

        with _storage_errors("add_change", document_id):
            async with self.engine.begin() as conn:
                version = await self._count(conn, document_id) + 1
                record = ChangeRecord.for_change(document_id, version, change)
                await conn.execute(insert(ChangeRow).values(**record.model_dump()))

        logger.debug("Added change %s", record.id)
        return version

    async def remove_changes(self, document_id: str) -> None:
        """Delete every change of `document_id` (no error if there are none)."""
        with _storage_errors("remove_changes", document_id):
            async with self.engine.begin() as conn:
                result = await conn.execute(
                    delete(ChangeRow).where(ChangeRow.document == document_id)
                )
        logger.debug("Removed %s changes of %s", result.rowcount, document_id)

    async def seed(self, changes: Mapping[str, Any]) -> None:
        """
        Add one change per document, all additions in flight at once.

        Meant for fixtures and local setup. The first failing
        addition is raised; additions that already committed stay.
        """
        logger.info("Seeding %d documents", len(changes))
        await asyncio.gather(
            *(self.add_change(doc_id, change) for doc_id, change in changes.items())
        )

    # ---- reads ----------------------------------------------------------

    async def get_version(self, document_id: str) -> int:
        """Return the head version of `document_id` (0 when it has no changes)."""
        with _storage_errors("get_version", document_id):
            async with self.engine.connect() as conn:
                return await self._count(conn, document_id)

    async def get_changes(
        self, document_id: str, since_version: int = 0
    ) -> DocumentChanges:
        """
        Return changes with `pos >= since_version` (oldest→newest) and the
        head version of the whole document.

        0 returns every change, 1 returns the same set, n includes change n.
        """
        if since_version < 0:
            raise InvalidArgumentError("since_version must be >= 0", "since_version")

        with _storage_errors("get_changes", document_id):
            async with self.engine.connect() as conn:
                q = (
                    select(ChangeRow.data)
                    .where(ChangeRow.document == document_id)
                    .where(ChangeRow.pos >= since_version)
                    .order_by(ChangeRow.pos.asc())
                )
                rows: List[str] = list((await conn.execute(q)).scalars())
                head = await self._count(conn, document_id)

        return DocumentChanges(version=head, changes=[decode_change(d) for d in rows])
