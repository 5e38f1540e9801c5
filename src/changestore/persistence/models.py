"""
Single-table schema: every change of every document lives here.
"""

from sqlalchemy import BigInteger, Column, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import declarative_base

from ..core.record import now_ms

Base = declarative_base()


class ChangeRow(Base):
    """Single table that stores **all** document changes."""

    __tablename__ = "changes"
    __table_args__ = (
        UniqueConstraint("document", "pos", name="uq_changes_document_pos"),
    )

    id = Column(String, primary_key=True)  # "{document}/{pos}"
    document = Column(String, nullable=False, index=True)
    pos = Column(Integer, nullable=False)
    data = Column(Text, nullable=False)
    timestamp = Column(BigInteger, nullable=False, default=now_ms)
