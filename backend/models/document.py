"""Document model: one JSON document of a named collection."""
import uuid
from typing import Any

from sqlalchemy import Index, String
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import JSON

from models import Base


class Document(Base):
    """Document table: id, collection, data (schemaless JSON body)."""

    __tablename__ = "document"
    __table_args__ = (Index("ix_document_collection", "collection"),)

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    collection: Mapped[str] = mapped_column(String(255), nullable=False)
    data: Mapped[dict[str, Any]] = mapped_column(JSON(), nullable=False, default=dict)
