"""Document repository: list, get, insert, merge, delete within one collection."""
import uuid
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from models.document import Document


def list_documents(session: Session, collection: str) -> list[Document]:
    """Return all documents of a collection (stable order by id)."""
    result = session.execute(
        select(Document).where(Document.collection == collection).order_by(Document.id)
    )
    return list(result.scalars().all())


def get_document(session: Session, collection: str, document_id: str) -> Optional[Document]:
    """Return a document by id or None (also None when it belongs to another collection)."""
    doc = session.get(Document, document_id)
    if doc is None or doc.collection != collection:
        return None
    return doc


def insert_document(
    session: Session,
    collection: str,
    data: dict[str, Any],
    document_id: str | None = None,
) -> Document:
    """Insert a document, commit, and return it. Id is generated if not provided."""
    doc = Document(id=document_id or str(uuid.uuid4()), collection=collection, data=dict(data))
    session.add(doc)
    session.commit()
    session.refresh(doc)
    return doc


def merge_document(
    session: Session,
    collection: str,
    document_id: str,
    data: dict[str, Any],
) -> Optional[Document]:
    """Merge data into an existing document body. Returns the document or None if not found."""
    doc = get_document(session, collection, document_id)
    if doc is None:
        return None
    # Reassign so the JSON column is flagged dirty.
    doc.data = {**(doc.data or {}), **data}
    session.commit()
    session.refresh(doc)
    return doc


def delete_document(session: Session, collection: str, document_id: str) -> bool:
    """Delete a document by id. Returns True if deleted, False if not found."""
    doc = get_document(session, collection, document_id)
    if doc is None:
        return False
    session.delete(doc)
    session.commit()
    return True

