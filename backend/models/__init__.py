"""SQLAlchemy declarative base for the document store."""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for document store tables."""
    pass
