"""SQLAlchemy declarative base.

Usage:
    from aipulse.models.base import Base

    class MyModel(Base):
        __tablename__ = "my_table"
        key: Mapped[str] = mapped_column(primary_key=True)
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models.

    Tables registered here are created by ``Database.create_tables``.
    """

    pass
