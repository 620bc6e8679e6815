# aula/app/db/base.py
"""SQLAlchemy declarative base for all ORM models."""
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """
    Base class for all SQLAlchemy ORM models.

    Usage:
        class Student(Base):
            __tablename__ = "students"
            sid = Column(String, primary_key=True)
            ...
    """
    pass


__all__ = ["Base"]
