"""SQLAlchemy ORM models."""

from echos.models.base import Base
from echos.models.user import User

__all__ = ["Base", "User"]
