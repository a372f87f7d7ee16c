"""ORM model for user accounts (auth, RBAC and profile)."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, String, Text

from echos.models.base import Base


def _new_id() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(UTC)


class User(Base):
    """
    User account for JWT authentication, role-based access control and profile data.

    role: 'admin' or 'user'
    pseudonyme is stored lower-cased; the unique index is the source of truth for uniqueness.
    """

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=_new_id)
    pseudonyme = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    address_street = Column(String(255), nullable=True)
    address_city = Column(String(255), nullable=True)
    address_country = Column(String(255), nullable=True)
    comment = Column(Text, nullable=True)
    role = Column(String(32), nullable=False, default="user")
    last_authenticated_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(
        DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow
    )
