"""User directory: persistence of user records over SQLAlchemy."""

import logging
from typing import Any

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from echos.core.errors import AlreadyExistsError
from echos.models import User
from echos.schemas.users import SORTABLE_FIELDS, UserQuery

logger = logging.getLogger(__name__)

# Plain columns callers may write. Address is accepted as a nested mapping.
WRITABLE_FIELDS = frozenset(
    {
        "pseudonyme",
        "password_hash",
        "name",
        "comment",
        "role",
        "last_authenticated_at",
    }
)
ADDRESS_PARTS = ("street", "city", "country")

# Columns covered by full-text search.
TEXT_SEARCH_COLUMNS = (
    User.pseudonyme,
    User.name,
    User.comment,
    User.address_street,
    User.address_city,
    User.address_country,
)


def _to_columns(data: dict[str, Any]) -> dict[str, Any]:
    """Flatten a record mapping into column values; rejects anything not writable."""
    columns: dict[str, Any] = {}
    for key, value in data.items():
        if key == "address":
            address = value or {}
            for part in ADDRESS_PARTS:
                columns[f"address_{part}"] = address.get(part)
        elif key in WRITABLE_FIELDS:
            columns[key] = value
        else:
            # A raw "password" must have been hashed by the caller.
            raise ValueError(f"Field {key!r} cannot be written to the user directory")
    return columns


class UserDirectory:
    """
    Lookup and mutation of user records.

    Uniqueness of pseudonyme is enforced by the database index; an integrity
    violation on insert or update surfaces as AlreadyExistsError.
    """

    def __init__(self, session: Session) -> None:
        self._session = session

    def find_one(self, **filters: Any) -> User | None:
        if not filters:
            raise ValueError("find_one requires at least one filter")
        return self._session.query(User).filter_by(**filters).first()

    def create(self, data: dict[str, Any]) -> User:
        user = User(**_to_columns(data))
        self._session.add(user)
        self._commit()
        self._session.refresh(user)
        return user

    def update(self, filters: dict[str, Any], patch: dict[str, Any]) -> User | None:
        user = self.find_one(**filters)
        if user is None:
            return None
        for column, value in _to_columns(patch).items():
            setattr(user, column, value)
        self._commit()
        self._session.refresh(user)
        return user

    def remove(self, filters: dict[str, Any]) -> int:
        if not filters:
            raise ValueError("remove requires at least one filter")
        # "fetch" also evicts matched instances from the identity map.
        deleted = (
            self._session.query(User)
            .filter_by(**filters)
            .delete(synchronize_session="fetch")
        )
        self._session.commit()
        return deleted

    def find_all(self, query: UserQuery) -> list[User]:
        """Paginated, sorted, full-text filtered list of users."""
        q = self._session.query(User)
        if query.text and query.text.split():
            terms = query.text.split()
            q = q.filter(
                or_(
                    *(
                        column.contains(term, autoescape=True)
                        for term in terms
                        for column in TEXT_SEARCH_COLUMNS
                    )
                )
            )
        if query.property_sort:
            column = getattr(User, SORTABLE_FIELDS[query.property_sort])
            q = q.order_by(column.asc() if query.direction_sort == 1 else column.desc())
        # Stable pagination when the requested sort has ties.
        q = q.order_by(User.created_at.asc(), User.id.asc())
        skip = (query.page - 1) * query.limit
        return q.offset(skip).limit(query.limit).all()

    @staticmethod
    def project(user: User) -> dict[str, Any]:
        """Directory-safe view of a record: no password hash, no internal fields."""
        address = {part: getattr(user, f"address_{part}") for part in ADDRESS_PARTS}
        return {
            "id": user.id,
            "pseudonyme": user.pseudonyme,
            "role": user.role,
            "name": user.name,
            "address": address if any(address.values()) else None,
            "comment": user.comment,
            "last_authenticated_at": user.last_authenticated_at,
            "created_at": user.created_at,
            "updated_at": user.updated_at,
        }

    def _commit(self) -> None:
        try:
            self._session.commit()
        except IntegrityError:
            self._session.rollback()
            logger.info("User directory rejected a duplicate pseudonyme")
            raise AlreadyExistsError("Account already exists") from None
