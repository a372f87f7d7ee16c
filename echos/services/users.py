"""Profile read/edit/delete operations over the user directory."""

import logging
from typing import Any

from echos.core.errors import MalformedInputError, NotFoundError
from echos.core.security import PSEUDONYME_EMPTY_MESSAGE, hash_password, normalize_pseudonyme
from echos.models import User
from echos.schemas.users import UserQuery
from echos.services.directory import UserDirectory

logger = logging.getLogger(__name__)

USER_NOT_FOUND_MESSAGE = "user not found"
REQUIRED_FIELDS = ("pseudonyme", "role")


def prepare_patch(patch: dict[str, Any]) -> dict[str, Any]:
    """
    Turn an API patch into directory columns.

    A raw password is replaced by its hash and never kept; pseudonymes are lower-cased.
    """
    prepared = dict(patch)
    password = prepared.pop("password", None)
    if password is not None:
        prepared["password_hash"] = hash_password(password)
    # Required columns cannot be cleared.
    for key in REQUIRED_FIELDS:
        if key in prepared and prepared[key] is None:
            del prepared[key]
    if "pseudonyme" in prepared:
        prepared["pseudonyme"] = normalize_pseudonyme(prepared["pseudonyme"])
        if not prepared["pseudonyme"]:
            raise MalformedInputError(PSEUDONYME_EMPTY_MESSAGE)
    return prepared


def get_profile(directory: UserDirectory, user_id: str) -> dict[str, Any]:
    user = directory.find_one(id=user_id)
    if user is None:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)
    return directory.project(user)


def update_profile(
    directory: UserDirectory, user_id: str, patch: dict[str, Any]
) -> dict[str, Any]:
    """Apply patch to user_id and return the updated projection."""
    user = directory.update({"id": user_id}, prepare_patch(patch))
    if user is None:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)
    logger.info("Profile updated: user_id=%s fields=%s", user_id, sorted(patch))
    return directory.project(user)


def delete_user(directory: UserDirectory, user_id: str) -> int:
    if directory.find_one(id=user_id) is None:
        raise NotFoundError(USER_NOT_FOUND_MESSAGE)
    deleted = directory.remove({"id": user_id})
    logger.info("User deleted: user_id=%s", user_id)
    return deleted


def list_users(directory: UserDirectory, query: UserQuery) -> list[dict[str, Any]]:
    users: list[User] = directory.find_all(query)
    return [directory.project(u) for u in users]
