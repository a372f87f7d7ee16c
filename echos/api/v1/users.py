"""Profile endpoints: self-service (/me) and admin management of any user."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query

from echos.api.deps import get_directory, guarded
from echos.schemas.auth import CurrentUser
from echos.schemas.users import (
    DeleteResponse,
    UserAdminUpdate,
    UserProfile,
    UserQuery,
    UsersListResponse,
    UserUpdate,
)
from echos.services import users as user_ops
from echos.services.directory import UserDirectory

router = APIRouter()


@router.get("/me", response_model=UserProfile)
def get_me(
    current_user: Annotated[CurrentUser, Depends(guarded("users:get_me"))],
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> UserProfile:
    """Profile of the authenticated user."""
    return UserProfile.model_validate(user_ops.get_profile(directory, current_user.id))


@router.put("/me", response_model=UserProfile)
def update_me(
    body: UserUpdate,
    current_user: Annotated[CurrentUser, Depends(guarded("users:update_me"))],
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> UserProfile:
    """Edit the authenticated user's own profile. The role cannot be changed here."""
    profile = user_ops.update_profile(directory, current_user.id, body.patch())
    return UserProfile.model_validate(profile)


@router.get("", response_model=UsersListResponse)
def list_users(
    query: Annotated[UserQuery, Query()],
    _admin: Annotated[CurrentUser, Depends(guarded("users:list"))],
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> UsersListResponse:
    """List users with pagination, sorting and full-text search (admin only)."""
    users = user_ops.list_users(directory, query)
    return UsersListResponse(
        users=[UserProfile.model_validate(u) for u in users],
        page=query.page,
        limit=query.limit,
    )


@router.get("/{user_id}", response_model=UserProfile)
def get_user(
    user_id: str,
    _admin: Annotated[CurrentUser, Depends(guarded("users:get"))],
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> UserProfile:
    return UserProfile.model_validate(user_ops.get_profile(directory, user_id))


@router.put("/{user_id}", response_model=UserProfile)
def update_user(
    user_id: str,
    body: UserAdminUpdate,
    _admin: Annotated[CurrentUser, Depends(guarded("users:update"))],
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> UserProfile:
    """Edit any user, including its role (admin only)."""
    return UserProfile.model_validate(
        user_ops.update_profile(directory, user_id, body.patch())
    )


@router.delete("/{user_id}", response_model=DeleteResponse)
def delete_user(
    user_id: str,
    _admin: Annotated[CurrentUser, Depends(guarded("users:delete"))],
    directory: Annotated[UserDirectory, Depends(get_directory)],
) -> DeleteResponse:
    """Hard-delete a user (admin only)."""
    return DeleteResponse(deleted=user_ops.delete_user(directory, user_id))
