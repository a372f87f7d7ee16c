"""Pydantic request/response schemas."""

from echos.schemas.auth import (
    Address,
    AuthTokens,
    ClaimSet,
    CurrentUser,
    RefreshedTokens,
    RefreshRequest,
    SigninRequest,
    SignupRequest,
    TokenClaims,
)
from echos.schemas.errors import ErrorEnvelope
from echos.schemas.health import HealthResponse
from echos.schemas.users import (
    DeleteResponse,
    UserAdminUpdate,
    UserProfile,
    UserQuery,
    UsersListResponse,
    UserUpdate,
)

__all__ = [
    "Address",
    "AuthTokens",
    "ClaimSet",
    "CurrentUser",
    "DeleteResponse",
    "ErrorEnvelope",
    "HealthResponse",
    "RefreshRequest",
    "RefreshedTokens",
    "SigninRequest",
    "SignupRequest",
    "TokenClaims",
    "UserAdminUpdate",
    "UserProfile",
    "UserQuery",
    "UserUpdate",
    "UsersListResponse",
]
