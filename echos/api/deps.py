"""FastAPI dependencies: service wiring and the guard pipeline for protected routes."""

from collections.abc import Callable
from typing import Annotated

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from echos.core.config import AuthConfig, get_auth_config
from echos.core.database import get_db
from echos.core.guards import AccessGuard, RoleGuard
from echos.core.tokens import TokenIssuer
from echos.schemas.auth import CurrentUser
from echos.services.auth import AuthService
from echos.services.directory import UserDirectory

role_guard = RoleGuard()


def get_directory(db: Annotated[Session, Depends(get_db)]) -> UserDirectory:
    return UserDirectory(db)


def get_token_issuer(
    config: Annotated[AuthConfig, Depends(get_auth_config)],
) -> TokenIssuer:
    return TokenIssuer(config)


def get_auth_service(
    directory: Annotated[UserDirectory, Depends(get_directory)],
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    config: Annotated[AuthConfig, Depends(get_auth_config)],
) -> AuthService:
    return AuthService(directory, issuer, config)


def get_access_guard(
    issuer: Annotated[TokenIssuer, Depends(get_token_issuer)],
    auth_service: Annotated[AuthService, Depends(get_auth_service)],
) -> AccessGuard:
    return AccessGuard(issuer, auth_service)


def guarded(route_id: str) -> Callable[..., CurrentUser]:
    """
    Dependency factory for a protected route.

    Runs the access guard, then the role guard for route_id, and returns the
    authenticated subject. The route id is checked against the role table here,
    at import time, so an undeclared route cannot be mounted.
    """
    role_guard.required_roles(route_id)

    def _dep(
        access_guard: Annotated[AccessGuard, Depends(get_access_guard)],
        authorization: Annotated[str | None, Header()] = None,
        user_agent: Annotated[str | None, Header()] = None,
    ) -> CurrentUser:
        subject = access_guard.authenticate(authorization, user_agent)
        return role_guard.authorize(route_id, subject)

    return _dep
