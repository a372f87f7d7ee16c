"""Signup, signin and token refresh endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Header, status

from echos.api.deps import get_auth_service
from echos.schemas.auth import (
    AuthTokens,
    RefreshedTokens,
    RefreshRequest,
    SigninRequest,
    SignupRequest,
)
from echos.services.auth import AuthService

router = APIRouter()


@router.post("/signup", response_model=AuthTokens, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    user_agent: Annotated[str | None, Header()] = None,
) -> AuthTokens:
    """
    Create an account and return an access/refresh token pair.

    Accounts created here always get the 'user' role, whatever the body says.
    """
    return auth.signup(
        body.pseudonyme,
        body.password,
        body.profile_fields(),
        user_agent=user_agent,
    )


@router.post("/signin", response_model=AuthTokens)
def signin(
    body: SigninRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    user_agent: Annotated[str | None, Header()] = None,
) -> AuthTokens:
    """
    Authenticate with pseudonyme and password; returns JWT access and refresh tokens.
    Include the access token in the Authorization header as: Bearer <token>
    """
    return auth.signin(body.pseudonyme, body.password, user_agent=user_agent)


@router.post("/refresh", response_model=RefreshedTokens)
def refresh(
    body: RefreshRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
    user_agent: Annotated[str | None, Header()] = None,
) -> RefreshedTokens:
    """Exchange a refresh token for a new access/refresh pair."""
    return auth.refresh(body.refresh_token, user_agent=user_agent)
