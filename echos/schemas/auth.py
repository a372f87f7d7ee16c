"""Request/response schemas for auth endpoints and token claim sets."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from echos.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_POLICY_MESSAGE,
    PSEUDONYME_EMPTY_MESSAGE,
    PSEUDONYME_MAX_LEN,
    PSEUDONYME_MIN_LEN,
    password_meets_policy,
)

Role = Literal["admin", "user"]


class Address(BaseModel):
    """Postal address attached to a profile; every part is optional."""

    model_config = ConfigDict(extra="forbid")

    street: str | None = Field(default=None, max_length=255)
    city: str | None = Field(default=None, max_length=255)
    country: str | None = Field(default=None, max_length=255)


def check_password_policy(v: str | None) -> str | None:
    if v is not None and not password_meets_policy(v):
        raise ValueError(PASSWORD_POLICY_MESSAGE)
    return v


def check_pseudonyme(v: str | None) -> str | None:
    # Length limits run on the raw value; surrounding whitespace does not count.
    if v is None:
        return v
    v = v.strip()
    if not v:
        raise ValueError(PSEUDONYME_EMPTY_MESSAGE)
    return v


class SignupRequest(BaseModel):
    """Public registration payload. A supplied role is accepted but never honoured."""

    model_config = ConfigDict(extra="forbid")

    pseudonyme: str = Field(
        ..., min_length=PSEUDONYME_MIN_LEN, max_length=PSEUDONYME_MAX_LEN
    )
    password: str = Field(..., max_length=PASSWORD_MAX_LEN)
    name: str | None = Field(default=None, min_length=1, max_length=255)
    address: Address | None = None
    comment: str | None = None
    role: Role | None = None

    @field_validator("pseudonyme")
    @classmethod
    def validate_pseudonyme(cls, v: str) -> str:
        return check_pseudonyme(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        return check_password_policy(v)

    def profile_fields(self) -> dict:
        """Optional profile data to persist alongside the credentials."""
        return self.model_dump(include={"name", "address", "comment"}, exclude_none=True)


class SigninRequest(BaseModel):
    """Credentials for signin."""

    model_config = ConfigDict(extra="forbid")

    pseudonyme: str = Field(
        ..., min_length=PSEUDONYME_MIN_LEN, max_length=PSEUDONYME_MAX_LEN
    )
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN)

    @field_validator("pseudonyme")
    @classmethod
    def validate_pseudonyme(cls, v: str) -> str:
        return check_pseudonyme(v)


class RefreshRequest(BaseModel):
    """Body of POST /auth/refresh."""

    model_config = ConfigDict(populate_by_name=True)

    refresh_token: str = Field(..., alias="refreshToken", min_length=1)


class ClaimSet(BaseModel):
    """Minimal identity payload: who the subject is and what role it holds."""

    model_config = ConfigDict(populate_by_name=True)

    subject_id: str = Field(..., alias="userId")
    role: Role
    name: str | None = None


class TokenClaims(ClaimSet):
    """Claim set as embedded in a token, with the optional client fingerprint."""

    user_agent: str | None = Field(default=None, alias="userAgent")

    def to_payload(self) -> dict:
        """Wire form of the claims (aliases, no empty fingerprint)."""
        return self.model_dump(by_alias=True, exclude_none=True)

    def public(self) -> ClaimSet:
        return ClaimSet(subject_id=self.subject_id, role=self.role, name=self.name)


class AuthTokens(BaseModel):
    """Returned by signup and signin."""

    model_config = ConfigDict(populate_by_name=True)

    token: str = Field(..., description="JWT access token")
    refresh_token: str = Field(..., alias="refreshToken", description="JWT refresh token")
    user: ClaimSet


class RefreshedTokens(BaseModel):
    """Returned by refresh: a brand new access/refresh pair."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")


class CurrentUser(BaseModel):
    """
    Authenticated subject for dependency injection.

    Token claims merged with the current directory record; directory values win,
    so role and name reflect the stored user rather than the token.
    """

    id: str
    pseudonyme: str
    role: Role
    name: str | None = None
    address: Address | None = None
    comment: str | None = None
    last_authenticated_at: datetime | None = None
    claims: TokenClaims
