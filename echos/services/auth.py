"""Signup, signin and token refresh built on the directory, hasher and token issuer."""

import logging
from datetime import UTC, datetime
from typing import Any

from echos.core.config import AuthConfig
from echos.core.errors import (
    AlreadyExistsError,
    InvalidCredentialsError,
    MalformedInputError,
    NotFoundError,
    TokenError,
    UnauthorizedError,
)
from echos.core.security import (
    PSEUDONYME_EMPTY_MESSAGE,
    hash_password,
    normalize_pseudonyme,
    verify_password,
)
from echos.core.tokens import TokenIssuer
from echos.models import User
from echos.schemas.auth import AuthTokens, RefreshedTokens, TokenClaims
from echos.services.directory import UserDirectory

logger = logging.getLogger(__name__)

DEFAULT_ROLE = "user"
REFRESH_REJECTED_MESSAGE = "Invalid refresh token"


class AuthService:
    """
    Orchestrates the credential flows.

    Lookup misses and credential mismatches raise AppError subclasses (4xx).
    Hashing and signing failures are unexpected and propagate untouched.
    """

    def __init__(
        self,
        directory: UserDirectory,
        issuer: TokenIssuer,
        config: AuthConfig,
    ) -> None:
        self.directory = directory
        self.issuer = issuer
        self.config = config

    def signup(
        self,
        pseudonyme: str,
        password: str,
        profile_fields: dict[str, Any] | None = None,
        user_agent: str | None = None,
    ) -> AuthTokens:
        """
        Register a new account and log it in.

        The role is always DEFAULT_ROLE here; profile_fields may not carry one.
        The existence check is only a pre-check, the unique index has the final say.
        """
        pseudonyme = normalize_pseudonyme(pseudonyme)
        if not pseudonyme:
            raise MalformedInputError(PSEUDONYME_EMPTY_MESSAGE)
        if self.directory.find_one(pseudonyme=pseudonyme) is not None:
            logger.info("Signup rejected: pseudonyme=%s already exists", pseudonyme)
            raise AlreadyExistsError("Account already exists")

        fields = dict(profile_fields or {})
        fields.pop("role", None)
        fields.pop("password", None)
        user = self.directory.create(
            {
                **fields,
                "pseudonyme": pseudonyme,
                "password_hash": hash_password(password),
                "role": DEFAULT_ROLE,
            }
        )
        logger.info("Signup succeeded: user_id=%s", user.id)
        return self._issue_pair(self._claims_for(user, user_agent))

    def signin(
        self, pseudonyme: str, password: str, user_agent: str | None = None
    ) -> AuthTokens:
        pseudonyme = normalize_pseudonyme(pseudonyme)
        if not pseudonyme:
            raise MalformedInputError(PSEUDONYME_EMPTY_MESSAGE)
        user = self.directory.find_one(pseudonyme=pseudonyme)
        if user is None:
            logger.info("Signin rejected: pseudonyme=%s not found", pseudonyme)
            raise NotFoundError("User not found")
        if not verify_password(password, user.password_hash):
            logger.info("Signin rejected: bad credentials for user_id=%s", user.id)
            raise InvalidCredentialsError("Invalid credentials")

        user = self.directory.update(
            {"id": user.id}, {"last_authenticated_at": datetime.now(UTC)}
        ) or user
        logger.info("Signin succeeded: user_id=%s", user.id)
        return self._issue_pair(self._claims_for(user, user_agent))

    def refresh(self, refresh_token: str, user_agent: str | None = None) -> RefreshedTokens:
        """
        Trade a refresh token for a new access/refresh pair.

        Any verification failure becomes the same UnauthorizedError so callers
        cannot tell expiry from forgery. By default the new pair is minted from
        the claims embedded in the refresh token (role changes since issuance are
        not seen until the next signin); set refresh_revalidates_subject to read
        the directory instead.
        """
        try:
            verified = self.issuer.verify_refresh(refresh_token)
        except TokenError:
            raise UnauthorizedError(REFRESH_REJECTED_MESSAGE) from None

        if self.config.refresh_revalidates_subject:
            user = self.directory.find_one(id=verified.subject_id)
            if user is None:
                logger.info(
                    "Refresh rejected: subject %s no longer exists", verified.subject_id
                )
                raise UnauthorizedError(REFRESH_REJECTED_MESSAGE)
            claims = self._claims_for(user, user_agent or verified.user_agent)
        else:
            claims = TokenClaims(
                subject_id=verified.subject_id,
                role=verified.role,
                name=verified.name,
                user_agent=verified.user_agent,
            )

        return RefreshedTokens(
            access_token=self.issuer.issue_access(claims),
            refresh_token=self.issuer.issue_refresh(claims),
        )

    def validate_subject(self, subject_id: str) -> dict[str, Any] | None:
        """Current directory projection for subject_id, or None if it is gone."""
        user = self.directory.find_one(id=subject_id)
        if user is None:
            return None
        return self.directory.project(user)

    def _claims_for(self, user: User, user_agent: str | None) -> TokenClaims:
        return TokenClaims(
            subject_id=user.id,
            role=user.role,
            name=user.name,
            user_agent=user_agent if self.config.bind_user_agent else None,
        )

    def _issue_pair(self, claims: TokenClaims) -> AuthTokens:
        return AuthTokens(
            token=self.issuer.issue_access(claims),
            refresh_token=self.issuer.issue_refresh(claims),
            user=claims.public(),
        )
