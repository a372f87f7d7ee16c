"""JWT issuance and verification for access and refresh tokens."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from pydantic import ValidationError

from echos.core.config import AuthConfig
from echos.core.errors import (
    ExpiredTokenError,
    InvalidTokenError,
    MalformedTokenError,
    TokenError,
)
from echos.schemas.auth import TokenClaims

logger = logging.getLogger(__name__)

REQUIRED_REGISTERED_CLAIMS = ["exp", "iat"]


class TokenIssuer:
    """
    Signs and verifies claim sets.

    Access and refresh tokens share the claim shape but use distinct secrets and
    lifetimes, so a token of one kind never verifies as the other.
    """

    def __init__(self, config: AuthConfig) -> None:
        self._config = config

    def issue_access(self, claims: TokenClaims) -> str:
        return self._sign(
            claims,
            self._config.access_secret,
            timedelta(minutes=self._config.access_ttl_minutes),
        )

    def issue_refresh(self, claims: TokenClaims) -> str:
        return self._sign(
            claims,
            self._config.refresh_secret,
            timedelta(minutes=self._config.refresh_ttl_minutes),
        )

    def verify(self, token: str, secret: str) -> TokenClaims:
        """
        Decode and validate token; return its claim set.

        Raises ExpiredTokenError, InvalidTokenError or MalformedTokenError. Callers
        at the edge collapse these into a single rejection; the kind is logged here.
        """
        try:
            payload = self._decode(token, secret)
        except TokenError as exc:
            logger.info("Token rejected: reason=%s", exc.reason)
            raise
        try:
            return TokenClaims.model_validate(payload)
        except ValidationError:
            logger.info("Token rejected: reason=%s", MalformedTokenError.reason)
            raise MalformedTokenError("Token payload lacks the claim set") from None

    def verify_access(self, token: str) -> TokenClaims:
        return self.verify(token, self._config.access_secret)

    def verify_refresh(self, token: str) -> TokenClaims:
        return self.verify(token, self._config.refresh_secret)

    def _sign(self, claims: TokenClaims, secret: str, ttl: timedelta) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            **claims.to_payload(),
            "iat": now,
            "exp": now + ttl,
        }
        return jwt.encode(payload, secret, algorithm=self._config.algorithm)

    def _decode(self, token: str, secret: str) -> dict[str, Any]:
        if not token:
            raise MalformedTokenError("Empty token")
        # ExpiredSignatureError and InvalidSignatureError subclass the generic errors
        # below, so they are matched first.
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[self._config.algorithm],
                options={"require": REQUIRED_REGISTERED_CLAIMS},
            )
        except jwt.ExpiredSignatureError as exc:
            raise ExpiredTokenError(str(exc)) from exc
        except jwt.InvalidSignatureError as exc:
            raise InvalidTokenError(str(exc)) from exc
        except jwt.DecodeError as exc:
            raise MalformedTokenError(str(exc)) from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidTokenError(str(exc)) from exc
