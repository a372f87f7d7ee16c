"""
Request guards: authentication (access guard) then authorization (role guard).

Both are plain classes with no framework coupling; echos.api.deps chains them
in that order for FastAPI routes.
"""

import logging
from collections.abc import Mapping

from echos.core.errors import ForbiddenError, TokenError, UnauthorizedError
from echos.core.permissions import (
    ROLE_ALL,
    ROUTE_GROUP_ROLES,
    ROUTE_ROLES,
    route_group,
)
from echos.core.tokens import TokenIssuer
from echos.schemas.auth import CurrentUser
from echos.services.auth import AuthService

logger = logging.getLogger(__name__)

BEARER_SCHEME = "bearer"


def extract_bearer_token(authorization: str | None) -> str:
    """Return the token from 'Bearer <token>'; UnauthorizedError otherwise."""
    if not authorization:
        raise UnauthorizedError("Not authenticated")
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != BEARER_SCHEME or not token.strip():
        raise UnauthorizedError("Not authenticated")
    return token.strip()


class AccessGuard:
    """
    Verifies the bearer access token and re-validates its subject.

    Every token failure is reported to the caller the same way; the issuer logs
    the specific cause.
    """

    def __init__(self, issuer: TokenIssuer, auth_service: AuthService) -> None:
        self.issuer = issuer
        self.auth_service = auth_service

    def authenticate(
        self, authorization: str | None, user_agent: str | None = None
    ) -> CurrentUser:
        token = extract_bearer_token(authorization)
        try:
            claims = self.issuer.verify_access(token)
        except TokenError:
            raise UnauthorizedError("Invalid or expired token") from None

        # Tokens can outlive the account they were issued for.
        projection = self.auth_service.validate_subject(claims.subject_id)
        if projection is None:
            logger.info("Access rejected: subject %s no longer exists", claims.subject_id)
            raise UnauthorizedError("token invalid")

        if claims.user_agent and user_agent and user_agent != claims.user_agent:
            logger.warning(
                "Access rejected: user agent mismatch for subject %s", claims.subject_id
            )
            raise UnauthorizedError("User agent not allowed")

        merged = {**claims.model_dump(), **projection}
        return CurrentUser.model_validate({**merged, "claims": claims})


class RoleGuard:
    """Checks the authenticated subject's role against the route table."""

    def __init__(
        self,
        route_roles: Mapping[str, frozenset[str]] = ROUTE_ROLES,
        group_roles: Mapping[str, frozenset[str]] = ROUTE_GROUP_ROLES,
    ) -> None:
        self.route_roles = route_roles
        self.group_roles = group_roles

    def required_roles(self, route_id: str) -> frozenset[str]:
        """
        Union of the handler's and its group's declared roles.

        Raises KeyError for a route that was never declared, so an unlisted
        route fails at wiring time instead of silently allowing everyone.
        """
        if route_id not in self.route_roles:
            raise KeyError(f"Route {route_id!r} has no role declaration")
        group = route_group(route_id)
        return self.route_roles[route_id] | self.group_roles.get(group, frozenset())

    def is_allowed(self, route_id: str, role: str | None) -> bool:
        required = self.required_roles(route_id)
        if not required or ROLE_ALL in required:
            return True
        return role in required

    def authorize(self, route_id: str, subject: CurrentUser | None) -> CurrentUser:
        if subject is None:
            # Authentication must have run first.
            raise UnauthorizedError("Not authenticated")
        if not self.is_allowed(route_id, subject.role):
            required = sorted(self.required_roles(route_id))
            logger.info(
                "Access denied: subject=%s role=%s route=%s",
                subject.id,
                subject.role,
                route_id,
            )
            raise ForbiddenError(
                "You do not have permission to perform this action. This action "
                f"requires one of the following roles: {' | '.join(required)}"
            )
        return subject
