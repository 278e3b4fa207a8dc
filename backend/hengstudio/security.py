"""
Admin Gate

Shared-secret authorization for mutating endpoints.
The secret comes from settings once at startup; a missing secret fails closed.
"""
import enum
import hmac
import logging
from typing import Optional

from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from .errors import AdminNotConfiguredError, UnauthorizedError

logger = logging.getLogger(__name__)

ADMIN_TOKEN_HEADER = "X-Admin-Token"

# Admin token header; missing header is handled by AdminGate, not FastAPI
admin_token_header = APIKeyHeader(name=ADMIN_TOKEN_HEADER, auto_error=False)


class AuthDecision(str, enum.Enum):
    """Outcome of an authorization check."""
    ALLOWED = "allowed"
    UNAUTHORIZED = "unauthorized"
    NOT_CONFIGURED = "not_configured"


class AdminGate:
    """Stateless check of a provided token against the configured secret."""

    def __init__(self, secret: Optional[str]):
        self._secret = (secret or "").strip()

    @property
    def configured(self) -> bool:
        return bool(self._secret)

    def authorize(self, provided: Optional[str]) -> AuthDecision:
        if not self._secret:
            return AuthDecision.NOT_CONFIGURED
        token = (provided or "").strip()
        if not token:
            return AuthDecision.UNAUTHORIZED
        if not hmac.compare_digest(token.encode("utf-8"), self._secret.encode("utf-8")):
            return AuthDecision.UNAUTHORIZED
        return AuthDecision.ALLOWED

    def require(self, provided: Optional[str]) -> None:
        """
        Raise unless the token is allowed.

        Raises:
            AdminNotConfiguredError: No secret configured on the server
            UnauthorizedError: Token missing or wrong
        """
        decision = self.authorize(provided)
        if decision is AuthDecision.NOT_CONFIGURED:
            logger.warning("Rejected admin request: ADMIN_TOKEN is not configured")
            raise AdminNotConfiguredError()
        if decision is AuthDecision.UNAUTHORIZED:
            raise UnauthorizedError()


def require_admin(request: Request, token: Optional[str] = Security(admin_token_header)) -> None:
    """Dependency gating a route behind the admin token."""
    request.app.state.admin_gate.require(token)
