"""
Authentication module for the Vitals Service API.

Every data endpoint requires an `Authorization: Bearer <token>` header. The
token is resolved to a user identity by a TokenVerifier; identity management
itself lives outside this service, so the verifier is the whole boundary.
"""
import logging
import secrets
from dataclasses import dataclass
from typing import Dict, Optional

from fastapi import Depends, Security
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from core.exceptions import UnauthorizedError

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(
    auto_error=False,  # Missing credentials are reported as {"error": ...} by UnauthorizedError
    description="Bearer token resolved to a user identity.",
)


@dataclass(frozen=True)
class AuthenticatedUser:
    """Identity attached to a request after the bearer token is verified."""
    id: str


class TokenVerifier:
    """Resolves bearer tokens to users. Subclass for a real identity provider."""

    def resolve(self, token: str) -> Optional[AuthenticatedUser]:
        raise NotImplementedError


class StaticTokenVerifier(TokenVerifier):
    """
    Verifier backed by a fixed token -> user id table (from settings).

    Every configured token is compared with secrets.compare_digest so the
    time taken does not depend on which token (if any) matched.
    """

    def __init__(self, tokens: Dict[str, str]):
        self._tokens = dict(tokens)

    def resolve(self, token: str) -> Optional[AuthenticatedUser]:
        matched: Optional[str] = None
        for candidate, user_id in self._tokens.items():
            if secrets.compare_digest(candidate.encode(), token.encode()):
                matched = user_id
        return AuthenticatedUser(id=matched) if matched else None


def get_token_verifier() -> TokenVerifier:
    """Token verifier dependency; override in tests via dependency_overrides."""
    from core.config import settings

    return StaticTokenVerifier(settings.auth_token_map)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Security(bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> AuthenticatedUser:
    """
    Verify the bearer token and return the caller's identity.

    Raises:
        UnauthorizedError: 401 if the header is missing, not a bearer
            credential, or the token does not resolve to a user.
    """
    if credentials is None or not credentials.credentials:
        logger.warning("API request without bearer credential")
        raise UnauthorizedError("No authorization header")

    user = verifier.resolve(credentials.credentials)
    if user is None:
        logger.warning("API request with unresolvable bearer credential")
        raise UnauthorizedError("Unauthorized")

    return user
