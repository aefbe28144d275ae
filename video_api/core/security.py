"""Bearer token validation against the OIDC provider's signing keys."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from video_api.core.config import settings

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Validated caller: the raw bearer token plus its claims."""

    token: str
    claims: Dict[str, Any] = field(default_factory=dict)

    @property
    def sub(self) -> str:
        return self.claims["sub"]


def unauthorized(detail: str = "invalid_token") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


class TokenVerifier:
    """Checks signature, expiry, issuer and audience of access tokens."""

    def __init__(
        self,
        jwks_client: jwt.PyJWKClient,
        issuer: str,
        audience: str,
        algorithms: list[str],
    ) -> None:
        self._jwks = jwks_client
        self.issuer = issuer
        self.audience = audience
        self.algorithms = algorithms

    def verify(self, token: str) -> Dict[str, Any]:
        try:
            signing_key = self._jwks.get_signing_key_from_jwt(token)
            claims = jwt.decode(
                token,
                signing_key.key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as error:
            logger.info("token_rejected", extra={"reason": str(error)})
            raise unauthorized() from error
        return claims


_verifier: Optional[TokenVerifier] = None


def get_token_verifier() -> TokenVerifier:
    global _verifier
    if _verifier is None:
        _verifier = TokenVerifier(
            jwt.PyJWKClient(settings.jwks_url, cache_keys=True),
            issuer=settings.auth_issuer,
            audience=settings.auth_audience,
            algorithms=settings.auth_algorithms,
        )
    return _verifier


def get_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(
        bearer_scheme),
    verifier: TokenVerifier = Depends(get_token_verifier),
) -> AuthContext:
    if credentials is None or not credentials.credentials:
        raise unauthorized("missing_token")
    claims = verifier.verify(credentials.credentials)
    return AuthContext(token=credentials.credentials, claims=claims)
