"""Per-request identity resolution from auth-provider bearer tokens"""

from dataclasses import dataclass
from typing import Optional

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from .config import Settings, get_settings
from .logging import get_logger

logger = get_logger(__name__)

ANONYMOUS_ACTOR = "anonymous"

bearer = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class RequestContext:
    """Identity of the caller for a single request.

    Built per request from a verified token and passed explicitly into every
    service call. `identity_id` is None for anonymous callers.
    """
    identity_id: Optional[str] = None
    email: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return self.identity_id is None

    @property
    def actor(self) -> str:
        """Identifier recorded in the audit trail"""
        return self.identity_id or ANONYMOUS_ACTOR

    @classmethod
    def anonymous(cls) -> "RequestContext":
        return cls()


def decode_token(token: str, settings: Settings) -> dict:
    """Verify a bearer token and return its claims"""
    if not settings.jwt_secret:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token verification not configured")

    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        return jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Token expired")
    except jwt.InvalidTokenError as e:
        logger.info(f"[AUTH] Rejected token: {e}")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def context_from_claims(claims: dict) -> RequestContext:
    subject = claims.get("sub")
    if not subject:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    return RequestContext(identity_id=str(subject), email=claims.get("email"))


def get_request_context(
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(get_settings),
) -> RequestContext:
    """FastAPI dependency: anonymous without a token, 401 on a bad one"""
    if not creds:
        return RequestContext.anonymous()
    claims = decode_token(creds.credentials, settings)
    return context_from_claims(claims)
