"""Shared API dependencies for authentication and common functionality."""

from datetime import UTC, datetime, timedelta
from typing import Annotated, Any

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.orm import Session

from momlink.core.settings import settings
from momlink.db.session import get_db

# HTTP Bearer scheme for JWT authentication
bearer_scheme = HTTPBearer()

# Type alias for database session dependency
SessionDep = Annotated[Session, Depends(get_db)]


def create_access_token(subject: str, extra_claims: dict[str, str] | None = None) -> str:
    """Create a JWT access token for the given account id."""
    to_encode: dict[str, object] = {"sub": subject}
    if extra_claims:
        to_encode.update(extra_claims)
    expire = datetime.now(UTC) + timedelta(minutes=settings.access_token_expire_minutes)
    to_encode["exp"] = expire
    encoded_jwt: str = jwt.encode(
        to_encode,
        settings.secret_key,
        algorithm=settings.jwt_algorithm,
    )
    return encoded_jwt


def decode_token(token: str) -> dict[str, Any] | None:
    """Return the verified claims of a token, or None if it is invalid or expired."""
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
    if not payload.get("sub"):
        return None
    return payload


def current_user_id(token: str) -> str | None:
    """Return the authenticated account id carried by a token, if any."""
    payload = decode_token(token)
    return str(payload["sub"]) if payload is not None else None


def get_token_claims(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
) -> dict[str, Any]:
    """Get the verified claims of the caller's bearer token.

    Raises:
        HTTPException: If the token is invalid, expired or has no subject
    """
    payload = decode_token(credentials.credentials)
    if payload is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
        )
    return payload


TokenClaimsDep = Annotated[dict[str, Any], Depends(get_token_claims)]


def get_current_user_id(claims: TokenClaimsDep) -> str:
    """Get the account id of the authenticated caller.

    A valid token is enough: members who have not onboarded yet have no
    profile row but still need to reach the profile endpoints.
    """
    return str(claims["sub"])


# Type alias for current user dependency
CurrentUserIdDep = Annotated[str, Depends(get_current_user_id)]
