"""Bearer credential resolution against the identity provider.

The identity provider issues HS256 JWTs whose ``sub`` claim is the stable
profile id. Huddle only ever verifies them; issuing is handled upstream, with
``create_access_token`` kept for tooling and tests.
"""

from __future__ import annotations

from datetime import timedelta

from jose import JWTError, jwt

from huddle.core.errors import UnauthorizedError
from huddle.core.settings import settings
from huddle.db.time import utcnow


def resolve_subject(token: str | None) -> str:
    """Return the subject id carried by a bearer token.

    Raises:
        UnauthorizedError: If the token is missing, invalid, expired or has
            no subject claim.
    """
    if not token:
        raise UnauthorizedError("No token provided")
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError as err:
        raise UnauthorizedError("Invalid token") from err

    subject = payload.get("sub")
    if not subject:
        raise UnauthorizedError("Invalid token")
    return str(subject)


def create_access_token(subject: str, expires_minutes: int = 60) -> str:
    """Create a signed token for ``subject``."""
    claims = {
        "sub": subject,
        "exp": utcnow() + timedelta(minutes=expires_minutes),
    }
    return jwt.encode(claims, settings.secret_key, algorithm=settings.jwt_algorithm)
