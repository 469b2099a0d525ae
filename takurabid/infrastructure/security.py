"""Validation of access tokens issued by the hosted identity provider."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt

from takurabid.config import Settings


@dataclass(frozen=True)
class IdentityClaims:
    """Subset of the token claims this service relies on."""

    auth_id: str
    email: str | None


def decode_identity_token(token: str, settings: Settings) -> IdentityClaims:
    """Verify ``token`` and return its claims.

    Raises ``ValueError`` when the signature, expiry or audience is invalid, or
    when the token carries no subject.
    """

    options = {"verify_aud": settings.jwt_audience is not None}
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            audience=settings.jwt_audience,
            options=options,
        )
    except JWTError as exc:
        raise ValueError("Could not validate credentials") from exc

    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject:
        raise ValueError("Could not validate credentials")
    email = payload.get("email")
    return IdentityClaims(auth_id=subject, email=email if isinstance(email, str) else None)


def create_identity_token(
    settings: Settings,
    auth_id: str,
    *,
    email: str | None = None,
    expires_delta: timedelta = timedelta(hours=1),
) -> str:
    """Sign a token the way the identity provider does, for local development."""

    claims: dict[str, object] = {
        "sub": auth_id,
        "exp": datetime.now(tz=timezone.utc) + expires_delta,
    }
    if settings.jwt_audience is not None:
        claims["aud"] = settings.jwt_audience
    if email:
        claims["email"] = email
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


__all__ = ["IdentityClaims", "create_identity_token", "decode_identity_token"]
