"""
inventory_access.auth.jwt

Access-token helpers for the identity provider's JWTs.

Responsibilities:
- Decode and validate provider access tokens (iss/aud/exp/iat/sub).
- Distinguish an expired token (refreshable) from an invalid one.
- Issue tokens with the same claim layout for local provider stubs.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import ExpiredSignatureError, InvalidTokenError

from inventory_access.settings import Settings


@dataclass(frozen=True, slots=True)
class JwtConfig:
    alg: str
    issuer: str
    audience: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> JwtConfig:
        return cls(
            alg=settings.jwt_alg,
            issuer=settings.jwt_issuer,
            audience=settings.jwt_audience,
            secret=settings.jwt_secret,
        )


@dataclass(frozen=True, slots=True)
class AccessClaims:
    subject_id: str
    expires_at: datetime
    email: str | None = None


class JwtValidationError(Exception):
    pass


class TokenExpired(JwtValidationError):
    pass


def issue_token(
    *,
    cfg: JwtConfig,
    subject: str,
    email: str | None = None,
    ttl: timedelta = timedelta(hours=1),
) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "aud": cfg.audience,
        "sub": subject,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    if email is not None:
        payload["email"] = email
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_access_token(*, cfg: JwtConfig, token: str, verify_exp: bool = True) -> AccessClaims:
    try:
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            audience=cfg.audience,
            options={
                "require": ["exp", "iat", "iss", "aud", "sub"],
                "verify_exp": verify_exp,
            },
        )
    except ExpiredSignatureError as e:
        raise TokenExpired(str(e)) from e
    except InvalidTokenError as e:
        raise JwtValidationError(str(e)) from e

    subject = str(payload.get("sub", ""))
    if not subject:
        raise JwtValidationError("token has an empty subject")
    return AccessClaims(
        subject_id=subject,
        expires_at=datetime.fromtimestamp(int(payload["exp"]), tz=UTC),
        email=payload.get("email"),
    )


# --- Module Notes -----------------------------------------------------------
# Tokens are verified against the shared provider secret (HS256 by default);
# the session layer only learns who the token belongs to and whether it is usable.
