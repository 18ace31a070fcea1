"""Signed session tokens for the admin area.

Tokens are HS256 JWTs carrying ``username`` and ``role`` plus the standard
``iat``/``exp`` claims. Nothing is stored server side: a token is valid until
it expires, even after the client drops the cookie.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt


ALGORITHM = "HS256"


class TokenError(Exception):
    """Token failed verification. ``reason`` is safe to show to the client."""

    reason = "invalid token"


class TokenExpired(TokenError):
    reason = "expired"


class TokenInvalid(TokenError):
    reason = "invalid token"


@dataclass(frozen=True)
class TokenClaims:
    username: str
    role: str
    issued_at: datetime
    expires_at: datetime


class TokenService:
    def __init__(self, secret: str, expiry_seconds: int):
        if not secret:
            raise ValueError("Token secret must not be empty")
        self.secret = secret
        self.expiry_seconds = expiry_seconds

    def issue(self, username: str, role: str, now: Optional[datetime] = None) -> str:
        """Sign a token for ``username`` with the given role."""
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "username": username,
            "role": role,
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.expiry_seconds),
        }
        return jwt.encode(payload, self.secret, algorithm=ALGORITHM)

    def verify(self, token: str, now: Optional[datetime] = None) -> TokenClaims:
        """
        Check signature and expiry and return the claims.

        Raises:
          - TokenExpired if ``exp`` is in the past
          - TokenInvalid for malformed tokens, bad signatures or missing claims
        """
        try:
            payload = jwt.decode(
                token,
                self.secret,
                algorithms=[ALGORITHM],
                options={"require": ["exp", "iat"], "verify_exp": now is None},
            )
        except jwt.ExpiredSignatureError as e:
            raise TokenExpired("Authentication token has expired") from e
        except jwt.InvalidTokenError as e:
            raise TokenInvalid("Invalid authentication token") from e

        expires_at = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        if now is not None and expires_at <= now:
            raise TokenExpired("Authentication token has expired")

        username = payload.get("username")
        role = payload.get("role")
        if not isinstance(username, str) or not isinstance(role, str):
            raise TokenInvalid("Token is missing username or role")

        return TokenClaims(
            username=username,
            role=role,
            issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
            expires_at=expires_at,
        )
