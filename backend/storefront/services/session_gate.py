"""Admin session gate: cookie in, allow/deny decision out."""

from dataclasses import dataclass
from datetime import datetime
from typing import Mapping, Optional

from storefront.services.token_service import TokenClaims, TokenError, TokenService

ADMIN_ROLE = "admin"


@dataclass(frozen=True)
class GateDecision:
    allowed: bool
    identity: Optional[TokenClaims] = None
    reason: Optional[str] = None

    @classmethod
    def allow(cls, identity: TokenClaims) -> "GateDecision":
        return cls(allowed=True, identity=identity)

    @classmethod
    def deny(cls, reason: str) -> "GateDecision":
        return cls(allowed=False, reason=reason)


class SessionGate:
    """
    Decides whether a request carries a valid admin session.

    Used by the admin route filter and by every mutating API endpoint.
    Stateless: the same cookie and clock always give the same decision.
    """

    def __init__(self, token_service: TokenService, cookie_name: str):
        self.token_service = token_service
        self.cookie_name = cookie_name

    def authorize(self, cookies: Mapping[str, str], now: Optional[datetime] = None) -> GateDecision:
        token = cookies.get(self.cookie_name)
        if not token:
            return GateDecision.deny("no token")

        try:
            claims = self.token_service.verify(token, now=now)
        except TokenError as e:
            return GateDecision.deny(e.reason)

        if claims.role != ADMIN_ROLE:
            return GateDecision.deny("not admin")

        return GateDecision.allow(claims)
