"""Perimeter check for the admin UI.

Every request under a protected prefix (``/admin`` by default) must carry a
valid admin session cookie or it is redirected to the login page before any
route runs. The login page and login API stay reachable.
"""

import logging
from typing import Callable, Iterable

from fastapi import Request, Response
from fastapi.responses import RedirectResponse
from starlette.middleware.base import BaseHTTPMiddleware

from storefront.services.session_gate import SessionGate

logger = logging.getLogger(__name__)


def _normalize(path: str) -> str:
    return path.rstrip("/") or "/"


class AdminRouteFilter(BaseHTTPMiddleware):
    def __init__(
        self,
        app,
        gate: SessionGate,
        protected_prefixes: Iterable[str] = ("/admin",),
        public_paths: Iterable[str] = ("/admin/login", "/api/auth/login"),
        login_path: str = "/admin/login",
    ):
        super().__init__(app)
        self.gate = gate
        self.protected_prefixes = tuple(_normalize(p) for p in protected_prefixes)
        self.public_paths = frozenset(_normalize(p) for p in public_paths)
        self.login_path = login_path

    def is_protected(self, path: str) -> bool:
        path = _normalize(path)
        if path in self.public_paths:
            return False
        return any(path == prefix or path.startswith(prefix + "/") for prefix in self.protected_prefixes)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        path = request.url.path
        if not self.is_protected(path):
            return await call_next(request)

        decision = self.gate.authorize(request.cookies)
        if not decision.allowed:
            logger.debug(f"Redirecting {path} to login: {decision.reason}")
            return RedirectResponse(url=self.login_path, status_code=307)

        return await call_next(request)
