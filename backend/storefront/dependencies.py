"""FastAPI dependency providers.

Services are built once in ``create_app`` and kept on ``app.state``; these
functions hand them to routes. Tests swap any of them through
``app.dependency_overrides``.
"""

import logging
from typing import Optional

from fastapi import Depends, Request

from storefront.config import Settings
from storefront.errors import Unauthorized
from storefront.services.image_storage import ImageStorage
from storefront.services.session_gate import SessionGate
from storefront.services.token_service import TokenClaims, TokenService

logger = logging.getLogger(__name__)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_token_service(request: Request) -> TokenService:
    return request.app.state.token_service


def get_session_gate(request: Request) -> SessionGate:
    return request.app.state.session_gate


def get_image_storage(request: Request) -> Optional[ImageStorage]:
    """Configured image store, or None when uploads are disabled."""
    return request.app.state.image_storage


def require_admin(request: Request, gate: SessionGate = Depends(get_session_gate)) -> TokenClaims:
    """Allow the request only with a valid admin session cookie; 401 otherwise."""
    decision = gate.authorize(request.cookies)
    if not decision.allowed:
        logger.info(f"Rejected {request.method} {request.url.path}: {decision.reason}")
        raise Unauthorized("Unauthorized")
    return decision.identity
