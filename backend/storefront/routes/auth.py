"""Admin login/logout.

A successful login sets the ``admin_auth_token`` cookie (HttpOnly,
SameSite=Strict) holding a signed session token. Logout only clears the
cookie; the token itself stays valid until it expires.
"""

import hmac
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from storefront.config import SESSION_COOKIE_NAME, Settings
from storefront.dependencies import get_app_settings, get_session_gate, get_token_service
from storefront.services.session_gate import ADMIN_ROLE, SessionGate
from storefront.services.token_service import TokenService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth")


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


def credentials_match(username: str, password: str, settings: Settings) -> bool:
    """Constant-time check against the configured admin credentials."""
    username_ok = hmac.compare_digest(username.encode("utf-8"), settings.admin_username.encode("utf-8"))
    password_ok = hmac.compare_digest(password.encode("utf-8"), settings.admin_password.encode("utf-8"))
    return username_ok and password_ok


@router.post("/login")
def login(
    credentials: LoginRequest,
    settings: Settings = Depends(get_app_settings),
    tokens: TokenService = Depends(get_token_service),
):
    """Exchange admin credentials for a session cookie"""
    if not credentials_match(credentials.username, credentials.password, settings):
        logger.warning("Failed admin login attempt")
        return JSONResponse(status_code=401, content={"success": False, "message": "Invalid credentials"})

    token = tokens.issue(credentials.username, ADMIN_ROLE)
    response = JSONResponse(status_code=200, content={"success": True, "message": "Login successful"})
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.token_expiry_seconds,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    logger.info(f"Admin {credentials.username} logged in")
    return response


@router.post("/logout")
def logout(settings: Settings = Depends(get_app_settings)):
    """Clear the session cookie"""
    response = JSONResponse(status_code=200, content={"success": True, "message": "Logged out successfully"})
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        path="/",
        httponly=True,
        secure=settings.is_production,
        samesite="strict",
    )
    return response


@router.get("/session")
def session_status(request: Request, gate: SessionGate = Depends(get_session_gate)):
    """Report whether the caller holds a valid admin session"""
    decision = gate.authorize(request.cookies)
    if not decision.allowed:
        return JSONResponse(status_code=401, content={"authenticated": False, "reason": decision.reason})
    return {"authenticated": True, "username": decision.identity.username}
