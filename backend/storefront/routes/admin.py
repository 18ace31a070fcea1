"""
Admin UI pages.

The admin screens are a frontend build served from ``backend/static``.
Access control happens before these routes run (see ``AdminRouteFilter``),
so everything here except the login page is only reached with a session.
"""
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import FileResponse

router = APIRouter(include_in_schema=False)

STATIC_DIR = Path(__file__).resolve().parent.parent.parent / "static"


def _serve_page(page: str):
    index = STATIC_DIR / "index.html"
    if index.is_file():
        return FileResponse(str(index))
    return {"page": page, "message": "Admin frontend build not found"}


@router.get("/admin")
def admin_dashboard():
    return _serve_page("/admin")


@router.get("/admin/{page_path:path}")
def admin_page(page_path: str):
    """Serve the admin SPA for login, products and services screens."""
    return _serve_page(f"/admin/{page_path}".rstrip("/"))
