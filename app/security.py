# app/security.py
import hmac, posixpath
from fastapi import Request
from fastapi.responses import JSONResponse, RedirectResponse
from sitestore.config import DATA_DIRS
from sitestore.errors import Forbidden

SESSION_KEY = "dashboard_authenticated"
DASHBOARD_PAGES = ("/dashboard.html", "/dashboard")
LOGIN_PAGE = "/login.html"


def check_password(expected: str, given: str) -> bool:
    if not expected:
        return False
    return hmac.compare_digest(expected.encode("utf-8"), (given or "").encode("utf-8"))


def is_authenticated(request: Request) -> bool:
    return "session" in request.scope and bool(request.session.get(SESSION_KEY))


def require_dashboard(request: Request) -> None:
    """Dependency for dashboard-only routes."""
    if not is_authenticated(request):
        raise Forbidden("Authentication required")


def static_access_response(path: str, authenticated: bool):
    """
    Decide whether a path may be served. Returns a response that
    short-circuits the request, or None to let it through.
    Dot segments are refused before normalizing, so '..' cannot climb
    out of /api/ into a storage directory.
    """
    raw = [s for s in path.split("/") if s]
    if any(s.startswith(".") for s in raw):
        return JSONResponse(status_code=403, content={"success": False, "message": "Access denied"})
    normalized = posixpath.normpath("/" + path.lstrip("/"))
    segments = [s for s in normalized.split("/") if s]
    if segments and segments[0] in DATA_DIRS:
        return JSONResponse(status_code=403, content={"success": False, "message": "Access denied"})
    if normalized in DASHBOARD_PAGES and not authenticated:
        return RedirectResponse(LOGIN_PAGE, status_code=302)
    return None
