"""
HTTP middleware: route gating and error logging
"""
import logging
import traceback

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse, Response

logger = logging.getLogger(__name__)

PUBLIC_PATHS = frozenset({"/login", "/setup", "/health", "/ready"})
AUTH_PAGES = frozenset({"/login", "/setup"})


def gate_redirect(path: str, is_authenticated: bool) -> str | None:
    """
    Where a request has to be sent instead, or None to let it through

    Example:
        >>> gate_redirect("/api/v1/wallets/", False)
        "/login"
        >>> gate_redirect("/login", True)
        "/"
    """
    if not is_authenticated and path not in PUBLIC_PATHS:
        return "/login"
    if is_authenticated and path in AUTH_PAGES:
        return "/"
    return None


class AuthGateMiddleware(BaseHTTPMiddleware):
    """Redirects by session state; must run inside SessionMiddleware"""

    async def dispatch(self, request, call_next):
        target = gate_redirect(request.url.path, bool(request.session.get("user_id")))
        if target is not None:
            return RedirectResponse(target, status_code=302)
        return await call_next(request)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    """Logs the traceback of any unhandled exception, including sync routes"""

    async def dispatch(self, request, call_next):
        try:
            return await call_next(request)
        except Exception:
            tb_str = traceback.format_exc()
            logger.error("\n%s\nERROR on %s %s\n%s%s", "=" * 60, request.method, request.url.path, tb_str, "=" * 60)
            return Response(content="Internal Server Error", status_code=500)
