"""
FastAPI application factory
"""
import logging

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse
from starlette.middleware.sessions import SessionMiddleware

from walletbook.config import get_settings
from walletbook.infrastructure.db.session import check_db_connection
from walletbook.infrastructure.store import FinanceCache
from walletbook.api.errors import register_error_handlers
from walletbook.api.middleware import AuthGateMiddleware, ErrorLoggingMiddleware
from walletbook.api.v1 import auth, wallets, categories, transactions, dashboard, pages

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Application factory - builds and configures the FastAPI app

    Returns:
        Configured FastAPI app
    """
    settings = get_settings()

    app = FastAPI(
        title="walletbook",
        debug=settings.DEBUG,
    )

    # One cache per app, shared by every request's FinanceStore
    app.state.finance_cache = FinanceCache()

    register_error_handlers(app)

    # Middleware: the last one added runs first, so the session is loaded before the gate
    app.add_middleware(ErrorLoggingMiddleware)
    app.add_middleware(AuthGateMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.SECRET_KEY
    )

    # Routers - API first, then SSR pages
    app.include_router(wallets.router)
    app.include_router(categories.router)
    app.include_router(transactions.router)
    app.include_router(dashboard.router)
    app.include_router(auth.router)
    app.include_router(pages.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (checks the database)"""
        check_db_connection()
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "walletbook.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
