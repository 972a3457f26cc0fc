from fastapi import FastAPI

from backend.api.routes.graph import router
from backend.core.middleware import GraphRateLimitMiddleware
from backend.core.observability import configure_logging
from backend.core.observability import init_sentry
from backend.settings import Settings


def create_app() -> FastAPI:
    """Build the application with logging, Sentry, and rate limiting wired."""

    settings = Settings()
    configure_logging(settings)
    init_sentry(settings)

    app = FastAPI(title="GitHub Contribution Merger")
    app.add_middleware(
        GraphRateLimitMiddleware,
        requests_per_window=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
        trust_forwarded_for=settings.rate_limit_trust_forwarded_for,
    )
    app.include_router(router)
    return app


app = create_app()
