from fastapi import FastAPI

from mountain.api.routes.mountain import router
from mountain.core.logging import configure_logging
from mountain.core.middleware import RenderRateLimitMiddleware
from mountain.core.observability import init_sentry
from mountain.settings import Settings


def create_app() -> FastAPI:
    """Build the API application with logging, Sentry and rate limiting."""

    settings = Settings()
    configure_logging(settings.log_level)
    init_sentry(settings, component="api")

    application = FastAPI(title="contrib-mountain")
    application.add_middleware(
        RenderRateLimitMiddleware,
        requests_per_window=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
    )
    application.include_router(router)
    return application


app = create_app()
