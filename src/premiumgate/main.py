from fastapi import FastAPI

from premiumgate.api.v1.routers.health import router as health_router
from premiumgate.api.v1.routers.stripe_webhook import reject_unsupported_methods
from premiumgate.api.v1.routers.stripe_webhook import router as stripe_router
from premiumgate.core.config import settings
from premiumgate.core.logging import configure_logging


def create_app() -> FastAPI:
    configure_logging(settings.log_level, json=settings.log_json)

    app = FastAPI(title="premiumgate", version="0.1.0")
    app.middleware("http")(reject_unsupported_methods)
    app.include_router(health_router, prefix="/api/v1")
    app.include_router(stripe_router, prefix="/api/v1")
    return app


app = create_app()
