from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from billing_bridge.api.routers.billing import router as billing_router
from billing_bridge.api.routers.health import router as health_router
from billing_bridge.domain.exceptions import ConfigurationError
from billing_bridge.shared.config import Settings, get_settings


logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


async def _configuration_error_handler(_request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.error("main: configuration_error detail=%s", exc)
    return JSONResponse(status_code=500, content={"error": "Service is not configured"})


def create_app(settings: Settings) -> FastAPI:
    app = FastAPI(title="Billing Bridge")
    # CORS wraps every route, so it runs before any handler reads the body.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_allowed_origins),
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        allow_credentials=True,
    )
    app.add_exception_handler(ConfigurationError, _configuration_error_handler)
    app.include_router(health_router)
    app.include_router(billing_router)
    return app


settings = get_settings()
configure_logging(settings.log_level)
app = create_app(settings)


def run() -> None:
    import uvicorn

    logger.info("main: listening host=%s port=%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    run()
