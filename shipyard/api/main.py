"""Shipyard API - FastAPI with SQLAlchemy and a background deployment pipeline."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
import time
import uuid

from fastapi import FastAPI, Request
import structlog

from shipyard.config import Settings, get_settings
from shipyard.database import create_engine, create_session_maker, init_models
from shipyard.logging_config import (
    clear_context,
    get_logger,
    set_correlation_id,
    setup_logging,
)
from shipyard.services import Services, build_services

from . import routers


def create_app(settings: Settings | None = None, services: Services | None = None) -> FastAPI:
    """Build the application.

    When ``services`` is given the lifespan skips database and client setup;
    tests use this to inject fakes.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        if getattr(app.state, "services", None) is not None:
            yield
            return

        cfg = settings or get_settings()
        setup_logging(
            service_name=cfg.service_name,
            log_format=cfg.log_format,
            log_level=cfg.log_level,
        )
        cfg.uploads_dir.mkdir(parents=True, exist_ok=True)
        cfg.staging_dir.mkdir(parents=True, exist_ok=True)

        engine = create_engine(cfg.database_url)
        await init_models(engine)
        app.state.services = build_services(cfg, create_session_maker(engine))

        yield

        # Shutdown: let in-flight pipelines record their final status
        await app.state.services.runner.drain()
        await engine.dispose()

    app = FastAPI(
        title="Shipyard API",
        description="Deploy uploaded or linked projects to GitHub and Vercel",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.services = services

    @app.middleware("http")
    async def correlation_middleware(request: Request, call_next):
        correlation_id = request.headers.get("X-Correlation-ID", f"req_{uuid.uuid4().hex[:8]}")
        set_correlation_id(correlation_id)
        structlog.contextvars.bind_contextvars(method=request.method, path=request.url.path)

        started = time.perf_counter()
        logger = get_logger("shipyard.http")

        def elapsed_ms() -> float:
            return round((time.perf_counter() - started) * 1000, 2)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "http_request_exception",
                error=str(e),
                error_type=type(e).__name__,
                duration_ms=elapsed_ms(),
                exc_info=True,
            )
            raise
        else:
            log = logger.error if response.status_code >= 500 else logger.info  # noqa: PLR2004
            log("http_request", status_code=response.status_code, duration_ms=elapsed_ms())
            response.headers["X-Correlation-ID"] = correlation_id
            return response
        finally:
            clear_context()

    @app.get("/")
    async def root():
        """Root endpoint - API information."""
        return {
            "name": "Shipyard API",
            "version": "0.1.0",
            "description": "Deploy uploaded or linked projects to GitHub and Vercel",
        }

    app.include_router(routers.health.router)
    app.include_router(routers.projects.router, prefix="/api")
    app.include_router(routers.admin.router, prefix="/api")

    return app


app = create_app()


def run() -> None:
    """Console entry point."""
    import uvicorn

    uvicorn.run("shipyard.api.main:app", host="0.0.0.0", port=8000)  # noqa: S104
