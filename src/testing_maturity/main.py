"""Testing maturity assessment service entry point."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from testing_maturity import __version__
from testing_maturity.api.router import router
from testing_maturity.api.routes.assessment import get_model_loader
from testing_maturity.core.model_loader import ModelUnavailableError
from testing_maturity.database import close_database, create_tables, init_database
from testing_maturity.observability import configure_logging, get_logger
from testing_maturity.settings import get_settings

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Manage application startup and shutdown lifecycle.

    Args:
        app: The FastAPI application instance.

    Yields:
        None
    """
    settings = get_settings()
    configure_logging(settings.log_level, json_logs=settings.json_logs)

    init_database(settings)
    if settings.create_tables_on_startup:
        await create_tables()

    # Preload so the first request does not pay for parsing; /model reports failures.
    try:
        model = get_model_loader().load()
    except ModelUnavailableError:
        logger.error("Maturity model unavailable at startup")
    else:
        logger.info("Service started", service=settings.service_name, model_version=model.version)

    yield

    await close_database()
    logger.info("Service stopped", service=settings.service_name)


app = FastAPI(
    title="Testing Maturity Assessment",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(router, prefix="/api/v1")


@app.get("/health", tags=["Health"])
async def health() -> dict[str, str]:
    """Liveness probe."""
    return {"status": "ok"}
