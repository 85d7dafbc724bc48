"""Main entrypoint and application factory for the CardSense statement API.

This module initializes the FastAPI application, configures logging, creates the database tables, maps pipeline errors to JSON error responses, and exposes the Scalar API reference endpoint for interactive OpenAPI documentation. It also includes the main entrypoint for running the app with Uvicorn.
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from scalar_fastapi import get_scalar_api_reference
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from cardsense.api.routes import router
from cardsense.core.db import init_db
from cardsense.core.errors import CardSenseError
from cardsense.core.settings import get_settings
from cardsense.core.utils import get_logger, setup_logging

setup_logging(get_settings().log_dir, get_settings().log_level)
logger = get_logger("cardsense.app")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan event handler to create the spending and document tables."""
    _ = app  # Silence unused argument warning
    try:
        init_db()
    except SQLAlchemyError:
        logger.exception("Failed to create database tables")
        raise
    yield


app = FastAPI(
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    title="CardSense Statement API",
    description="""
    The CardSense Statement API extracts, categorizes and stores transactions from Indian bank statements.

    **Endpoints:**
    - `POST /api/spending/upload`: Upload a CSV or PDF statement and store its transactions.
    - `POST /api/upload/bank-statement`: Quick, non-persisted analysis of a PDF statement.
    - `POST /api/analyze-statement`: LLM analysis of a PDF statement.
    - `GET|POST|DELETE /api/spending`: The caller's spending history.
    - `GET /health`: Health check endpoint.
    - `GET /scalar`: Interactive Scalar OpenAPI documentation.
    """,
    version="1.0.0",
)
app.include_router(router)


@app.exception_handler(CardSenseError)
async def cardsense_error_handler(request: Request, exc: CardSenseError) -> JSONResponse:
    """Render pipeline errors as ``{"error": message}``."""
    logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render HTTP errors with the same envelope as pipeline errors."""
    _ = request
    return JSONResponse({"error": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.get("/scalar", include_in_schema=False)
async def scalar_docs() -> JSONResponse:
    """Return Scalar API reference."""
    return get_scalar_api_reference(openapi_url=app.openapi_url, title=app.title)


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run("main:app", host=settings.server_host, port=settings.server_port, reload=True)
