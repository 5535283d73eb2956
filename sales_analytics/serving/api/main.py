"""
FastAPI Application

Main entry point for the Sales Analytics API.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
import structlog

from sales_analytics.config import get_settings
from sales_analytics.config.logging import configure_logging
from sales_analytics.dataset import SalesDataset
from sales_analytics.ingestion import generate_sample_csv
from sales_analytics.serving.api.middleware import RequestLoggingMiddleware
from sales_analytics.serving.api.routes import (
    analytics_router,
    dataset_router,
    health_router,
)

logger = structlog.get_logger(__name__)


async def load_initial_data(dataset: SalesDataset) -> None:
    """Load the configured CSV, or the canonical sample, into the dataset"""
    settings = get_settings()

    if settings.dataset.sample_path:
        result = await dataset.import_source(settings.dataset.sample_path)
        logger.info(
            "Initial dataset loaded",
            source=settings.dataset.sample_path,
            records=len(result.records),
            diagnostics=len(result.diagnostics),
        )
    elif settings.dataset.load_sample_on_startup:
        result = dataset.import_text(generate_sample_csv())
        logger.info("Sample dataset loaded", records=len(result.records))


def create_app(dataset: Optional[SalesDataset] = None, load_data: bool = True) -> FastAPI:
    """
    Build the API application around one dataset.

    Args:
        dataset: Dataset to serve (a new empty one by default)
        load_data: Load initial data on startup
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging()
        logger.info("Starting Sales Analytics API", version=settings.version)

        if load_data:
            await load_initial_data(app.state.dataset)

        yield

        logger.info("Shutting down...")

    app = FastAPI(
        title="Sales Analytics API",
        description="Filterable sales dataset with dashboard metrics and chart-ready series",
        version=settings.version,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.dataset = dataset if dataset is not None else SalesDataset()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=1000)
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(health_router, prefix="/api/v1", tags=["Health"])
    app.include_router(dataset_router, prefix="/api/v1/dataset", tags=["Dataset"])
    app.include_router(analytics_router, prefix="/api/v1/analytics", tags=["Analytics"])

    @app.get("/api/v1/info")
    async def api_info():
        """API information endpoint."""
        return {
            "name": "Sales Analytics API",
            "version": settings.version,
            "environment": settings.app_env,
            "documentation": "/docs",
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    settings = get_settings()
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
