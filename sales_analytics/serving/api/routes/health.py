"""
Health Check Endpoints

Provides health and readiness checks for orchestration systems.
"""

from datetime import datetime
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from sales_analytics.config import get_settings
from sales_analytics.dataset import SalesDataset
from sales_analytics.serving.api.dependencies import get_dataset

router = APIRouter()


class HealthResponse(BaseModel):
    """Health check response"""
    status: str
    version: str
    environment: str
    timestamp: datetime
    checks: Dict[str, Any]


@router.get("/health", response_model=HealthResponse)
async def health_check(dataset: SalesDataset = Depends(get_dataset)) -> HealthResponse:
    """
    Health check endpoint.

    Reports the dataset snapshot version and record counts.
    """
    settings = get_settings()
    snapshot = dataset.snapshot()

    return HealthResponse(
        status="healthy",
        version=settings.version,
        environment=settings.app_env,
        timestamp=datetime.utcnow(),
        checks={
            "dataset": {
                "version": snapshot.version,
                "records": len(snapshot.records),
                "filtered_records": len(snapshot.filtered),
            }
        },
    )


@router.get("/health/live")
async def liveness_check() -> Dict[str, str]:
    """
    Liveness probe endpoint.

    Returns 200 if the application is running.
    """
    return {"status": "alive"}


@router.get("/health/ready")
async def readiness_check(response: Response, dataset: SalesDataset = Depends(get_dataset)) -> Dict[str, str]:
    """
    Readiness probe endpoint.

    Ready once the dataset holds at least one record.
    """
    if not dataset.records:
        response.status_code = 503
        return {"status": "not_ready", "reason": "dataset_empty"}
    return {"status": "ready"}
