"""
Dataset API Endpoints

CSV import, filter management and the sample CSV download.
"""

from datetime import date, datetime
from typing import List, Optional, Union

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from pydantic import BaseModel, Field, field_validator
import structlog

from sales_analytics.dataset import SalesDataset
from sales_analytics.errors import InvalidFilterError
from sales_analytics.ingestion import ParseResult, generate_sample_csv
from sales_analytics.ingestion.sample import SAMPLE_FILE_NAME
from sales_analytics.serving.api.dependencies import get_dataset

router = APIRouter()
logger = structlog.get_logger(__name__)


class DiagnosticResponse(BaseModel):
    """One ingestion diagnostic"""
    code: str
    message: str
    line: Optional[int] = None
    error: Optional[str] = None


class ImportSummary(BaseModel):
    """Result of a CSV import"""
    version: int
    records_loaded: int
    rows_read: int
    rows_dropped: int
    diagnostics: List[DiagnosticResponse]


class UrlImportRequest(BaseModel):
    """Remote CSV location"""
    url: str = Field(..., min_length=1)


class DateRangeResponse(BaseModel):
    start: datetime
    end: datetime


class FilterResponse(BaseModel):
    """Current filter criteria"""
    date_range: DateRangeResponse
    regions: List[str]
    categories: List[str]
    customer_segments: List[str]


class FilterUpdate(BaseModel):
    """
    Partial filter update; omitted fields keep their value.

    A date-only bound ("2025-10-06") covers the whole day.
    """
    start: Optional[Union[datetime, date]] = None
    end: Optional[Union[datetime, date]] = None
    regions: Optional[List[str]] = None
    categories: Optional[List[str]] = None
    customer_segments: Optional[List[str]] = None

    @field_validator("start", "end", mode="before")
    @classmethod
    def parse_plain_date(cls, v):
        """Keep YYYY-MM-DD input as a date so DateRange widens it to the full day"""
        if isinstance(v, str) and len(v.strip()) == 10:
            try:
                return date.fromisoformat(v.strip())
            except ValueError:
                return v
        return v


def _summary(dataset: SalesDataset, result: ParseResult) -> ImportSummary:
    return ImportSummary(
        version=dataset.snapshot().version,
        records_loaded=len(result.records),
        rows_read=result.rows_read,
        rows_dropped=result.rows_dropped,
        diagnostics=[
            DiagnosticResponse(
                code=d.code.value,
                message=d.message,
                line=d.line,
                error=d.error,
            )
            for d in result.diagnostics
        ],
    )


@router.post("/import", response_model=ImportSummary)
async def import_csv(
    request: Request,
    dataset: SalesDataset = Depends(get_dataset),
) -> ImportSummary:
    """
    Replace the dataset with the CSV sent as the request body.
    """
    body = await request.body()
    logger.info("import_csv called", bytes=len(body))
    result = await dataset.import_source(body)
    return _summary(dataset, result)


@router.post("/import-url", response_model=ImportSummary)
async def import_csv_from_url(
    payload: UrlImportRequest,
    dataset: SalesDataset = Depends(get_dataset),
) -> ImportSummary:
    """
    Replace the dataset with a CSV fetched over HTTP.

    An unreachable URL empties the dataset and returns a
    source_fetch_failure diagnostic.
    """
    logger.info("import_csv_from_url called", url=payload.url)
    result = await dataset.import_url(payload.url)
    return _summary(dataset, result)


@router.delete("", status_code=204)
async def clear_dataset(dataset: SalesDataset = Depends(get_dataset)) -> Response:
    """Drop all records"""
    dataset.clear()
    return Response(status_code=204)


@router.get("/sample.csv")
async def download_sample_csv() -> Response:
    """Download the canonical sample CSV"""
    return Response(
        content=generate_sample_csv(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{SAMPLE_FILE_NAME}"'},
    )


@router.get("/filters", response_model=FilterResponse)
async def get_filters(dataset: SalesDataset = Depends(get_dataset)) -> FilterResponse:
    """Current filter criteria"""
    return FilterResponse(**dataset.filters.as_dict())


@router.patch("/filters", response_model=FilterResponse)
async def update_filters(
    update: FilterUpdate,
    dataset: SalesDataset = Depends(get_dataset),
) -> FilterResponse:
    """
    Merge a partial filter update.

    Supplying only one of start/end keeps the other bound.
    """
    partial = update.model_dump(exclude_unset=True, exclude={"start", "end"})
    partial = {key: value for key, value in partial.items() if value is not None}

    if update.start is not None or update.end is not None:
        current = dataset.filters.date_range
        partial["date_range"] = (update.start or current.start, update.end or current.end)

    try:
        snapshot = dataset.update_filter(**partial)
    except InvalidFilterError as e:
        raise HTTPException(status_code=422, detail=str(e))

    return FilterResponse(**snapshot.filters.as_dict())


@router.delete("/filters", response_model=FilterResponse)
async def reset_filters(dataset: SalesDataset = Depends(get_dataset)) -> FilterResponse:
    """Restore the default filter"""
    snapshot = dataset.reset_filter()
    return FilterResponse(**snapshot.filters.as_dict())
