"""
CSV Sources

Async acquisition of raw CSV text from files, file-like objects, byte
buffers and HTTP URLs. Fetch failures surface as SourceFetchError from the
fetch helpers; the parse helpers turn them into an empty ParseResult with a
source_fetch_failure diagnostic instead of raising.
"""

import asyncio
import inspect
from pathlib import Path
from typing import IO, Optional, Union

import httpx
import structlog

from sales_analytics.config import get_settings
from sales_analytics.errors import SourceFetchError
from .csv_parser import (
    DiagnosticCode,
    ParseDiagnostic,
    ParseResult,
    SalesCsvParser,
)

logger = structlog.get_logger(__name__)

TextSource = Union[str, Path, bytes, bytearray, IO[str], IO[bytes]]


def _decode(payload: Union[str, bytes, bytearray], source: str) -> str:
    if isinstance(payload, str):
        return payload
    if not isinstance(payload, (bytes, bytearray, memoryview)):
        raise SourceFetchError(source, f"read() returned {type(payload).__name__}, expected text or bytes")
    try:
        return bytes(payload).decode("utf-8-sig")
    except UnicodeDecodeError as e:
        raise SourceFetchError(source, f"not valid UTF-8 text ({e.reason})") from e


def _describe(source: TextSource) -> str:
    if isinstance(source, (str, Path)):
        return str(source)
    if isinstance(source, (bytes, bytearray)):
        return f"<{len(source)} bytes>"
    return getattr(source, "name", None) or type(source).__name__


async def read_text_source(source: TextSource) -> str:
    """
    Read CSV text from a path, a file-like object or a byte buffer.

    File-like objects may expose either a regular or a coroutine ``read``.
    Blocking file reads run in a worker thread.

    Raises:
        SourceFetchError: the source is missing, closed, unreadable or not UTF-8
    """
    description = _describe(source)

    if isinstance(source, (bytes, bytearray)):
        return _decode(source, description)

    try:
        if isinstance(source, (str, Path)):
            payload = await asyncio.to_thread(Path(source).read_bytes)
        else:
            payload = source.read()
            if inspect.isawaitable(payload):
                payload = await payload
    except OSError as e:
        raise SourceFetchError(description, e.strerror or str(e)) from e
    # a closed file object raises ValueError
    except (ValueError, TypeError, AttributeError) as e:
        raise SourceFetchError(description, str(e) or type(e).__name__) from e

    return _decode(payload, description)


async def fetch_text(
    url: str,
    timeout: Optional[float] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> str:
    """
    Fetch CSV text over HTTP.

    Args:
        url: CSV location
        timeout: Request timeout in seconds (settings default)
        client: Client to reuse; a short-lived one is created otherwise

    Raises:
        SourceFetchError: malformed URL, transport error or a 4xx/5xx response
    """
    timeout = timeout or get_settings().fetch.timeout_seconds
    try:
        if client is not None:
            resp = await client.get(url, timeout=timeout)
        else:
            async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as owned:
                resp = await owned.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        raise SourceFetchError(url, str(e) or type(e).__name__) from e

    if resp.status_code >= 400:
        raise SourceFetchError(url, f"HTTP {resp.status_code}")
    return _decode(resp.content, url)


def fetch_failure_result(error: SourceFetchError) -> ParseResult:
    """Empty ParseResult carrying a single fetch-failure diagnostic"""
    logger.warning("CSV source unavailable", source=error.source, reason=error.reason)
    return ParseResult(
        diagnostics=[
            ParseDiagnostic(
                code=DiagnosticCode.SOURCE_FETCH_FAILURE,
                message=str(error),
                error=error.reason,
            )
        ]
    )


async def parse_source(source: TextSource, parser: Optional[SalesCsvParser] = None) -> ParseResult:
    """
    Read and parse a local CSV source.

    Never raises for unreadable sources; see fetch_failure_result.
    """
    parser = parser or SalesCsvParser()
    try:
        text = await read_text_source(source)
    except SourceFetchError as e:
        return fetch_failure_result(e)
    return parser.parse(text)


async def parse_url(
    url: str,
    parser: Optional[SalesCsvParser] = None,
    client: Optional[httpx.AsyncClient] = None,
) -> ParseResult:
    """Fetch and parse a remote CSV; never raises for fetch failures"""
    parser = parser or SalesCsvParser()
    try:
        text = await fetch_text(url, client=client)
    except SourceFetchError as e:
        return fetch_failure_result(e)
    return parser.parse(text)
