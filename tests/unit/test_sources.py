"""
Unit Tests - CSV Sources
"""
import io

import httpx
import pytest

from sales_analytics.errors import SourceFetchError
from sales_analytics.ingestion import (
    DiagnosticCode,
    fetch_text,
    generate_sample_csv,
    parse_source,
    parse_url,
    read_text_source,
)

CSV_URL = "https://data.example.com/sales.csv"


def mock_client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestReadTextSource:
    """Tests for local source reading"""

    @pytest.mark.asyncio
    async def test_reads_path(self, tmp_path):
        path = tmp_path / "sales.csv"
        path.write_text(generate_sample_csv(), encoding="utf-8")

        assert await read_text_source(path) == generate_sample_csv()
        assert await read_text_source(str(path)) == generate_sample_csv()

    @pytest.mark.asyncio
    async def test_reads_bytes_and_strips_bom(self):
        payload = "\ufeffid,date\n1,2025-10-01".encode("utf-8")

        assert await read_text_source(payload) == "id,date\n1,2025-10-01"

    @pytest.mark.asyncio
    async def test_reads_file_like_objects(self):
        assert await read_text_source(io.StringIO("a,b")) == "a,b"
        assert await read_text_source(io.BytesIO(b"a,b")) == "a,b"

    @pytest.mark.asyncio
    async def test_missing_file_raises(self, tmp_path):
        with pytest.raises(SourceFetchError) as exc_info:
            await read_text_source(tmp_path / "missing.csv")

        assert "missing.csv" in exc_info.value.source

    @pytest.mark.asyncio
    async def test_invalid_utf8_raises(self):
        with pytest.raises(SourceFetchError):
            await read_text_source(b"\xff\xfe\xfa")


class TestParseSource:
    """Tests for parse_source"""

    @pytest.mark.asyncio
    async def test_parses_file(self, tmp_path):
        path = tmp_path / "sales.csv"
        path.write_text(generate_sample_csv(), encoding="utf-8")

        result = await parse_source(path)

        assert len(result.records) == 6
        assert result.diagnostics == []

    @pytest.mark.asyncio
    async def test_missing_file_becomes_diagnostic(self, tmp_path):
        result = await parse_source(tmp_path / "missing.csv")

        assert result.records == []
        assert len(result.diagnostics) == 1
        assert result.diagnostics[0].code == DiagnosticCode.SOURCE_FETCH_FAILURE
        assert "missing.csv" in result.diagnostics[0].message


class TestFetchText:
    """Tests for HTTP sources"""

    @pytest.mark.asyncio
    async def test_fetches_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            assert str(request.url) == CSV_URL
            return httpx.Response(200, text=generate_sample_csv())

        async with mock_client(handler) as client:
            text = await fetch_text(CSV_URL, client=client)

        assert text == generate_sample_csv()

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        async with mock_client(lambda request: httpx.Response(404)) as client:
            with pytest.raises(SourceFetchError) as exc_info:
                await fetch_text(CSV_URL, client=client)

        assert exc_info.value.reason == "HTTP 404"
        assert exc_info.value.source == CSV_URL

    @pytest.mark.asyncio
    async def test_transport_error_raises(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with mock_client(handler) as client:
            with pytest.raises(SourceFetchError):
                await fetch_text(CSV_URL, client=client)


class TestParseUrl:
    """Tests for parse_url"""

    @pytest.mark.asyncio
    async def test_parses_remote_csv(self):
        async with mock_client(lambda request: httpx.Response(200, text=generate_sample_csv())) as client:
            result = await parse_url(CSV_URL, client=client)

        assert len(result.records) == 6

    @pytest.mark.asyncio
    async def test_fetch_failure_returns_empty_result(self):
        async with mock_client(lambda request: httpx.Response(500)) as client:
            result = await parse_url(CSV_URL, client=client)

        assert result.records == []
        assert result.warnings_by_code() == {DiagnosticCode.SOURCE_FETCH_FAILURE: 1}
        assert result.diagnostics[0].error == "HTTP 500"

    @pytest.mark.asyncio
    async def test_malformed_url_becomes_diagnostic(self):
        result = await parse_url("http://[::1")

        assert result.records == []
        assert result.warnings_by_code() == {DiagnosticCode.SOURCE_FETCH_FAILURE: 1}


class TestUnreadableSources:
    """Tests for sources that fail after being opened"""

    @pytest.mark.asyncio
    async def test_malformed_url_raises_fetch_error(self):
        async with mock_client(lambda request: httpx.Response(200)) as client:
            with pytest.raises(SourceFetchError) as exc_info:
                await fetch_text("http://[::1", client=client)

        assert exc_info.value.source == "http://[::1"

    @pytest.mark.asyncio
    async def test_closed_file_raises_fetch_error(self):
        stream = io.BytesIO(generate_sample_csv().encode("utf-8"))
        stream.close()

        with pytest.raises(SourceFetchError):
            await read_text_source(stream)

    @pytest.mark.asyncio
    async def test_read_returning_non_text_raises_fetch_error(self):
        class NumberReader:
            def read(self):
                return 42

        with pytest.raises(SourceFetchError) as exc_info:
            await read_text_source(NumberReader())

        assert "int" in exc_info.value.reason

    @pytest.mark.asyncio
    async def test_closed_file_becomes_diagnostic(self):
        stream = io.BytesIO(b"id,date")
        stream.close()

        result = await parse_source(stream)

        assert result.records == []
        assert result.diagnostics[0].code == DiagnosticCode.SOURCE_FETCH_FAILURE
