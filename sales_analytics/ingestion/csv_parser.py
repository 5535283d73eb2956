"""
Sales CSV Parser

Turns raw delimited text into validated SalesRecord objects.
Handles:
- Blank line skipping
- Quote-aware comma tokenizing (quotes toggle, no escape doubling)
- Column count checks against the header
- Field defaulting and lenient numeric coercion
- Record validation with per-row diagnostics

A malformed row never aborts the parse: every row yields either a record
or a diagnostic, and the caller gets both lists back.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional, Union
import math
import re

import structlog

from sales_analytics.domain.records import SalesRecord

logger = structlog.get_logger(__name__)


# Header names recognised in the input (case-sensitive)
FIELD_ID = "id"
FIELD_DATE = "date"
FIELD_REVENUE = "revenue"
FIELD_ORDERS = "orders"
FIELD_CUSTOMER_ID = "customerId"
FIELD_PRODUCT_ID = "productId"
FIELD_PRODUCT_NAME = "productName"
FIELD_CATEGORY = "category"
FIELD_REGION = "region"

CSV_FIELDS = [
    FIELD_ID,
    FIELD_DATE,
    FIELD_REVENUE,
    FIELD_ORDERS,
    FIELD_CUSTOMER_ID,
    FIELD_PRODUCT_ID,
    FIELD_PRODUCT_NAME,
    FIELD_CATEGORY,
    FIELD_REGION,
]

UNKNOWN = "Unknown"
DEFAULT_REVENUE = 0.0
DEFAULT_ORDER_COUNT = 1

# Tried in order after ISO-8601
DATE_FORMATS = [
    "%m/%d/%Y",
    "%m/%d/%Y %H:%M:%S",
    "%Y/%m/%d",
    "%Y/%m/%d %H:%M:%S",
    "%d %b %Y",
    "%b %d %Y",
]

_FLOAT_PREFIX = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_PREFIX = re.compile(r"^[+-]?\d+")


class DiagnosticCode(str, Enum):
    """Kinds of ingestion diagnostics"""
    COLUMN_COUNT_MISMATCH = "column_count_mismatch"
    INVALID_ROW = "invalid_row"
    ROW_CONSTRUCTION_ERROR = "row_construction_error"
    SOURCE_FETCH_FAILURE = "source_fetch_failure"


@dataclass(frozen=True)
class ParseDiagnostic:
    """Warning about a dropped row or an unreadable source"""
    code: DiagnosticCode
    message: str
    line: Optional[int] = None
    record: Optional[SalesRecord] = None
    error: Optional[str] = None


RowOutcome = Union[SalesRecord, ParseDiagnostic]


@dataclass
class ParseResult:
    """Records and diagnostics from one parse"""
    records: List[SalesRecord] = field(default_factory=list)
    diagnostics: List[ParseDiagnostic] = field(default_factory=list)
    rows_read: int = 0

    @property
    def rows_dropped(self) -> int:
        return self.rows_read - len(self.records)

    def warnings_by_code(self) -> Dict[DiagnosticCode, int]:
        """Count diagnostics per code"""
        counts: Dict[DiagnosticCode, int] = {}
        for diagnostic in self.diagnostics:
            counts[diagnostic.code] = counts.get(diagnostic.code, 0) + 1
        return counts


def split_csv_line(line: str) -> List[str]:
    """
    Split one CSV line on commas outside double quotes.

    A quote toggles quoted mode and is dropped from the token. Each token is
    stripped of surrounding whitespace.
    """
    tokens = []
    current = []
    in_quotes = False

    for char in line:
        if char == '"':
            in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            tokens.append("".join(current).strip())
            current = []
        else:
            current.append(char)

    tokens.append("".join(current).strip())
    return tokens


def parse_float(value: Optional[str]) -> Optional[float]:
    """Parse the leading decimal number of a string, None if there is none"""
    if not value:
        return None
    match = _FLOAT_PREFIX.match(value.strip())
    if not match:
        return None
    number = float(match.group(0))
    if not math.isfinite(number):
        return None
    return number


def parse_int(value: Optional[str]) -> Optional[int]:
    """Parse the leading integer of a string, None if there is none"""
    if not value:
        return None
    match = _INT_PREFIX.match(value.strip())
    if not match:
        return None
    return int(match.group(0))


def parse_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a calendar date or timestamp.

    ISO-8601 first, then the fallback formats. Timezone-aware values are
    converted to naive UTC so every record compares on the same clock.
    """
    if not value:
        return None
    value = value.strip()

    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        parsed = None
        for fmt in DATE_FORMATS:
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue

    if parsed is None:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


class SalesCsvParser:
    """
    Resilient sales CSV parser.

    The first non-blank line is the header; its names map columns to record
    fields. Missing fields are defaulted using the 1-based data row index.

    Example:
        parser = SalesCsvParser()
        result = parser.parse(csv_text)
        for diagnostic in result.diagnostics:
            print(diagnostic.line, diagnostic.message)
    """

    def parse(self, text: str) -> ParseResult:
        """
        Parse CSV text into records and diagnostics.

        Args:
            text: Raw CSV content

        Returns:
            ParseResult with records in input order
        """
        result = ParseResult()
        lines = [line for line in text.split("\n") if line.strip()]
        if not lines:
            logger.info("CSV input is empty")
            return result

        headers = [header.strip() for header in lines[0].split(",")]

        for row_index, line in enumerate(lines[1:], start=1):
            result.rows_read += 1
            outcome = self._parse_row(headers, line, row_index)

            if isinstance(outcome, ParseDiagnostic):
                result.diagnostics.append(outcome)
                logger.warning(
                    outcome.message,
                    code=outcome.code.value,
                    line=outcome.line,
                )
            else:
                result.records.append(outcome)

        logger.info(
            "CSV parsed",
            rows_read=result.rows_read,
            records=len(result.records),
            rows_dropped=result.rows_dropped,
        )
        return result

    def _parse_row(self, headers: List[str], line: str, row_index: int) -> RowOutcome:
        """Turn one data line into a record or a diagnostic"""
        line_number = row_index + 1
        values = split_csv_line(line)

        if len(values) != len(headers):
            return ParseDiagnostic(
                code=DiagnosticCode.COLUMN_COUNT_MISMATCH,
                message=f"Skipping line {line_number}: Column count mismatch "
                        f"(expected {len(headers)}, got {len(values)})",
                line=line_number,
            )

        try:
            record = self._build_record(dict(zip(headers, values)), row_index)
        except Exception as e:
            return ParseDiagnostic(
                code=DiagnosticCode.ROW_CONSTRUCTION_ERROR,
                message=f"Error parsing line {line_number}",
                line=line_number,
                error=str(e),
            )

        if not record.is_valid():
            return ParseDiagnostic(
                code=DiagnosticCode.INVALID_ROW,
                message=f"Skipping invalid data at line {line_number}",
                line=line_number,
                record=record,
            )

        return record

    def _build_record(self, row: Dict[str, str], row_index: int) -> SalesRecord:
        """Apply defaults and coercion to a header-keyed row"""
        revenue = parse_float(row.get(FIELD_REVENUE))
        order_count = parse_int(row.get(FIELD_ORDERS))
        if order_count is None or order_count < 1:
            order_count = DEFAULT_ORDER_COUNT

        return SalesRecord(
            id=row.get(FIELD_ID) or f"order_{row_index}",
            date=parse_date(row.get(FIELD_DATE)),
            revenue=DEFAULT_REVENUE if revenue is None else revenue,
            order_count=order_count,
            customer_id=row.get(FIELD_CUSTOMER_ID) or f"customer_{row_index}",
            product_id=row.get(FIELD_PRODUCT_ID) or f"product_{row_index}",
            product_name=row.get(FIELD_PRODUCT_NAME) or None,
            category=row.get(FIELD_CATEGORY) or UNKNOWN,
            region=row.get(FIELD_REGION) or UNKNOWN,
        )


def parse_sales_csv(text: str) -> ParseResult:
    """
    Convenience function to parse sales CSV text.

    Args:
        text: Raw CSV content

    Returns:
        ParseResult with records and diagnostics
    """
    return SalesCsvParser().parse(text)
