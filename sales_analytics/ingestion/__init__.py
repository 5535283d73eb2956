"""
Data Ingestion Module
"""
from .csv_parser import (
    DiagnosticCode,
    ParseDiagnostic,
    ParseResult,
    SalesCsvParser,
    parse_sales_csv,
)
from .sample import generate_sample_csv, generate_synthetic_csv, write_sample_csv
from .sources import fetch_text, parse_source, parse_url, read_text_source

__all__ = [
    "DiagnosticCode",
    "ParseDiagnostic",
    "ParseResult",
    "SalesCsvParser",
    "parse_sales_csv",
    "generate_sample_csv",
    "generate_synthetic_csv",
    "write_sample_csv",
    "fetch_text",
    "parse_source",
    "parse_url",
    "read_text_source",
]
