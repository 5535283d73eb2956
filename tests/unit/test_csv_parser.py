"""
Unit Tests - CSV Parsing
"""
from datetime import datetime

import pytest

from sales_analytics.ingestion import (
    DiagnosticCode,
    SalesCsvParser,
    generate_sample_csv,
    generate_synthetic_csv,
    parse_sales_csv,
    write_sample_csv,
)
from sales_analytics.ingestion.csv_parser import (
    parse_date,
    parse_float,
    parse_int,
    split_csv_line,
)


def build_csv(header: str, *rows: str) -> str:
    return "\n".join([header, *rows])


class TestSplitCsvLine:
    """Tests for the quote-aware tokenizer"""

    def test_plain_tokens_are_trimmed(self):
        assert split_csv_line(" a , b,c ") == ["a", "b", "c"]

    def test_quoted_commas_are_literal(self):
        tokens = split_csv_line('id2,"ACME, Inc.","North, America"')
        assert tokens == ["id2", "ACME, Inc.", "North, America"]

    def test_empty_tokens_kept(self):
        assert split_csv_line(",x,,") == ["", "x", "", ""]

    def test_unterminated_quote_swallows_rest_of_line(self):
        assert split_csv_line('a,"b,c') == ["a", "b,c"]


class TestCoercion:
    """Tests for lenient value coercion"""

    def test_parse_float_prefix(self):
        assert parse_float("12.5") == 12.5
        assert parse_float(" 7 ") == 7.0
        assert parse_float("99.99USD") == 99.99
        assert parse_float("-1") == -1.0

    def test_parse_float_non_numeric(self):
        assert parse_float("abc") is None
        assert parse_float("") is None
        assert parse_float(None) is None

    def test_parse_int_truncates(self):
        assert parse_int("3") == 3
        assert parse_int("2.9") == 2
        assert parse_int("x2") is None

    def test_parse_date_formats(self):
        assert parse_date("2025-10-05") == datetime(2025, 10, 5)
        assert parse_date("2025-10-05T14:30:00") == datetime(2025, 10, 5, 14, 30)
        assert parse_date("10/05/2025") == datetime(2025, 10, 5)
        assert parse_date("2025-10-05T12:00:00+02:00") == datetime(2025, 10, 5, 10, 0)

    def test_parse_date_invalid(self):
        assert parse_date("not-a-date") is None
        assert parse_date("2025-13-45") is None
        assert parse_date("") is None


class TestSalesCsvParser:
    """Tests for SalesCsvParser"""

    def test_parses_well_formed_row(self, csv_header):
        csv = build_csv(csv_header, "id1,2025-10-01,10.5,2,c1,p1,Name,Cat,Region")

        result = parse_sales_csv(csv)

        assert len(result.records) == 1
        record = result.records[0]
        assert record.id == "id1"
        assert record.date == datetime(2025, 10, 1)
        assert record.revenue == 10.5
        assert record.order_count == 2
        assert record.customer_id == "c1"
        assert record.product_id == "p1"
        assert record.product_name == "Name"
        assert record.category == "Cat"
        assert record.region == "Region"
        assert result.diagnostics == []

    def test_quoted_fields_with_commas(self, csv_header):
        csv = build_csv(
            csv_header,
            'id2,2025-10-02,99.99,1,c2,p2,"ACME, Inc.",Electronics,"North, America"',
        )

        result = parse_sales_csv(csv)

        assert len(result.records) == 1
        record = result.records[0]
        assert record.region == "North, America"
        assert record.product_name == "ACME, Inc."
        assert record.category == "Electronics"

    def test_column_count_mismatch_skips_row(self, csv_header):
        csv = build_csv(
            csv_header,
            "id3,2025-10-03,20.00,1,c3,p3,Prod,Category",
            "id4,2025-10-03,30.00,1,c4,p4,Prod,Category,Region",
        )

        result = parse_sales_csv(csv)

        assert [r.id for r in result.records] == ["id4"]
        mismatches = [d for d in result.diagnostics if d.code == DiagnosticCode.COLUMN_COUNT_MISMATCH]
        assert len(mismatches) == 1
        assert "Column count mismatch" in mismatches[0].message
        assert mismatches[0].line == 2

    def test_invalid_date_skips_row(self, csv_header):
        csv = build_csv(csv_header, "id5,not-a-date,20.00,1,c5,p5,Prod,Category,Region")

        result = parse_sales_csv(csv)

        assert result.records == []
        assert len(result.diagnostics) == 1
        diagnostic = result.diagnostics[0]
        assert diagnostic.code == DiagnosticCode.INVALID_ROW
        assert "Skipping invalid data" in diagnostic.message
        assert diagnostic.record is not None
        assert diagnostic.record.id == "id5"
        assert diagnostic.record.date is None

    def test_negative_revenue_skips_row(self, csv_header):
        csv = build_csv(csv_header, "id6,2025-10-04,-1,1,c6,p6,Prod,Category,Region")

        result = parse_sales_csv(csv)

        assert result.records == []
        assert result.diagnostics[0].code == DiagnosticCode.INVALID_ROW

    def test_defaults_for_blank_fields(self, csv_header):
        csv = build_csv(csv_header, ",2025-10-05,,,,,,,")

        result = parse_sales_csv(csv)

        assert len(result.records) == 1
        record = result.records[0]
        assert record.id == "order_1"
        assert record.revenue == 0
        assert record.order_count == 1
        assert record.customer_id == "customer_1"
        assert record.product_id == "product_1"
        assert record.product_name is None
        assert record.category == "Unknown"
        assert record.region == "Unknown"
        assert record.date == datetime(2025, 10, 5)

    def test_default_index_counts_data_rows(self, csv_header):
        csv = build_csv(
            csv_header,
            "a,2025-10-01,1,1,c,p,n,cat,r",
            "",
            ",2025-10-02,1,1,c,p,n,cat,r",
        )

        result = parse_sales_csv(csv)

        assert [r.id for r in result.records] == ["a", "order_2"]

    def test_non_numeric_values_fall_back_to_defaults(self, csv_header):
        csv = build_csv(csv_header, "id8,2025-10-06,abc,many,c8,p8,Prod,Category,Region")

        result = parse_sales_csv(csv)

        record = result.records[0]
        assert record.revenue == 0
        assert record.order_count == 1

    def test_zero_order_count_defaults_to_one(self, csv_header):
        csv = build_csv(csv_header, "id9,2025-10-06,5,0,c9,p9,Prod,Category,Region")

        assert parse_sales_csv(csv).records[0].order_count == 1

    def test_ignores_blank_lines(self, csv_header):
        csv = build_csv(csv_header, "", "id7,2025-10-06,12.34,1,c7,p7,Prod,Category,Region", "   ")

        result = parse_sales_csv(csv)

        assert [r.id for r in result.records] == ["id7"]
        assert result.diagnostics == []
        assert result.rows_read == 1

    def test_header_order_defines_mapping(self):
        csv = build_csv(
            "region,id,date,revenue,customerId,productId,category",
            "Europe,x1,2025-10-01,5,c,p,Books",
        )

        record = parse_sales_csv(csv).records[0]

        assert record.region == "Europe"
        assert record.id == "x1"
        assert record.order_count == 1

    def test_crlf_line_endings(self, csv_header):
        csv = "\r\n".join([csv_header, "id1,2025-10-01,10,1,c1,p1,Name,Cat,Region"])

        record = parse_sales_csv(csv).records[0]

        assert record.region == "Region"

    def test_empty_input(self):
        result = parse_sales_csv("   \n\n")
        assert result.records == []
        assert result.diagnostics == []

    def test_row_construction_error_does_not_abort(self, csv_header, monkeypatch):
        parser = SalesCsvParser()
        original = parser._build_record

        def flaky(row, row_index):
            if row_index == 1:
                raise RuntimeError("boom")
            return original(row, row_index)

        monkeypatch.setattr(parser, "_build_record", flaky)
        csv = build_csv(
            csv_header,
            "id1,2025-10-01,10,1,c1,p1,Name,Cat,Region",
            "id2,2025-10-02,10,1,c2,p2,Name,Cat,Region",
        )

        result = parser.parse(csv)

        assert [r.id for r in result.records] == ["id2"]
        assert result.diagnostics[0].code == DiagnosticCode.ROW_CONSTRUCTION_ERROR
        assert result.diagnostics[0].error == "boom"

    def test_output_preserves_input_order_with_gaps(self, csv_header):
        csv = build_csv(
            csv_header,
            "a,2025-10-01,1,1,c,p,n,cat,r",
            "b,bad-date,1,1,c,p,n,cat,r",
            "c,2025-10-03,1,1,c,p,n,cat,r",
            "d,2025-10-04,1,1,c,p,n",
            "e,2025-10-05,1,1,c,p,n,cat,r",
        )

        result = parse_sales_csv(csv)

        assert [r.id for r in result.records] == ["a", "c", "e"]
        assert result.rows_dropped == 2
        assert result.warnings_by_code() == {
            DiagnosticCode.INVALID_ROW: 1,
            DiagnosticCode.COLUMN_COUNT_MISMATCH: 1,
        }


class TestSampleCsv:
    """Tests for the canonical and synthetic sample generators"""

    def test_sample_round_trip(self):
        result = parse_sales_csv(generate_sample_csv())

        assert len(result.records) == 6
        assert [r.id for r in result.records] == [f"order_00{i}" for i in range(1, 7)]
        assert result.records[0].region == "North America"
        assert all(r.date is not None for r in result.records)
        assert result.diagnostics == []

    def test_sample_is_deterministic(self):
        assert generate_sample_csv() == generate_sample_csv()

    def test_write_sample_csv(self, tmp_path):
        path = write_sample_csv(tmp_path)

        assert path.name == "sample-sales-data.csv"
        assert path.read_text(encoding="utf-8") == generate_sample_csv()

    def test_synthetic_csv_parses_cleanly(self):
        text = generate_synthetic_csv(rows=300, seed=7, start=datetime(2025, 1, 1), days=30)

        result = parse_sales_csv(text)

        assert len(result.records) == 300
        assert result.diagnostics == []
        assert all(datetime(2025, 1, 1) <= r.date <= datetime(2025, 1, 31) for r in result.records)

    def test_synthetic_csv_is_reproducible(self):
        first = generate_synthetic_csv(rows=50, seed=3, start=datetime(2025, 1, 1))
        second = generate_synthetic_csv(rows=50, seed=3, start=datetime(2025, 1, 1))

        assert first == second

    def test_write_sample_csv_creates_missing_directory(self, tmp_path):
        target = tmp_path / "data" / "generated"

        path = write_sample_csv(target)

        assert target.is_dir()
        assert path == target / "sample-sales-data.csv"
        assert path.read_text(encoding="utf-8") == generate_sample_csv()

    def test_write_sample_csv_to_explicit_file(self, tmp_path):
        path = write_sample_csv(tmp_path / "exports" / "template.csv")

        assert path.name == "template.csv"
        assert path.is_file()
