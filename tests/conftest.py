"""
Test Suite Configuration
"""
from datetime import datetime
from typing import List

import pytest

from sales_analytics.config import Settings
from sales_analytics.dataset import SalesDataset
from sales_analytics.domain import DateRange, FilterCriteria, SalesRecord

HEADER = "id,date,revenue,orders,customerId,productId,productName,category,region"


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Create test settings"""
    return Settings(
        app_env="testing",
        debug=True,
    )


@pytest.fixture
def csv_header() -> str:
    return HEADER


@pytest.fixture
def sample_records() -> List[SalesRecord]:
    """Four January 2024 orders across three regions"""
    return [
        SalesRecord(
            id="order1",
            date=datetime(2024, 1, 15),
            revenue=250.0,
            order_count=2,
            customer_id="customer1",
            product_id="product1",
            product_name="Widget A",
            category="Electronics",
            region="North",
        ),
        SalesRecord(
            id="order2",
            date=datetime(2024, 1, 16),
            revenue=150.0,
            order_count=1,
            customer_id="customer2",
            product_id="product2",
            product_name="Widget B",
            category="Electronics",
            region="South",
        ),
        SalesRecord(
            id="order3",
            date=datetime(2024, 1, 17),
            revenue=300.0,
            order_count=3,
            customer_id="customer1",
            product_id="product1",
            product_name="Widget A",
            category="Electronics",
            region="North",
        ),
        SalesRecord(
            id="order4",
            date=datetime(2024, 1, 18),
            revenue=50.0,
            order_count=1,
            customer_id="customer3",
            product_id="product3",
            product_name="Widget C",
            category="Home",
            region="East",
        ),
    ]


@pytest.fixture
def january_filter() -> FilterCriteria:
    """Whole of January 2024, no restrictions"""
    return FilterCriteria(
        date_range=DateRange(start=datetime(2024, 1, 1), end=datetime(2024, 1, 31, 23, 59, 59)),
    )


@pytest.fixture
def dataset(sample_records, january_filter) -> SalesDataset:
    """Dataset holding the sample records under the January filter"""
    return SalesDataset(records=sample_records, filters=january_filter)
