"""
Sample Sales Data

Canonical sample CSV (a fixed six-row fixture users can download as a
template) and a seeded synthetic generator for demo-sized datasets.
"""

from datetime import datetime, timedelta
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import structlog
from faker import Faker

from .csv_parser import CSV_FIELDS

logger = structlog.get_logger(__name__)


# =============================================================================
# CONFIGURATION
# =============================================================================

SAMPLE_FILE_NAME = "sample-sales-data.csv"

SAMPLE_ROWS = [
    ["order_001", "2025-10-01", "125.99", "1", "customer_1001", "product_501", "Wireless Headphones", "Electronics", "North America"],
    ["order_002", "2025-10-01", "89.50", "1", "customer_1002", "product_502", "Cotton T-Shirt", "Clothing", "Europe"],
    ["order_003", "2025-10-02", "234.75", "1", "customer_1003", "product_503", "Garden Tools", "Home & Garden", "Asia Pacific"],
    ["order_004", "2025-10-02", "67.25", "1", "customer_1004", "product_504", "Running Shoes", "Sports", "North America"],
    ["order_005", "2025-10-03", "29.99", "1", "customer_1005", "product_505", "Programming Book", "Books", "Europe"],
    ["order_006", "2025-10-06", "29.99", "1", "customer_1005", "product_505", "Programming Book", "Books", "Europe"],
]

CATEGORIES = [
    ("Electronics", ["Headphones", "Phones", "Laptops", "Cameras"], (50, 2000)),
    ("Clothing", ["Shirts", "Jackets", "Shoes", "Dresses"], (20, 500)),
    ("Home & Garden", ["Kitchen", "Furniture", "Garden", "Decor"], (30, 1000)),
    ("Sports", ["Fitness", "Outdoor", "Cycling", "Team Sports"], (25, 800)),
    ("Books", ["Fiction", "Non-Fiction", "Educational", "Comics"], (10, 50)),
]

REGIONS = ["North America", "Europe", "Asia Pacific", "Latin America"]
REGION_WEIGHTS = [0.40, 0.30, 0.20, 0.10]


def generate_sample_csv() -> str:
    """
    Build the canonical sample CSV.

    Always returns the same content: header plus rows order_001..order_006.
    """
    lines = [",".join(CSV_FIELDS)]
    lines.extend(",".join(row) for row in SAMPLE_ROWS)
    return "\n".join(lines)


def write_sample_csv(path: Union[str, Path]) -> Path:
    """
    Write the canonical sample CSV and return its path.

    An existing directory, or a path without a file suffix, is treated as a
    directory and created if needed; the file inside it is SAMPLE_FILE_NAME.
    """
    path = Path(path)
    if path.is_dir() or not path.suffix:
        path = path / SAMPLE_FILE_NAME
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(generate_sample_csv(), encoding="utf-8")
    logger.info("Sample CSV written", path=str(path))
    return path


def _quote(value: str) -> str:
    return f'"{value}"' if "," in value else value


def generate_synthetic_csv(
    rows: int = 1000,
    seed: int = 42,
    start: Optional[datetime] = None,
    days: int = 90,
    customers: int = 200,
    products: int = 50,
) -> str:
    """
    Generate a reproducible synthetic sales CSV.

    Args:
        rows: Number of order rows
        seed: Seed for Faker and numpy
        start: First order timestamp (defaults to `days` before today)
        days: Span of order timestamps in days
        customers: Size of the customer pool
        products: Size of the product catalog

    Returns:
        CSV text with the standard header
    """
    fake = Faker()
    Faker.seed(seed)
    rng = np.random.default_rng(seed)

    start = start or datetime.combine(datetime.now().date(), datetime.min.time()) - timedelta(days=days)

    catalog: List[tuple] = []
    for i in range(products):
        category, subcategories, (low, high) = CATEGORIES[int(rng.integers(len(CATEGORIES)))]
        subcategory = subcategories[int(rng.integers(len(subcategories)))]
        catalog.append((
            f"product_{1000 + i}",
            f"{fake.word().title()} {subcategory}",
            category,
            float(rng.uniform(low, high)),
        ))

    customer_ids = [f"customer_{10000 + i}" for i in range(customers)]
    offsets = np.sort(rng.uniform(0, days * 24 * 3600, rows))
    product_idx = rng.integers(len(catalog), size=rows)
    customer_idx = rng.integers(len(customer_ids), size=rows)
    region_idx = rng.choice(len(REGIONS), size=rows, p=REGION_WEIGHTS)
    quantities = rng.integers(1, 4, size=rows)
    price_jitter = rng.uniform(0.85, 1.15, size=rows)

    lines = [",".join(CSV_FIELDS)]
    for i in range(rows):
        product_id, name, category, price = catalog[product_idx[i]]
        timestamp = start + timedelta(seconds=float(offsets[i]))
        revenue = round(price * price_jitter[i] * int(quantities[i]), 2)
        lines.append(",".join([
            f"order_{i + 1:06d}",
            timestamp.strftime("%Y-%m-%dT%H:%M:%S"),
            f"{revenue:.2f}",
            str(int(quantities[i])),
            customer_ids[customer_idx[i]],
            product_id,
            _quote(name),
            category,
            REGIONS[region_idx[i]],
        ]))

    logger.info("Synthetic CSV generated", rows=rows, seed=seed, days=days)
    return "\n".join(lines)
