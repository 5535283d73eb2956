"""
Dataset Module
"""
from .dataset import DatasetSnapshot, SalesDataset
from .filters import apply_filters, default_filter, matches

__all__ = [
    "DatasetSnapshot",
    "SalesDataset",
    "apply_filters",
    "default_filter",
    "matches",
]
