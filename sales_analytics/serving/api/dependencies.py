"""
API Dependencies
"""

from fastapi import Request

from sales_analytics.dataset import SalesDataset


def get_dataset(request: Request) -> SalesDataset:
    """The application's dataset instance"""
    return request.app.state.dataset
