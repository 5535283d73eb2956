"""
Sales Analytics Core

Ingests commerce transaction CSVs, keeps a filterable dataset and derives
dashboard metrics, rollups and chart-ready time series from it.
"""

__version__ = "1.0.0"
