"""
Chart Rendering Support Module
"""
from .downsampler import downsample, series_to_points

__all__ = ["downsample", "series_to_points"]
