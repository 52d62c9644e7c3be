"""
Hydration package: per-item fetch policy and the page pipeline.
"""

from .pipeline import HydrationPipeline
from .policy import FetchPolicy, HydrationState, Resolution

__all__ = ["FetchPolicy", "HydrationPipeline", "HydrationState", "Resolution"]
