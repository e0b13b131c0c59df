"""
Database models for the Histline timeline cache and the bubble dataset.
"""

from histline.models.dataset import DatasetEntry
from histline.models.timeline import Timeline

__all__ = [
    "DatasetEntry",
    "Timeline",
]
