"""
Reading sources
"""
from .base import ReadingSourceBase
from .simulated import SimulatedReadingSource

__all__ = ["ReadingSourceBase", "SimulatedReadingSource"]
