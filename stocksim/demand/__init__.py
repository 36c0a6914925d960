"""
Synthetic Demand Generation

This package provides the seeded random source and the demand generator
that produces reproducible monthly and daily demand series.
"""

from .seeded_random import SeededRandom
from .generator import DemandGenerator, DemandSeries, MonthDemand, generate_demand

__all__ = [
    'SeededRandom',
    'DemandGenerator',
    'DemandSeries',
    'MonthDemand',
    'generate_demand'
]
