"""
stocksim: seeded demand generation and ROP/EOQ inventory simulation.
"""

from .exceptions import StockSimError, InvalidParameterError, ConfigurationError
from .demand import *
from .simulation import *
from .runner import *

__version__ = "1.0.0"
