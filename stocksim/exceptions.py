"""
Custom exceptions for demand generation and inventory simulation.
"""

class StockSimError(Exception):
    """Base exception for stocksim errors"""
    pass

class InvalidParameterError(StockSimError, ValueError):
    """Raised when a generator, formula or simulator input is rejected"""
    pass

class ConfigurationError(StockSimError):
    """Raised when a scenario configuration cannot be loaded"""
    pass
