"""
Utility modules for the stocksim package.
"""

from .logger import (
    SimLogger,
    get_logger,
    setup_logging,
    configure_workflow_logging
)
from .pipeline_decorators import pipeline_step
from .rounding import round_half_up

__all__ = [
    'SimLogger',
    'get_logger',
    'setup_logging',
    'configure_workflow_logging',
    'pipeline_step',
    'round_half_up'
]
