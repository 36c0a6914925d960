"""
Pipeline decorators for consistent logging and timing of scenario steps.

A decorated step logs its start, its duration and a short summary of what
it produced, and logs then re-raises any failure.
"""

import time
import functools
from typing import Callable, Any, Dict, Optional

from .logger import get_logger


def pipeline_step(step_name: str, step_number: int, total_steps: int,
                  details: Optional[Callable[[Any], Dict[str, Any]]] = None):
    """
    Decorator for scenario steps that handles logging and timing.

    Args:
        step_name: Human-readable name of the step
        step_number: Current step number (1-based)
        total_steps: Total number of steps in the scenario
        details: Optional function mapping the step result to the key/value
            pairs logged with the completion message

    Usage:
        @pipeline_step("Generating demand", 1, 3,
                       details=lambda series: {'months': len(series)})
        def _generate_demand(self, config):
            ...
    """
    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(self, *args, **kwargs) -> Any:
            logger = getattr(self, 'logger', None)
            if logger is None:
                logger = get_logger(__name__)

            logger.log_workflow_step(step_name, step_number, total_steps)

            step_start = time.time()
            try:
                result = func(self, *args, **kwargs)
            except Exception as e:
                step_duration = time.time() - step_start
                logger.error(f"Step '{step_name}' failed after {step_duration:.2f}s: {e}")
                raise

            step_duration = time.time() - step_start
            logger.log_step_completion(
                f"{step_name} completed",
                step_duration,
                details(result) if details is not None else None
            )
            return result

        return wrapper
    return decorator
