"""
Scenario runner package: YAML configuration and end-to-end execution.
"""

from .config import ScenarioConfig, DemandConfig, PolicyConfig, OutputConfig, load_scenarios
from .scenario import ScenarioRunner, ScenarioOutcome, save_outcome

__all__ = [
    'ScenarioConfig',
    'DemandConfig',
    'PolicyConfig',
    'OutputConfig',
    'load_scenarios',
    'ScenarioRunner',
    'ScenarioOutcome',
    'save_outcome'
]
