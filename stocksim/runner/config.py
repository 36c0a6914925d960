"""
Scenario configuration for the simulation runner.

Scenarios are described in YAML:

    name: baseline
    demand:
      seed: 12345
      months: 24
      ...
    policy:
      setup_cost: 50
      ...

A file may also list several scenarios under ``scenarios:``; top-level
``demand``/``policy``/``output`` sections then act as shared defaults.
"""

from dataclasses import dataclass, field, fields, replace, asdict
from typing import Optional, List, Dict, Any, Union
from pathlib import Path
import copy

import yaml

from ..exceptions import ConfigurationError
from ..simulation.policy_formulas import service_z_from_level

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@dataclass
class DemandConfig:
    """Parameters of the synthetic demand generator."""
    seed: int = 12345
    months: int = 24
    base_level: float = 1000.0
    trend_per_period: float = 10.0
    noise_std: float = 100.0
    peak_month: int = 12  # December
    peak_factor: float = 1.5


@dataclass
class PolicyConfig:
    """Cost and service inputs used to derive EOQ, safety stock and reorder point."""
    setup_cost: float = 50.0
    holding_cost: float = 2.0
    lead_time_days: int = 10
    service_z: float = 1.65
    # Takes precedence over service_z when set
    service_level: Optional[float] = None

    def resolve_service_z(self) -> float:
        if self.service_level is not None:
            return service_z_from_level(self.service_level)
        return self.service_z


@dataclass
class OutputConfig:
    """Where results go."""
    output_dir: Optional[str] = None  # None disables CSV export
    # Used by run-simulation when --log-level is not given
    log_level: str = "INFO"

    def __post_init__(self):
        if str(self.log_level).upper() not in LOG_LEVELS:
            raise ConfigurationError(
                f"log_level must be one of {list(LOG_LEVELS)}, got {self.log_level!r}"
            )
        self.log_level = str(self.log_level).upper()


_SECTIONS = {
    'demand': DemandConfig,
    'policy': PolicyConfig,
    'output': OutputConfig,
}


@dataclass
class ScenarioConfig:
    """Complete definition of one what-if scenario."""
    name: str = "baseline"
    demand: DemandConfig = field(default_factory=DemandConfig)
    policy: PolicyConfig = field(default_factory=PolicyConfig)
    output: OutputConfig = field(default_factory=OutputConfig)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ScenarioConfig':
        """
        Build a scenario from a nested dictionary.

        Raises:
            ConfigurationError: On unknown sections or keys
        """
        if not isinstance(data, dict):
            raise ConfigurationError(f"Scenario must be a mapping, got {type(data).__name__}")

        unknown = set(data) - set(_SECTIONS) - {'name'}
        if unknown:
            raise ConfigurationError(f"Unknown scenario sections: {sorted(unknown)}")

        sections = {}
        for section, section_cls in _SECTIONS.items():
            values = data.get(section) or {}
            if not isinstance(values, dict):
                raise ConfigurationError(f"Section '{section}' must be a mapping")
            allowed = {f.name for f in fields(section_cls)}
            unknown_keys = set(values) - allowed
            if unknown_keys:
                raise ConfigurationError(f"Unknown keys in '{section}': {sorted(unknown_keys)}")
            sections[section] = section_cls(**values)

        return cls(name=str(data.get('name', cls.name)), **sections)

    @classmethod
    def from_yaml(cls, config_path: Union[str, Path]) -> 'ScenarioConfig':
        """Load a single-scenario YAML file."""
        scenarios = load_scenarios(config_path)
        if len(scenarios) != 1:
            raise ConfigurationError(
                f"{config_path} defines {len(scenarios)} scenarios, expected exactly one"
            )
        return scenarios[0]

    def with_overrides(self, **overrides) -> 'ScenarioConfig':
        """
        Copy of this scenario with individual parameters replaced.

        Keys are looked up in every section, e.g.
        ``config.with_overrides(seed=7, lead_time_days=5)``. None values are ignored.
        """
        updated = {section: {} for section in _SECTIONS}
        name = self.name
        for key, value in overrides.items():
            if value is None:
                continue
            if key == 'name':
                name = value
                continue
            for section, section_cls in _SECTIONS.items():
                if key in {f.name for f in fields(section_cls)}:
                    updated[section][key] = value
                    break
            else:
                raise ConfigurationError(f"Unknown scenario parameter: {key}")

        return ScenarioConfig(
            name=name,
            demand=replace(self.demand, **updated['demand']),
            policy=replace(self.policy, **updated['policy']),
            output=replace(self.output, **updated['output'])
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def _merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_scenarios(config_path: Union[str, Path]) -> List[ScenarioConfig]:
    """
    Load every scenario defined in a YAML file.

    Args:
        config_path: Path to the YAML configuration

    Returns:
        List of ScenarioConfig in file order

    Raises:
        ConfigurationError: If the file is missing, unparsable or malformed
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigurationError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, 'r') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_path} must contain a mapping at the top level")

    if 'scenarios' not in data:
        return [ScenarioConfig.from_dict(data)]

    entries = data['scenarios']
    if not isinstance(entries, list) or not entries:
        raise ConfigurationError("'scenarios' must be a non-empty list")

    defaults = {key: value for key, value in data.items() if key != 'scenarios'}
    scenarios = []
    for idx, entry in enumerate(entries, start=1):
        if not isinstance(entry, dict):
            raise ConfigurationError(f"Scenario #{idx} must be a mapping")
        merged = _merge(defaults, entry)
        merged.setdefault('name', f"scenario_{idx}")
        scenarios.append(ScenarioConfig.from_dict(merged))

    names = [scenario.name for scenario in scenarios]
    if len(set(names)) != len(names):
        raise ConfigurationError(f"Scenario names must be unique, got {names}")
    return scenarios
