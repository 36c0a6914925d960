from pathlib import Path

import pytest

from stocksim.exceptions import ConfigurationError
from stocksim.runner import ScenarioConfig, DemandConfig, PolicyConfig, OutputConfig, load_scenarios

CONFIG_DIR = Path(__file__).parent.parent / "config"


def _write(path, text):
    path.write_text(text)
    return path


def test_defaults():
    config = ScenarioConfig()
    assert config.name == "baseline"
    assert config.demand == DemandConfig()
    assert config.policy.resolve_service_z() == 1.65
    assert config.output.output_dir is None


def test_from_dict():
    config = ScenarioConfig.from_dict({
        'name': 'fast',
        'demand': {'seed': 7, 'months': 6},
        'policy': {'lead_time_days': 3},
    })
    assert config.name == 'fast'
    assert config.demand.seed == 7
    assert config.demand.months == 6
    assert config.demand.base_level == DemandConfig().base_level
    assert config.policy.lead_time_days == 3


@pytest.mark.parametrize("data", [
    {'demand': {'sede': 1}},
    {'inventory': {}},
    {'policy': [1, 2]},
    [1, 2, 3],
])
def test_from_dict_rejects_malformed_input(data):
    with pytest.raises(ConfigurationError):
        ScenarioConfig.from_dict(data)


def test_service_level_takes_precedence_over_z():
    policy = PolicyConfig(service_z=3.0, service_level=0.95)
    assert policy.resolve_service_z() == pytest.approx(1.6449, abs=1e-4)


def test_load_single_scenario(tmp_path):
    path = _write(tmp_path / "one.yaml", """
name: single
demand:
  seed: 99
policy:
  holding_cost: 4
""")
    scenarios = load_scenarios(path)
    assert len(scenarios) == 1
    assert scenarios[0].name == "single"
    assert scenarios[0].demand.seed == 99
    assert scenarios[0].policy.holding_cost == 4
    assert ScenarioConfig.from_yaml(path) == scenarios[0]


def test_load_multiple_scenarios_merges_defaults(tmp_path):
    path = _write(tmp_path / "many.yaml", """
demand:
  seed: 5
  months: 12
policy:
  setup_cost: 30
scenarios:
  - name: short
    policy:
      lead_time_days: 2
  - policy:
      lead_time_days: 20
    demand:
      months: 6
""")
    short, second = load_scenarios(path)
    assert short.name == "short"
    assert short.demand.seed == 5
    assert short.demand.months == 12
    assert short.policy.setup_cost == 30
    assert short.policy.lead_time_days == 2
    assert second.name == "scenario_2"
    assert second.demand.months == 6
    assert second.demand.seed == 5
    assert second.policy.lead_time_days == 20

    with pytest.raises(ConfigurationError):
        ScenarioConfig.from_yaml(path)


def test_duplicate_scenario_names_are_rejected(tmp_path):
    path = _write(tmp_path / "dup.yaml", """
scenarios:
  - name: a
  - name: a
""")
    with pytest.raises(ConfigurationError):
        load_scenarios(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigurationError):
        load_scenarios(tmp_path / "missing.yaml")


def test_invalid_yaml(tmp_path):
    path = _write(tmp_path / "bad.yaml", "demand: [unclosed\n")
    with pytest.raises(ConfigurationError):
        load_scenarios(path)


def test_empty_file_gives_default_scenario(tmp_path):
    path = _write(tmp_path / "empty.yaml", "")
    assert load_scenarios(path) == [ScenarioConfig()]


def test_with_overrides():
    config = ScenarioConfig().with_overrides(seed=7, lead_time_days=4, output_dir="out",
                                             months=None, name="tuned")
    assert config.name == "tuned"
    assert config.demand.seed == 7
    assert config.demand.months == DemandConfig().months
    assert config.policy.lead_time_days == 4
    assert config.output.output_dir == "out"


def test_with_overrides_rejects_unknown_parameter():
    with pytest.raises(ConfigurationError):
        ScenarioConfig().with_overrides(lead_time=4)


@pytest.mark.parametrize("filename, count", [
    ("scenario_config.yaml", 1),
    ("lead_time_comparison.yaml", 3),
])
def test_shipped_configurations_load(filename, count):
    scenarios = load_scenarios(CONFIG_DIR / filename)
    assert len(scenarios) == count


def test_output_log_level_is_normalized_and_validated(tmp_path):
    path = _write(tmp_path / "levels.yaml", "output:\n  log_level: debug\n")
    assert load_scenarios(path)[0].output.log_level == "DEBUG"
    assert OutputConfig().log_level == "INFO"

    with pytest.raises(ConfigurationError):
        OutputConfig(log_level="LOUD")
    with pytest.raises(ConfigurationError):
        ScenarioConfig().with_overrides(log_level="verbose")
