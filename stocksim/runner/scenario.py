"""
Scenario runner.

Generates demand, derives the replenishment policy and simulates it for one
or many scenarios.
"""

from concurrent.futures import ProcessPoolExecutor, as_completed
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Any, Union
import multiprocessing as mp

from .config import ScenarioConfig
from ..exceptions import ConfigurationError
from ..demand.generator import DemandGenerator, DemandSeries
from ..simulation.policy_formulas import PolicyParameters
from ..simulation.simulator import InventorySimulator, SimulationResult
from ..utils.logger import get_logger
from ..utils.pipeline_decorators import pipeline_step


def _demand_details(series: DemandSeries) -> Dict[str, Any]:
    return {
        'months': len(series),
        'annual_demand': f"{series.annual_demand:.1f}",
        'daily_std': f"{series.daily_std_deviation:.2f}",
    }


def _policy_details(policy: PolicyParameters) -> Dict[str, Any]:
    return {
        'EOQ': policy.eoq,
        'safety stock': policy.safety_stock,
        'reorder point': policy.reorder_point,
        'lead time': f"{policy.lead_time_days}d",
    }


def _simulation_details(result: SimulationResult) -> Dict[str, Any]:
    return {
        'stockout_days': sum(m.stockout_days for m in result.simulation_months),
        'service_level': f"{result.overall_service_level:.2%}",
    }


@dataclass(frozen=True)
class ScenarioOutcome:
    """Everything produced by one scenario run."""
    name: str
    demand: DemandSeries
    policy: PolicyParameters
    result: SimulationResult

    def summary(self) -> Dict[str, Any]:
        months = self.result.simulation_months
        return {
            'scenario': self.name,
            'months': len(months),
            'annual_demand': self.demand.annual_demand,
            'daily_avg_demand': self.demand.daily_avg_demand,
            'daily_std_deviation': self.demand.daily_std_deviation,
            **self.policy.to_dict(),
            'orders': sum(m.orders for m in months),
            'stockout_days': sum(m.stockout_days for m in months),
            'overall_service_level': self.result.overall_service_level,
        }


class ScenarioRunner:
    """
    Runs what-if scenarios end to end.

    Scenarios share no state, so a batch can run in separate processes
    without changing any result.
    """

    def __init__(self, log_level: str = "INFO"):
        self.log_level = log_level
        self.logger = get_logger(__name__, level=log_level)
        self.generator = DemandGenerator(log_level=log_level)
        self.simulator = InventorySimulator(log_level=log_level)

    def run(self, config: ScenarioConfig) -> ScenarioOutcome:
        """
        Run a single scenario.

        Args:
            config: Scenario definition

        Returns:
            ScenarioOutcome with demand, derived policy and simulation result
        """
        try:
            demand = self._generate_demand(config)
            policy = self._derive_policy(config, demand)
            result = self._simulate(demand, policy)
        except Exception as e:
            self.logger.log_error_with_context(e, f"scenario '{config.name}'")
            raise

        outcome = ScenarioOutcome(name=config.name, demand=demand, policy=policy, result=result)
        summary = outcome.summary()
        self.logger.log_performance_metrics(f"Scenario '{config.name}'", {
            'orders': summary['orders'],
            'stockout_days': summary['stockout_days'],
            'service_level': f"{result.overall_service_level:.2%}",
        })
        return outcome

    @pipeline_step("Generating demand", 1, 3, details=_demand_details)
    def _generate_demand(self, config: ScenarioConfig) -> DemandSeries:
        d = config.demand
        return self.generator.generate(
            seed=d.seed,
            months=d.months,
            base_level=d.base_level,
            trend_per_period=d.trend_per_period,
            noise_std=d.noise_std,
            peak_month=d.peak_month,
            peak_factor=d.peak_factor
        )

    @pipeline_step("Deriving policy parameters", 2, 3, details=_policy_details)
    def _derive_policy(self, config: ScenarioConfig, demand: DemandSeries) -> PolicyParameters:
        p = config.policy
        return PolicyParameters.from_demand(
            demand,
            setup_cost=p.setup_cost,
            holding_cost=p.holding_cost,
            lead_time_days=p.lead_time_days,
            service_z=p.resolve_service_z()
        )

    @pipeline_step("Simulating inventory", 3, 3, details=_simulation_details)
    def _simulate(self, demand: DemandSeries, policy: PolicyParameters) -> SimulationResult:
        return self.simulator.simulate_inventory(
            demand,
            eoq=policy.eoq,
            reorder_point=policy.reorder_point,
            safety_stock=policy.safety_stock,
            lead_time_days=policy.lead_time_days
        )

    def run_batch(self, configs: List[ScenarioConfig],
                  max_workers: Optional[int] = None) -> Dict[str, ScenarioOutcome]:
        """
        Run several scenarios, in parallel for larger batches.

        Args:
            configs: Scenario definitions (names must be unique)
            max_workers: Maximum number of worker processes (CPU count if None)

        Returns:
            Outcomes keyed by scenario name, in input order
        """
        if not configs:
            self.logger.warning("No scenarios to run")
            return {}

        names = [config.name for config in configs]
        if len(set(names)) != len(names):
            raise ConfigurationError(f"Scenario names must be unique, got {names}")

        self.logger.info(f"Starting batch of {len(configs)} scenarios")

        if max_workers is None:
            max_workers = min(mp.cpu_count(), len(configs))

        outcomes = {}
        # Small batches run sequentially to avoid process start-up overhead
        if len(configs) <= 4 or max_workers <= 1:
            for i, config in enumerate(configs, start=1):
                outcomes[config.name] = self.run(config)
                self.logger.log_processing_progress(i, len(configs), "Scenarios")
        else:
            with ProcessPoolExecutor(max_workers=max_workers) as executor:
                future_to_name = {
                    executor.submit(_run_scenario, config, self.log_level): config.name
                    for config in configs
                }
                for i, future in enumerate(as_completed(future_to_name), start=1):
                    name = future_to_name[future]
                    try:
                        outcomes[name] = future.result()
                    except Exception as e:
                        self.logger.log_error_with_context(e, f"scenario '{name}'")
                        raise
                    self.logger.log_processing_progress(i, len(configs), "Scenarios", name)

        self.logger.info(f"Completed batch of {len(outcomes)} scenarios")
        return {name: outcomes[name] for name in names}


def _run_scenario(config: ScenarioConfig, log_level: str) -> ScenarioOutcome:
    """Worker entry point for process pools."""
    return ScenarioRunner(log_level=log_level).run(config)


def save_outcome(outcome: ScenarioOutcome, output_dir: Union[str, Path]) -> Dict[str, Path]:
    """
    Write monthly results and daily demand of a scenario to CSV.

    Returns:
        Paths of the written files
    """
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)
    safe_name = outcome.name.replace('/', '_').replace('\\', '_')

    results_file = output_dir / f"{safe_name}_simulation.csv"
    demand_file = output_dir / f"{safe_name}_demand.csv"
    outcome.result.to_dataframe().to_csv(results_file, index=False)
    outcome.demand.to_dataframe().to_csv(demand_file, index=False)

    return {'results_file': results_file, 'demand_file': demand_file}
