#!/usr/bin/env python3
"""
Inventory Simulation Runner

Generates seeded synthetic demand and simulates an ROP/EOQ replenishment
policy against it, for one scenario or a batch of scenarios.
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from stocksim.exceptions import ConfigurationError
from stocksim.runner import ScenarioConfig, ScenarioRunner, load_scenarios, save_outcome
from stocksim.runner.config import LOG_LEVELS
from stocksim.utils.logger import configure_workflow_logging

DEFAULT_CONFIG = "config/scenario_config.yaml"


def run_simulation(config_path: str = DEFAULT_CONFIG,
                   overrides: Optional[dict] = None,
                   output_dir: Optional[str] = None,
                   max_workers: Optional[int] = None,
                   log_level: Optional[str] = None,
                   log_dir: Optional[str] = "output/logs"):
    """
    Run the scenarios of a configuration file.

    Args:
        config_path: Path to the YAML scenario configuration
        overrides: Parameter overrides applied to every scenario
        output_dir: Directory for CSV results (overrides the config)
        max_workers: Maximum number of parallel workers
        log_level: Logging level (defaults to output.log_level of the first scenario)
        log_dir: Directory for the run log file (None for console only)

    Returns:
        Dictionary mapping scenario names to outcomes
    """
    log_level = _resolve_log_level(log_level, config_path)
    logger = configure_workflow_logging(
        workflow_name="inventory_simulation",
        log_level=log_level,
        log_dir=log_dir
    )

    logger.info("🔍 Inventory Simulation")
    logger.info(f"📋 Configuration: {config_path}")

    try:
        scenarios: List[ScenarioConfig] = [
            scenario.with_overrides(**(overrides or {}))
            for scenario in load_scenarios(config_path)
        ]

        runner = ScenarioRunner(log_level=log_level)
        logger.info(f"🚀 Running {len(scenarios)} scenario(s)...")
        outcomes = runner.run_batch(scenarios, max_workers=max_workers)

        for scenario in scenarios:
            outcome = outcomes[scenario.name]
            _log_outcome(logger, outcome)

            target_dir = output_dir or scenario.output.output_dir
            if target_dir:
                paths = save_outcome(outcome, target_dir)
                logger.info(f"💾 Results saved to {paths['results_file']}")

        logger.info("✅ Simulation completed successfully!")
        return outcomes

    except Exception as e:
        logger.log_error_with_context(e, "Simulation failed")
        sys.exit(1)


def _resolve_log_level(log_level: Optional[str], config_path: str) -> str:
    """Explicit level first, then output.log_level of the first scenario, then INFO."""
    if log_level:
        return log_level
    try:
        scenarios = load_scenarios(config_path)
    except ConfigurationError:
        # Reported once logging is configured
        return "INFO"
    return scenarios[0].output.log_level


def _log_outcome(logger, outcome):
    """Month-by-month summary of one scenario."""
    logger.info(f"📊 Scenario '{outcome.name}':")
    logger.info(
        f"  Demand: annual {outcome.demand.annual_demand:.1f}, "
        f"daily avg {outcome.demand.daily_avg_demand:.2f}, "
        f"daily std {outcome.demand.daily_std_deviation:.2f}"
    )
    logger.info(
        f"  Policy: EOQ {outcome.policy.eoq}, SS {outcome.policy.safety_stock}, "
        f"ROP {outcome.policy.reorder_point}, LT {outcome.policy.lead_time_days}d"
    )
    logger.info("  Month | Start | Demand | Incoming | Orders | Served | Stockout | Backorder | End | SL")
    for m in outcome.result.simulation_months:
        logger.info(
            f"  {m.month:>5} | {m.stock_start:>5} | {m.demand:>6} | {m.incoming_qty:>8} | "
            f"{m.order_qty:>4} ({m.orders}) | {m.served:>6} | {m.stockout_days:>8} | "
            f"{m.backorder:>9} | {m.stock_end:>3} | {m.service_level:.1%}"
        )
    logger.info(f"  Overall service level: {outcome.result.overall_service_level:.2%}")


def main():
    """Main function."""
    parser = argparse.ArgumentParser(description="Run seeded ROP/EOQ inventory simulation")
    parser.add_argument("--config", default=DEFAULT_CONFIG,
                       help="Path to the YAML scenario configuration")
    parser.add_argument("--seed", type=int, help="Demand RNG seed")
    parser.add_argument("--months", type=int, help="Number of months to simulate")
    parser.add_argument("--base-level", type=float, help="Demand level of the first month")
    parser.add_argument("--trend", type=float, dest="trend_per_period",
                       help="Demand trend per month")
    parser.add_argument("--noise-std", type=float, help="Monthly demand noise standard deviation")
    parser.add_argument("--peak-month", type=int, choices=range(1, 13),
                       help="Month of the year with peak demand")
    parser.add_argument("--peak-factor", type=float, help="Peak month demand multiplier")
    parser.add_argument("--setup-cost", type=float, help="Cost per order")
    parser.add_argument("--holding-cost", type=float, help="Holding cost per unit per year")
    parser.add_argument("--lead-time", type=int, dest="lead_time_days",
                       help="Lead time in days")
    parser.add_argument("--service-z", type=float, help="Service level z-score")
    parser.add_argument("--service-level", type=float,
                       help="Target cycle service level in (0, 1), overrides --service-z")
    parser.add_argument("--output-dir", help="Directory for CSV results")
    parser.add_argument("--max-workers", type=int, help="Maximum number of parallel workers")
    parser.add_argument("--log-level", choices=list(LOG_LEVELS),
                       help="Logging level (default: output.log_level from the configuration)")
    parser.add_argument("--no-log-file", action="store_true",
                       help="Log to the console only")

    args = parser.parse_args()

    override_keys = [
        'seed', 'months', 'base_level', 'trend_per_period', 'noise_std', 'peak_month',
        'peak_factor', 'setup_cost', 'holding_cost', 'lead_time_days', 'service_z',
        'service_level'
    ]
    overrides = {key: getattr(args, key) for key in override_keys}

    if not Path(args.config).exists():
        parser.error(f"Configuration file not found: {args.config}")

    run_simulation(
        config_path=args.config,
        overrides=overrides,
        output_dir=args.output_dir,
        max_workers=args.max_workers,
        log_level=args.log_level,
        log_dir=None if args.no_log_file else "output/logs"
    )


if __name__ == "__main__":
    main()
