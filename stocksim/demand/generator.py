"""
Synthetic demand generator.

Creates a reproducible monthly demand series with trend, a seasonal peak
month and gaussian noise, and splits each month into 30 daily values whose
sum equals the monthly total exactly.
"""

import math
from dataclasses import dataclass
from typing import List, Tuple

import numpy as np
import pandas as pd

from .seeded_random import SeededRandom
from ..exceptions import InvalidParameterError
from ..utils.logger import get_logger
from ..utils.rounding import round_half_up

DAYS_PER_MONTH = 30

# Smallest non-zero draw of SeededRandom (1 / 2**32)
_MIN_DRAW = 2.0 ** -32


@dataclass(frozen=True)
class MonthDemand:
    """Demand of one simulated month."""
    total: int
    daily: Tuple[int, ...]


@dataclass(frozen=True)
class DemandSeries:
    """
    Generated demand history plus the statistics used to size the policy.

    Attributes:
        months: One MonthDemand per simulated month, in chronological order
        annual_demand: Total demand normalized to a 12-month year
        daily_avg_demand: annual_demand / 365
        daily_std_deviation: Sample standard deviation of all daily values
    """
    months: Tuple[MonthDemand, ...]
    annual_demand: float
    daily_avg_demand: float
    daily_std_deviation: float

    def __len__(self) -> int:
        return len(self.months)

    def monthly_totals(self) -> List[int]:
        return [month.total for month in self.months]

    def all_daily(self) -> List[int]:
        """Flattened daily demand across every month."""
        return [value for month in self.months for value in month.daily]

    def to_dataframe(self) -> pd.DataFrame:
        """
        Daily demand as a long DataFrame.

        Returns:
            DataFrame with columns month, day, demand, month_total
        """
        records = []
        for month_idx, month in enumerate(self.months, start=1):
            for day_idx, value in enumerate(month.daily, start=1):
                records.append({
                    'month': month_idx,
                    'day': day_idx,
                    'demand': value,
                    'month_total': month.total
                })
        return pd.DataFrame(records, columns=['month', 'day', 'demand', 'month_total'])


class DemandGenerator:
    """
    Generates seeded synthetic demand.

    A generator owns nothing between calls: every generate() builds a fresh
    SeededRandom, so two calls with the same arguments return equal series.
    """

    def __init__(self, days_per_month: int = DAYS_PER_MONTH, log_level: str = None):
        self.days_per_month = days_per_month
        self.logger = get_logger(__name__, level=log_level)

    def generate(self, seed: int, months: int, base_level: float,
                 trend_per_period: float, noise_std: float,
                 peak_month: int, peak_factor: float) -> DemandSeries:
        """
        Generate a demand series.

        Args:
            seed: RNG seed, truncated to unsigned 32 bits
            months: Number of months to generate (>= 1)
            base_level: Demand level of the first month
            trend_per_period: Linear change of the level per month
            noise_std: Standard deviation of the monthly gaussian noise (>= 0)
            peak_month: Month of the year (1-12) receiving the seasonal peak
            peak_factor: Multiplier applied to the level in the peak month

        Returns:
            DemandSeries with monthly totals, daily split and statistics

        Raises:
            InvalidParameterError: If an argument is out of range
        """
        self._validate(months, base_level, trend_per_period, noise_std, peak_month, peak_factor)

        random = SeededRandom(seed)
        demand_months = []
        for t in range(months):
            total = self._monthly_total(random, t, base_level, trend_per_period,
                                        noise_std, peak_month, peak_factor)
            daily = self._daily_split(random, total)
            demand_months.append(MonthDemand(total=total, daily=tuple(daily)))

        series = self._with_statistics(demand_months)
        self.logger.debug(
            f"Generated {months} months of demand (seed={seed}): "
            f"annual={series.annual_demand:.1f}, daily_avg={series.daily_avg_demand:.2f}, "
            f"daily_std={series.daily_std_deviation:.2f}"
        )
        return series

    @staticmethod
    def _validate(months, base_level, trend_per_period, noise_std, peak_month, peak_factor):
        if isinstance(months, bool) or not isinstance(months, (int, np.integer)) or months < 1:
            raise InvalidParameterError(f"months must be an integer >= 1, got {months!r}")
        if isinstance(peak_month, bool) or not isinstance(peak_month, (int, np.integer)) \
                or not 1 <= peak_month <= 12:
            raise InvalidParameterError(f"peak_month must be an integer in [1, 12], got {peak_month!r}")
        for name, value in (('base_level', base_level), ('trend_per_period', trend_per_period),
                            ('noise_std', noise_std), ('peak_factor', peak_factor)):
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name} must be finite, got {value!r}")
        if noise_std < 0:
            raise InvalidParameterError(f"noise_std must be >= 0, got {noise_std!r}")

    @staticmethod
    def _monthly_total(random: SeededRandom, t: int, base_level: float,
                       trend_per_period: float, noise_std: float,
                       peak_month: int, peak_factor: float) -> int:
        month_in_year = (t % 12) + 1
        trend = trend_per_period * t
        peak_multiplier = peak_factor if month_in_year == peak_month else 1

        # Box-Muller; u1 == 0 would make log() undefined
        u1 = max(random.next(), _MIN_DRAW)
        u2 = random.next()
        z = math.sqrt(-2.0 * math.log(u1)) * math.cos(2.0 * math.pi * u2)
        noise = z * noise_std

        return max(0, round_half_up((base_level + trend) * peak_multiplier + noise))

    def _daily_split(self, random: SeededRandom, total: int) -> List[int]:
        """
        Split a monthly total into daily values summing exactly to the total.

        Raw daily values are exponential draws with mean total / days, scaled
        proportionally to the total and rounded; the rounding residual goes to
        the last day.
        """
        days = self.days_per_month
        draws = [min(random.next(), 1.0 - _MIN_DRAW) for _ in range(days)]
        # A zero month still consumes its draws so later months keep the same sequence
        if total == 0:
            return [0] * days

        rate = days / total
        raw = [-math.log(1.0 - u) / rate for u in draws]

        raw_sum = sum(raw)
        if raw_sum > 0:
            daily = [round_half_up(x / raw_sum * total) for x in raw]
        else:
            daily = [0] * days

        daily[-1] += total - sum(daily)
        if daily[-1] < 0:
            self._absorb_deficit(daily)
        return daily

    @staticmethod
    def _absorb_deficit(daily: List[int]) -> None:
        """Move a negative last-day value onto the preceding days, latest first."""
        deficit = -daily[-1]
        daily[-1] = 0
        for i in range(len(daily) - 2, -1, -1):
            if deficit == 0:
                break
            taken = min(daily[i], deficit)
            daily[i] -= taken
            deficit -= taken

    @staticmethod
    def _with_statistics(demand_months: List[MonthDemand]) -> DemandSeries:
        months = len(demand_months)
        annual_demand = sum(month.total for month in demand_months) / months * 12
        daily_avg_demand = annual_demand / 365

        all_days = np.array([v for month in demand_months for v in month.daily], dtype=float)
        daily_std = float(np.std(all_days, ddof=1)) if len(all_days) > 1 else 0.0

        return DemandSeries(
            months=tuple(demand_months),
            annual_demand=annual_demand,
            daily_avg_demand=daily_avg_demand,
            daily_std_deviation=daily_std
        )


def generate_demand(seed: int, months: int, base_level: float, trend_per_period: float,
                    noise_std: float, peak_month: int, peak_factor: float) -> DemandSeries:
    """Convenience wrapper around DemandGenerator().generate()."""
    return DemandGenerator().generate(seed, months, base_level, trend_per_period,
                                      noise_std, peak_month, peak_factor)
