"""
Replenishment policy formulas.

Closed-form EOQ, safety stock and reorder point calculations, plus the fixed
30-day calendar arithmetic used to schedule order arrivals.
"""

import math
from dataclasses import dataclass
from typing import TYPE_CHECKING

import numpy as np
from scipy import stats
from typeguard import typechecked

from ..exceptions import InvalidParameterError
from ..utils.rounding import round_half_up

if TYPE_CHECKING:
    from ..demand.generator import DemandSeries

DAYS_PER_MONTH = 30


def _require_finite(**values):
    for name, value in values.items():
        if not math.isfinite(value):
            raise InvalidParameterError(f"{name} must be finite, got {value!r}")


@typechecked
def compute_eoq(annual_demand: float, setup_cost: float, holding_cost: float) -> int:
    """
    Economic order quantity: round(sqrt(2 * D * S / H)).

    Args:
        annual_demand: Annual demand D (>= 0)
        setup_cost: Fixed cost per order S (>= 0)
        holding_cost: Holding cost per unit per year H (> 0)

    Returns:
        EOQ rounded half-up to whole units

    Raises:
        InvalidParameterError: If H <= 0 or D, S are negative
    """
    _require_finite(annual_demand=annual_demand, setup_cost=setup_cost, holding_cost=holding_cost)
    if holding_cost <= 0:
        raise InvalidParameterError(f"holding_cost must be > 0, got {holding_cost!r}")
    if annual_demand < 0 or setup_cost < 0:
        raise InvalidParameterError(
            f"annual_demand and setup_cost must be >= 0, got {annual_demand!r}, {setup_cost!r}"
        )
    return round_half_up(math.sqrt((2 * annual_demand * setup_cost) / holding_cost))


@typechecked
def compute_safety_stock(demand_std: float, lead_time: float, service_z: float) -> int:
    """
    Safety stock: round(Z * sigma_d * sqrt(L)).

    Args:
        demand_std: Standard deviation of daily demand
        lead_time: Lead time in days
        service_z: z-score of the target service level
    """
    _require_finite(demand_std=demand_std, lead_time=lead_time, service_z=service_z)
    if lead_time < 0:
        raise InvalidParameterError(f"lead_time must be >= 0, got {lead_time!r}")
    if demand_std < 0:
        raise InvalidParameterError(f"demand_std must be >= 0, got {demand_std!r}")
    return round_half_up(service_z * demand_std * math.sqrt(lead_time))


@typechecked
def compute_reorder_point(avg_demand: float, lead_time: float, safety_stock: float) -> int:
    """Reorder point: round(average daily demand * L + safety stock)."""
    _require_finite(avg_demand=avg_demand, lead_time=lead_time, safety_stock=safety_stock)
    return round_half_up(avg_demand * lead_time + safety_stock)


def service_z_from_level(service_level: float) -> float:
    """
    z-score for a cycle service level, e.g. 0.95 -> 1.645.

    Raises:
        InvalidParameterError: If service_level is not strictly between 0 and 1
    """
    if not 0 < service_level < 1:
        raise InvalidParameterError(f"service_level must be in (0, 1), got {service_level!r}")
    return float(stats.norm.ppf(service_level))


@dataclass(frozen=True)
class ArrivalDate:
    month: int
    day: int

    @property
    def key(self):
        return (self.month, self.day)


@typechecked
def arrival_date(month: int, day: int, lead_time: int) -> ArrivalDate:
    """
    Date an order placed on (month, day) arrives, on a calendar of 30-day months.

    Example:
        arrival_date(5, 25, 10) -> ArrivalDate(month=6, day=5)
    """
    total_days = (month - 1) * DAYS_PER_MONTH + (day - 1) + lead_time
    return ArrivalDate(
        month=total_days // DAYS_PER_MONTH + 1,
        day=total_days % DAYS_PER_MONTH + 1
    )


@dataclass(frozen=True)
class PolicyParameters:
    """
    Parameters of the ROP/EOQ replenishment policy.

    Attributes:
        eoq: Order quantity placed on every reorder
        safety_stock: Buffer covering demand variability during the lead time
        reorder_point: Inventory position below which an order is placed
        lead_time_days: Days between placing and receiving an order
    """
    eoq: float
    safety_stock: float
    reorder_point: float
    lead_time_days: int

    @classmethod
    def from_demand(cls, demand: 'DemandSeries', setup_cost: float, holding_cost: float,
                    lead_time_days: int, service_z: float) -> 'PolicyParameters':
        """
        Derive the policy from demand statistics.

        EOQ uses the annualized demand, safety stock the daily standard
        deviation and the reorder point the average daily demand.
        """
        if isinstance(lead_time_days, bool) or not isinstance(lead_time_days, (int, np.integer)) \
                or lead_time_days < 0:
            raise InvalidParameterError(f"lead_time_days must be an integer >= 0, got {lead_time_days!r}")
        lead_time_days = int(lead_time_days)

        eoq = compute_eoq(demand.annual_demand, setup_cost, holding_cost)
        safety_stock = compute_safety_stock(demand.daily_std_deviation, lead_time_days, service_z)
        reorder_point = compute_reorder_point(demand.daily_avg_demand, lead_time_days, safety_stock)
        return cls(
            eoq=eoq,
            safety_stock=safety_stock,
            reorder_point=reorder_point,
            lead_time_days=lead_time_days
        )

    def to_dict(self) -> dict:
        return {
            'eoq': self.eoq,
            'safety_stock': self.safety_stock,
            'reorder_point': self.reorder_point,
            'lead_time_days': self.lead_time_days
        }
