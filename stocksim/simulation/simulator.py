"""
Inventory simulation engine.

Runs a day-by-day ROP/EOQ replenishment simulation against a demand series
and reports one result record per month.
"""

import math
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Tuple, Any

import numpy as np
import pandas as pd

from .policy_formulas import arrival_date, DAYS_PER_MONTH
from ..demand.generator import DemandSeries
from ..exceptions import InvalidParameterError
from ..utils.logger import get_logger
from ..utils.rounding import round_half_up

# Field names used by the chart and table renderers
_RECORD_FIELDS = {
    'month': 'month',
    'demand': 'demand',
    'stock_start': 'stockStart',
    'incoming_qty': 'incomingQty',
    'orders': 'orders',
    'order_qty': 'orderQty',
    'served': 'served',
    'served_days': 'servedDays',
    'stockout_days': 'stockoutDays',
    'backorder': 'backorder',
    'stock_end': 'stockEnd',
    'waiting_arrivals': 'waitingArrivals',
    'service_level': 'serviceLevel',
}


@dataclass(frozen=True)
class MonthResult:
    """Outcome of one simulated month."""
    month: int
    demand: int
    stock_start: int
    incoming_qty: int
    orders: int
    order_qty: int
    served: int
    served_days: int
    stockout_days: int
    backorder: int
    stock_end: int
    waiting_arrivals: int
    service_level: float


@dataclass(frozen=True)
class SimulationResult:
    """Monthly results of a simulation run and its overall service level."""
    simulation_months: Tuple[MonthResult, ...]
    overall_service_level: float

    def to_dataframe(self) -> pd.DataFrame:
        """One row per month, snake_case columns."""
        return pd.DataFrame(
            [asdict(month) for month in self.simulation_months],
            columns=list(_RECORD_FIELDS)
        )

    def to_records(self) -> List[Dict[str, Any]]:
        """Monthly results keyed by the renderer field names (stockStart, incomingQty, ...)."""
        return [
            {_RECORD_FIELDS[name]: value for name, value in asdict(month).items()}
            for month in self.simulation_months
        ]


@dataclass
class SimulationState:
    """
    Mutable state of a single simulation run.

    on_order maps an arrival date (month, day) to the quantity due that day.
    Delivered entries are removed.
    """
    stock: float
    on_order: Dict[Tuple[int, int], int] = field(default_factory=dict)
    backorder: float = 0

    def pending_total(self) -> int:
        return sum(self.on_order.values())


class InventorySimulator:
    """
    ROP/EOQ inventory simulator on a calendar of 30-day months.

    Each day runs three phases in a fixed order:
    1. Arrival: receive the order due today, if any
    2. Reorder decision: if stock + all pending orders < reorder point,
       place one order of round(EOQ) arriving after the lead time
    3. Fulfilment: serve today's demand plus the carried backorder
    """

    def __init__(self, days_per_month: int = DAYS_PER_MONTH, log_level: str = None):
        self.days_per_month = days_per_month
        self.logger = get_logger(__name__, level=log_level)

    def simulate_inventory(self, demand_series: DemandSeries, eoq: float,
                           reorder_point: float, safety_stock: float,
                           lead_time_days: int) -> SimulationResult:
        """
        Simulate the replenishment policy against a demand series.

        Args:
            demand_series: Demand to serve, 30 daily values per month
            eoq: Order quantity
            reorder_point: Reorder threshold on the inventory position
            safety_stock: Safety stock the reorder point was derived from
            lead_time_days: Days between order placement and arrival

        Returns:
            SimulationResult with one MonthResult per month

        Raises:
            InvalidParameterError: If an input is out of range
        """
        self._validate(demand_series, eoq, reorder_point, safety_stock, lead_time_days)

        days = self.days_per_month
        # Start near the steady-state average stock to skip the initial transient
        state = SimulationState(stock=reorder_point + eoq / 2)
        order_size = round_half_up(eoq)
        simulation_months = []
        total_stockout_days = 0

        for month_idx, month in enumerate(demand_series.months, start=1):
            stock_start = state.stock
            incoming_qty = 0
            orders = 0
            order_qty = 0
            served = 0
            stockout_days = 0

            for day in range(1, days + 1):
                incoming_qty += self._receive(state, month_idx, day)

                if self._needs_order(state, reorder_point):
                    self._place_order(state, month_idx, day, order_size, lead_time_days)
                    orders += 1
                    order_qty += order_size

                day_served, stocked_out = self._fulfil(state, month.daily[day - 1])
                served += day_served
                if stocked_out:
                    stockout_days += 1

            total_stockout_days += stockout_days
            served_days = days - stockout_days
            simulation_months.append(MonthResult(
                month=month_idx,
                demand=month.total,
                stock_start=round_half_up(stock_start),
                incoming_qty=incoming_qty,
                orders=orders,
                order_qty=order_qty,
                served=round_half_up(served),
                served_days=served_days,
                stockout_days=stockout_days,
                backorder=round_half_up(state.backorder),
                stock_end=round_half_up(state.stock),
                waiting_arrivals=round_half_up(state.pending_total()),
                service_level=served_days / days
            ))

        total_days = len(demand_series.months) * days
        result = SimulationResult(
            simulation_months=tuple(simulation_months),
            overall_service_level=(total_days - total_stockout_days) / total_days
        )

        self._log_stranded_orders(state, len(demand_series.months))
        self.logger.debug(
            f"Simulated {len(simulation_months)} months: "
            f"{total_stockout_days} stockout days, service level {result.overall_service_level:.2%}"
        )
        return result

    def _validate(self, demand_series, eoq, reorder_point, safety_stock, lead_time_days):
        if demand_series is None or len(demand_series.months) == 0:
            raise InvalidParameterError("demand_series must contain at least one month")
        for idx, month in enumerate(demand_series.months, start=1):
            if len(month.daily) != self.days_per_month:
                raise InvalidParameterError(
                    f"Month {idx} has {len(month.daily)} daily values, expected {self.days_per_month}"
                )
        for name, value in (('eoq', eoq), ('reorder_point', reorder_point),
                            ('safety_stock', safety_stock)):
            if not math.isfinite(value):
                raise InvalidParameterError(f"{name} must be finite, got {value!r}")
        if isinstance(lead_time_days, bool) or not isinstance(lead_time_days, (int, np.integer)) \
                or lead_time_days < 0:
            raise InvalidParameterError(f"lead_time_days must be an integer >= 0, got {lead_time_days!r}")

    @staticmethod
    def _receive(state: SimulationState, month: int, day: int) -> int:
        """Add the order due on (month, day) to stock; returns the received quantity."""
        quantity = state.on_order.pop((month, day), 0)
        state.stock += quantity
        return quantity

    @staticmethod
    def _needs_order(state: SimulationState, reorder_point: float) -> bool:
        return state.stock + state.pending_total() < reorder_point

    def _place_order(self, state: SimulationState, month: int, day: int,
                     quantity: int, lead_time_days: int) -> None:
        due = arrival_date(month, day, int(lead_time_days))
        if state.on_order.get(due.key, 0) > 0:
            self.logger.warning(
                f"Order placed on month {month} day {day} replaces a pending "
                f"quantity of {state.on_order[due.key]} due on month {due.month} day {due.day}"
            )
        state.on_order[due.key] = quantity

    @staticmethod
    def _fulfil(state: SimulationState, daily_demand: int) -> Tuple[float, bool]:
        """Serve demand plus backorder from stock; returns (served, stocked_out)."""
        effective_demand = daily_demand + state.backorder
        stocked_out = effective_demand > state.stock
        state.backorder = max(0, effective_demand - state.stock)
        served = min(state.stock, effective_demand)
        state.stock -= served
        return served, stocked_out

    def _log_stranded_orders(self, state: SimulationState, months: int) -> None:
        # Orders due after the horizon (or keyed on an already processed day) are never delivered
        if state.on_order and self.logger.is_enabled_for('DEBUG'):
            stranded = ", ".join(
                f"M{m}/D{d}: {qty}" for (m, d), qty in sorted(state.on_order.items())
            )
            self.logger.debug(f"Orders still pending after {months} months: {stranded}")


def simulate_inventory(demand_series: DemandSeries, eoq: float, reorder_point: float,
                       safety_stock: float, lead_time_days: int) -> SimulationResult:
    """Convenience wrapper around InventorySimulator().simulate_inventory()."""
    return InventorySimulator().simulate_inventory(
        demand_series, eoq, reorder_point, safety_stock, lead_time_days
    )
