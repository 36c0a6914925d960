"""
Inventory Simulation Suite

This package provides the ROP/EOQ policy formulas and the day-by-day
inventory simulator that replays a demand series against them.
"""

from .simulator import (
    InventorySimulator,
    MonthResult,
    SimulationResult,
    SimulationState,
    simulate_inventory
)
from .policy_formulas import (
    ArrivalDate,
    PolicyParameters,
    arrival_date,
    compute_eoq,
    compute_reorder_point,
    compute_safety_stock,
    service_z_from_level
)

__all__ = [
    'InventorySimulator',
    'MonthResult',
    'SimulationResult',
    'SimulationState',
    'simulate_inventory',
    'ArrivalDate',
    'PolicyParameters',
    'arrival_date',
    'compute_eoq',
    'compute_reorder_point',
    'compute_safety_stock',
    'service_z_from_level'
]
