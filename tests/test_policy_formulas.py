import math

import numpy as np
import pytest

from conftest import build_series
from stocksim.exceptions import InvalidParameterError
from stocksim.simulation import (
    ArrivalDate,
    PolicyParameters,
    arrival_date,
    compute_eoq,
    compute_reorder_point,
    compute_safety_stock,
    service_z_from_level,
)
from stocksim.utils.rounding import round_half_up


def test_formula_reference_values():
    assert compute_eoq(10000, 50, 2) == 707
    assert compute_safety_stock(20, 9, 1.65) == 99
    assert compute_reorder_point(100, 9, 99) == 999


def test_eoq_with_zero_demand_is_zero():
    assert compute_eoq(0, 50, 2) == 0


@pytest.mark.parametrize("holding_cost", [0, -1, -0.5])
def test_eoq_rejects_non_positive_holding_cost(holding_cost):
    with pytest.raises(InvalidParameterError):
        compute_eoq(10000, 50, holding_cost)


@pytest.mark.parametrize("annual_demand, setup_cost", [(-1, 50), (100, -5), (float('nan'), 50)])
def test_eoq_rejects_invalid_demand_and_setup_cost(annual_demand, setup_cost):
    with pytest.raises(InvalidParameterError):
        compute_eoq(annual_demand, setup_cost, 2)


def test_safety_stock_zero_lead_time():
    assert compute_safety_stock(20, 0, 1.65) == 0


def test_safety_stock_rejects_negative_inputs():
    with pytest.raises(InvalidParameterError):
        compute_safety_stock(20, -1, 1.65)
    with pytest.raises(InvalidParameterError):
        compute_safety_stock(-20, 9, 1.65)


def test_reorder_point_rounds_half_up():
    # 2.5 * 1 + 0 -> 3, where banker's rounding would give 2
    assert compute_reorder_point(2.5, 1, 0) == 3


@pytest.mark.parametrize("month, day, lead_time, expected", [
    (5, 25, 10, ArrivalDate(month=6, day=5)),
    (1, 1, 0, ArrivalDate(month=1, day=1)),
    (1, 30, 1, ArrivalDate(month=2, day=1)),
    (12, 30, 1, ArrivalDate(month=13, day=1)),
    (1, 7, 40, ArrivalDate(month=2, day=17)),
    (3, 15, 60, ArrivalDate(month=5, day=15)),
])
def test_arrival_date(month, day, lead_time, expected):
    assert arrival_date(month, day, lead_time) == expected


def test_arrival_date_key():
    assert arrival_date(5, 25, 10).key == (6, 5)


def test_service_z_from_level():
    assert service_z_from_level(0.95) == pytest.approx(1.6449, abs=1e-4)
    assert service_z_from_level(0.5) == pytest.approx(0.0, abs=1e-12)


@pytest.mark.parametrize("level", [0, 1, 1.2, -0.1])
def test_service_z_from_level_rejects_out_of_range(level):
    with pytest.raises(InvalidParameterError):
        service_z_from_level(level)


def test_policy_parameters_from_demand():
    series = build_series([[10] * 30])
    assert series.annual_demand == pytest.approx(3600)

    policy = PolicyParameters.from_demand(series, setup_cost=50, holding_cost=2,
                                          lead_time_days=10, service_z=1.65)

    assert policy.eoq == round_half_up(math.sqrt(2 * 3600 * 50 / 2))
    assert policy.eoq == 424
    assert policy.safety_stock == 0
    assert policy.reorder_point == round_half_up(3600 / 365 * 10)
    assert policy.lead_time_days == 10
    assert policy.to_dict() == {
        'eoq': 424, 'safety_stock': 0, 'reorder_point': 99, 'lead_time_days': 10
    }


def test_policy_parameters_accept_numpy_lead_time():
    series = build_series([[10] * 30])
    policy = PolicyParameters.from_demand(series, setup_cost=50, holding_cost=2,
                                          lead_time_days=np.int64(10), service_z=1.65)
    assert policy.reorder_point == 99
    assert type(policy.lead_time_days) is int


@pytest.mark.parametrize("lead_time_days", [-1, 2.5, True])
def test_policy_parameters_reject_invalid_lead_time(lead_time_days):
    with pytest.raises(InvalidParameterError):
        PolicyParameters.from_demand(build_series([[10] * 30]), setup_cost=50, holding_cost=2,
                                     lead_time_days=lead_time_days, service_z=1.65)


@pytest.mark.parametrize("value, expected", [
    (2.5, 3),
    (0.5, 1),
    (1.4999, 1),
    (-2.5, -2),
    (-0.4, 0),
    (7.0, 7),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
