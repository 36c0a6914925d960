import pytest

from stocksim.demand.generator import DemandSeries, MonthDemand


def build_series(daily_by_month):
    """DemandSeries from explicit daily values (30 per month)."""
    months = tuple(MonthDemand(total=sum(daily), daily=tuple(daily)) for daily in daily_by_month)
    annual = sum(month.total for month in months) / len(months) * 12
    return DemandSeries(
        months=months,
        annual_demand=annual,
        daily_avg_demand=annual / 365,
        daily_std_deviation=0.0
    )


@pytest.fixture
def constant_series():
    """Factory for series with the same demand every day."""
    def _make(per_day, months=1):
        return build_series([[per_day] * 30 for _ in range(months)])
    return _make
