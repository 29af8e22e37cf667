"""
Projection metrics.

Result models and helper functions for growth and risk figures derived from
scenario projections. Volatility here is the spread between the optimistic
and pessimistic outcomes, not a statistical standard deviation: the three
scenarios are fixed assumptions, not samples.
"""

import math
from typing import Dict, List, Optional, Sequence

import numpy as np
from pydantic import BaseModel, Field

from .portfolio import ScenarioReturns, YearPoint


class ProjectionMetrics(BaseModel):
    """Metrics for a portfolio without liabilities."""

    current_value: float = Field(..., description="Current total asset value")
    future_value: ScenarioReturns = Field(
        ..., description="Final nominal value per scenario"
    )
    growth_rate: float = Field(..., description="Base scenario CAGR (%)")
    volatility: float = Field(..., description="Scenario spread (%)")
    sharpe_ratio: float = Field(..., description="Excess growth per unit of spread")
    max_drawdown: float = Field(..., ge=0, description="Largest peak-to-trough drop (%)")
    risk_score: int = Field(..., ge=1, le=10, description="Risk score (1-10)")


class NetWorthMetrics(BaseModel):
    """Metrics for a portfolio with liabilities, based on net worth."""

    current_assets: float = Field(..., description="Current total asset value")
    current_liabilities: float = Field(..., description="Current debt")
    current_net_worth: float = Field(..., description="Assets minus liabilities")
    future_net_worth: ScenarioReturns = Field(
        ..., description="Final net worth per scenario"
    )
    growth_rate: Optional[float] = Field(
        ...,
        description="Base scenario net worth CAGR (%), None when net worth is not positive",
    )
    volatility: float = Field(..., description="Scenario spread of net worth (%)")
    sharpe_ratio: float = Field(..., description="Excess growth per unit of spread")
    max_drawdown: float = Field(..., ge=0, description="Largest net worth drop (%)")
    risk_score: int = Field(..., ge=1, le=10, description="Risk score (1-10)")
    debt_to_assets_ratio: float = Field(..., ge=0, description="Debt / assets (%)")


class Diversification(BaseModel):
    """Concentration of a portfolio across asset types."""

    score: int = Field(..., ge=0, le=100, description="Diversification score")
    distribution: Dict[str, float] = Field(
        default_factory=dict, description="Share of value by type (%)"
    )
    concentration: int = Field(..., ge=0, description="Herfindahl index / 100")
    types_count: int = Field(default=0, ge=0, description="Number of asset types")


def calculate_cagr(current_value: float, future_value: float, years: int) -> float:
    """
    Compound annual growth rate in percent.

    Returns 0.0 when the current value or the number of years is not positive.
    """
    if current_value <= 0 or years <= 0:
        return 0.0
    if future_value <= 0:
        return -100.0
    return ((future_value / current_value) ** (1 / years) - 1) * 100


def calculate_spread(
    pessimistic_value: float, optimistic_value: float, current_value: float
) -> float:
    """Half the optimistic-pessimistic spread relative to today, in percent."""
    if current_value <= 0:
        return 0.0
    return (optimistic_value - pessimistic_value) / (2 * current_value) * 100


def calculate_sharpe_ratio(
    growth_rate: float, volatility: float, risk_free_rate: float
) -> float:
    """Simplified Sharpe ratio using the scenario spread as risk."""
    if volatility <= 0:
        return 0.0
    return (growth_rate - risk_free_rate) / volatility


def calculate_max_drawdown(values: Sequence[float]) -> float:
    """
    Largest percentage drop from a running peak to a later value.

    Peaks that are not positive are ignored.

    Args:
        values: Values in chronological order

    Returns:
        Maximum drawdown in percent (0.0 for an empty or rising series)
    """
    if len(values) == 0:
        return 0.0

    series = np.asarray(values, dtype=np.float64)
    peaks = np.maximum.accumulate(np.maximum(series, 0.0))
    positive = peaks > 0
    if not np.any(positive):
        return 0.0

    drawdowns = (peaks[positive] - series[positive]) / peaks[positive] * 100
    return float(max(0.0, np.max(drawdowns)))


def trajectory(points: List[YearPoint], field: str = "nominal") -> List[float]:
    """Extract one field of a projection as a list of floats."""
    return [float(getattr(point, field)) for point in points]


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives."""
    return int(math.floor(value + 0.5))
