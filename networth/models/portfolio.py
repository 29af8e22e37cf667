"""
Portfolio data models for net worth projections.

This module defines the assets, liabilities, scenario return tables, settings
and projection results exchanged between the calling layer and the
projection engine.
"""

from typing import Dict, List, Literal, Optional, Tuple

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    computed_field,
    model_validator,
)

from .amortization import AmortizationCalculator

ScenarioLabel = Literal["pessimistic", "base", "optimistic"]

SCENARIO_LABELS: Tuple[ScenarioLabel, ...] = ("pessimistic", "base", "optimistic")


class Asset(BaseModel):
    """A single holding in the portfolio."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., min_length=1, description="Asset identifier")
    type: str = Field(..., min_length=1, description="Asset type (stocks, bonds, ...)")
    name: str = Field(default="", description="Display name")
    value: float = Field(default=0.0, ge=0, description="Current market value")


class Liability(BaseModel):
    """An amortizing loan owed by the household."""

    model_config = ConfigDict(validate_assignment=True)

    id: str = Field(..., min_length=1, description="Liability identifier")
    type: str = Field(..., min_length=1, description="Liability type (mortgage, ...)")
    name: str = Field(default="", description="Display name")
    principal: float = Field(..., ge=0, description="Original loan amount")
    rate: float = Field(..., ge=0, description="Annual interest rate in percent")
    term_years: int = Field(..., ge=1, le=100, description="Loan term in years")
    current_balance: Optional[float] = Field(
        default=None, ge=0, description="Outstanding balance (defaults to principal)"
    )

    @model_validator(mode="after")
    def validate_current_balance(self) -> "Liability":
        if self.current_balance is None:
            # object.__setattr__ skips assignment validation and its recursion
            object.__setattr__(self, "current_balance", self.principal)
        elif self.current_balance > self.principal:
            raise ValueError("Current balance cannot exceed principal")
        return self

    @computed_field
    @property
    def monthly_payment(self) -> float:
        """Fixed monthly payment derived from principal, rate and term."""
        return AmortizationCalculator.calculate_monthly_payment(
            self.principal, self.rate, self.term_years
        )


class Portfolio(BaseModel):
    """Assets and liabilities owned by the user."""

    model_config = ConfigDict(validate_assignment=True)

    assets: List[Asset] = Field(default_factory=list, description="Asset holdings")
    liabilities: List[Liability] = Field(
        default_factory=list, description="Outstanding loans"
    )

    @computed_field
    @property
    def total_value(self) -> float:
        """Sum of all asset values."""
        return sum(asset.value for asset in self.assets)

    @computed_field
    @property
    def total_liabilities(self) -> float:
        """Sum of all outstanding liability balances."""
        return sum(liability.current_balance or 0.0 for liability in self.liabilities)

    @computed_field
    @property
    def net_worth(self) -> float:
        """Total assets minus total liabilities."""
        return self.total_value - self.total_liabilities

    def get_asset(self, asset_id: str) -> Optional[Asset]:
        """Find an asset by id."""
        for asset in self.assets:
            if asset.id == asset_id:
                return asset
        return None


class ScenarioReturns(BaseModel):
    """Annual percentage values for the three scenarios."""

    pessimistic: float = Field(default=0.0, description="Pessimistic value (%)")
    base: float = Field(default=0.0, description="Base value (%)")
    optimistic: float = Field(default=0.0, description="Optimistic value (%)")

    def for_scenario(self, scenario: ScenarioLabel) -> float:
        """Get the value for a scenario label."""
        if scenario not in SCENARIO_LABELS:
            raise ValueError(f"Unknown scenario: {scenario}")
        return getattr(self, scenario)


class ScenarioRateTable(BaseModel):
    """Per asset type return assumptions for each scenario."""

    return_rates: Dict[str, ScenarioReturns] = Field(
        default_factory=dict, description="Returns by asset type"
    )

    def rate_for(self, asset_type: str, scenario: ScenarioLabel) -> Optional[float]:
        """
        Look up the annual return for an asset type and scenario.

        Args:
            asset_type: Asset type tag
            scenario: Scenario label

        Returns:
            Annual return in percent, or None when the type is not in the table
        """
        returns = self.return_rates.get(asset_type)
        if returns is None:
            return None
        return returns.for_scenario(scenario)

    def canonical(self) -> Tuple[Tuple[str, float, float, float], ...]:
        """Order-independent tuple form of the table."""
        return tuple(
            (asset_type, r.pessimistic, r.base, r.optimistic)
            for asset_type, r in sorted(self.return_rates.items())
        )


class ProjectionSettings(BaseModel):
    """Global projection settings."""

    horizon_years: int = Field(
        default=10, ge=0, le=100, description="Number of years to project"
    )
    inflation: float = Field(
        default=6.0, gt=-100, description="Annual inflation in percent"
    )
    show_real_values: bool = Field(
        default=False, description="Whether the caller displays real values"
    )


class YearPoint(BaseModel):
    """Projected state of the portfolio for one year of one scenario."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=0, description="Years from today")
    nominal: float = Field(..., description="Total asset value")
    real: float = Field(..., description="Net worth in today's money")
    breakdown: Dict[str, float] = Field(
        default_factory=dict, description="Asset value by type"
    )
    liabilities: float = Field(default=0.0, description="Outstanding debt")
    net_worth: float = Field(..., description="Assets minus liabilities")


class ScenarioProjections(BaseModel):
    """Year by year projections for all three scenarios."""

    model_config = ConfigDict(frozen=True)

    pessimistic: List[YearPoint]
    base: List[YearPoint]
    optimistic: List[YearPoint]

    def for_scenario(self, scenario: ScenarioLabel) -> List[YearPoint]:
        """Get the trajectory for a scenario label."""
        if scenario not in SCENARIO_LABELS:
            raise ValueError(f"Unknown scenario: {scenario}")
        return getattr(self, scenario)

    def final(self, scenario: ScenarioLabel) -> Optional[YearPoint]:
        """Get the last year of a scenario, if any."""
        points = self.for_scenario(scenario)
        return points[-1] if points else None


class ScenarioSeries(BaseModel):
    """Plain value series for each scenario."""

    pessimistic: List[float] = Field(default_factory=list)
    base: List[float] = Field(default_factory=list)
    optimistic: List[float] = Field(default_factory=list)


class AssetProjection(ScenarioSeries):
    """Value series of a single asset across scenarios."""

    asset_id: str
    name: str = ""
    type: str


class DetailedProjections(BaseModel):
    """Per asset projections plus the aggregate liability balance."""

    assets: Dict[str, AssetProjection] = Field(default_factory=dict)
    liabilities: ScenarioSeries = Field(default_factory=ScenarioSeries)
