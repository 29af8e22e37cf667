"""
Asset class registry.

Type metadata for portfolio assets: scenario return adjustments relative to
inflation, risk weights, model risk profiles and allocation checks. The
registry is a plain object passed to whoever needs it; there is no module
level singleton.
"""

import uuid
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from .portfolio import Asset, ScenarioRateTable, ScenarioReturns

RiskLevel = Literal["low", "medium", "high"]

# Used for asset types the registry does not know about
DEFAULT_RISK_WEIGHT = 3.0

REBALANCE_THRESHOLD = 5.0

RISK_LEVEL_MULTIPLIERS: Dict[str, float] = {"high": 1.2, "medium": 1.0, "low": 0.8}


class AssetClassInfo(BaseModel):
    """Metadata for one asset type."""

    name: str = Field(..., min_length=1, description="Display name")
    description: str = Field(default="", description="Short description")
    risk_level: RiskLevel = Field(default="medium", description="Qualitative risk")
    risk_weight: float = Field(
        default=DEFAULT_RISK_WEIGHT, ge=1, le=10, description="Risk score weight"
    )
    liquidity: RiskLevel = Field(default="medium", description="Qualitative liquidity")
    inflation_adjustment: ScenarioReturns = Field(
        default_factory=ScenarioReturns,
        description="Return premium over inflation per scenario (percentage points)",
    )


class RiskProfile(BaseModel):
    """Model allocation for an investor risk appetite."""

    name: str
    description: str = ""
    allocation: Dict[str, float] = Field(..., description="Target allocation (%)")
    expected_return: float = Field(..., description="Expected annual return (%)")
    max_risk: float = Field(..., description="Tolerable drawdown (%)")

    @field_validator("allocation")
    @classmethod
    def validate_allocation(cls, v: Dict[str, float]) -> Dict[str, float]:
        """Validate that the allocation sums to 100%."""
        total = sum(v.values())
        if abs(total - 100) >= 0.01:
            raise ValueError(f"Allocation must sum to 100%, got {total}")
        return v


class AllocationValidation(BaseModel):
    """Result of checking an allocation."""

    is_valid: bool
    total: float
    deviation: float
    message: str


class RebalanceRecommendation(BaseModel):
    """Suggested change for one asset type."""

    asset_type: str
    action: Literal["increase", "decrease"]
    current_percent: float
    target_percent: float
    difference: float
    priority: float


class RebalancePlan(BaseModel):
    """Recommendations to move a portfolio toward a risk profile."""

    recommendations: List[RebalanceRecommendation] = Field(default_factory=list)
    target_profile: RiskProfile
    summary: str


def default_asset_classes() -> Dict[str, AssetClassInfo]:
    """Build the standard asset class table."""
    return {
        "stocks": AssetClassInfo(
            name="Equity funds",
            description="Index and actively managed equity funds",
            risk_level="high",
            risk_weight=6,
            liquidity="high",
            inflation_adjustment=ScenarioReturns(pessimistic=-1, base=5, optimistic=10),
        ),
        "bonds": AssetClassInfo(
            name="Bond funds",
            description="Government and corporate bond funds",
            risk_level="medium",
            risk_weight=2,
            liquidity="medium",
            inflation_adjustment=ScenarioReturns(pessimistic=-2, base=1, optimistic=5),
        ),
        "cash": AssetClassInfo(
            name="Money market",
            description="Deposits and short-term money market instruments",
            risk_level="low",
            risk_weight=1,
            liquidity="high",
            inflation_adjustment=ScenarioReturns(pessimistic=-1, base=0, optimistic=1),
        ),
        "realty": AssetClassInfo(
            name="Real estate",
            description="Direct real estate holdings",
            risk_level="medium",
            risk_weight=4,
            liquidity="low",
            inflation_adjustment=ScenarioReturns(pessimistic=-4, base=0, optimistic=2),
        ),
    }


def default_risk_profiles() -> Dict[str, RiskProfile]:
    """Build the standard risk profiles."""
    return {
        "conservative": RiskProfile(
            name="Conservative",
            description="Minimal risk, stable returns",
            allocation={"cash": 50, "bonds": 40, "stocks": 10, "realty": 0},
            expected_return=6,
            max_risk=15,
        ),
        "balanced": RiskProfile(
            name="Balanced",
            description="Moderate risk, steady growth",
            allocation={"cash": 20, "bonds": 30, "stocks": 40, "realty": 10},
            expected_return=9,
            max_risk=25,
        ),
        "aggressive": RiskProfile(
            name="Aggressive",
            description="High risk, high expected return",
            allocation={"cash": 5, "bonds": 15, "stocks": 65, "realty": 15},
            expected_return=13,
            max_risk=40,
        ),
    }


class AssetClassRegistry:
    """Lookup table of asset class metadata."""

    def __init__(
        self,
        asset_types: Optional[Dict[str, AssetClassInfo]] = None,
        risk_profiles: Optional[Dict[str, RiskProfile]] = None,
    ):
        """Initialize the registry.

        Args:
            asset_types: Asset class table (defaults to the standard table)
            risk_profiles: Risk profiles (defaults to the standard profiles)
        """
        self.asset_types = (
            asset_types if asset_types is not None else default_asset_classes()
        )
        self.risk_profiles = (
            risk_profiles if risk_profiles is not None else default_risk_profiles()
        )

    def get_asset_info(self, asset_type: str) -> Optional[AssetClassInfo]:
        """Get metadata for an asset type, or None if unknown."""
        return self.asset_types.get(asset_type)

    def all_asset_types(self) -> Dict[str, AssetClassInfo]:
        """Get all registered asset types."""
        return dict(self.asset_types)

    def inflation_adjustment(self, asset_type: str, scenario: str) -> float:
        """Get the return premium over inflation, 0.0 for unknown types."""
        info = self.get_asset_info(asset_type)
        if info is None:
            return 0.0
        return info.inflation_adjustment.for_scenario(scenario)  # type: ignore[arg-type]

    def risk_weight(self, asset_type: str) -> float:
        """Get the risk weight, a medium weight for unknown types."""
        info = self.get_asset_info(asset_type)
        if info is None:
            return DEFAULT_RISK_WEIGHT
        return info.risk_weight

    def build_scenario_rate_table(self, inflation: float) -> ScenarioRateTable:
        """
        Derive scenario returns from inflation and each type's adjustment.

        Args:
            inflation: Annual inflation in percent

        Returns:
            ScenarioRateTable covering every registered asset type
        """
        return ScenarioRateTable(
            return_rates={
                asset_type: ScenarioReturns(
                    pessimistic=inflation + info.inflation_adjustment.pessimistic,
                    base=inflation + info.inflation_adjustment.base,
                    optimistic=inflation + info.inflation_adjustment.optimistic,
                )
                for asset_type, info in self.asset_types.items()
            }
        )

    def create_default_asset(self, asset_type: str, value: float = 0.0) -> Asset:
        """
        Create a new asset of a registered type.

        Raises:
            ValueError: If the asset type is unknown
        """
        info = self.get_asset_info(asset_type)
        if info is None:
            raise ValueError(f"Unknown asset type: {asset_type}")

        return Asset(
            id=f"{asset_type}_{uuid.uuid4().hex[:12]}",
            type=asset_type,
            name=info.name,
            value=value,
        )

    def get_risk_profile(self, profile_name: str) -> Optional[RiskProfile]:
        """Get a risk profile by key, or None if unknown."""
        return self.risk_profiles.get(profile_name)

    @staticmethod
    def validate_allocation(allocation: Dict[str, float]) -> AllocationValidation:
        """Check that an allocation in percent sums to 100."""
        total = sum(allocation.values())
        is_valid = abs(total - 100) < 0.01

        return AllocationValidation(
            is_valid=is_valid,
            total=total,
            deviation=total - 100,
            message=(
                "Allocation is valid"
                if is_valid
                else f"Allocation must sum to 100%, current: {total:.1f}%"
            ),
        )

    def get_rebalance_recommendations(
        self, current_allocation: Dict[str, float], target_profile: str
    ) -> RebalancePlan:
        """
        Recommend changes to move an allocation toward a risk profile.

        Args:
            current_allocation: Current allocation by asset type (%)
            target_profile: Key of the target risk profile

        Returns:
            RebalancePlan with recommendations ordered by priority

        Raises:
            ValueError: If the risk profile is unknown
        """
        profile = self.get_risk_profile(target_profile)
        if profile is None:
            raise ValueError(f"Unknown risk profile: {target_profile}")

        recommendations = []
        for asset_type, target_percent in profile.allocation.items():
            current_percent = current_allocation.get(asset_type, 0.0)
            difference = target_percent - current_percent

            if abs(difference) > REBALANCE_THRESHOLD:
                info = self.get_asset_info(asset_type)
                multiplier = RISK_LEVEL_MULTIPLIERS.get(
                    info.risk_level if info else "medium", 1.0
                )
                recommendations.append(
                    RebalanceRecommendation(
                        asset_type=asset_type,
                        action="increase" if difference > 0 else "decrease",
                        current_percent=current_percent,
                        target_percent=target_percent,
                        difference=abs(difference),
                        priority=abs(difference) * multiplier,
                    )
                )

        recommendations.sort(key=lambda r: r.priority, reverse=True)

        return RebalancePlan(
            recommendations=recommendations,
            target_profile=profile,
            summary=self._rebalance_summary(recommendations),
        )

    def _rebalance_summary(self, recommendations: List[RebalanceRecommendation]) -> str:
        if not recommendations:
            return "Portfolio matches the target allocation"

        def names(action: str) -> str:
            return ", ".join(
                self._display_name(r.asset_type)
                for r in recommendations
                if r.action == action
            )

        lines = ["Rebalancing recommendations:"]
        if any(r.action == "increase" for r in recommendations):
            lines.append(f"Increase: {names('increase')}")
        if any(r.action == "decrease" for r in recommendations):
            lines.append(f"Decrease: {names('decrease')}")
        return "\n".join(lines)

    def _display_name(self, asset_type: str) -> str:
        info = self.get_asset_info(asset_type)
        return info.name if info else asset_type
