"""
Projection engine for net worth forecasting.

This module projects a portfolio forward year by year under three
deterministic return scenarios (pessimistic, base, optimistic). Each asset
type compounds annually at its own scenario rate, liabilities amortize on
their fixed schedule independent of the scenario, and real values are
deflated by cumulative inflation. Results are memoized per engine instance.
"""

import logging
import threading
from collections import OrderedDict
from typing import Dict, Hashable, List, Optional, Sequence, Tuple

import numpy as np

from .amortization import AmortizationCalculator
from .asset_classes import AssetClassRegistry
from .metrics import (
    Diversification,
    NetWorthMetrics,
    ProjectionMetrics,
    calculate_cagr,
    calculate_max_drawdown,
    calculate_sharpe_ratio,
    calculate_spread,
    round_half_up,
    trajectory,
)
from .portfolio import (
    SCENARIO_LABELS,
    Asset,
    AssetProjection,
    DetailedProjections,
    Liability,
    Portfolio,
    ProjectionSettings,
    ScenarioLabel,
    ScenarioProjections,
    ScenarioRateTable,
    ScenarioReturns,
    ScenarioSeries,
    YearPoint,
)
from .protocols import AssetTypeRegistry, BalanceCalculator

logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 128
DEFAULT_RISK_FREE_RATE = 4.0

# Risk score adjustment from the scenario spread is capped at this many points
MAX_VOLATILITY_ADJUSTMENT = 2.0


class ProjectionEngine:
    """Computes scenario projections and derived metrics for a portfolio."""

    def __init__(
        self,
        asset_classes: Optional[AssetTypeRegistry] = None,
        balance_calculator: Optional[BalanceCalculator] = None,
        max_cache_size: Optional[int] = DEFAULT_CACHE_SIZE,
        risk_free_rate: float = DEFAULT_RISK_FREE_RATE,
    ):
        """Initialize the projection engine.

        Args:
            asset_classes: Asset type metadata (defaults to the standard registry)
            balance_calculator: Loan balance calculator (defaults to annuity amortization)
            max_cache_size: Maximum number of cached projections, None for unbounded
            risk_free_rate: Annual risk-free rate (%) used by the Sharpe ratio
        """
        if max_cache_size is not None and max_cache_size < 1:
            raise ValueError("max_cache_size must be positive or None")

        self.asset_classes: AssetTypeRegistry = (
            asset_classes if asset_classes is not None else AssetClassRegistry()
        )
        self.balance_calculator: BalanceCalculator = (
            balance_calculator
            if balance_calculator is not None
            else AmortizationCalculator()
        )
        self.max_cache_size = max_cache_size
        self.risk_free_rate = risk_free_rate

        self._cache: "OrderedDict[Hashable, ScenarioProjections]" = OrderedDict()
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Projections
    # ------------------------------------------------------------------

    def calculate_projections(
        self,
        portfolio: Portfolio,
        rate_table: ScenarioRateTable,
        settings: ProjectionSettings,
    ) -> ScenarioProjections:
        """
        Project the portfolio under all three scenarios.

        Structurally identical inputs return the same cached object, which
        callers must treat as read-only.

        Args:
            portfolio: Assets and liabilities to project
            rate_table: Annual returns per asset type and scenario
            settings: Horizon and inflation

        Returns:
            ScenarioProjections with horizon_years + 1 points per scenario
        """
        key = self.get_cache_key(portfolio, rate_table, settings)

        with self._lock:
            cached = self._cache.get(key)
            if cached is not None:
                self._cache.move_to_end(key)
                logger.debug("Using cached projections")
                return cached

            logger.debug(
                f"Calculating projections for {len(portfolio.assets)} assets and "
                f"{len(portfolio.liabilities)} liabilities over "
                f"{settings.horizon_years} years"
            )
            projections = ScenarioProjections(
                **{
                    scenario: self.calculate_scenario_projection(
                        portfolio, rate_table, scenario, settings
                    )
                    for scenario in SCENARIO_LABELS
                }
            )

            self._cache[key] = projections
            if self.max_cache_size is not None:
                while len(self._cache) > self.max_cache_size:
                    self._cache.popitem(last=False)

            return projections

    def calculate_scenario_projection(
        self,
        portfolio: Portfolio,
        rate_table: ScenarioRateTable,
        scenario: ScenarioLabel,
        settings: ProjectionSettings,
    ) -> List[YearPoint]:
        """
        Project the portfolio year by year under one scenario.

        Args:
            portfolio: Assets and liabilities to project
            rate_table: Annual returns per asset type and scenario
            scenario: Scenario label
            settings: Horizon and inflation

        Returns:
            List of YearPoint for years 0..horizon_years
        """
        inflation_rate = settings.inflation / 100
        assets_by_type = self.group_assets_by_type(portfolio.assets)
        type_rates = {
            asset_type: self.resolve_return_rate(
                asset_type, scenario, rate_table, settings.inflation
            )
            for asset_type in assets_by_type
        }

        points = []
        for year in range(settings.horizon_years + 1):
            breakdown = {
                asset_type: self.calculate_asset_type_value(
                    assets, type_rates[asset_type], year
                )
                for asset_type, assets in assets_by_type.items()
            }
            nominal = sum(breakdown.values())
            liabilities = self.calculate_liabilities_value(portfolio.liabilities, year)
            net_worth = nominal - liabilities

            inflation_factor = (1 + inflation_rate) ** year
            real = net_worth / inflation_factor if inflation_factor > 0 else 0.0
            points.append(
                YearPoint(
                    year=year,
                    nominal=nominal,
                    real=real,
                    breakdown=breakdown,
                    liabilities=liabilities,
                    net_worth=net_worth,
                )
            )

        return points

    def resolve_return_rate(
        self,
        asset_type: str,
        scenario: ScenarioLabel,
        rate_table: ScenarioRateTable,
        inflation: float,
    ) -> float:
        """
        Annual return (%) for an asset type under a scenario.

        The rate table wins; types missing from it fall back to inflation
        plus the registry adjustment (zero for unknown types).
        """
        rate = rate_table.rate_for(asset_type, scenario)
        if rate is not None:
            return rate
        return inflation + self.asset_classes.inflation_adjustment(asset_type, scenario)

    @staticmethod
    def group_assets_by_type(assets: Sequence[Asset]) -> Dict[str, List[Asset]]:
        """Group assets by type, preserving first-seen order."""
        groups: Dict[str, List[Asset]] = {}
        for asset in assets:
            groups.setdefault(asset.type, []).append(asset)
        return groups

    @staticmethod
    def calculate_asset_type_value(
        assets: Sequence[Asset], return_rate: float, years: int
    ) -> float:
        """
        Value of a group of assets after compounding annually.

        Args:
            assets: Assets sharing a return rate
            return_rate: Annual return in percent
            years: Number of years to compound

        Returns:
            Grown total value
        """
        total_value = sum(asset.value for asset in assets)
        return total_value * (1 + return_rate / 100) ** years

    def calculate_liabilities_value(
        self, liabilities: Sequence[Liability], years: float
    ) -> float:
        """Total outstanding balance of all liabilities after some years."""
        return sum(
            self.balance_calculator.calculate_remaining_balance(liability, years)
            for liability in liabilities
        )

    def calculate_detailed_projections(
        self,
        portfolio: Portfolio,
        rate_table: ScenarioRateTable,
        settings: ProjectionSettings,
    ) -> DetailedProjections:
        """
        Project every asset individually under all scenarios.

        Args:
            portfolio: Assets and liabilities to project
            rate_table: Annual returns per asset type and scenario
            settings: Horizon and inflation

        Returns:
            DetailedProjections keyed by asset id, plus the liability series
        """
        years = np.arange(settings.horizon_years + 1, dtype=np.float64)

        assets: Dict[str, AssetProjection] = {}
        for asset in portfolio.assets:
            series = {}
            for scenario in SCENARIO_LABELS:
                rate = self.resolve_return_rate(
                    asset.type, scenario, rate_table, settings.inflation
                )
                series[scenario] = (asset.value * (1 + rate / 100) ** years).tolist()

            assets[asset.id] = AssetProjection(
                asset_id=asset.id, name=asset.name, type=asset.type, **series
            )

        # Liabilities amortize the same way in every scenario
        balances = [
            self.calculate_liabilities_value(portfolio.liabilities, year)
            for year in range(settings.horizon_years + 1)
        ]
        liabilities = ScenarioSeries(
            pessimistic=list(balances), base=list(balances), optimistic=list(balances)
        )

        return DetailedProjections(assets=assets, liabilities=liabilities)

    # ------------------------------------------------------------------
    # Metrics
    # ------------------------------------------------------------------

    def calculate_metrics(
        self,
        portfolio: Portfolio,
        projections: ScenarioProjections,
        settings: ProjectionSettings,
    ) -> ProjectionMetrics:
        """
        Growth and risk metrics for a portfolio without liabilities.

        Args:
            portfolio: Projected portfolio
            projections: Result of calculate_projections
            settings: Horizon and inflation

        Returns:
            ProjectionMetrics based on gross asset values
        """
        current_value = portfolio.total_value
        future = ScenarioReturns(
            **{
                scenario: self._final_value(projections, scenario, "nominal")
                for scenario in SCENARIO_LABELS
            }
        )

        growth_rate = calculate_cagr(current_value, future.base, settings.horizon_years)
        volatility = calculate_spread(future.pessimistic, future.optimistic, current_value)

        return ProjectionMetrics(
            current_value=current_value,
            future_value=future,
            growth_rate=growth_rate,
            volatility=volatility,
            sharpe_ratio=calculate_sharpe_ratio(
                growth_rate, volatility, self.risk_free_rate
            ),
            max_drawdown=calculate_max_drawdown(
                trajectory(projections.pessimistic, "nominal")
            ),
            risk_score=self.calculate_risk_score(portfolio, volatility),
        )

    def calculate_metrics_with_liabilities(
        self,
        portfolio: Portfolio,
        projections: ScenarioProjections,
        settings: ProjectionSettings,
    ) -> NetWorthMetrics:
        """
        Growth and risk metrics based on net worth.

        Growth rate is None when today's or the final base net worth is not
        positive, since a compound rate is undefined across a sign change.

        Args:
            portfolio: Projected portfolio
            projections: Result of calculate_projections
            settings: Horizon and inflation

        Returns:
            NetWorthMetrics including the debt to assets ratio
        """
        current_assets = portfolio.total_value
        current_liabilities = self.calculate_liabilities_value(portfolio.liabilities, 0)
        current_net_worth = current_assets - current_liabilities
        future = ScenarioReturns(
            **{
                scenario: self._final_value(projections, scenario, "net_worth")
                for scenario in SCENARIO_LABELS
            }
        )

        growth_rate: Optional[float]
        if settings.horizon_years <= 0:
            growth_rate = 0.0
        elif current_net_worth <= 0 or future.base <= 0:
            growth_rate = None
        else:
            growth_rate = calculate_cagr(
                current_net_worth, future.base, settings.horizon_years
            )

        volatility = calculate_spread(
            future.pessimistic, future.optimistic, current_net_worth
        )

        return NetWorthMetrics(
            current_assets=current_assets,
            current_liabilities=current_liabilities,
            current_net_worth=current_net_worth,
            future_net_worth=future,
            growth_rate=growth_rate,
            volatility=volatility,
            sharpe_ratio=calculate_sharpe_ratio(
                growth_rate or 0.0, volatility, self.risk_free_rate
            ),
            max_drawdown=calculate_max_drawdown(
                trajectory(projections.pessimistic, "net_worth")
            ),
            risk_score=self.calculate_risk_score(portfolio, volatility),
            debt_to_assets_ratio=(
                current_liabilities / current_assets * 100 if current_assets > 0 else 0.0
            ),
        )

    def calculate_risk_score(self, portfolio: Portfolio, volatility: float) -> int:
        """
        Heuristic risk score from 1 (low) to 10 (high).

        Value-weighted asset type risk plus up to two points for scenario
        spread.
        """
        if not portfolio.assets:
            return 1

        total_value = portfolio.total_value or 1.0
        weighted_risk = sum(
            asset.value / total_value * self.asset_classes.risk_weight(asset.type)
            for asset in portfolio.assets
        )
        volatility_adjustment = min(volatility / 20, MAX_VOLATILITY_ADJUSTMENT)

        return min(max(round_half_up(weighted_risk + volatility_adjustment), 1), 10)

    @staticmethod
    def calculate_diversification(portfolio: Portfolio) -> Diversification:
        """Distribution across asset types and Herfindahl concentration."""
        if not portfolio.assets:
            return Diversification(score=0, distribution={}, concentration=100)

        total_value = portfolio.total_value
        distribution: Dict[str, float] = {}
        for asset in portfolio.assets:
            distribution[asset.type] = distribution.get(asset.type, 0.0) + asset.value

        distribution = {
            asset_type: (value / total_value * 100 if total_value > 0 else 0.0)
            for asset_type, value in distribution.items()
        }
        hhi = sum(percentage**2 for percentage in distribution.values())

        return Diversification(
            score=round_half_up(max(0.0, 100 - hhi / 100)),
            distribution=distribution,
            concentration=round_half_up(hhi / 100),
            types_count=len(distribution),
        )

    # ------------------------------------------------------------------
    # Cache
    # ------------------------------------------------------------------

    @staticmethod
    def get_cache_key(
        portfolio: Portfolio,
        rate_table: ScenarioRateTable,
        settings: ProjectionSettings,
    ) -> Tuple[Hashable, ...]:
        """Canonical key of everything a projection depends on."""
        return (
            tuple((asset.type, asset.value) for asset in portfolio.assets),
            tuple(
                (
                    liability.type,
                    liability.principal,
                    liability.rate,
                    liability.term_years,
                )
                for liability in portfolio.liabilities
            ),
            rate_table.canonical(),
            settings.horizon_years,
            settings.inflation,
        )

    def clear_cache(self) -> None:
        """Drop all cached projections."""
        with self._lock:
            self._cache.clear()

    @property
    def cache_size(self) -> int:
        """Number of cached projections."""
        return len(self._cache)

    @staticmethod
    def _final_value(
        projections: ScenarioProjections, scenario: ScenarioLabel, field: str
    ) -> float:
        final = projections.final(scenario)
        return float(getattr(final, field)) if final is not None else 0.0
