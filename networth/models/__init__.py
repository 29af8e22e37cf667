"""Data models and calculators for net worth projections."""

from .amortization import (
    AmortizationCalculator,
    LoanTotals,
    LoanValidationResult,
    PaymentScheduleEntry,
    validate_loan_parameters,
)
from .asset_classes import AssetClassInfo, AssetClassRegistry, RiskProfile
from .liability_classes import LiabilityClassInfo, LiabilityClassRegistry
from .metrics import Diversification, NetWorthMetrics, ProjectionMetrics
from .modifications import (
    BuyModification,
    PortfolioModification,
    RebalanceModification,
    SellModification,
    apply_modifications,
)
from .portfolio import (
    SCENARIO_LABELS,
    Asset,
    AssetProjection,
    DetailedProjections,
    Liability,
    Portfolio,
    ProjectionSettings,
    ScenarioProjections,
    ScenarioRateTable,
    ScenarioReturns,
    ScenarioSeries,
    YearPoint,
)
from .projection_engine import ProjectionEngine

__all__ = [
    "SCENARIO_LABELS",
    "Asset",
    "Liability",
    "Portfolio",
    "ScenarioReturns",
    "ScenarioRateTable",
    "ProjectionSettings",
    "YearPoint",
    "ScenarioProjections",
    "ScenarioSeries",
    "AssetProjection",
    "DetailedProjections",
    "AmortizationCalculator",
    "LoanTotals",
    "LoanValidationResult",
    "PaymentScheduleEntry",
    "validate_loan_parameters",
    "AssetClassInfo",
    "AssetClassRegistry",
    "RiskProfile",
    "LiabilityClassInfo",
    "LiabilityClassRegistry",
    "ProjectionMetrics",
    "NetWorthMetrics",
    "Diversification",
    "SellModification",
    "BuyModification",
    "RebalanceModification",
    "PortfolioModification",
    "apply_modifications",
    "ProjectionEngine",
]
