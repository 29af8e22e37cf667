"""
Projection service for coordinating a complete projection run.

This service plays the role of the calling layer around the projection
engine: it applies hypothetical modifications, fills in a missing rate table
and settings, computes the scenario projections, picks the metrics variant
that fits the portfolio and optionally adds the per asset breakdown.
"""

import logging
from typing import List, Optional, Union

from pydantic import BaseModel, Field

from networth.models.asset_classes import AssetClassRegistry
from networth.models.metrics import Diversification, NetWorthMetrics, ProjectionMetrics
from networth.models.modifications import PortfolioModification, apply_modifications
from networth.models.portfolio import (
    DetailedProjections,
    Portfolio,
    ProjectionSettings,
    ScenarioProjections,
    ScenarioRateTable,
)
from networth.models.projection_engine import ProjectionEngine

logger = logging.getLogger(__name__)


class ProjectionRequest(BaseModel):
    """Inputs of a projection run."""

    portfolio: Portfolio = Field(default_factory=Portfolio)
    scenarios: Optional[ScenarioRateTable] = Field(
        default=None,
        description="Return table; derived from inflation and asset classes if omitted",
    )
    settings: Optional[ProjectionSettings] = Field(
        default=None, description="Horizon and inflation; service defaults if omitted"
    )
    modifications: List[PortfolioModification] = Field(
        default_factory=list,
        description="Hypothetical changes applied before projecting",
    )
    include_detailed: bool = Field(
        default=False, description="Whether to include per asset projections"
    )


class ProjectionReport(BaseModel):
    """Outputs of a projection run."""

    portfolio: Portfolio
    settings: ProjectionSettings
    projections: ScenarioProjections
    metrics: Union[NetWorthMetrics, ProjectionMetrics]
    diversification: Diversification
    scenarios: ScenarioRateTable
    detailed: Optional[DetailedProjections] = None


class ProjectionService:
    """Service for running portfolio projections."""

    def __init__(
        self,
        engine: Optional[ProjectionEngine] = None,
        asset_classes: Optional[AssetClassRegistry] = None,
        default_settings: Optional[ProjectionSettings] = None,
    ) -> None:
        """Initialize the projection service.

        Args:
            engine: Projection engine (one is created if omitted)
            asset_classes: Registry used to derive missing rate tables
            default_settings: Settings for requests that carry none
        """
        self.asset_classes = asset_classes or AssetClassRegistry()
        self.engine = engine or ProjectionEngine(asset_classes=self.asset_classes)
        self.default_settings = default_settings or ProjectionSettings()
        self.logger = logging.getLogger(__name__)

    def run(self, request: ProjectionRequest) -> ProjectionReport:
        """Run a complete projection.

        Args:
            request: Portfolio, optional rate table, settings and modifications

        Returns:
            ProjectionReport with projections and metrics

        Raises:
            Exception: If the projection fails
        """
        settings = request.settings or self.default_settings

        try:
            portfolio = request.portfolio
            if request.modifications:
                self.logger.info(
                    f"Applying {len(request.modifications)} portfolio modifications"
                )
                portfolio = apply_modifications(portfolio, request.modifications)

            self.logger.info(
                f"Starting projection for {len(portfolio.assets)} assets, "
                f"{len(portfolio.liabilities)} liabilities, "
                f"{settings.horizon_years} years"
            )

            scenarios = request.scenarios or self.asset_classes.build_scenario_rate_table(
                settings.inflation
            )
            projections = self.engine.calculate_projections(
                portfolio, scenarios, settings
            )

            metrics: Union[NetWorthMetrics, ProjectionMetrics]
            if portfolio.liabilities:
                metrics = self.engine.calculate_metrics_with_liabilities(
                    portfolio, projections, settings
                )
            else:
                metrics = self.engine.calculate_metrics(portfolio, projections, settings)

            detailed = None
            if request.include_detailed:
                detailed = self.engine.calculate_detailed_projections(
                    portfolio, scenarios, settings
                )

            self.logger.info(
                f"Completed projection, cache holds {self.engine.cache_size} entries"
            )
            return ProjectionReport(
                portfolio=portfolio,
                settings=settings,
                projections=projections,
                metrics=metrics,
                diversification=self.engine.calculate_diversification(portfolio),
                scenarios=scenarios,
                detailed=detailed,
            )

        except Exception as e:
            self.logger.error(f"Projection failed: {str(e)}")
            raise

    def clear_cache(self) -> None:
        """Drop cached projections."""
        self.engine.clear_cache()
        self.logger.info("Cleared projection cache")
