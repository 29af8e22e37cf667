"""
Tests for the projection service.
"""

import logging
from unittest.mock import patch

import pytest

from networth.models.metrics import NetWorthMetrics, ProjectionMetrics
from networth.models.modifications import BuyModification
from networth.models.portfolio import Asset, Portfolio, ProjectionSettings
from networth.models.projection_engine import ProjectionEngine
from networth.services.projection_service import ProjectionRequest, ProjectionService


class TestProjectionService:
    """Test cases for ProjectionService."""

    def test_run_without_liabilities(self, mixed_portfolio, rate_table, settings):
        """Test that asset-only portfolios get ProjectionMetrics."""
        report = ProjectionService().run(
            ProjectionRequest(
                portfolio=mixed_portfolio, scenarios=rate_table, settings=settings
            )
        )

        assert isinstance(report.metrics, ProjectionMetrics)
        assert len(report.projections.base) == 11
        assert report.detailed is None
        assert report.scenarios == rate_table
        assert report.diversification.types_count == 3

    def test_run_with_liabilities(self, leveraged_portfolio, rate_table, settings):
        """Test that portfolios with debt get NetWorthMetrics."""
        report = ProjectionService().run(
            ProjectionRequest(
                portfolio=leveraged_portfolio, scenarios=rate_table, settings=settings
            )
        )

        assert isinstance(report.metrics, NetWorthMetrics)
        assert report.metrics.current_net_worth == 700000

    def test_rate_table_derived_from_inflation(self, settings):
        """Test that a missing rate table is built from the asset classes."""
        portfolio = Portfolio(assets=[Asset(id="s", type="stocks", value=100000)])
        report = ProjectionService().run(
            ProjectionRequest(
                portfolio=portfolio, settings=ProjectionSettings(horizon_years=1)
            )
        )

        # default inflation 6 + stocks base adjustment 5
        assert report.scenarios.rate_for("stocks", "base") == 11.0
        assert report.projections.base[1].nominal == pytest.approx(111000)

    def test_default_settings(self):
        """Test that requests without settings use the service defaults."""
        service = ProjectionService(
            default_settings=ProjectionSettings(horizon_years=3, inflation=2.0)
        )
        report = service.run(ProjectionRequest())

        assert report.settings.horizon_years == 3
        assert len(report.projections.optimistic) == 4

    def test_include_detailed(self, mixed_portfolio, rate_table, settings):
        """Test the optional per asset breakdown."""
        report = ProjectionService().run(
            ProjectionRequest(
                portfolio=mixed_portfolio,
                scenarios=rate_table,
                settings=settings,
                include_detailed=True,
            )
        )

        assert set(report.detailed.assets) == {a.id for a in mixed_portfolio.assets}

    def test_modifications_are_applied(self, mixed_portfolio, rate_table, settings):
        """Test that modifications change the projected portfolio only."""
        report = ProjectionService().run(
            ProjectionRequest(
                portfolio=mixed_portfolio,
                scenarios=rate_table,
                settings=settings,
                modifications=[BuyModification(asset_type="realty", amount=30000)],
            )
        )

        assert report.portfolio.total_value == 200000
        assert report.projections.base[0].nominal == pytest.approx(200000)
        assert mixed_portfolio.total_value == 170000

    def test_repeated_runs_hit_cache(self, mixed_portfolio, rate_table, settings):
        """Test that the service reuses the engine cache."""
        service = ProjectionService()
        request = ProjectionRequest(
            portfolio=mixed_portfolio, scenarios=rate_table, settings=settings
        )

        first = service.run(request)
        second = service.run(request)

        assert second.projections is first.projections
        assert service.engine.cache_size == 1

        service.clear_cache()
        assert service.engine.cache_size == 0

    def test_injected_engine(self):
        """Test that the service uses the engine it is given."""
        engine = ProjectionEngine(max_cache_size=5)

        assert ProjectionService(engine=engine).engine is engine

    def test_failure_is_logged_and_reraised(self, mixed_portfolio, caplog):
        """Test that engine errors propagate after being logged."""
        service = ProjectionService()

        with patch.object(
            service.engine, "calculate_projections", side_effect=RuntimeError("boom")
        ):
            with caplog.at_level(logging.ERROR):
                with pytest.raises(RuntimeError, match="boom"):
                    service.run(ProjectionRequest(portfolio=mixed_portfolio))

        assert "Projection failed: boom" in caplog.text
