"""
Tests for projection metrics and diversification.
"""

import pytest

from networth.models.metrics import (
    NetWorthMetrics,
    ProjectionMetrics,
    calculate_cagr,
    calculate_max_drawdown,
    calculate_sharpe_ratio,
    calculate_spread,
    round_half_up,
)
from networth.models.portfolio import Asset, Liability, Portfolio, ProjectionSettings
from networth.models.projection_engine import ProjectionEngine


def run_metrics(engine, portfolio, rate_table, settings):
    projections = engine.calculate_projections(portfolio, rate_table, settings)
    if portfolio.liabilities:
        return engine.calculate_metrics_with_liabilities(portfolio, projections, settings)
    return engine.calculate_metrics(portfolio, projections, settings)


class TestMetricHelpers:
    """Test the metric helper functions."""

    def test_max_drawdown(self):
        """Test the largest drop from a running peak."""
        assert calculate_max_drawdown([100, 120, 90, 130, 65]) == pytest.approx(50.0)

    def test_max_drawdown_rising_series(self):
        """Test that a rising series has no drawdown."""
        assert calculate_max_drawdown([1, 2, 3, 4]) == 0.0
        assert calculate_max_drawdown([]) == 0.0

    def test_max_drawdown_ignores_non_positive_peaks(self):
        """Test that negative values never become peaks."""
        assert calculate_max_drawdown([-50, -80, -20]) == 0.0
        assert calculate_max_drawdown([-50, 100, 75]) == pytest.approx(25.0)

    def test_cagr(self):
        """Test compound annual growth."""
        assert calculate_cagr(100, 121, 2) == pytest.approx(10.0)
        assert calculate_cagr(0, 121, 2) == 0.0
        assert calculate_cagr(100, 121, 0) == 0.0
        assert calculate_cagr(100, 0, 5) == -100.0

    def test_spread(self):
        """Test half the scenario spread relative to today."""
        assert calculate_spread(90, 130, 100) == pytest.approx(20.0)
        assert calculate_spread(90, 130, 0) == 0.0

    def test_sharpe_ratio(self):
        """Test excess growth per unit of spread."""
        assert calculate_sharpe_ratio(12, 4, 4) == pytest.approx(2.0)
        assert calculate_sharpe_ratio(12, 0, 4) == 0.0

    @pytest.mark.parametrize(
        "value,expected", [(0.4, 0), (0.5, 1), (2.5, 3), (7.49, 7), (7.5, 8)]
    )
    def test_round_half_up(self, value, expected):
        """Test that halves round up."""
        assert round_half_up(value) == expected


class TestProjectionMetrics:
    """Test metrics for portfolios without liabilities."""

    def test_single_stock_portfolio(self, rate_table, settings):
        """Test growth and risk for 100,000 in stocks over ten years."""
        portfolio = Portfolio(assets=[Asset(id="s", type="stocks", value=100000)])
        metrics = run_metrics(ProjectionEngine(), portfolio, rate_table, settings)

        assert isinstance(metrics, ProjectionMetrics)
        assert metrics.current_value == 100000
        assert metrics.future_value.base == pytest.approx(100000 * 1.12**10)
        assert metrics.growth_rate == pytest.approx(12.0)
        expected_spread = (1.2**10 - 1.05**10) / 2 * 100
        assert metrics.volatility == pytest.approx(expected_spread)
        assert metrics.sharpe_ratio == pytest.approx((12.0 - 4.0) / expected_spread)
        assert metrics.max_drawdown == 0.0
        # stocks weight 6 plus the capped spread adjustment of 2
        assert metrics.risk_score == 8

    def test_zero_value_portfolio(self, rate_table, settings):
        """Test that a zero valued portfolio does not divide by zero."""
        portfolio = Portfolio(assets=[Asset(id="s", type="stocks", value=0)])
        metrics = run_metrics(ProjectionEngine(), portfolio, rate_table, settings)

        assert metrics.growth_rate == 0
        assert metrics.volatility == 0
        assert metrics.sharpe_ratio == 0
        assert metrics.risk_score == 1

    def test_cash_only_is_low_risk(self, rate_table, settings):
        """Test that a cash portfolio scores low."""
        portfolio = Portfolio(assets=[Asset(id="c", type="cash", value=10000)])
        metrics = run_metrics(ProjectionEngine(), portfolio, rate_table, settings)

        assert metrics.risk_score <= 3

    def test_empty_portfolio_risk(self):
        """Test that an empty portfolio gets the lowest score."""
        assert ProjectionEngine().calculate_risk_score(Portfolio(), 50.0) == 1

    def test_custom_risk_free_rate(self, rate_table, settings):
        """Test that the Sharpe ratio uses the engine's risk-free rate."""
        portfolio = Portfolio(assets=[Asset(id="s", type="stocks", value=100000)])
        default = run_metrics(ProjectionEngine(), portfolio, rate_table, settings)
        custom = run_metrics(
            ProjectionEngine(risk_free_rate=0.0), portfolio, rate_table, settings
        )

        assert custom.sharpe_ratio > default.sharpe_ratio


class TestNetWorthMetrics:
    """Test metrics for portfolios with liabilities."""

    def test_leveraged_portfolio(self, leveraged_portfolio, rate_table, settings):
        """Test net worth figures and debt ratio."""
        metrics = run_metrics(
            ProjectionEngine(), leveraged_portfolio, rate_table, settings
        )

        assert isinstance(metrics, NetWorthMetrics)
        assert metrics.current_assets == 1700000
        assert metrics.current_liabilities == 1000000
        assert metrics.current_net_worth == 700000
        assert metrics.debt_to_assets_ratio == pytest.approx(1000000 / 1700000 * 100)
        assert metrics.growth_rate is not None
        assert metrics.growth_rate > 0
        assert (
            metrics.future_net_worth.pessimistic
            <= metrics.future_net_worth.base
            <= metrics.future_net_worth.optimistic
        )

    def test_negative_net_worth_has_no_growth_rate(self, mortgage, rate_table, settings):
        """Test that growth is undefined when net worth starts negative."""
        portfolio = Portfolio(
            assets=[Asset(id="c", type="cash", value=100000)], liabilities=[mortgage]
        )
        metrics = run_metrics(ProjectionEngine(), portfolio, rate_table, settings)

        assert metrics.current_net_worth == -900000
        assert metrics.growth_rate is None
        assert metrics.volatility == 0
        assert metrics.debt_to_assets_ratio == pytest.approx(1000.0)

    def test_zero_horizon_growth(self, leveraged_portfolio, rate_table):
        """Test that a zero horizon reports zero growth."""
        settings = ProjectionSettings(horizon_years=0)
        metrics = run_metrics(
            ProjectionEngine(), leveraged_portfolio, rate_table, settings
        )

        assert metrics.growth_rate == 0.0

    def test_no_assets_debt_ratio(self, mortgage, rate_table, settings):
        """Test that the debt ratio is zero when there are no assets."""
        portfolio = Portfolio(liabilities=[mortgage])
        metrics = run_metrics(ProjectionEngine(), portfolio, rate_table, settings)

        assert metrics.debt_to_assets_ratio == 0.0
        assert metrics.risk_score == 1

    def test_serialization(self, leveraged_portfolio, rate_table, settings):
        """Test that metrics serialize to JSON-friendly data."""
        metrics = run_metrics(
            ProjectionEngine(), leveraged_portfolio, rate_table, settings
        )
        data = metrics.model_dump(mode="json")

        assert set(data["future_net_worth"]) == {"pessimistic", "base", "optimistic"}


class TestDiversification:
    """Test diversification scoring."""

    def test_even_split(self):
        """Test two types at 50% each."""
        portfolio = Portfolio(
            assets=[
                Asset(id="s", type="stocks", value=5000),
                Asset(id="b", type="bonds", value=5000),
            ]
        )
        result = ProjectionEngine.calculate_diversification(portfolio)

        assert result.score == 50
        assert result.concentration == 50
        assert result.distribution == {"stocks": 50.0, "bonds": 50.0}
        assert result.types_count == 2

    def test_single_type(self):
        """Test a fully concentrated portfolio."""
        portfolio = Portfolio(
            assets=[
                Asset(id="s1", type="stocks", value=100),
                Asset(id="s2", type="stocks", value=300),
            ]
        )
        result = ProjectionEngine.calculate_diversification(portfolio)

        assert result.score == 0
        assert result.concentration == 100
        assert result.distribution == {"stocks": 100.0}

    def test_empty_portfolio(self):
        """Test that an empty portfolio is maximally concentrated."""
        result = ProjectionEngine.calculate_diversification(Portfolio())

        assert result.score == 0
        assert result.concentration == 100
        assert result.distribution == {}

    def test_four_way_split(self):
        """Test an even split across four types."""
        portfolio = Portfolio(
            assets=[
                Asset(id=asset_type, type=asset_type, value=25)
                for asset_type in ("stocks", "bonds", "cash", "realty")
            ]
        )
        result = ProjectionEngine.calculate_diversification(portfolio)

        assert result.score == 75
        assert result.concentration == 25
