"""
Pytest configuration and shared fixtures for the net worth projection tests.
"""

import pytest

from networth import create_app
from networth.config import Settings
from networth.models.portfolio import (
    Asset,
    Liability,
    Portfolio,
    ProjectionSettings,
    ScenarioRateTable,
    ScenarioReturns,
)


@pytest.fixture
def rate_table():
    """Return assumptions used across the projection tests."""
    return ScenarioRateTable(
        return_rates={
            "stocks": ScenarioReturns(pessimistic=5, base=12, optimistic=20),
            "bonds": ScenarioReturns(pessimistic=3, base=8, optimistic=12),
            "cash": ScenarioReturns(pessimistic=4, base=7, optimistic=10),
            "realty": ScenarioReturns(pessimistic=0, base=5, optimistic=12),
        }
    )


@pytest.fixture
def mixed_portfolio():
    """Portfolio with several asset types and no liabilities."""
    return Portfolio(
        assets=[
            Asset(id="stocks-1", type="stocks", name="Index fund", value=60000),
            Asset(id="stocks-2", type="stocks", name="Growth fund", value=40000),
            Asset(id="bonds-1", type="bonds", name="Treasuries", value=50000),
            Asset(id="cash-1", type="cash", name="Deposit", value=20000),
        ]
    )


@pytest.fixture
def mortgage():
    """A 20 year mortgage at 8.5%."""
    return Liability(
        id="mortgage-1",
        type="mortgage",
        name="Apartment",
        principal=1000000,
        rate=8.5,
        term_years=20,
    )


@pytest.fixture
def leveraged_portfolio(mortgage):
    """Portfolio with realty financed by a mortgage."""
    return Portfolio(
        assets=[
            Asset(id="realty-1", type="realty", name="Apartment", value=1500000),
            Asset(id="stocks-1", type="stocks", name="Index fund", value=200000),
        ],
        liabilities=[mortgage],
    )


@pytest.fixture
def settings():
    """Ten year horizon with 6% inflation."""
    return ProjectionSettings(horizon_years=10, inflation=6.0)


@pytest.fixture
def app_settings():
    """Application settings for tests."""
    return Settings(SECRET_KEY="test-secret-key-123", APP_ENV="testing", _env_file=None)


@pytest.fixture
def app(app_settings):
    """Flask application configured for tests."""
    return create_app(app_settings)


@pytest.fixture
def client(app):
    """Flask test client."""
    return app.test_client()
