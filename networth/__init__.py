"""Net Worth Projection Flask Application Factory."""

from typing import Optional

from flask import Flask

from networth.config import Settings, get_global_settings
from networth.models.asset_classes import AssetClassRegistry
from networth.models.liability_classes import LiabilityClassRegistry
from networth.models.portfolio import ProjectionSettings
from networth.models.projection_engine import ProjectionEngine
from networth.services.projection_service import ProjectionService


def create_app(settings: Optional[Settings] = None) -> Flask:
    """Create and configure the Flask application.

    Args:
        settings: Settings to use (defaults to the global settings)

    Returns:
        Flask: Configured Flask application instance
    """
    app = Flask(__name__)

    # Configuration from Pydantic Settings
    settings = settings or get_global_settings()
    app.config["SECRET_KEY"] = settings.secret_key
    app.config["ENV"] = settings.flask_env
    app.config["DEBUG"] = settings.app_env == "development"
    app.config["TESTING"] = settings.app_env == "testing"
    app.logger.setLevel(settings.log_level)

    # One engine per application so its projection cache is shared by requests
    asset_classes = AssetClassRegistry()
    engine = ProjectionEngine(
        asset_classes=asset_classes,
        max_cache_size=settings.cache_limit,
        risk_free_rate=settings.risk_free_rate,
    )
    app.extensions["projection_service"] = ProjectionService(
        engine=engine,
        asset_classes=asset_classes,
        default_settings=ProjectionSettings(
            horizon_years=settings.default_horizon_years,
            inflation=settings.default_inflation,
        ),
    )
    app.extensions["liability_classes"] = LiabilityClassRegistry()

    # Register blueprints
    from networth.blueprints.health import health_bp
    from networth.blueprints.projections import projections_bp

    app.register_blueprint(health_bp)
    app.register_blueprint(projections_bp)

    return app
