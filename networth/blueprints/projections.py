"""
Projections blueprint.

This module provides API endpoints for running net worth projections,
inspecting loan amortization and listing the asset and liability classes.
"""

import json
from typing import Any

from flask import Blueprint, current_app, jsonify, request
from pydantic import BaseModel, Field, ValidationError

from networth.models.amortization import (
    AmortizationCalculator,
    validate_loan_parameters,
)
from networth.models.portfolio import Liability
from networth.services.projection_service import ProjectionRequest, ProjectionService

projections_bp = Blueprint("projections", __name__, url_prefix="/api")


class AmortizationRequest(BaseModel):
    """Request body for the amortization endpoint."""

    liability: Liability
    months: int = Field(default=12, ge=1, le=1200)


def _service() -> ProjectionService:
    return current_app.extensions["projection_service"]


def _validation_error(error: ValidationError) -> Any:
    details = json.loads(error.json(include_url=False))
    return jsonify({"error": "Invalid request", "details": details}), 400


@projections_bp.route("/projections", methods=["POST"])
def run_projection() -> Any:
    """Project a portfolio under the three return scenarios.

    Returns:
        JSON response with projections, metrics and diversification
    """
    try:
        payload = ProjectionRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _validation_error(e)

    try:
        report = _service().run(payload)
        return jsonify(report.model_dump(mode="json")), 200

    except Exception as e:
        current_app.logger.error(f"Error running projection: {str(e)}")
        return jsonify({"error": "Internal server error"}), 500


@projections_bp.route("/projections/cache", methods=["DELETE"])
def clear_projection_cache() -> Any:
    """Drop all cached projections.

    Returns:
        JSON response with the new cache size
    """
    service = _service()
    service.clear_cache()
    return jsonify({"cached_projections": service.engine.cache_size}), 200


@projections_bp.route("/liabilities/amortization", methods=["POST"])
def amortization() -> Any:
    """Describe the repayment of a single liability.

    Returns:
        JSON response with payment, totals, validation and schedule
    """
    try:
        payload = AmortizationRequest.model_validate(request.get_json(silent=True) or {})
    except ValidationError as e:
        return _validation_error(e)

    liability = payload.liability
    validation = validate_loan_parameters(
        liability.principal, liability.rate, liability.term_years
    )
    totals = AmortizationCalculator.calculate_total_payments(liability)
    schedule = AmortizationCalculator.get_payment_schedule(liability, payload.months)
    yearly_balances = [
        AmortizationCalculator.calculate_remaining_balance(liability, year)
        for year in range(liability.term_years + 1)
    ]

    return (
        jsonify(
            {
                "monthly_payment": liability.monthly_payment,
                "validation": validation.model_dump(),
                "totals": totals.model_dump(),
                "yearly_balances": yearly_balances,
                "schedule": [entry.model_dump() for entry in schedule],
            }
        ),
        200,
    )


@projections_bp.route("/asset-classes", methods=["GET"])
def list_asset_classes() -> Any:
    """List the registered asset classes and risk profiles."""
    registry = _service().asset_classes
    return (
        jsonify(
            {
                "asset_classes": {
                    asset_type: info.model_dump()
                    for asset_type, info in registry.all_asset_types().items()
                },
                "risk_profiles": {
                    key: profile.model_dump()
                    for key, profile in registry.risk_profiles.items()
                },
            }
        ),
        200,
    )


@projections_bp.route("/liability-classes", methods=["GET"])
def list_liability_classes() -> Any:
    """List the registered liability classes."""
    registry = current_app.extensions["liability_classes"]
    return (
        jsonify(
            {
                liability_type: info.model_dump()
                for liability_type, info in registry.all_liability_types().items()
            }
        ),
        200,
    )
