"""HTTP routes for the Flask API."""

from http import HTTPStatus
from typing import Any, Dict

from flask import Blueprint, current_app, jsonify, request
from pydantic import ValidationError

from investcalc.core.engine import calculate
from investcalc.core.ping import get_ping_message, get_version
from investcalc.logging_config import get_logger
from investcalc.schemas.calculation import CalculationParameters, ReinvestmentPeriod
from investcalc.schemas.ping import PingResponse

api_bp = Blueprint("api", __name__)
logger = get_logger(__name__)


@api_bp.errorhandler(ValidationError)
def _handle_validation_error(exc: ValidationError):
    """Convert Pydantic validation errors into JSON responses."""
    # rejected input may be NaN/inf, which has no JSON spelling
    detail = exc.errors(include_url=False, include_context=False, include_input=False)
    logger.info("calculation.rejected", errors=len(detail))
    return jsonify({"detail": detail}), HTTPStatus.UNPROCESSABLE_ENTITY


@api_bp.get("/ping")
def ping() -> Any:
    """Health-check endpoint."""
    response = PingResponse(message=get_ping_message(), version=get_version())
    return jsonify(response.model_dump())


@api_bp.get("/reinvestment-periods")
def reinvestment_periods() -> Any:
    """Compounding frequencies the calculator understands."""
    return jsonify(
        [
            {"value": period.value, "periodsPerYear": period.periods_per_year}
            for period in ReinvestmentPeriod
        ]
    )


@api_bp.post("/calculate")
def calculate_endpoint() -> Any:
    """Project the final amount or solve for the unknown field."""
    raw_payload: Dict[str, Any] = request.get_json(force=True, silent=False)
    parameters = CalculationParameters.model_validate(raw_payload)

    result = calculate(parameters, current_app.extensions["solver_settings"])

    logger.info(
        "calculation.completed",
        mode=parameters.mode.value,
        final_amount=result.finalAmount,
        converged=result.solution.converged if result.solution else None,
    )
    return jsonify(result.model_dump(mode="json"))
