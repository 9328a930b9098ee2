"""Inverse solver: find the one unknown input that reaches a target amount."""

from __future__ import annotations

from typing import Callable, Dict, Optional, Tuple

from investcalc.config import SolverSettings
from investcalc.core.projection import project
from investcalc.logging_config import get_logger
from investcalc.schemas.calculation import (
    CalculationMode,
    CalculationParameters,
    CalculationResult,
    SolverSolution,
)

logger = get_logger(__name__)

MAX_RATE_PERCENT = 50.0
MAX_TERM_YEARS = 50.0

# mode -> the CalculationParameters field it replaces
SOLVED_FIELDS: Dict[CalculationMode, str] = {
    CalculationMode.SOLVE_FOR_RATE: "annualRatePercent",
    CalculationMode.SOLVE_FOR_INITIAL_CAPITAL: "initialCapital",
    CalculationMode.SOLVE_FOR_TERM: "termYears",
    CalculationMode.SOLVE_FOR_CONTRIBUTION: "monthlyContribution",
}


def search_interval(mode: CalculationMode, target_amount: float) -> Tuple[float, float]:
    """Plausible range of the unknown; the objective is assumed increasing over it."""
    if mode is CalculationMode.SOLVE_FOR_RATE:
        return 0.0, MAX_RATE_PERCENT
    if mode is CalculationMode.SOLVE_FOR_INITIAL_CAPITAL:
        return 0.0, target_amount
    if mode is CalculationMode.SOLVE_FOR_TERM:
        return 0.0, MAX_TERM_YEARS
    if mode is CalculationMode.SOLVE_FOR_CONTRIBUTION:
        return 0.0, target_amount / 12
    raise ValueError(f"{mode.value} is not a solve mode")


def _objective(
    mode: CalculationMode, parameters: CalculationParameters
) -> Callable[[float], CalculationResult]:
    """Projection as a function of the unknown, every other input held fixed."""
    field_name = SOLVED_FIELDS[mode]
    fixed = {
        "capital": parameters.initialCapital,
        "rate_percent": parameters.annualRatePercent,
        "term_years": parameters.termYears,
        "monthly_contribution": parameters.monthlyContribution,
        "periods_per_year": parameters.compoundingPeriodsPerYear,
    }
    argument = {
        "initialCapital": "capital",
        "annualRatePercent": "rate_percent",
        "termYears": "term_years",
        "monthlyContribution": "monthly_contribution",
    }[field_name]

    def evaluate(value: float) -> CalculationResult:
        return project(**{**fixed, argument: value})

    return evaluate


def solve(
    mode: CalculationMode,
    parameters: CalculationParameters,
    target_amount: Optional[float] = None,
    settings: Optional[SolverSettings] = None,
) -> CalculationResult:
    """
    Bisect the unknown named by `mode` until the projection hits the target.

    Never raises for unreachable targets: the search collapses onto a bound of
    the interval and the result carries the residual for the caller to judge.
    """
    if mode not in SOLVED_FIELDS:
        raise ValueError(f"{mode.value} is not a solve mode")

    settings = settings or SolverSettings()
    target = parameters.targetAmount if target_amount is None else target_amount
    evaluate = _objective(mode, parameters)

    low, high = search_interval(mode, target)
    iterations = 0
    converged = False
    value = (low + high) / 2
    result: Optional[CalculationResult] = None

    for _ in range(settings.max_iterations):
        iterations += 1
        value = (low + high) / 2
        result = evaluate(value)
        if abs(result.finalAmount - target) < settings.tolerance:
            converged = True
            break
        if result.finalAmount < target:
            low = value
        else:
            high = value

    if not converged:
        # budget spent: answer with the midpoint of what is left of the interval
        value = (low + high) / 2
        result = evaluate(value)
        converged = abs(result.finalAmount - target) < settings.tolerance

    residual = result.finalAmount - target
    if converged:
        logger.debug("solver.converged", mode=mode.value, value=value, iterations=iterations)
    else:
        logger.warning(
            "solver.not_converged",
            mode=mode.value,
            value=value,
            residual=residual,
            iterations=iterations,
        )

    solved_parameters = parameters.model_copy(
        update={SOLVED_FIELDS[mode]: value, "targetAmount": target, "mode": mode}
    )
    return result.model_copy(
        update={
            "parameters": solved_parameters,
            "solution": SolverSolution(
                field=mode,
                value=value,
                residual=residual,
                iterations=iterations,
                converged=converged,
            ),
        }
    )
