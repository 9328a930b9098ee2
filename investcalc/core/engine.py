"""Entry point of the calculation engine: one parameter set in, one fresh result out."""

from __future__ import annotations

from typing import Optional

from investcalc.config import SolverSettings
from investcalc.core.projection import project_parameters
from investcalc.core.solver import solve
from investcalc.schemas.calculation import CalculationParameters, CalculationResult


def calculate(
    parameters: CalculationParameters,
    settings: Optional[SolverSettings] = None,
) -> CalculationResult:
    """Project the final amount, or solve for the field named by `parameters.mode`."""
    if not parameters.mode.is_solve:
        return project_parameters(parameters)
    return solve(parameters.mode, parameters, parameters.targetAmount, settings)
