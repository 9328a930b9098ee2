from __future__ import annotations

from math import isclose

import pytest
from structlog.testing import capture_logs

from investcalc.config import SolverSettings
from investcalc.core.projection import project
from investcalc.core.solver import search_interval, solve
from investcalc.schemas.calculation import CalculationMode, CalculationParameters


def make_parameters(**overrides) -> CalculationParameters:
    values = {
        "initialCapital": 10000,
        "annualRatePercent": 5,
        "termYears": 10,
        "monthlyContribution": 500,
        "targetAmount": 100000,
    }
    values.update(overrides)
    return CalculationParameters(**values)


def test_solve_for_initial_capital():
    """
    8%, 5 years, 500/month, aiming for 50k: roughly 8.9k has to be there on day one.
    """
    parameters = make_parameters(annualRatePercent=8, termYears=5, targetAmount=50000)

    result = solve(CalculationMode.SOLVE_FOR_INITIAL_CAPITAL, parameters)

    capital = result.solution.value
    assert result.solution.converged
    assert abs(result.finalAmount - 50000) < 1
    assert 8800 < capital < 9000
    assert result.parameters.initialCapital == capital
    assert abs(project(capital, 8, 5, 500, 12).finalAmount - 50000) < 1


def test_solve_for_rate_round_trips_through_projection():
    parameters = make_parameters()

    result = solve(CalculationMode.SOLVE_FOR_RATE, parameters)

    rate = result.solution.value
    assert result.solution.converged
    assert 5 < rate < 7
    assert abs(project(10000, rate, 10, 500, 12).finalAmount - 100000) < 1
    assert result.parameters.annualRatePercent == rate


def test_solve_for_rate_with_simple_interest():
    parameters = make_parameters(reinvestmentPeriod="none")

    result = solve(CalculationMode.SOLVE_FOR_RATE, parameters)

    assert result.solution.converged
    assert abs(project(10000, result.solution.value, 10, 500, None).finalAmount - 100000) < 1


def test_solve_for_contribution():
    parameters = make_parameters()

    result = solve(CalculationMode.SOLVE_FOR_CONTRIBUTION, parameters)

    assert result.solution.converged
    assert 530 < result.solution.value < 545
    assert abs(result.finalAmount - 100000) < 1


def test_solve_for_term_lands_on_whole_period():
    target = project(10000, 5, 10, 500, 12).finalAmount
    parameters = make_parameters(targetAmount=target)

    result = solve(CalculationMode.SOLVE_FOR_TERM, parameters)

    term = result.solution.value
    assert result.solution.converged
    # any term in (119/12, 10] simulates the same 120 months
    assert 119 / 12 < term <= 10
    assert isclose(result.finalAmount, target, abs_tol=1e-6)
    assert len(result.yearlyBreakdown) == 10


def test_target_below_reach_collapses_to_lower_bound():
    """
    100k already grows past a 1k target with no contributions at all.
    """
    parameters = make_parameters(initialCapital=100000, targetAmount=1000)

    result = solve(CalculationMode.SOLVE_FOR_CONTRIBUTION, parameters)

    assert not result.solution.converged
    assert result.solution.iterations == 100
    assert result.solution.value < 1e-20
    assert result.solution.residual > 0
    assert isclose(result.finalAmount, project(100000, 5, 10, 0, 12).finalAmount, rel_tol=1e-9)


def test_target_above_reach_collapses_to_upper_bound():
    parameters = make_parameters(
        initialCapital=1000, termYears=1, monthlyContribution=0, targetAmount=1e9
    )

    with capture_logs() as logs:
        result = solve(CalculationMode.SOLVE_FOR_RATE, parameters)

    assert not result.solution.converged
    assert isclose(result.solution.value, 50.0, abs_tol=1e-9)
    assert result.solution.residual < 0
    assert result.residual == result.solution.residual

    warnings = [entry for entry in logs if entry["event"] == "solver.not_converged"]
    assert len(warnings) == 1
    assert warnings[0]["log_level"] == "warning"
    assert warnings[0]["mode"] == "interestRate"
    assert warnings[0]["residual"] == result.solution.residual
    assert warnings[0]["iterations"] == 100


def test_explicit_target_overrides_parameters():
    parameters = make_parameters(targetAmount=1)

    result = solve(CalculationMode.SOLVE_FOR_CONTRIBUTION, parameters, target_amount=100000)

    assert result.solution.converged
    assert result.parameters.targetAmount == 100000


def test_iteration_budget_comes_from_settings():
    parameters = make_parameters()

    result = solve(
        CalculationMode.SOLVE_FOR_RATE,
        parameters,
        settings=SolverSettings(max_iterations=1),
    )

    # one midpoint at 25%, then the answer is the middle of the half that is left
    assert result.solution.iterations == 1
    assert result.solution.value == 12.5
    assert not result.solution.converged


def test_loose_tolerance_exits_early():
    parameters = make_parameters()

    strict = solve(CalculationMode.SOLVE_FOR_RATE, parameters)
    loose = solve(
        CalculationMode.SOLVE_FOR_RATE,
        parameters,
        settings=SolverSettings(tolerance=5000),
    )

    assert loose.solution.converged
    assert loose.solution.iterations < strict.solution.iterations


def test_search_intervals():
    assert search_interval(CalculationMode.SOLVE_FOR_RATE, 1200) == (0.0, 50.0)
    assert search_interval(CalculationMode.SOLVE_FOR_INITIAL_CAPITAL, 1200) == (0.0, 1200)
    assert search_interval(CalculationMode.SOLVE_FOR_TERM, 1200) == (0.0, 50.0)
    assert search_interval(CalculationMode.SOLVE_FOR_CONTRIBUTION, 1200) == (0.0, 100)


def test_projection_mode_is_not_solvable():
    with pytest.raises(ValueError):
        solve(CalculationMode.PROJECT_FINAL_AMOUNT, make_parameters())


@pytest.mark.parametrize(
    "settings",
    [{"max_iterations": 0}, {"tolerance": 0}, {"tolerance": -1.0}],
)
def test_solver_settings_reject_empty_budget(settings):
    with pytest.raises(ValueError):
        SolverSettings(**settings)


def test_converged_solve_logs_no_warning():
    with capture_logs() as logs:
        result = solve(CalculationMode.SOLVE_FOR_RATE, make_parameters())

    assert result.solution.converged
    assert [entry["event"] for entry in logs] == ["solver.converged"]


def test_term_target_below_starting_capital_collapses_to_zero():
    """
    10k already beats a 5k target, so the term shrinks towards zero without raising.
    """
    parameters = CalculationParameters(targetAmount=5000)

    result = solve(CalculationMode.SOLVE_FOR_TERM, parameters)

    assert not result.solution.converged
    assert 0 < result.solution.value < 1e-20
    assert result.finalAmount > 10000
    assert result.effectiveAnnualReturnPercent is None
