"""Forward projection of an investment with periodic contributions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Protocol

from investcalc.core.rounding import (
    count_periods,
    count_years,
    effective_annual_return,
    round_currency,
)
from investcalc.schemas.calculation import (
    CalculationParameters,
    CalculationResult,
    YearlyRecord,
)


@dataclass
class YearTotals:
    year: int
    starting_balance: float
    interest: float = 0.0
    contributions: float = 0.0
    ending_balance: float = 0.0

    def to_record(self) -> YearlyRecord:
        return YearlyRecord(
            year=self.year,
            startingBalance=round_currency(self.starting_balance),
            interest=round_currency(self.interest),
            contributions=round_currency(self.contributions),
            endingBalance=round_currency(self.ending_balance),
        )


@dataclass
class ProjectionRun:
    final_amount: float
    periodic_contributions: float
    years: List[YearTotals] = field(default_factory=list)


class ProjectionStrategy(Protocol):
    def run(
        self,
        capital: float,
        rate_percent: float,
        term_years: float,
        monthly_contribution: float,
    ) -> ProjectionRun:
        ...


class SimpleInterestStrategy:
    """No reinvestment: interest is paid on capital plus every contribution for the full term."""

    @staticmethod
    def amount_at(
        capital: float, rate: float, monthly_contribution: float, years: float
    ) -> tuple[float, float]:
        """Closed form balance after `years`; returns (amount, contributions)."""
        contributions = monthly_contribution * 12 * years
        principal = capital + contributions
        return principal + principal * rate * years, contributions

    def run(
        self,
        capital: float,
        rate_percent: float,
        term_years: float,
        monthly_contribution: float,
    ) -> ProjectionRun:
        rate = rate_percent / 100.0
        term = max(term_years, 0.0)

        years: List[YearTotals] = []
        previous_amount, previous_contributions = capital, 0.0
        for year in range(1, count_years(term) + 1):
            # the last row stops at the end of the term, not the calendar year
            amount, contributions = self.amount_at(
                capital, rate, monthly_contribution, min(float(year), term)
            )
            added = contributions - previous_contributions
            years.append(
                YearTotals(
                    year=year,
                    starting_balance=previous_amount,
                    interest=amount - previous_amount - added,
                    contributions=added,
                    ending_balance=amount,
                )
            )
            previous_amount, previous_contributions = amount, contributions

        final_amount, contributions = self.amount_at(capital, rate, monthly_contribution, term)
        return ProjectionRun(
            final_amount=final_amount,
            periodic_contributions=contributions,
            years=years,
        )


class PeriodicCompoundingStrategy:
    """Interest is added to the balance every period, after which that period's contribution lands."""

    def __init__(self, periods_per_year: int):
        if periods_per_year <= 0:
            raise ValueError("periods_per_year must be positive")
        self.periods_per_year = periods_per_year

    def run(
        self,
        capital: float,
        rate_percent: float,
        term_years: float,
        monthly_contribution: float,
    ) -> ProjectionRun:
        n = self.periods_per_year
        period_rate = rate_percent / 100.0 / n
        period_contribution = monthly_contribution * 12 / n

        balance = float(capital)
        contributed = 0.0
        years: List[YearTotals] = []
        current: Optional[YearTotals] = None

        for period in range(count_periods(term_years, n)):
            if period % n == 0:
                current = YearTotals(year=period // n + 1, starting_balance=balance)
                years.append(current)

            interest = balance * period_rate
            balance = balance * (1 + period_rate) + period_contribution
            contributed += period_contribution

            current.interest += interest
            current.contributions += period_contribution
            current.ending_balance = balance

        return ProjectionRun(
            final_amount=balance,
            periodic_contributions=contributed,
            years=years,
        )


def select_strategy(periods_per_year: Optional[int]) -> ProjectionStrategy:
    """Simple interest when there is no reinvestment, the periodic recurrence otherwise."""
    if periods_per_year is None:
        return SimpleInterestStrategy()
    return PeriodicCompoundingStrategy(periods_per_year)


def project(
    capital: float,
    rate_percent: float,
    term_years: float,
    monthly_contribution: float,
    periods_per_year: Optional[int],
) -> CalculationResult:
    """
    Project an investment forward.

    Order of operations (compounding):
      1) Accrue the period's interest on the running balance.
      2) Add the period's share of the monthly contribution.
      3) Roll the period into the current year's row.

    Top-level totals keep full precision; yearly rows are rounded to whole units.
    """
    run = select_strategy(periods_per_year).run(
        capital, rate_percent, term_years, monthly_contribution
    )

    total_contributions = capital + run.periodic_contributions
    return CalculationResult(
        finalAmount=run.final_amount,
        totalContributions=total_contributions,
        totalInterest=run.final_amount - total_contributions,
        effectiveAnnualReturnPercent=effective_annual_return(
            run.final_amount, capital, term_years
        ),
        yearlyBreakdown=[year.to_record() for year in run.years],
    )


def project_parameters(parameters: CalculationParameters) -> CalculationResult:
    """Run `project` on a full parameter set and keep the inputs on the result."""
    result = project(
        capital=parameters.initialCapital,
        rate_percent=parameters.annualRatePercent,
        term_years=parameters.termYears,
        monthly_contribution=parameters.monthlyContribution,
        periods_per_year=parameters.compoundingPeriodsPerYear,
    )
    return result.model_copy(update={"parameters": parameters})
