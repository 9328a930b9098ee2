"""Data contracts for compound-interest calculations."""

from __future__ import annotations

import math
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

MAX_TERM_YEARS = 100.0


class ReinvestmentPeriod(str, Enum):
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    SEMIANNUAL = "semiannual"
    ANNUAL = "annual"
    NONE = "none"

    @property
    def periods_per_year(self) -> Optional[int]:
        """Compounding periods per year, None for simple interest."""
        return _PERIODS_PER_YEAR[self]


_PERIODS_PER_YEAR = {
    ReinvestmentPeriod.MONTHLY: 12,
    ReinvestmentPeriod.QUARTERLY: 4,
    ReinvestmentPeriod.SEMIANNUAL: 2,
    ReinvestmentPeriod.ANNUAL: 1,
    ReinvestmentPeriod.NONE: None,
}


class CalculationMode(str, Enum):
    PROJECT_FINAL_AMOUNT = "finalAmount"
    SOLVE_FOR_RATE = "interestRate"
    SOLVE_FOR_INITIAL_CAPITAL = "initialCapital"
    SOLVE_FOR_TERM = "investmentTerm"
    SOLVE_FOR_CONTRIBUTION = "monthlyContribution"

    @property
    def is_solve(self) -> bool:
        return self is not CalculationMode.PROJECT_FINAL_AMOUNT


class CalculationParameters(BaseModel):
    """Inputs for one calculation. Every field has the calculator's starting value."""

    model_config = ConfigDict(extra="forbid", frozen=True, allow_inf_nan=False)

    initialCapital: float = Field(10000.0, description="Capital invested at the start.")
    annualRatePercent: float = Field(
        8.0,
        description="Annual interest rate as a percentage (5 means 5%).",
    )
    termYears: float = Field(5.0, description="Investment term in years, may be fractional.")
    monthlyContribution: float = Field(500.0, description="Amount added every month.")
    reinvestmentPeriod: ReinvestmentPeriod = ReinvestmentPeriod.MONTHLY
    targetAmount: float = Field(
        50000.0,
        description="Amount to reach; only read when solving for another field.",
    )
    mode: CalculationMode = CalculationMode.PROJECT_FINAL_AMOUNT

    @field_validator(
        "initialCapital",
        "annualRatePercent",
        "termYears",
        "monthlyContribution",
        "targetAmount",
    )
    @classmethod
    def clamp_negative(cls, value: float) -> float:
        # negative input counts as "nothing entered"
        return max(value, 0.0)

    @field_validator("termYears")
    @classmethod
    def clamp_term(cls, value: float) -> float:
        return min(value, MAX_TERM_YEARS)

    @property
    def compoundingPeriodsPerYear(self) -> Optional[int]:
        return self.reinvestmentPeriod.periods_per_year


class YearlyRecord(BaseModel):
    """One row of the year-by-year table, in whole currency units."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(..., ge=1)
    startingBalance: float
    interest: float
    contributions: float
    endingBalance: float


class SolverSolution(BaseModel):
    """How the inversion solver arrived at the unknown field."""

    model_config = ConfigDict(frozen=True)

    field: CalculationMode
    value: float
    residual: float = Field(..., description="finalAmount minus targetAmount.")
    iterations: int = Field(..., ge=0)
    converged: bool


class CalculationResult(BaseModel):
    """Projection output; a new instance is produced for every calculation."""

    model_config = ConfigDict(frozen=True)

    finalAmount: float
    totalContributions: float = Field(
        ...,
        description="Initial capital plus every periodic contribution.",
    )
    totalInterest: float
    effectiveAnnualReturnPercent: Optional[float] = Field(
        None,
        description="Annualised growth of the initial capital; None when capital or term is zero.",
    )
    yearlyBreakdown: List[YearlyRecord] = Field(default_factory=list)
    parameters: Optional[CalculationParameters] = None
    solution: Optional[SolverSolution] = None

    @property
    def residual(self) -> Optional[float]:
        return self.solution.residual if self.solution else None

    def is_balanced(self, rel_tol: float = 1e-6) -> bool:
        """finalAmount == totalContributions + totalInterest within tolerance."""
        return math.isclose(
            self.finalAmount,
            self.totalContributions + self.totalInterest,
            rel_tol=rel_tol,
            abs_tol=1e-9,
        )
