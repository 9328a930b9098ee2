"""Application configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Mapping

DEFAULT_MAX_ITERATIONS = 100
DEFAULT_TOLERANCE = 1.0


@dataclass(frozen=True)
class SolverSettings:
    """Bisection budget handed to the solver on every call."""

    max_iterations: int = DEFAULT_MAX_ITERATIONS
    tolerance: float = DEFAULT_TOLERANCE

    def __post_init__(self) -> None:
        if self.max_iterations <= 0:
            raise ValueError("max_iterations must be positive")
        if self.tolerance <= 0:
            raise ValueError("tolerance must be positive")


class Config:
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
        "http://127.0.0.1:3000",
        "http://127.0.0.1:5173",
    ]
    LOG_LEVEL = "INFO"
    LOG_JSON = False
    LOG_CACHE_LOGGERS = True
    SOLVER_MAX_ITERATIONS = DEFAULT_MAX_ITERATIONS
    SOLVER_TOLERANCE = DEFAULT_TOLERANCE


class TestingConfig(Config):
    TESTING = True
    LOG_LEVEL = "WARNING"
    LOG_CACHE_LOGGERS = False


def solver_settings_from_config(config: Mapping[str, Any]) -> SolverSettings:
    return SolverSettings(
        max_iterations=int(config.get("SOLVER_MAX_ITERATIONS", DEFAULT_MAX_ITERATIONS)),
        tolerance=float(config.get("SOLVER_TOLERANCE", DEFAULT_TOLERANCE)),
    )
