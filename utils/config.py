"""
Analysis configuration.

Holds sample size, bootstrap iteration count, confidence level and
the column names the analysis reads.
"""

from __future__ import annotations
from dataclasses import asdict, dataclass
from numbers import Integral

from utils.io import InvalidConfigurationError

EMPTY_GROUP_POLICIES = ("raise", "redraw")

# sd and quantile bounds of the bootstrap means need at least two replicates
MIN_SUMMARY_REPLICATES = 2


def validate_ci_level(ci: float) -> float:
    """Return ci as float, or raise if it is not strictly inside (0, 1)."""
    try:
        ci = float(ci)
    except (TypeError, ValueError):
        raise InvalidConfigurationError(f"Confidence level must be a number, got {ci!r}.")
    if not 0.0 < ci < 1.0:
        raise InvalidConfigurationError(f"Confidence level must lie in (0, 1), got {ci}.")
    return ci


def validate_positive_int(value, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral) or value <= 0:
        raise InvalidConfigurationError(f"{name} must be a positive integer, got {value!r}.")
    return int(value)


@dataclass
class AnalysisConfig:
    """Parameters for one run of the four CI strategies."""

    # Size of the fixed sample drawn from the population (N)
    sample_size: int = 100

    # Number of bootstrap resamples (B)
    n_boot: int = 1000

    ci_level: float = 0.95
    seed: int | None = None

    # Column names in the observation frame
    group_field: str = "group"
    value_field: str = "value"

    # "raise" | "redraw"
    empty_group_policy: str = "raise"

    def validate(self) -> "AnalysisConfig":
        validate_positive_int(self.sample_size, "sample_size")
        validate_positive_int(self.n_boot, "n_boot")
        if self.n_boot < MIN_SUMMARY_REPLICATES:
            raise InvalidConfigurationError(
                f"n_boot must be at least {MIN_SUMMARY_REPLICATES} to summarize "
                f"the sampling distribution, got {self.n_boot}."
            )
        validate_ci_level(self.ci_level)
        if self.empty_group_policy not in EMPTY_GROUP_POLICIES:
            raise InvalidConfigurationError(
                f"Unknown empty_group_policy: {self.empty_group_policy!r}"
            )
        return self

    def to_dict(self) -> dict:
        return asdict(self)


DEFAULTS = AnalysisConfig().to_dict()
