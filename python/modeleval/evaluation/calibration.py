"""Binned calibration curves with binomial confidence intervals.

Each score column is cut into probability bins; per bin we report the sample
count, the observed event rate with its interval, and the mean predicted
probability. A bin without samples has an ``UNDEFINED`` rate, never 0.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import asdict, dataclass
from typing import Any, Dict, Hashable, Sequence, Tuple

import numpy as np
import pandas as pd
from scipy import stats

from ..errors import InvalidProbabilityError, check_same_length
from .levels import LevelSet, event_indicator
from .lift import ScoreColumns, named_columns
from .ranking import as_scores
from .undefined import UNDEFINED, MaybeFloat, export_value

logger = logging.getLogger(__name__)

DEFAULT_CUTS = 11


class BinningStrategy(enum.Enum):
    UNIFORM = "uniform"
    QUANTILE = "quantile"

    @classmethod
    def parse(cls, value: "BinningStrategy | str") -> "BinningStrategy":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown binning strategy {value!r}; expected one of {[m.value for m in cls]}"
            ) from None


class IntervalMethod(enum.Enum):
    """Binomial interval for a bin's event rate (Clopper-Pearson or Wilson score)."""

    EXACT = "exact"
    WILSON = "wilson"

    @classmethod
    def parse(cls, value: "IntervalMethod | str") -> "IntervalMethod":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown interval method {value!r}; expected one of {[m.value for m in cls]}"
            ) from None


@dataclass(frozen=True)
class CalibrationBin:
    """``[lower, upper)`` probability interval; the last bin also holds ``upper``."""

    lower: float
    upper: float
    count: int
    events: int
    observed_rate: MaybeFloat
    ci_lower: MaybeFloat
    ci_upper: MaybeFloat
    mean_predicted: MaybeFloat

    @property
    def midpoint(self) -> float:
        return (self.lower + self.upper) / 2.0

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def to_dict(self) -> Dict[str, Any]:
        out = {k: export_value(v) for k, v in asdict(self).items()}
        out["midpoint"] = self.midpoint
        return out


def bin_edges(
    probabilities: np.ndarray,
    cuts: int,
    strategy: BinningStrategy | str = BinningStrategy.UNIFORM,
) -> np.ndarray:
    """Bin boundaries covering [0, 1].

    Uniform edges sit at exact multiples of ``1 / cuts``. Quantile edges follow
    the sample distribution; repeated quantiles collapse, leaving fewer bins.
    """

    strategy = BinningStrategy.parse(strategy)
    fractions = np.arange(cuts + 1) / cuts
    if strategy is BinningStrategy.UNIFORM:
        return fractions
    edges = np.quantile(probabilities, fractions)
    edges[0], edges[-1] = 0.0, 1.0
    edges = np.unique(edges)
    if edges.size < cuts + 1:
        logger.warning(
            "quantile binning collapsed %d requested bins to %d (tied scores)", cuts, edges.size - 1
        )
    return edges


def assign_bins(probabilities: np.ndarray, edges: np.ndarray) -> np.ndarray:
    idx = np.searchsorted(edges, probabilities, side="right") - 1
    return np.clip(idx, 0, edges.size - 2)


def proportion_interval(
    events: int,
    count: int,
    confidence_level: float = 0.95,
    method: IntervalMethod | str = IntervalMethod.EXACT,
) -> Tuple[float, float]:
    method = IntervalMethod.parse(method)
    ci = stats.binomtest(int(events), int(count)).proportion_ci(
        confidence_level=confidence_level, method=method.value
    )
    return float(ci.low), float(ci.high)


def _column_bins(
    p: np.ndarray,
    is_event: np.ndarray,
    cuts: int,
    confidence_level: float,
    strategy: BinningStrategy,
    interval: IntervalMethod,
) -> Tuple[CalibrationBin, ...]:
    edges = bin_edges(p, cuts, strategy)
    idx = assign_bins(p, edges)
    n_bins = edges.size - 1
    counts = np.bincount(idx, minlength=n_bins)
    events = np.bincount(idx, weights=is_event.astype(float), minlength=n_bins)
    sums = np.bincount(idx, weights=p, minlength=n_bins)
    bins = []
    for b in range(n_bins):
        count = int(counts[b])
        hits = int(round(events[b]))
        if count == 0:
            rate = lo = hi = mean_p = UNDEFINED
        else:
            rate = hits / count
            lo, hi = proportion_interval(hits, count, confidence_level, interval)
            mean_p = float(sums[b]) / count
        bins.append(
            CalibrationBin(
                lower=float(edges[b]),
                upper=float(edges[b + 1]),
                count=count,
                events=hits,
                observed_rate=rate,
                ci_lower=lo,
                ci_upper=hi,
                mean_predicted=mean_p,
            )
        )
    return tuple(bins)


def calibration_curve(
    observed: Sequence[Hashable],
    scores: ScoreColumns,
    levels: LevelSet | Sequence[Hashable],
    positive: Hashable | None = None,
    cuts: int = DEFAULT_CUTS,
    confidence_level: float = 0.95,
    strategy: BinningStrategy | str = BinningStrategy.UNIFORM,
    interval: IntervalMethod | str = IntervalMethod.EXACT,
) -> Dict[str, Tuple[CalibrationBin, ...]]:
    """Observed event rate per probability bin, for each named score column."""

    if isinstance(cuts, bool) or not isinstance(cuts, (int, np.integer)) or cuts < 1:
        raise ValueError(f"cuts must be a positive integer, got {cuts!r}")
    if not 0.0 < confidence_level < 1.0:
        raise ValueError(f"confidence_level must lie in (0, 1), got {confidence_level}")
    strategy = BinningStrategy.parse(strategy)
    interval = IntervalMethod.parse(interval)
    columns = named_columns(scores)
    check_same_length(observed=observed, **{f"scores[{k!r}]": v for k, v in columns.items()})
    is_event, _ = event_indicator(observed, levels, positive)
    result = {}
    for name, col in columns.items():
        p = as_scores(col, f"scores[{name!r}]")
        if p.min() < 0.0 or p.max() > 1.0:
            raise InvalidProbabilityError(f"scores[{name!r}] must lie in [0, 1]")
        result[name] = _column_bins(p, is_event, int(cuts), confidence_level, strategy, interval)
        logger.debug(
            "calibration %s: %d bins, %d empty",
            name,
            len(result[name]),
            sum(b.is_empty for b in result[name]),
        )
    return result


def expected_calibration_error(bins: Sequence[CalibrationBin]) -> MaybeFloat:
    """Count-weighted mean gap between observed rate and mean predicted probability."""

    filled = [b for b in bins if not b.is_empty]
    total = sum(b.count for b in filled)
    if total == 0:
        return UNDEFINED
    gap = sum(b.count * abs(b.observed_rate - b.mean_predicted) for b in filled)
    return float(gap) / total


def calibration_frame(result: Dict[str, Sequence[CalibrationBin]]) -> pd.DataFrame:
    """Long-format table (one row per model and bin) for plotting."""

    rows = []
    for name, bins in result.items():
        for b in bins:
            row = b.to_dict()
            row["model"] = name
            rows.append(row)
    columns = ["model", "lower", "upper", "midpoint", "count", "events", "observed_rate",
               "ci_lower", "ci_upper", "mean_predicted"]
    return pd.DataFrame(rows, columns=columns)


__all__ = [
    "DEFAULT_CUTS",
    "BinningStrategy",
    "IntervalMethod",
    "CalibrationBin",
    "bin_edges",
    "assign_bins",
    "proportion_interval",
    "calibration_curve",
    "expected_calibration_error",
    "calibration_frame",
]
