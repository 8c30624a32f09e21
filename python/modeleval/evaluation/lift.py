"""Cumulative gain (lift) curves for one or more competing score columns."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Hashable, Mapping, Sequence, Union

import numpy as np
import pandas as pd

from ..errors import EmptyInputError, EvaluationError, check_same_length
from .levels import LevelSet, event_indicator
from .ranking import Curve, as_scores, threshold_sweep

logger = logging.getLogger(__name__)

ScoreColumns = Union[Mapping[str, Sequence[float]], pd.DataFrame]


def named_columns(scores: ScoreColumns) -> Dict[str, Sequence[float]]:
    """Score columns keyed by their string names, in input order."""

    columns: Dict[str, Sequence[float]] = {}
    for name, col in scores.items():
        key = str(name)
        if key in columns:
            raise EvaluationError(f"scores has more than one column named {key!r}")
        columns[key] = col
    if not columns:
        raise EmptyInputError("scores must contain at least one named column")
    return columns


def percent_grid(n_samples: int) -> np.ndarray:
    """Shared x-domain: percent of samples examined after 0, 1, ..., n samples."""

    return np.arange(n_samples + 1) * 100.0 / n_samples


@dataclass(frozen=True)
class LiftResult:
    curves: Dict[str, Curve]
    prevalence: float
    n_samples: int
    n_events: int

    @property
    def grid(self) -> np.ndarray:
        return percent_grid(self.n_samples)

    def reference(self) -> Curve:
        """No-skill diagonal: events found at the rate samples are examined."""

        x = self.grid
        return Curve(x, x.copy(), np.full(x.size, np.nan), "percent_sampled", "percent_found")

    def perfect(self) -> Curve:
        """Best achievable curve: every event ranked ahead of every non-event."""

        x = self.grid
        if self.n_events == 0:
            y = np.zeros_like(x)
        else:
            y = np.minimum(100.0, x / self.prevalence)
        return Curve(x, y, np.full(x.size, np.nan), "percent_sampled", "percent_found")

    def to_frame(self) -> pd.DataFrame:
        frames = []
        for name, curve in self.curves.items():
            frame = curve.to_frame()
            frame.insert(0, "model", name)
            frames.append(frame)
        return pd.concat(frames, ignore_index=True)


def _gain_curve(scores: np.ndarray, is_event: np.ndarray, n_events: int) -> Curve:
    n = scores.size
    sweep = threshold_sweep(scores, is_event)
    examined = np.r_[0, sweep.tp + sweep.fp]
    found = np.r_[0, sweep.tp].astype(float)
    grid = percent_grid(n)
    # a tied group is spread evenly across the samples it covers
    x_steps = examined * 100.0 / n
    if n_events:
        y = np.interp(grid, x_steps, found * 100.0 / n_events)
    else:
        y = np.zeros_like(grid)
    group_thresholds = np.r_[np.inf, sweep.thresholds]
    thresholds = group_thresholds[np.searchsorted(examined, np.arange(n + 1), side="left")]
    return Curve(grid, y, thresholds, "percent_sampled", "percent_found")


def lift_curve(
    observed: Sequence[Hashable],
    scores: ScoreColumns,
    levels: LevelSet | Sequence[Hashable],
    positive: Hashable | None = None,
) -> LiftResult:
    """Percent of events captured vs. percent of samples examined, by descending score.

    Every column's curve is evaluated on the same grid so the curves overlay
    directly. A dataset with no events yields flat curves at zero.
    """

    columns = named_columns(scores)
    n = check_same_length(observed=observed, **{f"scores[{k!r}]": v for k, v in columns.items()})
    is_event, event = event_indicator(observed, levels, positive)
    n_events = int(is_event.sum())
    if n_events == 0:
        logger.warning("no samples of event level %r; lift curves stay at zero", event)
    curves = {
        name: _gain_curve(as_scores(col, f"scores[{name!r}]"), is_event, n_events)
        for name, col in columns.items()
    }
    return LiftResult(curves=curves, prevalence=n_events / n, n_samples=n, n_events=n_events)


__all__ = ["LiftResult", "ScoreColumns", "named_columns", "percent_grid", "lift_curve"]
