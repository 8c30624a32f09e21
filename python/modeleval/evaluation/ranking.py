"""ROC and precision-recall curves from a threshold sweep over event probabilities.

Samples are ranked by descending score and every distinct score is a
threshold. Tied samples always cross a threshold together, so a tie produces
one diagonal step rather than an optimistic staircase.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Dict, Hashable, Mapping, Sequence

import numpy as np
import pandas as pd

from ..errors import DegenerateInputError, InvalidProbabilityError, check_same_length
from .classification import binary_statistics
from .confusion import build_confusion_matrix
from .levels import LevelSet, as_level_set, event_indicator
from .logloss import ProbabilityTable, probability_matrix
from .undefined import MaybeFloat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Curve:
    """Ordered (x, y) points with the score threshold that produced each."""

    x: np.ndarray
    y: np.ndarray
    thresholds: np.ndarray
    x_label: str = "x"
    y_label: str = "y"

    def __len__(self) -> int:
        return int(self.x.size)

    def area(self) -> float:
        return trapezoid_area(self.x, self.y)

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(
            {self.x_label: self.x, self.y_label: self.y, "threshold": self.thresholds}
        )


@dataclass(frozen=True)
class ThresholdSweep:
    """Cumulative counts after each distinct score, highest score first."""

    thresholds: np.ndarray
    tp: np.ndarray
    fp: np.ndarray
    n_pos: int
    n_neg: int


def trapezoid_area(x: np.ndarray, y: np.ndarray) -> float:
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)
    if x.size < 2:
        return 0.0
    return float(np.sum(np.diff(x) * (y[1:] + y[:-1]) / 2.0))


def as_scores(values: Sequence[float], argument: str = "scores") -> np.ndarray:
    arr = np.asarray(values, dtype=float).reshape(-1)
    if not np.all(np.isfinite(arr)):
        raise InvalidProbabilityError(f"{argument} contains non-finite values")
    return arr


def threshold_sweep(scores: np.ndarray, is_event: np.ndarray) -> ThresholdSweep:
    """Group tied scores and accumulate true/false positives per group."""

    order = np.argsort(-scores, kind="mergesort")
    ranked = scores[order]
    events = is_event[order].astype(np.int64)
    group_ends = np.r_[np.flatnonzero(np.diff(ranked) != 0), ranked.size - 1]
    tp = np.cumsum(events)[group_ends]
    fp = group_ends + 1 - tp
    n_pos = int(events.sum())
    return ThresholdSweep(
        thresholds=ranked[group_ends],
        tp=tp,
        fp=fp,
        n_pos=n_pos,
        n_neg=int(ranked.size - n_pos),
    )


def _event_sweep(
    observed: Sequence[Hashable],
    event_probability: Sequence[float],
    levels: LevelSet | Sequence[Hashable],
    positive: Hashable | None,
) -> ThresholdSweep:
    n = check_same_length(observed=observed, event_probability=event_probability)
    is_event, event = event_indicator(observed, levels, positive)
    scores = as_scores(event_probability, "event_probability")
    n_pos = int(is_event.sum())
    if n_pos == 0 or n_pos == n:
        raise DegenerateInputError(
            f"observed has {n_pos} of {n} samples in event level {event!r}; "
            "ranking statistics need both events and non-events"
        )
    return threshold_sweep(scores, is_event)


def roc_curve(
    observed: Sequence[Hashable],
    event_probability: Sequence[float],
    levels: LevelSet | Sequence[Hashable],
    positive: Hashable | None = None,
) -> Curve:
    """False-positive rate vs. true-positive rate from (0, 0) to (1, 1)."""

    sweep = _event_sweep(observed, event_probability, levels, positive)
    return Curve(
        x=np.r_[0.0, sweep.fp / sweep.n_neg],
        y=np.r_[0.0, sweep.tp / sweep.n_pos],
        thresholds=np.r_[np.inf, sweep.thresholds],
        x_label="false_positive_rate",
        y_label="true_positive_rate",
    )


def pr_curve(
    observed: Sequence[Hashable],
    event_probability: Sequence[float],
    levels: LevelSet | Sequence[Hashable],
    positive: Hashable | None = None,
) -> Curve:
    """Recall vs. precision, sorted by recall.

    The recall-0 anchor reuses the precision of the lowest-recall point rather
    than 1.0.
    """

    sweep = _event_sweep(observed, event_probability, levels, positive)
    recall = sweep.tp / sweep.n_pos
    precision = sweep.tp / (sweep.tp + sweep.fp)
    return Curve(
        x=np.r_[0.0, recall],
        y=np.r_[precision[0], precision],
        thresholds=np.r_[np.inf, sweep.thresholds],
        x_label="recall",
        y_label="precision",
    )


def roc_auc(observed, event_probability, levels, positive=None) -> float:
    return roc_curve(observed, event_probability, levels, positive).area()


def pr_auc(observed, event_probability, levels, positive=None) -> float:
    return pr_curve(observed, event_probability, levels, positive).area()


def _summary_inputs(observed, probabilities, levels, positive, predicted):
    level_set = as_level_set(levels)
    event = level_set.resolve_positive(positive, binary=True)
    n = check_same_length(observed=observed)
    if not isinstance(probabilities, (Mapping, pd.DataFrame)) and np.ndim(probabilities) == 1:
        # a bare event-probability column for a two-level problem
        level_set.require_binary()
        p = as_scores(probabilities, "probabilities")
        mat = np.empty((p.size, 2), dtype=float)
        mat[:, level_set.index(event)] = p
        mat[:, 1 - level_set.index(event)] = 1.0 - p
        mat = probability_matrix(mat, level_set, n_samples=n)
    else:
        mat = probability_matrix(probabilities, level_set, n_samples=n)
    if predicted is None:
        # argmax keeps the first maximum, so ties go to the earlier level
        predicted = [level_set.levels[i] for i in mat.argmax(axis=1)]
    counts = build_confusion_matrix(predicted, observed, level_set).binary_counts(event)
    return level_set, event, mat[:, level_set.index(event)], counts


def roc_summary(
    observed: Sequence[Hashable],
    probabilities: ProbabilityTable | Sequence[float],
    levels: LevelSet | Sequence[Hashable],
    positive: Hashable | None = None,
    predicted: Sequence[Hashable] | None = None,
) -> Dict[str, MaybeFloat]:
    """Area under the ROC curve plus sensitivity and specificity of the class predictions.

    Without ``predicted`` the most probable level is taken as the prediction.
    """

    level_set, event, p_event, counts = _summary_inputs(
        observed, probabilities, levels, positive, predicted
    )
    st = binary_statistics(counts)
    return {
        "ROC": roc_auc(observed, p_event, level_set, event),
        "Sens": st.sensitivity,
        "Spec": st.specificity,
    }


def pr_summary(
    observed: Sequence[Hashable],
    probabilities: ProbabilityTable | Sequence[float],
    levels: LevelSet | Sequence[Hashable],
    positive: Hashable | None = None,
    predicted: Sequence[Hashable] | None = None,
    beta: float = 1.0,
) -> Dict[str, MaybeFloat]:
    """Precision-recall AUC plus precision, recall and F of the class predictions."""

    level_set, event, p_event, counts = _summary_inputs(
        observed, probabilities, levels, positive, predicted
    )
    st = binary_statistics(counts, beta=beta)
    return {
        "AUC": pr_auc(observed, p_event, level_set, event),
        "Precision": st.precision,
        "Recall": st.recall,
        "F": st.f_measure,
    }


def _one_vs_all_mean(
    area: Callable[..., float],
    observed: Sequence[Hashable],
    probabilities: ProbabilityTable,
    levels: LevelSet | Sequence[Hashable],
) -> float:
    level_set = as_level_set(levels)
    n = check_same_length(observed=observed)
    mat = probability_matrix(probabilities, level_set, n_samples=n)
    areas: list[float] = []
    for i, level in enumerate(level_set):
        try:
            areas.append(area(observed, mat[:, i], level_set, level))
        except DegenerateInputError:
            logger.warning("skipping level %r in one-vs-all average: degenerate", level)
    if not areas:
        raise DegenerateInputError("every level is degenerate; one-vs-all AUC is undefined")
    return float(np.mean(areas))


def multiclass_roc_auc(observed, probabilities, levels) -> float:
    """Mean one-vs-all ROC AUC over the levels that have both events and non-events."""

    return _one_vs_all_mean(roc_auc, observed, probabilities, levels)


def multiclass_pr_auc(observed, probabilities, levels) -> float:
    return _one_vs_all_mean(pr_auc, observed, probabilities, levels)


__all__ = [
    "Curve",
    "ThresholdSweep",
    "trapezoid_area",
    "threshold_sweep",
    "as_scores",
    "roc_curve",
    "pr_curve",
    "roc_auc",
    "pr_auc",
    "roc_summary",
    "pr_summary",
    "multiclass_roc_auc",
    "multiclass_pr_auc",
]
