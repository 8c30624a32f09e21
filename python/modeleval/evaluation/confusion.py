"""Cross-tabulation of predicted vs. observed class labels.

Rows are predicted levels, columns are observed (reference) levels.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Sequence

import numpy as np
import pandas as pd

from ..errors import check_same_length
from .levels import LevelSet, as_level_set

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BinaryCounts:
    """One-vs-all collapse of a confusion matrix around an event level."""

    tp: int
    fp: int
    fn: int
    tn: int

    @property
    def total(self) -> int:
        return self.tp + self.fp + self.fn + self.tn


@dataclass(frozen=True)
class ConfusionMatrix:
    """K x K count matrix with marginal totals."""

    matrix: np.ndarray
    levels: LevelSet

    @property
    def total(self) -> int:
        return int(self.matrix.sum())

    @property
    def predicted_totals(self) -> np.ndarray:
        return self.matrix.sum(axis=1)

    @property
    def observed_totals(self) -> np.ndarray:
        return self.matrix.sum(axis=0)

    @property
    def correct(self) -> int:
        return int(np.trace(self.matrix))

    def count(self, predicted: Hashable, observed: Hashable) -> int:
        return int(self.matrix[self.levels.index(predicted), self.levels.index(observed)])

    def binary_counts(self, positive: Hashable) -> BinaryCounts:
        i = self.levels.index(positive)
        tp = int(self.matrix[i, i])
        fp = int(self.predicted_totals[i]) - tp
        fn = int(self.observed_totals[i]) - tp
        tn = self.total - tp - fp - fn
        return BinaryCounts(tp=tp, fp=fp, fn=fn, tn=tn)

    def to_frame(self) -> pd.DataFrame:
        labels = list(self.levels)
        return pd.DataFrame(
            self.matrix,
            index=pd.Index(labels, name="Prediction"),
            columns=pd.Index(labels, name="Reference"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "levels": list(self.levels),
            "matrix": self.matrix.tolist(),
            "predicted_totals": self.predicted_totals.tolist(),
            "observed_totals": self.observed_totals.tolist(),
            "total": self.total,
        }


def build_confusion_matrix(
    predicted: Sequence[Hashable],
    observed: Sequence[Hashable],
    levels: LevelSet | Sequence[Hashable],
) -> ConfusionMatrix:
    """Count samples per (predicted, observed) level pair."""

    check_same_length(predicted=predicted, observed=observed)
    level_set = as_level_set(levels)
    pred_codes = level_set.encode(predicted, argument="predicted")
    obs_codes = level_set.encode(observed, argument="observed")
    k = len(level_set)
    flat = np.bincount(pred_codes * k + obs_codes, minlength=k * k)
    matrix = flat.reshape(k, k).astype(np.int64)
    logger.debug("confusion matrix over %d samples and %d levels", pred_codes.size, k)
    return ConfusionMatrix(matrix=matrix, levels=level_set)


__all__ = ["BinaryCounts", "ConfusionMatrix", "build_confusion_matrix"]
