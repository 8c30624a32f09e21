"""Compact per-model summaries for resampling loops."""

from __future__ import annotations

from typing import Dict, Hashable, Sequence

import numpy as np

from ..errors import check_same_length
from .classification import binary_statistics, cohen_kappa, macro_average
from .confusion import build_confusion_matrix
from .levels import LevelSet, as_level_set
from .logloss import (
    DEFAULT_EPS,
    DEFAULT_TOLERANCE,
    ProbabilityTable,
    check_row_sums,
    log_loss,
    probability_matrix,
)
from .ranking import multiclass_pr_auc, multiclass_roc_auc
from .regression import regression_summary
from .undefined import MaybeFloat


def default_summary(
    observed: Sequence,
    predicted: Sequence,
    levels: LevelSet | Sequence[Hashable] | None = None,
) -> Dict[str, MaybeFloat]:
    """RMSE/Rsquared/MAE for numeric outcomes, Accuracy/Kappa when ``levels`` is given."""

    if levels is None:
        return regression_summary(observed, predicted).to_dict()
    table = build_confusion_matrix(predicted, observed, levels)
    return {"Accuracy": table.correct / table.total, "Kappa": cohen_kappa(table)}


def multi_class_summary(
    observed: Sequence[Hashable],
    predicted: Sequence[Hashable] | None,
    probabilities: ProbabilityTable,
    levels: LevelSet | Sequence[Hashable],
    beta: float = 1.0,
    eps: float = DEFAULT_EPS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> Dict[str, MaybeFloat]:
    """Log-loss, one-vs-all AUCs, accuracy, Kappa and macro-averaged class statistics."""

    level_set = as_level_set(levels)
    n = check_same_length(observed=observed)
    mat = probability_matrix(probabilities, level_set, n_samples=n)
    check_row_sums(mat, tolerance)
    if predicted is None:
        predicted = [level_set.levels[i] for i in np.argmax(mat, axis=1)]
    table = build_confusion_matrix(predicted, observed, level_set)
    by_class = {
        level: binary_statistics(table.binary_counts(level), beta=beta) for level in level_set
    }
    out: Dict[str, MaybeFloat] = {
        "logLoss": log_loss(observed, mat, level_set, eps=eps, tolerance=tolerance),
        "AUC": multiclass_roc_auc(observed, mat, level_set),
        "prAUC": multiclass_pr_auc(observed, mat, level_set),
        "Accuracy": table.correct / table.total,
        "Kappa": cohen_kappa(table),
    }
    out.update(macro_average(by_class))
    return out


__all__ = ["default_summary", "multi_class_summary"]
