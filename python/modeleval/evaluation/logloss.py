"""Multi-class negative log-likelihood and probability-table validation."""

from __future__ import annotations

import logging
from typing import Any, Hashable, Mapping, Sequence, Union

import numpy as np
import pandas as pd

from ..errors import (
    InvalidLevelError,
    InvalidProbabilityError,
    LengthMismatchError,
    check_same_length,
)
from .levels import LevelSet, as_level_set

logger = logging.getLogger(__name__)

DEFAULT_EPS = 1e-15
DEFAULT_TOLERANCE = 1e-6

ProbabilityTable = Union[
    Mapping[Hashable, Sequence[float]], pd.DataFrame, np.ndarray, Sequence[Sequence[float]]
]


def _lookup_column(table: Any, level: Hashable) -> Any:
    if level in table:
        return table[level]
    # CSV headers arrive as strings even when labels are numeric
    if str(level) in table:
        return table[str(level)]
    raise InvalidLevelError(f"probabilities has no column for level {level!r}")


def probability_matrix(
    probabilities: ProbabilityTable,
    levels: LevelSet | Sequence[Hashable],
    n_samples: int | None = None,
) -> np.ndarray:
    """Normalize a probability table into an ``(n, K)`` float array in level order.

    Accepts a mapping or DataFrame keyed by level, or a 2-D array whose columns
    already follow the level order. Values must be finite and inside [0, 1].
    """

    level_set = as_level_set(levels)
    if isinstance(probabilities, (Mapping, pd.DataFrame)):
        columns = [
            np.asarray(_lookup_column(probabilities, level), dtype=float).reshape(-1)
            for level in level_set
        ]
        check_same_length(**{f"probabilities[{lvl!r}]": col for lvl, col in zip(level_set, columns)})
        mat = np.column_stack(columns)
    else:
        mat = np.asarray(probabilities, dtype=float)
        if mat.ndim != 2:
            raise InvalidProbabilityError(
                f"probabilities must be 2-D (samples x levels), got shape {mat.shape}"
            )
        if mat.shape[1] != len(level_set):
            raise InvalidLevelError(
                f"probabilities has {mat.shape[1]} columns for {len(level_set)} levels"
            )
    if n_samples is not None and mat.shape[0] != n_samples:
        raise LengthMismatchError(
            f"probabilities has {mat.shape[0]} rows but {n_samples} samples were observed"
        )
    if not np.all(np.isfinite(mat)):
        raise InvalidProbabilityError("probabilities contains non-finite values")
    if mat.size and (mat.min() < 0.0 or mat.max() > 1.0):
        raise InvalidProbabilityError("probabilities must lie in [0, 1]")
    return mat


def check_row_sums(matrix: np.ndarray, tolerance: float = DEFAULT_TOLERANCE) -> None:
    sums = matrix.sum(axis=1)
    bad = np.flatnonzero(np.abs(sums - 1.0) > tolerance)
    if bad.size:
        raise InvalidProbabilityError(
            f"probability rows must sum to 1 (tolerance {tolerance}); "
            f"{bad.size} rows do not, first at index {int(bad[0])} (sum={sums[bad[0]]:.6g})"
        )


def log_loss(
    observed: Sequence[Hashable],
    probabilities: ProbabilityTable,
    levels: LevelSet | Sequence[Hashable],
    eps: float = DEFAULT_EPS,
    tolerance: float = DEFAULT_TOLERANCE,
) -> float:
    """``-mean(log p)`` of the probability assigned to each sample's observed level.

    Probabilities are clamped to ``[eps, 1 - eps]`` so an exact zero on the true
    class gives a large but finite loss.
    """

    if not 0.0 < eps < 0.5:
        raise ValueError(f"eps must lie in (0, 0.5), got {eps}")
    level_set = as_level_set(levels)
    n = check_same_length(observed=observed)
    codes = level_set.encode(observed, argument="observed")
    mat = probability_matrix(probabilities, level_set, n_samples=n)
    check_row_sums(mat, tolerance)
    p_true = np.clip(mat[np.arange(n), codes], eps, 1.0 - eps)
    loss = float(-np.mean(np.log(p_true)))
    logger.debug("log loss %.6f over %d samples", loss, n)
    return loss


__all__ = [
    "DEFAULT_EPS",
    "DEFAULT_TOLERANCE",
    "ProbabilityTable",
    "probability_matrix",
    "check_row_sums",
    "log_loss",
]
