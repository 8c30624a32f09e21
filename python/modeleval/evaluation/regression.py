"""RMSE, MAE and correlation-based R-squared for numeric predictions."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Sequence

import numpy as np

from ..errors import EvaluationError, ZeroVarianceError, check_same_length
from .undefined import UNDEFINED, MaybeFloat

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegressionSummary:
    rmse: float
    r_squared: MaybeFloat
    mae: float

    def to_dict(self) -> Dict[str, MaybeFloat]:
        return {"RMSE": self.rmse, "Rsquared": self.r_squared, "MAE": self.mae}


def _as_pair(observed: Sequence[float], predicted: Sequence[float]) -> tuple[np.ndarray, np.ndarray]:
    check_same_length(observed=observed, predicted=predicted)
    obs = np.asarray(observed, dtype=float).reshape(-1)
    pred = np.asarray(predicted, dtype=float).reshape(-1)
    for name, arr in (("observed", obs), ("predicted", pred)):
        if not np.all(np.isfinite(arr)):
            raise EvaluationError(f"{name} contains non-finite values")
    return obs, pred


def r_squared(observed: Sequence[float], predicted: Sequence[float]) -> float:
    """Squared Pearson correlation between ``observed`` and ``predicted``.

    This is not ``1 - SS_res / SS_tot``: the squared correlation stays in
    [0, 1] even for models worse than the mean, which is what resampled model
    comparisons built on it expect.
    """

    obs, pred = _as_pair(observed, predicted)
    dx = obs - obs.mean()
    dy = pred - pred.mean()
    sxx = float(np.dot(dx, dx))
    syy = float(np.dot(dy, dy))
    if sxx == 0.0:
        raise ZeroVarianceError("observed has zero variance; correlation is undefined")
    if syy == 0.0:
        raise ZeroVarianceError("predicted has zero variance; correlation is undefined")
    r = float(np.dot(dx, dy)) / math.sqrt(sxx * syy)
    return min(1.0, max(0.0, r * r))


def regression_summary(observed: Sequence[float], predicted: Sequence[float]) -> RegressionSummary:
    """RMSE, R-squared and MAE; a constant input leaves R-squared ``UNDEFINED``."""

    obs, pred = _as_pair(observed, predicted)
    resid = obs - pred
    rmse = math.sqrt(float(np.mean(resid * resid)))
    mae = float(np.mean(np.abs(resid)))
    try:
        rsq: MaybeFloat = r_squared(obs, pred)
    except ZeroVarianceError as exc:
        logger.debug("Rsquared undefined: %s", exc)
        rsq = UNDEFINED
    return RegressionSummary(rmse=rmse, r_squared=rsq, mae=mae)


__all__ = ["RegressionSummary", "regression_summary", "r_squared"]
