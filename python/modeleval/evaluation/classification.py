"""Confusion-matrix derived classification statistics.

Binary formulas live in :func:`binary_statistics`; the multi-class case reuses
them once per level through a one-vs-all collapse of the matrix, while accuracy
and Kappa are always taken from the full matrix.
"""

from __future__ import annotations

import enum
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Hashable, List, Sequence

from scipy import stats

from ..errors import check_same_length
from .confusion import BinaryCounts, ConfusionMatrix, build_confusion_matrix
from .levels import LevelSet, as_level_set
from .undefined import UNDEFINED, MaybeFloat, defined_mean, export_value, safe_ratio

logger = logging.getLogger(__name__)


class SummaryMode(enum.Enum):
    """Which bundle of per-class statistics to report."""

    SENS_SPEC = "sens_spec"
    PREC_RECALL = "prec_recall"
    EVERYTHING = "everything"

    @classmethod
    def parse(cls, value: "SummaryMode | str") -> "SummaryMode":
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise ValueError(
                f"Unknown mode {value!r}; expected one of {[m.value for m in cls]}"
            ) from None


# output key -> BinaryStatistics attribute
_STAT_KEYS = {
    "Sensitivity": "sensitivity",
    "Specificity": "specificity",
    "Pos_Pred_Value": "pos_pred_value",
    "Neg_Pred_Value": "neg_pred_value",
    "Precision": "precision",
    "Recall": "recall",
    "F": "f_measure",
    "Prevalence": "prevalence",
    "Detection_Rate": "detection_rate",
    "Detection_Prevalence": "detection_prevalence",
    "Balanced_Accuracy": "balanced_accuracy",
}

_SHARED = ["Prevalence", "Detection_Rate", "Detection_Prevalence", "Balanced_Accuracy"]

_MODE_KEYS = {
    SummaryMode.SENS_SPEC: ["Sensitivity", "Specificity", "Pos_Pred_Value", "Neg_Pred_Value"]
    + _SHARED,
    SummaryMode.PREC_RECALL: ["Precision", "Recall", "F"] + _SHARED,
    SummaryMode.EVERYTHING: list(_STAT_KEYS),
}


@dataclass(frozen=True)
class BinaryStatistics:
    """Statistics for one event level against everything else."""

    sensitivity: MaybeFloat
    specificity: MaybeFloat
    pos_pred_value: MaybeFloat
    neg_pred_value: MaybeFloat
    precision: MaybeFloat
    recall: MaybeFloat
    f_measure: MaybeFloat
    prevalence: MaybeFloat
    detection_rate: MaybeFloat
    detection_prevalence: MaybeFloat
    balanced_accuracy: MaybeFloat

    def to_dict(self, mode: SummaryMode | str = SummaryMode.EVERYTHING) -> Dict[str, MaybeFloat]:
        keys = _MODE_KEYS[SummaryMode.parse(mode)]
        return {key: getattr(self, _STAT_KEYS[key]) for key in keys}


@dataclass(frozen=True)
class OverallStatistics:
    """Whole-matrix agreement statistics."""

    accuracy: float
    kappa: MaybeFloat
    accuracy_lower: float
    accuracy_upper: float
    no_information_rate: float
    accuracy_p_value: float
    mcnemar_p_value: MaybeFloat

    def to_dict(self) -> Dict[str, MaybeFloat]:
        return {
            "Accuracy": self.accuracy,
            "Kappa": self.kappa,
            "AccuracyLower": self.accuracy_lower,
            "AccuracyUpper": self.accuracy_upper,
            "AccuracyNull": self.no_information_rate,
            "AccuracyPValue": self.accuracy_p_value,
            "McnemarPValue": self.mcnemar_p_value,
        }


def f_measure(precision: MaybeFloat, recall: MaybeFloat, beta: float = 1.0) -> MaybeFloat:
    """Weighted harmonic mean of precision and recall."""

    if precision is UNDEFINED or recall is UNDEFINED:
        return UNDEFINED
    b2 = beta * beta
    return safe_ratio((1.0 + b2) * precision * recall, b2 * precision + recall)


def binary_statistics(counts: BinaryCounts, beta: float = 1.0) -> BinaryStatistics:
    if beta <= 0:
        raise ValueError(f"beta must be positive, got {beta}")
    tp, fp, fn, tn = counts.tp, counts.fp, counts.fn, counts.tn
    n = counts.total
    sens = safe_ratio(tp, tp + fn)
    spec = safe_ratio(tn, tn + fp)
    ppv = safe_ratio(tp, tp + fp)
    npv = safe_ratio(tn, tn + fn)
    if sens is UNDEFINED or spec is UNDEFINED:
        balanced = UNDEFINED
    else:
        balanced = (sens + spec) / 2.0
    return BinaryStatistics(
        sensitivity=sens,
        specificity=spec,
        pos_pred_value=ppv,
        neg_pred_value=npv,
        precision=ppv,
        recall=sens,
        f_measure=f_measure(ppv, sens, beta),
        prevalence=safe_ratio(tp + fn, n),
        detection_rate=safe_ratio(tp, n),
        detection_prevalence=safe_ratio(tp + fp, n),
        balanced_accuracy=balanced,
    )


def cohen_kappa(table: ConfusionMatrix) -> MaybeFloat:
    n = float(table.total)
    observed = table.correct / n
    expected = float((table.predicted_totals * table.observed_totals).sum()) / (n * n)
    return safe_ratio(observed - expected, 1.0 - expected)


def _mcnemar_p_value(table: ConfusionMatrix) -> MaybeFloat:
    if len(table.levels) != 2:
        return UNDEFINED
    b = int(table.matrix[0, 1])
    c = int(table.matrix[1, 0])
    if b + c == 0:
        return UNDEFINED
    statistic = (abs(b - c) - 1.0) ** 2 / (b + c)
    return float(stats.chi2.sf(statistic, df=1))


def overall_statistics(table: ConfusionMatrix, confidence_level: float = 0.95) -> OverallStatistics:
    """Accuracy with its exact interval, Kappa, and the no-information-rate test."""

    if not 0.0 < confidence_level < 1.0:
        raise ValueError(f"confidence_level must lie in (0, 1), got {confidence_level}")
    n = table.total
    correct = table.correct
    nir = float(table.observed_totals.max()) / n
    test = stats.binomtest(correct, n)
    ci = test.proportion_ci(confidence_level=confidence_level, method="exact")
    p_value = stats.binomtest(correct, n, p=nir, alternative="greater").pvalue
    return OverallStatistics(
        accuracy=correct / n,
        kappa=cohen_kappa(table),
        accuracy_lower=float(ci.low),
        accuracy_upper=float(ci.high),
        no_information_rate=nir,
        accuracy_p_value=float(p_value),
        mcnemar_p_value=_mcnemar_p_value(table),
    )


@dataclass(frozen=True)
class ClassificationReport:
    """Confusion matrix plus overall and per-class statistics."""

    table: ConfusionMatrix
    positive: Any
    overall: OverallStatistics
    by_class: Dict[Any, BinaryStatistics]
    mode: SummaryMode

    def to_dict(self) -> Dict[str, Any]:
        return {
            "table": self.table.to_dict(),
            "positive": self.positive,
            "mode": self.mode.value,
            "overall": {k: export_value(v) for k, v in self.overall.to_dict().items()},
            "by_class": {
                str(level): {k: export_value(v) for k, v in st.to_dict(self.mode).items()}
                for level, st in self.by_class.items()
            },
        }


def confusion_matrix(
    predicted: Sequence[Hashable],
    observed: Sequence[Hashable],
    levels: LevelSet | Sequence[Hashable],
    positive: Hashable | None = None,
    mode: SummaryMode | str = SummaryMode.SENS_SPEC,
    beta: float = 1.0,
    confidence_level: float = 0.95,
) -> ClassificationReport:
    """Build the matrix and derive every statistic.

    With two levels only ``positive`` (default: first level) gets a row in
    ``by_class``; with more, each level is treated as the event in turn.
    """

    level_set = as_level_set(levels)
    mode = SummaryMode.parse(mode)
    event = level_set.resolve_positive(positive)
    table = build_confusion_matrix(predicted, observed, level_set)
    if level_set.is_binary:
        targets: List[Any] = [event]
        report_positive = event
    else:
        targets = list(level_set)
        report_positive = None
    by_class = {level: binary_statistics(table.binary_counts(level), beta) for level in targets}
    overall = overall_statistics(table, confidence_level)
    logger.debug(
        "classification report: n=%d, k=%d, accuracy=%.4f", table.total, len(level_set), overall.accuracy
    )
    return ClassificationReport(
        table=table, positive=report_positive, overall=overall, by_class=by_class, mode=mode
    )


def classification_summary(
    predicted: Sequence[Hashable],
    observed: Sequence[Hashable],
    levels: LevelSet | Sequence[Hashable],
    positive: Hashable | None = None,
    mode: SummaryMode | str = SummaryMode.SENS_SPEC,
    beta: float = 1.0,
) -> Dict[str, MaybeFloat]:
    """Flat mapping of statistic name to value (or ``UNDEFINED``).

    Multi-class results carry ``"<Stat>:<level>"`` entries and ``"Mean_<Stat>"``
    averages over the levels where the statistic is defined.
    """

    level_set = as_level_set(levels)
    mode = SummaryMode.parse(mode)
    report = confusion_matrix(predicted, observed, level_set, positive, mode=mode, beta=beta)
    out: Dict[str, MaybeFloat] = {
        "Accuracy": report.overall.accuracy,
        "Kappa": report.overall.kappa,
    }
    if level_set.is_binary:
        out.update(report.by_class[report.positive].to_dict(mode))
        return out
    per_level = {level: st.to_dict(mode) for level, st in report.by_class.items()}
    for key in _MODE_KEYS[mode]:
        out[f"Mean_{key}"] = defined_mean(row[key] for row in per_level.values())
    for level, row in per_level.items():
        for key, value in row.items():
            out[f"{key}:{level}"] = value
    return out


def macro_average(by_class: Dict[Any, BinaryStatistics]) -> Dict[str, MaybeFloat]:
    """``Mean_<Stat>`` over levels for every statistic."""

    return {
        f"Mean_{key}": defined_mean(getattr(st, attr) for st in by_class.values())
        for key, attr in _STAT_KEYS.items()
    }


def accuracy(predicted: Sequence[Hashable], observed: Sequence[Hashable]) -> float:
    """Fraction of exact matches, computed without a level set."""

    n = check_same_length(predicted=predicted, observed=observed)
    return math.fsum(1.0 for p, o in zip(predicted, observed) if p == o) / n


__all__ = [
    "SummaryMode",
    "BinaryStatistics",
    "OverallStatistics",
    "ClassificationReport",
    "binary_statistics",
    "overall_statistics",
    "cohen_kappa",
    "f_measure",
    "confusion_matrix",
    "classification_summary",
    "macro_average",
    "accuracy",
]
