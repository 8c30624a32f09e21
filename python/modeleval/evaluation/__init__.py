"""Evaluation engines: confusion-matrix statistics, regression error, ranking curves,
log-loss, lift and calibration."""

from .undefined import UNDEFINED, is_undefined
from .levels import LevelSet
from .confusion import ConfusionMatrix, build_confusion_matrix
from .classification import SummaryMode, classification_summary, confusion_matrix
from .regression import regression_summary, r_squared
from .ranking import Curve, pr_curve, pr_summary, roc_curve, roc_summary
from .logloss import log_loss
from .lift import LiftResult, lift_curve
from .calibration import BinningStrategy, CalibrationBin, IntervalMethod, calibration_curve
from .summaries import default_summary, multi_class_summary

__all__ = [
    "UNDEFINED",
    "is_undefined",
    "LevelSet",
    "ConfusionMatrix",
    "build_confusion_matrix",
    "SummaryMode",
    "classification_summary",
    "confusion_matrix",
    "regression_summary",
    "r_squared",
    "Curve",
    "roc_curve",
    "pr_curve",
    "roc_summary",
    "pr_summary",
    "log_loss",
    "LiftResult",
    "lift_curve",
    "BinningStrategy",
    "CalibrationBin",
    "IntervalMethod",
    "calibration_curve",
    "default_summary",
    "multi_class_summary",
]
