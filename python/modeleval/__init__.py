"""Top-level package for modeleval, a model performance evaluation toolkit.

This package provides tooling for:

* confusion matrices and the classification statistics derived from them;
* regression error summaries (RMSE, correlation R-squared, MAE);
* ROC and precision-recall curves, their areas, and multi-class log-loss; and
* lift and calibration curve data for comparing competing score columns.

Every routine is a pure function over in-memory predictions; fitting models,
resampling and plotting are left to the caller.
"""

from importlib import import_module
from typing import Any

from .evaluation import (
    UNDEFINED,
    calibration_curve,
    classification_summary,
    confusion_matrix,
    lift_curve,
    log_loss,
    pr_summary,
    regression_summary,
    roc_summary,
)

__version__ = "0.1.0"

_PACKAGE_COMPONENTS = {
    "evaluation": ".evaluation",
    "config": ".config",
    "errors": ".errors",
    "utils": ".utils",
    "cli": ".cli",
}


def load_component(name: str) -> Any:
    """Dynamically import a package component."""

    try:
        module_path = _PACKAGE_COMPONENTS[name]
    except KeyError as exc:
        raise KeyError(
            f"Unknown component '{name}'. Available keys: {sorted(_PACKAGE_COMPONENTS)}"
        ) from exc

    return import_module(module_path, package=__name__)


__all__ = [
    "load_component",
    "__version__",
    "UNDEFINED",
    "regression_summary",
    "confusion_matrix",
    "classification_summary",
    "roc_summary",
    "pr_summary",
    "log_loss",
    "lift_curve",
    "calibration_curve",
]
