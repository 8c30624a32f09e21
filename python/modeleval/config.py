"""Configuration schemas for the modeleval command-line tools.

Engines never read these objects; the CLIs unpack them into explicit keyword
arguments for every call.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Literal


@dataclass(slots=True)
class ClassificationConfig:
    """Confusion-matrix statistics options."""

    positive: Any = None
    mode: Literal["sens_spec", "prec_recall", "everything"] = "sens_spec"
    beta: float = 1.0
    confidence_level: float = 0.95


@dataclass(slots=True)
class ProbabilityConfig:
    """Probability-table handling for log-loss."""

    eps: float = 1e-15
    tolerance: float = 1e-6


@dataclass(slots=True)
class CalibrationConfig:
    """Calibration binning and interval options."""

    cuts: int = 11
    confidence_level: float = 0.95
    strategy: Literal["uniform", "quantile"] = "uniform"
    interval: Literal["exact", "wilson"] = "exact"


@dataclass(slots=True)
class EvaluationConfig:
    """Composite configuration consumed by ``modeleval.cli``."""

    observed_col: str = "obs"
    predicted_col: str = "pred"
    probability_cols: List[str] = field(default_factory=list)
    levels: List[Any] | None = None
    classification: ClassificationConfig = field(default_factory=ClassificationConfig)
    probability: ProbabilityConfig = field(default_factory=ProbabilityConfig)
    calibration: CalibrationConfig = field(default_factory=CalibrationConfig)


def load_from_dict(config_dict: Dict) -> EvaluationConfig:
    """Instantiate an :class:`EvaluationConfig` from a raw dictionary."""

    levels = config_dict.get("levels")
    return EvaluationConfig(
        observed_col=str(config_dict.get("observed_col", "obs")),
        predicted_col=str(config_dict.get("predicted_col", "pred")),
        probability_cols=list(config_dict.get("probability_cols", [])),
        levels=list(levels) if levels is not None else None,
        classification=ClassificationConfig(**config_dict.get("classification", {})),
        probability=ProbabilityConfig(**config_dict.get("probability", {})),
        calibration=CalibrationConfig(**config_dict.get("calibration", {})),
    )


def load_config(path: Path) -> EvaluationConfig:
    with open(path, "r", encoding="utf-8") as f:
        return load_from_dict(json.load(f))


__all__ = [
    "ClassificationConfig",
    "ProbabilityConfig",
    "CalibrationConfig",
    "EvaluationConfig",
    "load_from_dict",
    "load_config",
]
