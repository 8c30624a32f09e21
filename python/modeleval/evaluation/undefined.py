"""Explicit marker for statistics whose denominator is zero.

``UNDEFINED`` is distinct from ``0.0`` and from ``float("nan")`` so callers that
aggregate across folds can decide how to treat it (usually: leave it out).
"""

from __future__ import annotations

import math
from typing import Any, Iterable, Union

import numpy as np


class _Undefined:
    _instance: "_Undefined | None" = None

    def __new__(cls) -> "_Undefined":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNDEFINED"

    def __bool__(self) -> bool:
        return False

    def __reduce__(self):
        return "UNDEFINED"


UNDEFINED = _Undefined()

MaybeFloat = Union[float, _Undefined]


def is_undefined(value: Any) -> bool:
    return value is UNDEFINED


def safe_ratio(numerator: float, denominator: float) -> MaybeFloat:
    """``numerator / denominator`` or ``UNDEFINED`` when the denominator is zero."""

    if denominator == 0:
        return UNDEFINED
    return float(numerator) / float(denominator)


def defined_mean(values: Iterable[MaybeFloat]) -> MaybeFloat:
    """Mean over the defined entries; ``UNDEFINED`` if there are none."""

    kept = [float(v) for v in values if v is not UNDEFINED]
    if not kept:
        return UNDEFINED
    return math.fsum(kept) / len(kept)


def export_value(value: Any) -> Any:
    """Render a statistic for JSON/pandas output (``UNDEFINED`` becomes ``None``)."""

    if value is UNDEFINED:
        return None
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, (float, np.floating)):
        return float(value)
    return value


__all__ = ["UNDEFINED", "MaybeFloat", "is_undefined", "safe_ratio", "defined_mean", "export_value"]
