"""Typed input-validation errors raised by the evaluation engines."""

from __future__ import annotations


class EvaluationError(ValueError):
    """Base class for malformed evaluation inputs."""


class InvalidLevelError(EvaluationError):
    """Unrecognized, duplicated or insufficient class levels."""


class LengthMismatchError(EvaluationError):
    """Parallel sequences that should be aligned have different lengths."""


class EmptyInputError(EvaluationError):
    """No samples (or no score columns) were supplied."""


class ZeroVarianceError(EvaluationError):
    """A constant sequence makes a correlation-based statistic undefined."""


class DegenerateInputError(EvaluationError):
    """The event class is absent (or is every sample), so a ranking statistic is undefined."""


class InvalidProbabilityError(EvaluationError):
    """Probabilities outside [0, 1], non-finite scores, or rows not summing to one."""


def check_same_length(**sequences) -> int:
    """Return the common length of the named sequences or raise.

    Raises ``EmptyInputError`` when the common length is zero.
    """

    lengths = {name: len(seq) for name, seq in sequences.items()}
    if len(set(lengths.values())) > 1:
        detail = ", ".join(f"{name}={n}" for name, n in lengths.items())
        raise LengthMismatchError(f"Sequences must have equal length ({detail})")
    n = next(iter(lengths.values()), 0)
    if n == 0:
        raise EmptyInputError(f"No samples supplied for {', '.join(lengths)}")
    return n


__all__ = [
    "EvaluationError",
    "InvalidLevelError",
    "LengthMismatchError",
    "EmptyInputError",
    "ZeroVarianceError",
    "DegenerateInputError",
    "InvalidProbabilityError",
    "check_same_length",
]
