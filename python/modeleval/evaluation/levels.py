"""Canonical ordered class levels and positive-level resolution."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Hashable, Iterable, Sequence

import numpy as np

from ..errors import InvalidLevelError

logger = logging.getLogger(__name__)


def _plain(value: Any) -> Any:
    # numpy scalars hash like their Python counterparts but print noisily
    return value.item() if isinstance(value, np.generic) else value


@dataclass(frozen=True)
class LevelSet:
    """Ordered, unique class levels. The first level is the default event class."""

    levels: tuple

    def __init__(self, levels: Iterable[Hashable]):
        values = tuple(_plain(v) for v in levels)
        if not values:
            raise InvalidLevelError("levels must contain at least one class level")
        if len(set(values)) != len(values):
            dupes = sorted({v for v in values if values.count(v) > 1}, key=str)
            raise InvalidLevelError(f"levels contains duplicates: {dupes}")
        object.__setattr__(self, "levels", values)

    @classmethod
    def infer(cls, *label_sequences: Iterable[Hashable]) -> "LevelSet":
        """Sorted union of the labels seen in ``label_sequences``."""

        seen = set()
        for seq in label_sequences:
            seen.update(_plain(v) for v in seq)
        try:
            ordered = sorted(seen)
        except TypeError:
            ordered = sorted(seen, key=str)
        return cls(ordered)

    def __len__(self) -> int:
        return len(self.levels)

    def __iter__(self):
        return iter(self.levels)

    def __contains__(self, level: object) -> bool:
        return _plain(level) in self.levels

    @property
    def is_binary(self) -> bool:
        return len(self.levels) == 2

    def index(self, level: Hashable) -> int:
        try:
            return self.levels.index(_plain(level))
        except ValueError:
            raise InvalidLevelError(
                f"Unknown level {level!r}; expected one of {list(self.levels)}"
            ) from None

    def require_binary(self) -> None:
        if len(self.levels) != 2:
            raise InvalidLevelError(
                f"Operation needs exactly 2 levels, got {len(self.levels)}: {list(self.levels)}"
            )

    def resolve_positive(self, positive: Hashable | None = None, binary: bool = False) -> Any:
        """Return the event level: ``positive`` if given, else the first level."""

        if binary and len(self.levels) < 2:
            raise InvalidLevelError(
                f"Binary statistics need at least 2 levels, got {list(self.levels)}"
            )
        if positive is None:
            return self.levels[0]
        if positive not in self:
            raise InvalidLevelError(
                f"positive={positive!r} is not one of the levels {list(self.levels)}"
            )
        return _plain(positive)

    def encode(self, labels: Iterable[Hashable], argument: str = "labels") -> np.ndarray:
        """Map labels to integer codes in level order."""

        lookup = {level: i for i, level in enumerate(self.levels)}
        codes = []
        unknown = set()
        for label in labels:
            code = lookup.get(_plain(label))
            if code is None:
                unknown.add(_plain(label))
                continue
            codes.append(code)
        if unknown:
            raise InvalidLevelError(
                f"{argument} contains labels outside the level set {list(self.levels)}: "
                f"{sorted(unknown, key=str)}"
            )
        return np.asarray(codes, dtype=np.int64)


def as_level_set(levels: LevelSet | Sequence[Hashable]) -> LevelSet:
    if isinstance(levels, LevelSet):
        return levels
    return LevelSet(levels)


def event_indicator(
    observed: Iterable[Hashable],
    levels: LevelSet | Sequence[Hashable],
    positive: Hashable | None = None,
    argument: str = "observed",
) -> tuple[np.ndarray, Any]:
    """Boolean event mask for ``observed`` and the resolved event level."""

    level_set = as_level_set(levels)
    event = level_set.resolve_positive(positive, binary=True)
    codes = level_set.encode(observed, argument=argument)
    logger.debug("event level %r over %d samples", event, codes.size)
    return codes == level_set.index(event), event


__all__ = ["LevelSet", "as_level_set", "event_indicator"]
