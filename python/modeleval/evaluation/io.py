"""Shared loaders for stored predictions (CSV or NPZ) used by the CLIs."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, Sequence

import numpy as np
import pandas as pd

from ..errors import EmptyInputError, EvaluationError


def load_predictions(path: Path) -> pd.DataFrame:
    """Read a predictions table; NPZ arrays become columns named by their keys."""

    path = Path(path)
    if path.suffix.lower() == ".npz":
        with np.load(path, allow_pickle=False) as obj:
            df = pd.DataFrame({key: np.asarray(obj[key]).reshape(-1) for key in obj.files})
    else:
        df = pd.read_csv(path)
    if df.empty:
        raise EmptyInputError(f"No rows in {path}")
    return df


def require_columns(df: pd.DataFrame, columns: Sequence[str], source: str = "input") -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise EvaluationError(
            f"{source} is missing columns {missing}; available: {list(df.columns)}"
        )


def numeric_column(df: pd.DataFrame, column: str) -> np.ndarray:
    """Column ``column`` as a float array; non-numeric cells name the column."""

    require_columns(df, [column])
    try:
        return df[column].to_numpy(dtype=float)
    except (TypeError, ValueError) as exc:
        raise EvaluationError(f"column {column!r} is not numeric: {exc}") from exc


def score_columns(df: pd.DataFrame, columns: Sequence[str]) -> Dict[str, np.ndarray]:
    require_columns(df, columns)
    return {c: numeric_column(df, c) for c in columns}


__all__ = ["load_predictions", "require_columns", "numeric_column", "score_columns"]
