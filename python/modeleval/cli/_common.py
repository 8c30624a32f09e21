"""Argument and IO plumbing shared by the modeleval CLIs."""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, List, Sequence

import pandas as pd

from ..config import EvaluationConfig, load_config
from ..evaluation.io import load_predictions, require_columns
from ..evaluation.levels import LevelSet
from ..utils.logging import configure_logging, level_from_verbosity

logger = logging.getLogger(__name__)


def add_input_args(ap: argparse.ArgumentParser) -> None:
    g = ap.add_mutually_exclusive_group(required=True)
    g.add_argument("--input", type=Path, help="CSV file with observed values and predictions")
    g.add_argument("--npz", type=Path, help="NPZ file whose arrays are named columns")
    ap.add_argument("--config", type=Path, default=None, help="JSON evaluation config")
    ap.add_argument("--obs-col", default=None, help="Observed outcome column")
    ap.add_argument("--levels", nargs="+", default=None, help="Class levels in order")
    ap.add_argument("--positive", default=None, help="Event level (default: first level)")
    ap.add_argument("--output", type=Path, default=None, help="Optional output path")
    ap.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity")


def setup(args: argparse.Namespace) -> EvaluationConfig:
    configure_logging(level=level_from_verbosity(args.verbose))
    cfg = load_config(args.config) if args.config is not None else EvaluationConfig()
    logger.debug("config: %s", cfg)
    return cfg


def read_frame(args: argparse.Namespace) -> pd.DataFrame:
    path = args.input if args.input is not None else args.npz
    df = load_predictions(path)
    logger.info("loaded %d rows from %s", len(df), path)
    return df


def label_column(df: pd.DataFrame, column: str) -> List[str]:
    """Labels as strings so they compare equal to levels given on the command line."""

    require_columns(df, [column])
    return df[column].astype(str).tolist()


def resolve_levels(
    cli_levels: Sequence[str] | None,
    cfg: EvaluationConfig,
    *label_lists: Sequence[str],
) -> LevelSet:
    if cli_levels:
        return LevelSet([str(v) for v in cli_levels])
    if cfg.levels:
        return LevelSet([str(v) for v in cfg.levels])
    return LevelSet.infer(*label_lists)


def pick(cli_value: Any, cfg_value: Any) -> Any:
    return cfg_value if cli_value is None else cli_value


def emit_json(payload: Any, output: Path | None) -> None:
    text = json.dumps(payload, indent=2)
    if output is not None:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")
        logger.info("wrote %s", output)
    else:
        print(text)


__all__ = [
    "add_input_args",
    "setup",
    "read_frame",
    "label_column",
    "resolve_levels",
    "pick",
    "emit_json",
]
