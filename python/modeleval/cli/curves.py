"""CLI: export ROC, precision-recall, lift or calibration curve data for plotting.

Run as:
  python -m modeleval.cli.curves --kind lift --input preds.csv --obs-col obs \
      --score-cols model_a model_b --positive yes --format csv --output lift.csv
  python -m modeleval.cli.curves --kind calibration --input preds.csv --obs-col obs \
      --score-cols model_a --positive yes --cuts 10 --interval wilson

Rows are long format (one ``model`` column) so several models overlay directly.
"""

from __future__ import annotations

import argparse
import json
import logging
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from ..errors import EvaluationError
from ..evaluation.calibration import (
    BinningStrategy,
    IntervalMethod,
    calibration_curve,
    calibration_frame,
    expected_calibration_error,
)
from ..evaluation.io import score_columns
from ..evaluation.lift import lift_curve
from ..evaluation.ranking import pr_curve, roc_curve
from ..evaluation.undefined import export_value
from ._common import add_input_args, label_column, pick, read_frame, resolve_levels, setup

logger = logging.getLogger(__name__)


def _ranking_frame(kind: str, observed, scores, levels, positive) -> pd.DataFrame:
    build = roc_curve if kind == "roc" else pr_curve
    frames = []
    for name, col in scores.items():
        curve = build(observed, col, levels, positive)
        frame = curve.to_frame()
        frame.insert(0, "model", name)
        frame["auc"] = curve.area()
        frames.append(frame)
    return pd.concat(frames, ignore_index=True)


def build_curves(args, cfg, df) -> tuple[pd.DataFrame, Dict[str, Any]]:
    """Curve rows plus scalar metadata (prevalence, areas, calibration error)."""

    observed = label_column(df, pick(args.obs_col, cfg.observed_col))
    scores = score_columns(df, args.score_cols)
    levels = resolve_levels(args.levels, cfg, observed)
    positive = pick(args.positive, cfg.classification.positive)
    positive = None if positive is None else str(positive)
    meta: Dict[str, Any] = {
        "kind": args.kind,
        "levels": list(levels),
        "positive": levels.resolve_positive(positive),
    }

    if args.kind in ("roc", "pr"):
        frame = _ranking_frame(args.kind, observed, scores, levels, positive)
        meta["auc"] = frame.groupby("model", sort=False)["auc"].first().to_dict()
        return frame, meta

    if args.kind == "lift":
        result = lift_curve(observed, scores, levels, positive)
        reference = result.reference().to_frame()
        reference.insert(0, "model", "reference")
        meta["prevalence"] = result.prevalence
        return pd.concat([result.to_frame(), reference], ignore_index=True), meta

    result = calibration_curve(
        observed,
        scores,
        levels,
        positive,
        cuts=int(pick(args.cuts, cfg.calibration.cuts)),
        confidence_level=float(pick(args.conf_level, cfg.calibration.confidence_level)),
        strategy=BinningStrategy.parse(pick(args.strategy, cfg.calibration.strategy)),
        interval=IntervalMethod.parse(pick(args.interval, cfg.calibration.interval)),
    )
    meta["ece"] = {name: export_value(expected_calibration_error(b)) for name, b in result.items()}
    return calibration_frame(result), meta


def _write(frame: pd.DataFrame, meta: Dict[str, Any], fmt: str, output: Path | None) -> None:
    if fmt == "csv":
        if output is None:
            print(frame.to_csv(index=False), end="")
        else:
            output.parent.mkdir(parents=True, exist_ok=True)
            frame.to_csv(output, index=False)
        return
    # pandas maps NaN/inf thresholds to null, which json.dumps would not
    payload = dict(meta)
    payload["rows"] = json.loads(frame.to_json(orient="records"))
    text = json.dumps(payload, indent=2)
    if output is None:
        print(text)
    else:
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(text + "\n", encoding="utf-8")


def main(argv: List[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Export evaluation curve data.")
    add_input_args(ap)
    ap.add_argument("--kind", choices=["roc", "pr", "lift", "calibration"], required=True)
    ap.add_argument("--score-cols", nargs="+", required=True, help="Event score column(s)")
    ap.add_argument("--cuts", type=int, default=None, help="Calibration bin count")
    ap.add_argument("--conf-level", type=float, default=None, help="Calibration interval level")
    ap.add_argument("--strategy", choices=[s.value for s in BinningStrategy], default=None)
    ap.add_argument("--interval", choices=[m.value for m in IntervalMethod], default=None)
    ap.add_argument("--format", choices=["csv", "json"], default="json")
    args = ap.parse_args(argv)
    cfg = setup(args)

    try:
        df = read_frame(args)
        frame, meta = build_curves(args, cfg, df)
    except EvaluationError as exc:
        logger.error("%s", exc)
        raise SystemExit(2) from exc

    _write(frame, meta, args.format, args.output)


if __name__ == "__main__":
    main()
