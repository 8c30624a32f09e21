"""CLI: classification or regression performance summaries from stored predictions.

Run as:
  python -m modeleval.cli.eval --input predictions.csv --obs-col obs --pred-col pred \
      [--prob-cols yes no] [--levels yes no] [--positive yes] [--mode prec_recall]
  python -m modeleval.cli.eval --task regression --input predictions.csv --obs-col y --pred-col yhat

Numerically undefined statistics (zero denominators) are written as null.
"""

from __future__ import annotations

import argparse
import logging
from typing import Any, Dict, List

from ..errors import EvaluationError
from ..evaluation.classification import SummaryMode, classification_summary, confusion_matrix
from ..evaluation.io import numeric_column, require_columns
from ..evaluation.logloss import log_loss
from ..evaluation.ranking import pr_summary, roc_summary
from ..evaluation.regression import regression_summary
from ..evaluation.summaries import multi_class_summary
from ..evaluation.undefined import export_value
from ._common import add_input_args, emit_json, label_column, pick, read_frame, resolve_levels, setup

logger = logging.getLogger(__name__)


def _exported(stats: Dict[str, Any]) -> Dict[str, Any]:
    return {k: export_value(v) for k, v in stats.items()}


def _probability_columns(df, prob_cols: List[str], levels) -> Dict[Any, Any] | None:
    if prob_cols:
        if len(prob_cols) != len(levels):
            raise EvaluationError(
                f"--prob-cols needs one column per level ({len(levels)}), got {len(prob_cols)}"
            )
        require_columns(df, prob_cols)
        return {level: numeric_column(df, col) for level, col in zip(levels, prob_cols)}
    if all(str(level) in df.columns for level in levels):
        return {level: numeric_column(df, str(level)) for level in levels}
    return None


def _classification(args, cfg, df) -> Dict[str, Any]:
    obs_col = pick(args.obs_col, cfg.observed_col)
    pred_col = pick(args.pred_col, cfg.predicted_col)
    observed = label_column(df, obs_col)
    predicted = label_column(df, pred_col)
    levels = resolve_levels(args.levels, cfg, observed, predicted)
    positive = pick(args.positive, cfg.classification.positive)
    positive = None if positive is None else str(positive)
    mode = SummaryMode.parse(pick(args.mode, cfg.classification.mode))
    beta = float(pick(args.beta, cfg.classification.beta))
    conf_level = float(pick(args.conf_level, cfg.classification.confidence_level))

    report = confusion_matrix(
        predicted, observed, levels, positive, mode=mode, beta=beta, confidence_level=conf_level
    )
    out: Dict[str, Any] = {
        "task": "classification",
        "n": report.table.total,
        "levels": list(levels),
        "positive": report.positive,
        "confusion": report.to_dict(),
        "summary": _exported(classification_summary(predicted, observed, levels, positive, mode, beta)),
    }

    probs = _probability_columns(df, list(pick(args.prob_cols, cfg.probability_cols) or []), levels)
    if probs is None:
        logger.info("no probability columns; skipping ROC/PR/log-loss")
        return out
    out["logLoss"] = log_loss(
        observed, probs, levels, eps=cfg.probability.eps, tolerance=cfg.probability.tolerance
    )
    if levels.is_binary:
        out["roc"] = _exported(roc_summary(observed, probs, levels, positive, predicted))
        out["pr"] = _exported(pr_summary(observed, probs, levels, positive, predicted, beta=beta))
    else:
        out["multi_class"] = _exported(
            multi_class_summary(
                observed,
                predicted,
                probs,
                levels,
                beta=beta,
                eps=cfg.probability.eps,
                tolerance=cfg.probability.tolerance,
            )
        )
    return out


def _regression(args, cfg, df) -> Dict[str, Any]:
    obs_col = pick(args.obs_col, cfg.observed_col)
    pred_col = pick(args.pred_col, cfg.predicted_col)
    require_columns(df, [obs_col, pred_col])
    summary = regression_summary(numeric_column(df, obs_col), numeric_column(df, pred_col))
    out: Dict[str, Any] = {"task": "regression", "n": int(len(df))}
    out.update(_exported(summary.to_dict()))
    return out


def main(argv: List[str] | None = None) -> None:
    ap = argparse.ArgumentParser(description="Compute model performance summaries.")
    add_input_args(ap)
    ap.add_argument(
        "--task", choices=["classification", "regression"], default="classification"
    )
    ap.add_argument("--pred-col", default=None, help="Predicted label/value column")
    ap.add_argument(
        "--prob-cols", nargs="+", default=None, help="Class probability columns, in level order"
    )
    ap.add_argument(
        "--mode", choices=[m.value for m in SummaryMode], default=None, help="Statistic bundle"
    )
    ap.add_argument("--beta", type=float, default=None, help="F-measure beta weight")
    ap.add_argument("--conf-level", type=float, default=None, help="Accuracy interval level")
    args = ap.parse_args(argv)
    cfg = setup(args)

    try:
        df = read_frame(args)
        if args.task == "regression":
            out = _regression(args, cfg, df)
        else:
            out = _classification(args, cfg, df)
    except EvaluationError as exc:
        logger.error("%s", exc)
        raise SystemExit(2) from exc

    emit_json(out, args.output)


if __name__ == "__main__":
    main()
