import numpy as np
import pandas as pd
import pytest

from modeleval.errors import (
    EmptyInputError,
    EvaluationError,
    InvalidProbabilityError,
    LengthMismatchError,
)
from modeleval.evaluation.lift import lift_curve


def test_perfect_ranking_captures_everything_early():
    result = lift_curve([1, 1, 0, 0], {"m": [0.9, 0.8, 0.2, 0.1]}, [1, 0])
    curve = result.curves["m"]
    assert curve.x.tolist() == [0.0, 25.0, 50.0, 75.0, 100.0]
    assert curve.y.tolist() == [0.0, 50.0, 100.0, 100.0, 100.0]
    assert result.prevalence == pytest.approx(0.5)
    assert np.allclose(result.perfect().y, curve.y)


def test_curve_is_monotonic_and_ends_at_full_capture(scored_binary):
    observed, p = scored_binary
    result = lift_curve(observed, {"model": p}, ["event", "none"])
    y = result.curves["model"].y
    assert np.all(np.diff(y) >= -1e-12)
    assert y[0] == 0.0
    assert y[-1] == pytest.approx(100.0)
    assert result.curves["model"].x[-1] == 100.0


def test_ties_spread_evenly():
    result = lift_curve([1, 0, 1, 0], {"flat": [0.5, 0.5, 0.5, 0.5]}, [1, 0])
    curve = result.curves["flat"]
    assert np.allclose(curve.y, curve.x)
    assert np.allclose(result.reference().y, curve.x)


def test_columns_share_x_domain(scored_binary):
    observed, p = scored_binary
    rng = np.random.default_rng(0)
    frame = pd.DataFrame({"good": p, "random": rng.uniform(size=p.size)})
    result = lift_curve(observed, frame, ["event", "none"])
    assert set(result.curves) == {"good", "random"}
    assert np.array_equal(result.curves["good"].x, result.curves["random"].x)
    # halfway through the ranking the informative score has found more events
    mid = p.size // 2
    assert result.curves["good"].y[mid] > result.curves["random"].y[mid]
    long = result.to_frame()
    assert len(long) == 2 * (p.size + 1)
    assert list(long.columns[:3]) == ["model", "percent_sampled", "percent_found"]


def test_no_events_stays_at_zero():
    result = lift_curve([0, 0, 0], {"m": [0.3, 0.2, 0.1]}, [1, 0])
    assert result.prevalence == 0.0
    assert np.all(result.curves["m"].y == 0.0)


def test_thresholds_follow_the_ranking():
    result = lift_curve([1, 0, 0], {"m": [0.2, 0.9, 0.9]}, [1, 0])
    thr = result.curves["m"].thresholds
    assert np.isinf(thr[0])
    assert thr[1:].tolist() == [0.9, 0.9, 0.2]


def test_errors():
    with pytest.raises(EmptyInputError):
        lift_curve([1, 0], {}, [1, 0])
    with pytest.raises(EmptyInputError):
        lift_curve([], {"m": []}, [1, 0])
    with pytest.raises(LengthMismatchError):
        lift_curve([1, 0], {"m": [0.1]}, [1, 0])
    with pytest.raises(InvalidProbabilityError):
        lift_curve([1, 0], {"m": [0.1, np.inf]}, [1, 0])


def test_column_names_must_stay_distinct_as_strings():
    frame = pd.DataFrame({1: [0.9, 0.1], "1": [0.2, 0.8]})
    with pytest.raises(EvaluationError, match="more than one column named '1'"):
        lift_curve([1, 0], frame, [1, 0])
