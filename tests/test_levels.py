import numpy as np
import pytest

from modeleval.errors import InvalidLevelError
from modeleval.evaluation.levels import LevelSet, event_indicator


def test_first_level_is_default_positive():
    levels = LevelSet(["yes", "no"])
    assert levels.resolve_positive() == "yes"
    assert levels.resolve_positive("no") == "no"


def test_unknown_positive_is_rejected():
    with pytest.raises(InvalidLevelError, match="maybe"):
        LevelSet(["yes", "no"]).resolve_positive("maybe")


def test_binary_resolution_needs_two_levels():
    with pytest.raises(InvalidLevelError):
        LevelSet(["only"]).resolve_positive(binary=True)
    with pytest.raises(InvalidLevelError):
        LevelSet(["a", "b", "c"]).require_binary()


def test_duplicate_and_empty_levels_rejected():
    with pytest.raises(InvalidLevelError):
        LevelSet(["a", "b", "a"])
    with pytest.raises(InvalidLevelError):
        LevelSet([])


def test_encode_names_argument_and_unknown_labels():
    levels = LevelSet(["a", "b"])
    assert levels.encode(["b", "a", "b"]).tolist() == [1, 0, 1]
    with pytest.raises(InvalidLevelError, match="observed.*'z'"):
        levels.encode(["a", "z"], argument="observed")


def test_numpy_labels_match_python_levels():
    levels = LevelSet([1, 0])
    codes = levels.encode(np.array([0, 1, 1]))
    assert codes.tolist() == [1, 0, 0]
    assert np.int64(1) in levels


def test_infer_sorts_union():
    assert list(LevelSet.infer(["b", "a"], ["c", "a"])) == ["a", "b", "c"]


def test_event_indicator_uses_override():
    mask, event = event_indicator(["x", "y", "x"], ["x", "y"], positive="y")
    assert event == "y"
    assert mask.tolist() == [False, True, False]
