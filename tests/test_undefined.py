import math
import pickle

import numpy as np

from modeleval.evaluation.undefined import (
    UNDEFINED,
    defined_mean,
    export_value,
    is_undefined,
    safe_ratio,
)


def test_sentinel_is_a_falsy_singleton():
    assert type(UNDEFINED)() is UNDEFINED
    assert not UNDEFINED
    assert UNDEFINED != 0.0
    assert repr(UNDEFINED) == "UNDEFINED"
    assert pickle.loads(pickle.dumps(UNDEFINED)) is UNDEFINED


def test_safe_ratio():
    assert safe_ratio(1, 4) == 0.25
    assert safe_ratio(0, 4) == 0.0
    assert safe_ratio(3, 0) is UNDEFINED
    assert is_undefined(safe_ratio(0, 0))


def test_defined_mean_skips_undefined():
    assert defined_mean([0.5, UNDEFINED, 1.0]) == 0.75
    assert defined_mean([UNDEFINED, UNDEFINED]) is UNDEFINED
    assert defined_mean([]) is UNDEFINED


def test_export_value():
    assert export_value(UNDEFINED) is None
    assert export_value(np.int64(3)) == 3 and type(export_value(np.int64(3))) is int
    assert type(export_value(np.float32(0.5))) is float
    assert math.isnan(export_value(float("nan")))
    assert export_value("yes") == "yes"
