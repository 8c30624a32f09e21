import sys
import os
from pathlib import Path

import numpy as np
import pytest

# Ensure the in-repo package is importable without installation
root = Path(__file__).resolve().parents[1]
pkg = root / "python"
if str(pkg) not in sys.path:
    sys.path.insert(0, str(pkg))

# sklearn cross-checks go through joblib; keep its temp files inside the repo
tmp_root = Path(__file__).resolve().parents[1] / ".tmp" / "joblib"
tmp_root.mkdir(parents=True, exist_ok=True)
os.environ.setdefault("JOBLIB_TEMP_FOLDER", str(tmp_root))


@pytest.fixture
def scored_binary():
    """400 samples whose event probability carries real but imperfect signal."""
    rng = np.random.default_rng(0)
    y = rng.integers(0, 2, size=400)
    p = np.clip(0.35 * y + rng.uniform(0.0, 0.65, size=400), 0.0, 1.0)
    observed = np.where(y == 1, "event", "none")
    return observed, p


@pytest.fixture
def three_class():
    """Diagonal-heavy 3-level predictions: 8 correct of 10 per level."""
    observed, predicted = [], []
    for i, level in enumerate(["a", "b", "c"]):
        others = [lv for lv in ["a", "b", "c"] if lv != level]
        observed += [level] * 10
        predicted += [level] * 8 + others
    return predicted, observed
