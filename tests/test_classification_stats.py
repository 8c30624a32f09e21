import numpy as np
import pytest

from modeleval.errors import EmptyInputError, InvalidLevelError
from modeleval.evaluation.classification import (
    SummaryMode,
    accuracy,
    classification_summary,
    confusion_matrix,
)
from modeleval.evaluation.undefined import UNDEFINED


OBS = [1, 1, 1, 0, 0]
PRED = [1, 0, 1, 0, 0]


def test_binary_scenario():
    report = confusion_matrix(PRED, OBS, [1, 0])
    assert report.table.matrix.tolist() == [[2, 0], [1, 2]]
    assert report.positive == 1
    st = report.by_class[1]
    assert report.overall.accuracy == pytest.approx(0.8)
    assert st.sensitivity == pytest.approx(2 / 3)
    assert st.specificity == pytest.approx(1.0)
    assert st.pos_pred_value == pytest.approx(1.0)
    assert st.neg_pred_value == pytest.approx(2 / 3)
    assert st.f_measure == pytest.approx(0.8)
    assert st.prevalence == pytest.approx(0.6)
    assert st.detection_rate == pytest.approx(0.4)
    assert st.detection_prevalence == pytest.approx(0.4)
    assert st.balanced_accuracy == pytest.approx(5 / 6)


def test_kappa_and_no_information_rate():
    overall = confusion_matrix(PRED, OBS, [1, 0]).overall
    assert overall.kappa == pytest.approx(0.32 / 0.52)
    assert overall.no_information_rate == pytest.approx(0.6)
    # P(X >= 4) for X ~ Binomial(5, 0.6)
    assert overall.accuracy_p_value == pytest.approx(0.33696)
    # Clopper-Pearson interval for 4 of 5
    assert overall.accuracy_lower == pytest.approx(0.2835821, abs=1e-6)
    assert overall.accuracy_upper == pytest.approx(0.9949492, abs=1e-6)
    # one discordant pair: continuity-corrected statistic is 0
    assert overall.mcnemar_p_value == pytest.approx(1.0)


def test_kappa_matches_sklearn():
    metrics = pytest.importorskip("sklearn.metrics")
    rng = np.random.default_rng(5)
    obs = rng.choice(["a", "b", "c"], size=300)
    pred = np.where(rng.random(300) < 0.6, obs, rng.choice(["a", "b", "c"], size=300))
    report = confusion_matrix(pred, obs, ["a", "b", "c"])
    assert report.overall.kappa == pytest.approx(metrics.cohen_kappa_score(obs, pred))


def test_positive_override_swaps_roles():
    st = confusion_matrix(PRED, OBS, [1, 0], positive=0).by_class[0]
    assert st.sensitivity == pytest.approx(1.0)
    assert st.specificity == pytest.approx(2 / 3)


def test_zero_denominator_is_undefined_not_zero():
    st = confusion_matrix([0, 0, 0], [1, 0, 0], [1, 0]).by_class[1]
    assert st.sensitivity == 0.0
    assert st.pos_pred_value is UNDEFINED
    assert st.precision is UNDEFINED
    assert st.f_measure is UNDEFINED


def test_kappa_undefined_when_chance_agreement_is_total():
    overall = confusion_matrix([0, 0], [0, 0], [1, 0]).overall
    assert overall.accuracy == 1.0
    assert overall.kappa is UNDEFINED
    assert overall.mcnemar_p_value is UNDEFINED


def test_accuracy_from_matrix_matches_direct_accuracy():
    rng = np.random.default_rng(42)
    for k in (2, 3, 5):
        levels = list(range(k))
        obs = rng.integers(0, k, size=97).tolist()
        pred = rng.integers(0, k, size=97).tolist()
        report = confusion_matrix(pred, obs, levels)
        assert report.overall.accuracy == pytest.approx(accuracy(pred, obs))


def test_three_levels_one_row_per_level(three_class):
    predicted, observed = three_class
    report = confusion_matrix(predicted, observed, ["a", "b", "c"])
    assert report.positive is None
    assert set(report.by_class) == {"a", "b", "c"}
    m = report.table.matrix
    assert report.overall.accuracy == pytest.approx(np.trace(m) / m.sum())
    for st in report.by_class.values():
        assert st.sensitivity == pytest.approx(0.8)
        assert st.specificity == pytest.approx(0.9)
    assert report.overall.kappa == pytest.approx(0.7)


def test_multiclass_summary_keys(three_class):
    predicted, observed = three_class
    out = classification_summary(predicted, observed, ["a", "b", "c"])
    assert out["Accuracy"] == pytest.approx(0.8)
    assert out["Sensitivity:b"] == pytest.approx(0.8)
    assert out["Mean_Sensitivity"] == pytest.approx(0.8)
    assert "Mean_Specificity" in out and "Specificity:c" in out


def test_mean_skips_undefined_levels():
    # level "c" is never predicted nor observed, so its PPV is undefined
    out = classification_summary(
        ["a", "b", "a", "b"], ["a", "b", "b", "b"], ["a", "b", "c"], mode="prec_recall"
    )
    assert out["Precision:c"] is UNDEFINED
    assert out["Mean_Precision"] == pytest.approx((0.5 + 1.0) / 2)


def test_modes_select_bundles():
    sens = classification_summary(PRED, OBS, [1, 0], mode=SummaryMode.SENS_SPEC)
    prec = classification_summary(PRED, OBS, [1, 0], mode="prec_recall")
    assert "Sensitivity" in sens and "Precision" not in sens
    assert {"Precision", "Recall", "F"} <= set(prec) and "Specificity" not in prec
    everything = classification_summary(PRED, OBS, [1, 0], mode="everything")
    assert {"Sensitivity", "Precision", "F", "Neg_Pred_Value"} <= set(everything)


def test_beta_weights_recall():
    f2 = classification_summary(PRED, OBS, [1, 0], mode="prec_recall", beta=2.0)["F"]
    # (1 + 4) * P * R / (4 * P + R) with P = 1, R = 2/3
    assert f2 == pytest.approx(5 * (2 / 3) / (4 + 2 / 3))


def test_errors():
    with pytest.raises(ValueError):
        classification_summary(PRED, OBS, [1, 0], mode="roc")
    with pytest.raises(InvalidLevelError):
        confusion_matrix(PRED, OBS, [1, 0], positive=7)
    with pytest.raises(EmptyInputError):
        confusion_matrix([], [], [1, 0])
    with pytest.raises(ValueError):
        confusion_matrix(PRED, OBS, [1, 0], beta=0.0)


def test_report_to_dict_renders_undefined_as_none():
    data = confusion_matrix([0, 0, 0], [1, 0, 0], [1, 0], mode="everything").to_dict()
    assert data["by_class"]["1"]["Precision"] is None
    assert data["table"]["matrix"] == [[0, 0], [1, 2]]
    assert data["overall"]["Accuracy"] == pytest.approx(2 / 3)
