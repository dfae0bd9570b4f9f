import numpy as np
import pytest

from mlengine.metrics import compute_metrics


def test_counts_and_ratios():
    y_true = np.array([True, True, False, False, True])
    y_pred = np.array([True, False, True, False, True])
    metrics = compute_metrics(y_true, y_pred)

    assert metrics['true_positives'] == 2
    assert metrics['false_positives'] == 1
    assert metrics['total_positives'] == 3
    assert metrics['precision'] == pytest.approx(2 / 3)
    assert metrics['recall'] == pytest.approx(2 / 3)


def test_empty_denominators():
    metrics = compute_metrics([False, False], [False, False])
    assert metrics['precision'] is None
    assert metrics['recall'] is None


def test_shape_mismatch():
    with pytest.raises(ValueError):
        compute_metrics([True], [True, False])
