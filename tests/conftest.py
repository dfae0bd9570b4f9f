"""
Shared pytest fixtures for the mlengine test suite.

The data generators here stand in for upstream ingestion: they only have to
produce DataFrames that honour the schema contract.
"""
from typing import List, Tuple

import numpy as np
import pytest

from mlengine.dataframe import ColumnMeta, ColumnType, DefaultDataFrame
from mlengine.output import AnomalyType

GAUSSIAN_FEATURES = 4
# Extra far-out rows appended to the Gaussian test set; with seed 12345 they
# bring the one-class SVM precision to 0.70.
EXTRA_ANOMALOUS = 226
RCF_DATA_SIZE = 500


# =============================================================================
# Gaussian anomaly data (one-class SVM)
# =============================================================================

def gaussian_anomaly(
    size: int,
    fraction_anomalous: float,
    seed: int = 12345,
    fraction_unknown: float = 0.02,
) -> Tuple[List[Tuple[np.ndarray, AnomalyType]], List[Tuple[np.ndarray, AnomalyType]]]:
    """
    Generate (features, label) pairs for a training set and a test set.

    Training rows are all EXPECTED, drawn from N(0, 1). In the test set a
    `fraction_anomalous` share is ANOMALOUS, drawn from N(6, 1), and a small
    share is tagged UNKNOWN.
    """
    rng = np.random.default_rng(seed)
    train = [
        (rng.normal(0.0, 1.0, GAUSSIAN_FEATURES), AnomalyType.EXPECTED)
        for _ in range(size)
    ]

    test = []
    for _ in range(size):
        draw = rng.random()
        if draw < fraction_anomalous:
            test.append((rng.normal(6.0, 1.0, GAUSSIAN_FEATURES), AnomalyType.ANOMALOUS))
        elif draw < fraction_anomalous + fraction_unknown:
            test.append((rng.normal(3.0, 1.0, GAUSSIAN_FEATURES), AnomalyType.UNKNOWN))
        else:
            test.append((rng.normal(0.0, 1.0, GAUSSIAN_FEATURES), AnomalyType.EXPECTED))
    return train, test


def gaussian_outliers(count: int, seed: int = 54321) -> List[Tuple[np.ndarray, AnomalyType]]:
    """ANOMALOUS rows drawn from N(6, 1), from their own random stream."""
    rng = np.random.default_rng(seed)
    return [(rng.normal(6.0, 1.0, GAUSSIAN_FEATURES), AnomalyType.ANOMALOUS) for _ in range(count)]


def construct_data_frame(examples, training: bool, labels: List[AnomalyType] = None) -> DefaultDataFrame:
    """
    Training keeps EXPECTED rows only; prediction drops UNKNOWN rows.
    Labels of the appended rows are collected into `labels` when given.
    """
    metas = [ColumnMeta(f"feature_{i}", ColumnType.DOUBLE) for i in range(GAUSSIAN_FEATURES)]
    data_frame = DefaultDataFrame(metas)
    for features, label in examples:
        if training and label is not AnomalyType.EXPECTED:
            continue
        if not training and label is AnomalyType.UNKNOWN:
            continue
        data_frame.append_row([float(v) for v in features])
        if labels is not None:
            labels.append(label)
    return data_frame


@pytest.fixture(scope="module")
def gaussian_data():
    train, test = gaussian_anomaly(1000, 0.3)
    test = test + gaussian_outliers(EXTRA_ANOMALOUS)
    prediction_labels: List[AnomalyType] = []
    train_frame = construct_data_frame(train, training=True)
    prediction_frame = construct_data_frame(test, training=False, labels=prediction_labels)
    return train_frame, prediction_frame, prediction_labels


# =============================================================================
# Integer series with planted spikes (batch forest)
# =============================================================================

def construct_rcf_data_frame(predict: bool, seed: int) -> DefaultDataFrame:
    """
    One INTEGER column of RCF_DATA_SIZE rows drawn from [1, 10). When
    `predict` is set, rows 0, 100, 200, 300 and 400 are drawn from [100, 1000).
    """
    rng = np.random.default_rng(seed)
    data_frame = DefaultDataFrame([ColumnMeta("value", ColumnType.INTEGER)])
    for i in range(RCF_DATA_SIZE):
        if predict and i % 100 == 0:
            data_frame.append_row([int(rng.integers(100, 1000))])
        else:
            data_frame.append_row([int(rng.integers(1, 10))])
    return data_frame


@pytest.fixture
def rcf_train_frame() -> DefaultDataFrame:
    return construct_rcf_data_frame(predict=False, seed=7)


@pytest.fixture
def rcf_prediction_frame() -> DefaultDataFrame:
    return construct_rcf_data_frame(predict=True, seed=8)


# =============================================================================
# Small frames
# =============================================================================

@pytest.fixture
def mixed_schema():
    return [
        ColumnMeta("x", ColumnType.DOUBLE),
        ColumnMeta("n", ColumnType.INTEGER),
        ColumnMeta("name", ColumnType.STRING),
        ColumnMeta("flag", ColumnType.BOOLEAN),
    ]


@pytest.fixture
def mixed_frame(mixed_schema) -> DefaultDataFrame:
    data_frame = DefaultDataFrame(mixed_schema)
    data_frame.append_row([1.5, 1, "a", True])
    data_frame.append_row([2.5, 2, "b", False])
    data_frame.append_row([3.5, 3, "c", True])
    return data_frame
