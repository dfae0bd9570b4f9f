import pytest

from mlengine.errors import InvalidParameterError, ModelNotFoundError
from mlengine.models import BatchRandomCutForest
from mlengine.output import FunctionName
from mlengine.parameters import AnomalyDetectionParams, BatchRCFParams

RCF_DATA_SIZE = 500
THRESHOLD = 0.01
PLANTED_ROWS = range(0, RCF_DATA_SIZE, 100)


@pytest.fixture
def parameters():
    return BatchRCFParams.builder() \
        .training_data_size(RCF_DATA_SIZE) \
        .number_of_trees(10) \
        .sample_size(100) \
        .anomaly_score_threshold(THRESHOLD) \
        .training_data_size(100) \
        .output_after(100) \
        .build()


@pytest.fixture
def forest(parameters):
    return BatchRandomCutForest(parameters)


def verify_prediction_result(output, output_after):
    predictions = output.prediction_result
    assert predictions.size() == RCF_DATA_SIZE
    scores = [row.get_value(0).double_value() for row in predictions]

    planted = [scores[i] for i in PLANTED_ROWS if i >= output_after]
    normal = [scores[i] for i in range(output_after, RCF_DATA_SIZE) if i not in PLANTED_ROWS]
    # 5 planted anomalies, the one at row 0 falls inside the warm-up window
    assert len(planted) == 4
    assert all(score > THRESHOLD for score in planted)
    assert min(planted) > max(normal), f"planted {planted}, highest normal {max(normal)}"


def test_predict(forest, rcf_train_frame, rcf_prediction_frame):
    model = forest.train(rcf_train_frame)
    verify_prediction_result(forest.predict(rcf_prediction_frame, model), forest.parameters.output_after)


def test_constructor_with_null_params(rcf_train_frame, rcf_prediction_frame):
    forest = BatchRandomCutForest(None)
    assert forest.parameters == BatchRCFParams()
    model = forest.train(rcf_train_frame)
    verify_prediction_result(forest.predict(rcf_prediction_frame, model), forest.parameters.output_after)


def test_predict_with_null_model(forest, rcf_prediction_frame):
    with pytest.raises(ModelNotFoundError, match="No model found for batch RCF prediction"):
        forest.predict(rcf_prediction_frame, None)


def test_train(forest, rcf_train_frame):
    model = forest.train(rcf_train_frame)
    assert model.name == FunctionName.BATCH_RCF.value
    assert model.version == 1
    assert model.content


def test_train_and_predict(forest, rcf_prediction_frame):
    verify_prediction_result(forest.train_and_predict(rcf_prediction_frame), forest.parameters.output_after)


def test_train_and_predict_matches_train_then_predict(forest, rcf_prediction_frame):
    combined = forest.train_and_predict(rcf_prediction_frame).prediction_result
    model = forest.train(rcf_prediction_frame)
    separate = forest.predict(rcf_prediction_frame, model).prediction_result

    assert combined.size() == separate.size() == rcf_prediction_frame.size()
    assert combined.column_metas() == separate.column_metas()
    # Same seed and same training rows grow the same forest.
    assert combined.to_records() == separate.to_records()


def test_warm_up_rows_are_zero_and_not_flagged(forest, rcf_train_frame, rcf_prediction_frame):
    model = forest.train(rcf_train_frame)
    predictions = forest.predict(rcf_prediction_frame, model).prediction_result
    output_after = forest.parameters.output_after

    for i in range(output_after):
        row = predictions.get_row(i)
        assert row.get_value(0).double_value() == 0.0
        assert row.get_value(1).boolean_value() is False
    for i in range(output_after, RCF_DATA_SIZE):
        score = predictions.get_row(i).get_value(0).double_value()
        assert 0.0 < score <= 1.0


def test_default_threshold_flags_only_planted_rows(rcf_train_frame, rcf_prediction_frame):
    forest = BatchRandomCutForest(BatchRCFParams(output_after=0))
    model = forest.train(rcf_train_frame)
    predictions = forest.predict(rcf_prediction_frame, model).prediction_result

    flagged = [i for i, row in enumerate(predictions) if row.get_value(1).boolean_value()]
    assert flagged == list(PLANTED_ROWS)
    for row in predictions:
        assert row.get_value(1).boolean_value() == (row.get_value(0).double_value() > 0.5)


def test_default_params_rarely_flag_normal_rows(rcf_train_frame, rcf_prediction_frame):
    forest = BatchRandomCutForest()
    model = forest.train(rcf_train_frame)
    predictions = forest.predict(rcf_prediction_frame, model).prediction_result

    output_after = forest.parameters.output_after
    normal_rows = [i for i in range(output_after, RCF_DATA_SIZE) if i not in PLANTED_ROWS]
    flagged = [i for i in normal_rows if predictions.get_row(i).get_value(1).boolean_value()]
    assert len(flagged) <= 0.01 * len(normal_rows), f"normal rows flagged: {flagged}"
    assert all(predictions.get_row(i).get_value(1).boolean_value() for i in PLANTED_ROWS if i >= output_after)


def test_sample_size_larger_than_training_rows(rcf_train_frame):
    forest = BatchRandomCutForest(BatchRCFParams(training_data_size=20, sample_size=256))
    output = forest.train_and_predict(rcf_train_frame)
    assert output.prediction_result.size() == rcf_train_frame.size()


def test_constructor_rejects_params_of_other_algorithm():
    with pytest.raises(InvalidParameterError, match="BATCH_RCF expects BatchRCFParams, got AnomalyDetectionParams"):
        BatchRandomCutForest(AnomalyDetectionParams())


def test_predict_is_repeatable(forest, rcf_train_frame, rcf_prediction_frame):
    model = forest.train(rcf_train_frame)
    first = forest.predict(rcf_prediction_frame, model).prediction_result.to_records()
    second = forest.predict(rcf_prediction_frame, model).prediction_result.to_records()
    assert first == second
