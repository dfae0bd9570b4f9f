import logging
from typing import Optional

import numpy as np
from sklearn.svm import OneClassSVM

from ..dataframe import ColumnMeta, ColumnType, DataFrame, DefaultDataFrame
from ..output import AnomalyType, FunctionName, MLPredictionOutput, Model
from ..parameters import AnomalyDetectionParams
from .base import BaseDetector

logger = logging.getLogger(__name__)

OUTPUT_COLUMNS = (
    ColumnMeta("score", ColumnType.DOUBLE),
    ColumnMeta("anomaly_type", ColumnType.STRING),
)


class AnomalyDetectionLibSVM(BaseDetector):
    """
    One-class SVM anomaly detector (libsvm, through scikit-learn's OneClassSVM).

    The model learns a boundary around the training rows, which should all be
    "expected" data; rows carrying other labels must be filtered out by the
    caller beforehand. New rows are scored with their signed distance to that
    boundary: negative scores fall outside it and are labelled ANOMALOUS.
    """
    FUNCTION_NAME = FunctionName.AD_LIBSVM
    VERSION = 1
    ALGORITHM_LABEL = "AD LibSVM"
    PARAMS_CLASS = AnomalyDetectionParams

    def __init__(self, parameters: Optional[AnomalyDetectionParams] = None):
        """
        Args:
            parameters (AnomalyDetectionParams or None): Hyperparameters. None
                means every parameter takes its default.
        """
        self.parameters = self._checked_parameters(parameters)

    def _build_estimator(self) -> OneClassSVM:
        p = self.parameters
        return OneClassSVM(
            kernel=p.kernel_type.value,
            gamma=p.gamma,
            nu=p.nu,
            coef0=p.coeff,
            degree=p.degree,
            tol=p.epsilon,
        )

    def train(self, data_frame: DataFrame) -> Model:
        X = self._training_matrix(data_frame)
        logger.info(
            "Training one-class SVM (%s kernel) on %d rows x %d features",
            self.parameters.kernel_type.name, X.shape[0], X.shape[1],
        )
        estimator = self._build_estimator().fit(X)
        return self._build_model(estimator, data_frame)

    def predict(self, data_frame: DataFrame, model: Model) -> MLPredictionOutput:
        payload = self._load_payload(model)
        X = self._prediction_matrix(data_frame, payload)
        result = DefaultDataFrame(OUTPUT_COLUMNS)
        if X.shape[0] == 0:
            return MLPredictionOutput(result)

        estimator = payload["estimator"]
        scores = estimator.decision_function(X)
        # libsvm convention: +1 inside the boundary, -1 outside
        labels = estimator.predict(X)
        for score, label in zip(scores, labels):
            anomaly_type = AnomalyType.ANOMALOUS if label == -1 else AnomalyType.EXPECTED
            result.append_row([float(score), anomaly_type.value])

        logger.debug(
            "AD LibSVM flagged %d of %d rows as anomalous",
            int(np.sum(labels == -1)), X.shape[0],
        )
        return MLPredictionOutput(result)
