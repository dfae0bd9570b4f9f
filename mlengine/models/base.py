import abc
import io
import logging
from typing import Any, Dict

import joblib
import numpy as np

from ..data_utils import to_feature_matrix
from ..dataframe import DataFrame
from ..errors import InvalidParameterError, ModelNotFoundError, SchemaError, UnsupportedOperationError
from ..output import FunctionName, MLPredictionOutput, Model

logger = logging.getLogger(__name__)


class BaseDetector(abc.ABC):
    """
    Abstract base class for all anomaly detection algorithms.

    This ensures a consistent train / predict contract over DataFrames, so the
    dispatcher can drive any algorithm by its FunctionName. Detectors keep no
    trained state between calls: everything a prediction needs travels inside
    the Model returned by `train`.
    """
    FUNCTION_NAME: FunctionName
    VERSION: int = 1
    # Human-readable algorithm name used in error messages.
    ALGORITHM_LABEL: str = ""
    PARAMS_CLASS: type
    CONTENT_COMPRESSION = 3

    @abc.abstractmethod
    def train(self, data_frame: DataFrame) -> Model:
        """
        Fit the detector on every row of `data_frame` and return the trained
        Model. Each column is one feature dimension.

        This method must be implemented by all subclasses.
        """
        raise NotImplementedError("Subclasses must implement this method.")

    @abc.abstractmethod
    def predict(self, data_frame: DataFrame, model: Model) -> MLPredictionOutput:
        """
        Score each row of `data_frame` with a Model produced by `train`.
        Output row i corresponds to input row i.

        This method must be implemented by all subclasses.
        """
        raise NotImplementedError("Subclasses must implement this method.")

    def train_and_predict(self, data_frame: DataFrame) -> MLPredictionOutput:
        """Fit and score in one call without producing a Model. Batch algorithms only."""
        raise UnsupportedOperationError(f"{self.FUNCTION_NAME.value} does not support train_and_predict")

    def _checked_parameters(self, parameters):
        """None means defaults. Anything but an instance of PARAMS_CLASS is a configuration error."""
        if parameters is None:
            return self.PARAMS_CLASS()
        if not isinstance(parameters, self.PARAMS_CLASS):
            raise InvalidParameterError(
                f"{self.FUNCTION_NAME.value} expects {self.PARAMS_CLASS.__name__}, got {type(parameters).__name__}"
            )
        parameters.validate()
        return parameters

    def _training_matrix(self, data_frame: DataFrame) -> np.ndarray:
        X = to_feature_matrix(data_frame)
        if X.shape[0] == 0:
            raise SchemaError(f"Cannot train {self.ALGORITHM_LABEL} on an empty DataFrame")
        return X

    def _build_model(self, estimator, data_frame: DataFrame) -> Model:
        payload = {
            "estimator": estimator,
            "feature_names": data_frame.column_names(),
        }
        buffer = io.BytesIO()
        joblib.dump(payload, buffer, compress=self.CONTENT_COMPRESSION)
        content = buffer.getvalue()
        logger.debug("Serialized %s model (%d bytes)", self.FUNCTION_NAME.value, len(content))
        return Model(name=self.FUNCTION_NAME.value, version=self.VERSION, content=content)

    def _load_payload(self, model: Model) -> Dict[str, Any]:
        if model is None:
            raise ModelNotFoundError(f"No model found for {self.ALGORITHM_LABEL} prediction")
        if model.name != self.FUNCTION_NAME.value:
            raise ModelNotFoundError(
                f"No model found for {self.ALGORITHM_LABEL} prediction: got a {model.name} model"
            )
        return joblib.load(io.BytesIO(model.content))

    def _prediction_matrix(self, data_frame: DataFrame, payload: Dict[str, Any]) -> np.ndarray:
        X = to_feature_matrix(data_frame)
        expected = len(payload["feature_names"])
        if X.shape[1] != expected:
            raise SchemaError(
                f"Model was trained on {expected} features {payload['feature_names']}, "
                f"the DataFrame has {X.shape[1]}"
            )
        return X
