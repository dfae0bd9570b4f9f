"""
Function-name dispatch over the registered algorithms.

Callers name an algorithm with a FunctionName (or its string value) and hand
over parameters as a parameter object, a plain mapping from user or config
input, or None for defaults.
"""
import logging
from collections.abc import Mapping
from typing import List, Optional, Union

from .config import MODEL_CONFIG
from .dataframe import DataFrame
from .errors import InvalidParameterError, UnsupportedOperationError
from .models import BaseDetector
from .output import FunctionName, MLPredictionOutput, Model
from .parameters import MLParams

logger = logging.getLogger(__name__)

ParamsInput = Union[MLParams, Mapping, None]


def _registry_entry(function_name: Union[FunctionName, str]) -> dict:
    if not isinstance(function_name, FunctionName):
        try:
            function_name = FunctionName(str(function_name).upper())
        except ValueError:
            raise UnsupportedOperationError(f"Unknown function name: {function_name!r}") from None
    entry = MODEL_CONFIG.get(function_name)
    if entry is None:
        raise UnsupportedOperationError(f"No algorithm registered for {function_name.value}")
    return entry


def _resolve_params(entry: dict, parameters: ParamsInput) -> Optional[MLParams]:
    params_class = entry['params']
    if parameters is None or isinstance(parameters, params_class):
        return parameters
    if isinstance(parameters, Mapping):
        return params_class.from_dict(parameters)
    raise InvalidParameterError(
        f"{entry['class'].FUNCTION_NAME.value} expects {params_class.__name__}, got {type(parameters).__name__}"
    )


def create_detector(function_name: Union[FunctionName, str], parameters: ParamsInput = None) -> BaseDetector:
    entry = _registry_entry(function_name)
    return entry['class'](_resolve_params(entry, parameters))


def train(function_name: Union[FunctionName, str], parameters: ParamsInput, data_frame: DataFrame) -> Model:
    detector = create_detector(function_name, parameters)
    model = detector.train(data_frame)
    logger.info("Trained %s v%d on %d rows", model.name, model.version, data_frame.size())
    return model


def predict(
    function_name: Union[FunctionName, str],
    parameters: ParamsInput,
    data_frame: DataFrame,
    model: Optional[Model],
) -> MLPredictionOutput:
    detector = create_detector(function_name, parameters)
    return detector.predict(data_frame, model)


def train_and_predict(
    function_name: Union[FunctionName, str],
    parameters: ParamsInput,
    data_frame: DataFrame,
) -> MLPredictionOutput:
    entry = _registry_entry(function_name)
    if not entry['supports_train_and_predict']:
        raise UnsupportedOperationError(
            f"{entry['class'].FUNCTION_NAME.value} does not support train_and_predict"
        )
    detector = entry['class'](_resolve_params(entry, parameters))
    return detector.train_and_predict(data_frame)


def supported_functions() -> List[FunctionName]:
    return list(MODEL_CONFIG)
