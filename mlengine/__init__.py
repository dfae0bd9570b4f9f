from .dataframe import (
    BooleanValue,
    ColumnMeta,
    ColumnType,
    ColumnValue,
    DataFrame,
    DefaultDataFrame,
    DoubleValue,
    IntValue,
    NullValue,
    Row,
    StringValue,
    empty_data_frame,
)
from .errors import (
    ColumnIndexError,
    ColumnTypeError,
    InvalidParameterError,
    MLEngineError,
    ModelNotFoundError,
    RowIndexError,
    SchemaError,
    UnsupportedOperationError,
)
from .models import AnomalyDetectionLibSVM, BatchRandomCutForest, BaseDetector
from .output import AnomalyType, FunctionName, MLPredictionOutput, Model
from .parameters import ADKernelType, AnomalyDetectionParams, BatchRCFParams

__version__ = "0.1.0"
