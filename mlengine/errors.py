"""
Exception hierarchy shared by the data model, the parameter classes and the
algorithm adapters.

Every error is raised synchronously at the call that detected it. The
secondary built-in base (ValueError, TypeError, ...) lets callers that do not
know about this package still catch the natural category.
"""


class MLEngineError(Exception):
    """Base class for all errors raised by mlengine."""


class InvalidParameterError(MLEngineError, ValueError):
    """A hyperparameter is out of range or unknown."""


class ModelNotFoundError(MLEngineError, ValueError):
    """Prediction was requested without a trained model."""


class SchemaError(MLEngineError, ValueError):
    """A row or value does not conform to the DataFrame schema."""


class ColumnTypeError(MLEngineError, TypeError):
    """A typed accessor was called on a value of another type."""


class RowIndexError(MLEngineError, IndexError):
    """A row index is outside the current DataFrame size."""


class ColumnIndexError(MLEngineError, IndexError):
    """A column index is outside the width of a row."""


class UnsupportedOperationError(MLEngineError, NotImplementedError):
    """The algorithm does not offer the requested capability."""
