"""
Immutable, validated hyperparameter objects for each algorithm.

Each parameter class is a frozen dataclass. Instances are normally created
through a fluent builder:

    params = AnomalyDetectionParams.builder().gamma(1.0).nu(0.1).build()
    poly = params.to_builder().kernel_type(ADKernelType.POLY).build()

Every construction path (builder, keyword constructor, `with_overrides`,
`from_dict`) ends in `__post_init__`, which validates the fields, so an invalid
object can never reach an algorithm.
"""
import dataclasses
import enum
import math
import numbers
from typing import Any, Dict, Mapping, Optional

from .errors import InvalidParameterError


class ParamsBuilder:
    """
    Fluent builder with one setter per dataclass field of `params_class`.

    Setters record a value and return the builder; `build()` constructs (and
    therefore validates) the parameter object. Fields never set keep the
    value they had in `initial`, or the dataclass default.
    """

    def __init__(self, params_class, initial: Optional[Mapping[str, Any]] = None):
        self._params_class = params_class
        self._field_names = {field.name for field in dataclasses.fields(params_class)}
        self._values = dict(initial or {})

    def __getattr__(self, name):
        if name.startswith("_") or name not in self._field_names:
            raise AttributeError(f"{self._params_class.__name__} has no parameter '{name}'")

        def setter(value):
            self._values[name] = value
            return self

        return setter

    def build(self):
        return self._params_class(**self._values)


class MLParams:
    """Mixin shared by the frozen parameter dataclasses."""

    def __post_init__(self):
        self.validate()

    def validate(self) -> None:
        raise NotImplementedError("Subclasses must implement this method.")

    @classmethod
    def builder(cls) -> ParamsBuilder:
        return ParamsBuilder(cls)

    def to_builder(self) -> ParamsBuilder:
        return ParamsBuilder(type(self), self.to_dict())

    def with_overrides(self, **changes) -> "MLParams":
        """Copy of this object with `changes` applied; the original is untouched."""
        self._check_names(changes)
        return dataclasses.replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        return {field.name: getattr(self, field.name) for field in dataclasses.fields(self)}

    @classmethod
    def from_dict(cls, mapping: Optional[Mapping[str, Any]]) -> "MLParams":
        """
        Build from user or config input. Missing keys take their defaults,
        unknown keys are rejected.
        """
        mapping = dict(mapping or {})
        cls._check_names(mapping)
        return cls(**mapping)

    @classmethod
    def _check_names(cls, mapping: Mapping[str, Any]) -> None:
        known = {field.name for field in dataclasses.fields(cls)}
        unknown = sorted(set(mapping) - known)
        if unknown:
            raise InvalidParameterError(f"Unknown parameters for {cls.__name__}: {', '.join(unknown)}")


def _is_number(value) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def _is_integer(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


def _require_positive(name: str, value) -> None:
    if not _is_number(value) or not value > 0:
        raise InvalidParameterError(f"{name} should be positive, got {value!r}")


def _require_positive_int(name: str, value) -> None:
    if not _is_integer(value) or value < 1:
        raise InvalidParameterError(f"{name} should be a positive integer, got {value!r}")


class ADKernelType(enum.Enum):
    LINEAR = "linear"
    POLY = "poly"
    RBF = "rbf"
    SIGMOID = "sigmoid"


@dataclasses.dataclass(frozen=True)
class AnomalyDetectionParams(MLParams):
    """
    Hyperparameters of the one-class LibSVM detector.

    Attributes:
        gamma (float): Kernel coefficient for RBF, POLY and SIGMOID kernels.
        nu (float): Upper bound on the fraction of training errors and lower
                    bound on the fraction of support vectors, in (0, 1].
        cost (float): libsvm's C. The one-class formulation is driven by `nu`
                      instead, so this is carried for completeness and must
                      only be positive.
        coeff (float): Independent term of the POLY and SIGMOID kernels.
        epsilon (float): Stopping tolerance of the solver.
        degree (int): Degree of the POLY kernel.
        kernel_type (ADKernelType): Kernel choice; strings such as "linear"
                                    are accepted and converted.
    """
    gamma: float = 1.0
    nu: float = 0.1
    cost: float = 1.0
    coeff: float = 0.0
    epsilon: float = 0.001
    degree: int = 3
    kernel_type: ADKernelType = ADKernelType.RBF

    def validate(self) -> None:
        _require_positive("gamma", self.gamma)
        _require_positive("nu", self.nu)
        if self.nu > 1:
            raise InvalidParameterError(f"nu should not exceed 1, got {self.nu!r}")
        _require_positive("cost", self.cost)
        _require_positive("epsilon", self.epsilon)
        if not _is_number(self.coeff):
            raise InvalidParameterError(f"coeff should be a number, got {self.coeff!r}")
        _require_positive_int("degree", self.degree)
        if not isinstance(self.kernel_type, ADKernelType):
            try:
                kernel = ADKernelType[str(self.kernel_type).upper()]
            except KeyError:
                raise InvalidParameterError(
                    f"kernel_type should be one of {[k.name for k in ADKernelType]}, got {self.kernel_type!r}"
                ) from None
            object.__setattr__(self, "kernel_type", kernel)


@dataclasses.dataclass(frozen=True)
class BatchRCFParams(MLParams):
    """
    Hyperparameters of the batch forest detector.

    Attributes:
        training_data_size (int or None): Number of leading rows used to grow
                                          the forest. None uses every row.
        number_of_trees (int): Number of trees in the forest.
        sample_size (int): Rows sampled per tree; clamped to the training size.
        anomaly_score_threshold (float): Rows scoring above this are flagged.
        output_after (int): Warm-up row count. Rows before this index are
                            reported with a zero score.
        random_seed (int or None): Seed for tree construction.
    """
    training_data_size: Optional[int] = None
    number_of_trees: int = 30
    sample_size: int = 256
    anomaly_score_threshold: float = 0.5
    output_after: int = 32
    random_seed: Optional[int] = 42

    def validate(self) -> None:
        if self.training_data_size is not None:
            _require_positive_int("training_data_size", self.training_data_size)
        _require_positive_int("number_of_trees", self.number_of_trees)
        _require_positive_int("sample_size", self.sample_size)
        if (not _is_number(self.anomaly_score_threshold) or not math.isfinite(self.anomaly_score_threshold)
                or self.anomaly_score_threshold < 0):
            raise InvalidParameterError(
                f"anomaly_score_threshold should be a finite non-negative number, got {self.anomaly_score_threshold!r}"
            )
        if not _is_integer(self.output_after) or self.output_after < 0:
            raise InvalidParameterError(f"output_after should be non-negative, got {self.output_after!r}")
        if self.random_seed is not None and not _is_integer(self.random_seed):
            raise InvalidParameterError(f"random_seed should be an integer, got {self.random_seed!r}")
