"""
Artifacts handed back to callers: trained Models and prediction outputs.
"""
import enum
from dataclasses import dataclass
from typing import Any, Dict, Optional

from .dataframe import DataFrame


class FunctionName(enum.Enum):
    """Stable identifiers used to dispatch to an algorithm."""
    AD_LIBSVM = "AD_LIBSVM"
    BATCH_RCF = "BATCH_RCF"


@dataclass(frozen=True)
class Model:
    """
    A trained artifact.

    `content` is an algorithm-specific opaque blob; only the algorithm that
    produced it knows how to read it back.
    """
    name: str
    version: int
    content: bytes

    def __repr__(self):
        return f"Model(name={self.name!r}, version={self.version}, content=<{len(self.content)} bytes>)"


class MLTaskStatus(enum.Enum):
    CREATED = "CREATED"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"


@dataclass(frozen=True)
class MLPredictionOutput:
    """
    Result of one predict or train-and-predict call.

    Row `i` of `prediction_result` belongs to row `i` of the input frame; its
    columns are defined by the algorithm.
    """
    prediction_result: DataFrame
    task_id: Optional[str] = None
    status: MLTaskStatus = MLTaskStatus.COMPLETED

    def to_dict(self) -> Dict[str, Any]:
        return {
            "task_id": self.task_id,
            "status": self.status.value,
            "prediction_result": {
                "column_metas": [
                    {"name": meta.name, "column_type": meta.column_type.value}
                    for meta in self.prediction_result.column_metas()
                ],
                "rows": self.prediction_result.to_records(),
            },
        }


class AnomalyType(enum.Enum):
    """Per-row verdict labels. UNKNOWN is only used to tag input data."""
    EXPECTED = "EXPECTED"
    ANOMALOUS = "ANOMALOUS"
    UNKNOWN = "UNKNOWN"
