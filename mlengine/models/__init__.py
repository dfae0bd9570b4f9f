from .base import BaseDetector
from .anomaly_detection_libsvm import AnomalyDetectionLibSVM
from .batch_rcf import BatchRandomCutForest

__all__ = [
    "BaseDetector",
    "AnomalyDetectionLibSVM",
    "BatchRandomCutForest",
]
