"""
Central configuration for the package.
"""
import logging

from .models import AnomalyDetectionLibSVM, BatchRandomCutForest
from .output import FunctionName
from .parameters import AnomalyDetectionParams, BatchRCFParams

DEFAULT_LOG_LEVEL = logging.INFO
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# --- Algorithm registry ---
# Single source of truth for dispatch: every FunctionName maps to the detector
# class that implements it and the parameter class it is configured with.

MODEL_CONFIG = {
    FunctionName.AD_LIBSVM: {
        'class': AnomalyDetectionLibSVM,
        'params': AnomalyDetectionParams,
        'supports_train_and_predict': False,
    },
    FunctionName.BATCH_RCF: {
        'class': BatchRandomCutForest,
        'params': BatchRCFParams,
        'supports_train_and_predict': True,
    },
}
