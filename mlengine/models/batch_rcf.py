import logging
from typing import List, Optional

import numpy as np
import rrcf

from ..dataframe import ColumnMeta, ColumnType, DataFrame, DefaultDataFrame
from ..output import FunctionName, MLPredictionOutput, Model
from ..parameters import BatchRCFParams
from .base import BaseDetector

logger = logging.getLogger(__name__)

OUTPUT_COLUMNS = (
    ColumnMeta("score", ColumnType.DOUBLE),
    ColumnMeta("anomalous", ColumnType.BOOLEAN),
)

# Leaf label of the row being scored; training leaves are labelled 0..n-1.
QUERY_LABEL = "query"


class BatchRandomCutForest(BaseDetector):
    """
    Batch random cut forest anomaly detector.

    The whole input is treated as one fixed batch. Each tree of the forest is
    an rrcf.RCTree grown on a random sample of the training rows. A row is
    scored by inserting it into every tree, reading its collusive displacement
    (CoDisp) and removing it again. CoDisp is divided by the number of points
    in the tree, so per-tree scores lie in [0, 1], and the row score is the
    mean over the forest. A row that lands outside the bounding box of the
    training sample is usually cut off at the root and scores close to 1.
    Ordinary rows score close to 0.

    The first `output_after` rows of every scored frame are warm-up rows:
    they are reported with a score of 0.0 and are never flagged, but they
    still produce an output row so that output and input sizes match.
    """
    FUNCTION_NAME = FunctionName.BATCH_RCF
    VERSION = 1
    ALGORITHM_LABEL = "batch RCF"
    PARAMS_CLASS = BatchRCFParams

    def __init__(self, parameters: Optional[BatchRCFParams] = None):
        """
        Args:
            parameters (BatchRCFParams or None): Hyperparameters. None means
                every parameter takes its default.
        """
        self.parameters = self._checked_parameters(parameters)

    def _grow_forest(self, X: np.ndarray) -> List[rrcf.RCTree]:
        p = self.parameters
        if p.training_data_size is not None:
            X = X[:p.training_data_size]
        sample_size = min(p.sample_size, X.shape[0])
        logger.info(
            "Growing %d trees on %d rows x %d features (sample size %d)",
            p.number_of_trees, X.shape[0], X.shape[1], sample_size,
        )

        rng = np.random.RandomState(p.random_seed)
        forest = []
        for _ in range(p.number_of_trees):
            sample = rng.choice(X.shape[0], size=sample_size, replace=False)
            # RCTree only seeds itself from a plain int
            tree_seed = int(rng.randint(np.iinfo(np.int32).max))
            forest.append(rrcf.RCTree(X[sample], random_state=tree_seed))
        return forest

    @staticmethod
    def _tree_score(tree: rrcf.RCTree, point: np.ndarray) -> float:
        size = tree.root.n
        tree.insert_point(point, index=QUERY_LABEL)
        codisp = tree.codisp(QUERY_LABEL)
        tree.forget_point(QUERY_LABEL)
        return codisp / size

    def _score(self, forest: List[rrcf.RCTree], X: np.ndarray) -> MLPredictionOutput:
        result = DefaultDataFrame(OUTPUT_COLUMNS)
        if X.shape[0] == 0:
            return MLPredictionOutput(result)

        output_after = self.parameters.output_after
        scores = np.zeros(X.shape[0])
        for i in range(output_after, X.shape[0]):
            scores[i] = np.mean([self._tree_score(tree, X[i]) for tree in forest])
        flags = scores > self.parameters.anomaly_score_threshold
        flags[:output_after] = False
        for score, flag in zip(scores, flags):
            result.append_row([float(score), bool(flag)])

        logger.debug("Batch RCF flagged %d of %d rows as anomalous", int(np.sum(flags)), X.shape[0])
        return MLPredictionOutput(result)

    def train(self, data_frame: DataFrame) -> Model:
        X = self._training_matrix(data_frame)
        forest = self._grow_forest(X)
        return self._build_model(forest, data_frame)

    def predict(self, data_frame: DataFrame, model: Model) -> MLPredictionOutput:
        payload = self._load_payload(model)
        X = self._prediction_matrix(data_frame, payload)
        return self._score(payload["estimator"], X)

    def train_and_predict(self, data_frame: DataFrame) -> MLPredictionOutput:
        X = self._training_matrix(data_frame)
        forest = self._grow_forest(X)
        return self._score(forest, X)
