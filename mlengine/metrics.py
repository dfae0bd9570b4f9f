import numpy as np


def compute_metrics(y_true: np.ndarray, y_pred: np.ndarray):
    """
    Calculates detection metrics for boolean anomaly flags.
    Both arrays must be aligned row by row; True means anomalous.
    Returns raw counts for aggregation alongside the final ratios.
    """
    y_true = np.asarray(y_true, dtype=bool)
    y_pred = np.asarray(y_pred, dtype=bool)
    if y_true.shape != y_pred.shape:
        raise ValueError(f"Label and prediction shapes differ: {y_true.shape} vs {y_pred.shape}")

    true_positives = int(np.sum(y_pred & y_true))
    false_positives = int(np.sum(y_pred & ~y_true))
    total_positives = int(np.sum(y_true))
    predicted_positives = true_positives + false_positives

    # Ratios are None when their denominator is empty
    precision = true_positives / predicted_positives if predicted_positives > 0 else None
    recall = true_positives / total_positives if total_positives > 0 else None

    return {
        'true_positives': true_positives,
        'false_positives': false_positives,
        'total_positives': total_positives,
        'precision': precision,
        'recall': recall,
    }
