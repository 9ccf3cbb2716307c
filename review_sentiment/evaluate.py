"""
Evaluation step: score a model against labeled examples.
"""

import logging
from dataclasses import asdict, dataclass
from typing import Any

import numpy as np
from sklearn.metrics import (
    accuracy_score,
    confusion_matrix,
    f1_score,
    log_loss,
    precision_score,
    recall_score,
    roc_auc_score,
)

from .data_loader import LabeledExample
from .model import Model

logger = logging.getLogger("review_sentiment")


@dataclass(frozen=True)
class Metrics:
    """Binary classification metrics for one evaluation run."""

    accuracy: float
    precision: float
    recall: float
    f1: float
    roc_auc: float
    log_loss: float
    tn: int
    fp: int
    fn: int
    tp: int
    num_examples: int

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _safe_auc(y_true: np.ndarray, y_prob: np.ndarray) -> float:
    # undefined with a single class present
    if len(np.unique(y_true)) < 2:
        return 0.0
    return float(roc_auc_score(y_true, y_prob))


def compute_metrics(y_true: np.ndarray, y_prob: np.ndarray, threshold: float = 0.5) -> Metrics:
    """
    Compute metrics from ground truth and positive-class probabilities.

    Args:
        y_true: Ground-truth labels (0/1)
        y_prob: Probability of the positive class per example
        threshold: Decision threshold, ``p >= threshold`` is positive

    Returns:
        Metrics
    """
    y_true = np.asarray(y_true, dtype=int)
    y_prob = np.asarray(y_prob, dtype=float)
    y_pred = (y_prob >= threshold).astype(int)

    tn, fp, fn, tp = confusion_matrix(y_true, y_pred, labels=[0, 1]).ravel()

    return Metrics(
        accuracy=float(accuracy_score(y_true, y_pred)),
        precision=float(precision_score(y_true, y_pred, zero_division=0)),
        recall=float(recall_score(y_true, y_pred, zero_division=0)),
        f1=float(f1_score(y_true, y_pred, zero_division=0)),
        roc_auc=_safe_auc(y_true, y_prob),
        log_loss=float(log_loss(y_true, np.clip(y_prob, 1e-15, 1 - 1e-15), labels=[0, 1])),
        tn=int(tn),
        fp=int(fp),
        fn=int(fn),
        tp=int(tp),
        num_examples=int(len(y_true)),
    )


def evaluate(model: Model, examples: list[LabeledExample], threshold: float = 0.5) -> Metrics:
    """
    Evaluate ``model`` on labeled examples.

    The model and the examples are not modified.

    Args:
        model: Fitted model
        examples: Held-out labeled examples
        threshold: Decision threshold

    Returns:
        Metrics

    Raises:
        ValueError: If there are no examples to evaluate
    """
    if not examples:
        raise ValueError("Cannot evaluate on an empty dataset")

    logger.info(f"Evaluating model on {len(examples)} held-out reviews...")

    y_true = np.array([int(example.label) for example in examples])
    y_prob = model.predict_proba([example.text for example in examples])

    metrics = compute_metrics(y_true, y_prob, threshold=threshold)

    logger.info(f"Accuracy: {metrics.accuracy:.2%}")
    return metrics


def print_metrics(metrics: Metrics) -> None:
    """Print evaluation results."""
    print("\n" + "=" * 60)
    print("MODEL EVALUATION RESULTS")
    print("=" * 60)

    print(f"\nAccuracy:  {metrics.accuracy:.2%}")
    print(f"Precision: {metrics.precision:.4f}")
    print(f"Recall:    {metrics.recall:.4f}")
    print(f"F1 Score:  {metrics.f1:.4f}")
    print(f"ROC-AUC:   {metrics.roc_auc:.4f}")
    print(f"Log-loss:  {metrics.log_loss:.4f}")

    print("\nConfusion Matrix (rows: actual neg/pos, cols: predicted neg/pos):")
    print(f"  [[{metrics.tn:>5} {metrics.fp:>5}]")
    print(f"   [{metrics.fn:>5} {metrics.tp:>5}]]")

    print("=" * 60)
