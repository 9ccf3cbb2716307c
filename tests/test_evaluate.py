"""
Tests for evaluation module.
"""

import math

import numpy as np
import pytest

from conftest import KeywordModel
from review_sentiment.data_loader import LabeledExample
from review_sentiment.evaluate import Metrics, compute_metrics, evaluate


@pytest.fixture
def keyword_examples() -> list[LabeledExample]:
    return [
        LabeledExample("a great film", True),
        LabeledExample("a great cast", True),
        LabeledExample("a dull film", False),
        LabeledExample("a dull cast", False),
    ]


class TestAccuracyBounds:
    """Accuracy is a fraction of correct predictions."""

    def test_all_correct(self, keyword_examples):
        metrics = evaluate(KeywordModel(), keyword_examples)

        assert metrics.accuracy == 1.0
        assert (metrics.tp, metrics.tn, metrics.fp, metrics.fn) == (2, 2, 0, 0)

    def test_all_wrong(self, keyword_examples):
        inverted = KeywordModel(high=0.1, low=0.9)

        metrics = evaluate(inverted, keyword_examples)

        assert metrics.accuracy == 0.0
        assert metrics.precision == 0.0
        assert metrics.recall == 0.0

    def test_half_correct(self, keyword_examples):
        always_positive = KeywordModel(keyword="a ")

        metrics = evaluate(always_positive, keyword_examples)

        assert metrics.accuracy == 0.5
        assert 0.0 <= metrics.accuracy <= 1.0


class TestEvaluate:
    """Tests for the evaluate step."""

    def test_does_not_modify_inputs(self, keyword_examples):
        snapshot = list(keyword_examples)

        evaluate(KeywordModel(), keyword_examples)

        assert keyword_examples == snapshot

    def test_scores_every_example_once(self, keyword_examples):
        model = KeywordModel()

        evaluate(model, keyword_examples)

        assert model.calls == [[e.text for e in keyword_examples]]

    def test_empty_dataset_raises(self):
        with pytest.raises(ValueError, match="empty"):
            evaluate(KeywordModel(), [])

    def test_threshold_applied(self, keyword_examples):
        # every probability is below 0.95, so everything is negative
        metrics = evaluate(KeywordModel(), keyword_examples, threshold=0.95)

        assert metrics.accuracy == 0.5
        assert metrics.tp == 0

    def test_to_dict(self, keyword_examples):
        data = evaluate(KeywordModel(), keyword_examples).to_dict()

        assert data["accuracy"] == 1.0
        assert data["num_examples"] == 4


class TestComputeMetrics:
    """Tests for metric computation."""

    def test_auc_perfect_ranking(self):
        metrics = compute_metrics(np.array([0, 0, 1, 1]), np.array([0.1, 0.2, 0.8, 0.9]))

        assert metrics.roc_auc == 1.0
        assert metrics.log_loss < 0.3

    def test_single_class_is_finite(self):
        metrics = compute_metrics(np.array([1, 1]), np.array([0.9, 0.8]))

        assert isinstance(metrics, Metrics)
        assert metrics.accuracy == 1.0
        assert math.isfinite(metrics.roc_auc)
        assert math.isfinite(metrics.log_loss)

    def test_threshold_is_inclusive(self):
        metrics = compute_metrics(np.array([1]), np.array([0.5]), threshold=0.5)

        assert metrics.tp == 1
