"""
Review Sentiment Package

Loads or trains a logistic-regression sentiment classifier for movie
and series reviews, evaluates it and runs sample predictions.
"""
from .acquisition import Loaded, TrainedFresh, get_model
from .context import PipelineContext
from .data_loader import LabeledExample, load_labeled_examples
from .evaluate import Metrics, evaluate
from .inference import PredictionExample, PredictionResult, predict
from .model import SentimentModel, SklearnBackend
from .train import train

__all__ = [
    "LabeledExample",
    "Loaded",
    "Metrics",
    "PipelineContext",
    "PredictionExample",
    "PredictionResult",
    "SentimentModel",
    "SklearnBackend",
    "TrainedFresh",
    "evaluate",
    "get_model",
    "load_labeled_examples",
    "predict",
    "train",
]
