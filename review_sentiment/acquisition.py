"""
Model acquisition: load the persisted model or train a fresh one.

The outcome is one of two variants, ``Loaded`` when an artifact was
restored and ``TrainedFresh`` when a model was trained, evaluated and
saved during this run.
"""

import logging
from dataclasses import dataclass
from typing import Union

from .context import PipelineContext
from .data_loader import (
    get_data_statistics,
    load_labeled_examples,
    print_data_statistics,
    split_data,
)
from .evaluate import Metrics, evaluate
from .model import CorruptArtifactError, Model
from .train import train

logger = logging.getLogger("review_sentiment")


@dataclass(frozen=True)
class Loaded:
    """Model restored from an existing artifact."""

    model: Model


@dataclass(frozen=True)
class TrainedFresh:
    """Model trained in this run, with its held-out metrics."""

    model: Model
    metrics: Metrics | None


AcquisitionResult = Union[Loaded, TrainedFresh]


def train_and_save(context: PipelineContext, verbose: bool = False) -> TrainedFresh:
    """
    Read training data, split, train, evaluate and persist a model.

    Args:
        context: Run context
        verbose: Print dataset statistics

    Returns:
        TrainedFresh with the model and its held-out metrics. Metrics are
        None when the test split is empty.

    Raises:
        MissingDataError: If the training data file does not exist
        DataValidationError: If the training data is malformed
        DegenerateTrainingError: If the training split is empty or single-class
    """
    examples = load_labeled_examples(
        context.data_path,
        text_column=context.text_column,
        label_column=context.label_column,
    )

    if verbose:
        print_data_statistics(get_data_statistics(examples))

    train_examples, test_examples = split_data(
        examples,
        test_fraction=context.test_fraction,
        random_seed=context.random_seed,
    )

    model = train(context, train_examples)

    metrics = None
    if test_examples:
        metrics = evaluate(model, test_examples, threshold=context.threshold)
    else:
        logger.warning("Test split is empty, skipping evaluation")

    context.backend.save(model, context.model_path)

    return TrainedFresh(model=model, metrics=metrics)


def get_model(
    context: PipelineContext,
    force_retrain: bool = False,
    verbose: bool = False,
) -> AcquisitionResult:
    """
    Obtain the model for this run.

    An existing artifact at ``context.model_path`` is loaded without
    reading the training data. Otherwise a model is trained and saved,
    overwriting the artifact path.

    Args:
        context: Run context
        force_retrain: Ignore an existing artifact and train anyway
        verbose: Print dataset statistics when training

    Returns:
        Loaded or TrainedFresh

    Raises:
        CorruptArtifactError: If the artifact is unreadable and
            ``context.retrain_on_corrupt`` is False
    """
    if context.model_path.exists() and not force_retrain:
        logger.info(f"Loading model from {context.model_path}")
        try:
            return Loaded(model=context.backend.load(context.model_path))
        except CorruptArtifactError:
            if not context.retrain_on_corrupt:
                raise
            logger.warning(
                f"Model artifact {context.model_path} is corrupt, retraining",
                exc_info=True,
            )

    logger.info("No usable model artifact, training a new model")
    return train_and_save(context, verbose=verbose)
