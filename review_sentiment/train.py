"""
Training step for the review sentiment classifier.
"""

import logging
import time

from .context import PipelineContext
from .data_loader import LabeledExample
from .model import Model

logger = logging.getLogger("review_sentiment")


def train(context: PipelineContext, examples: list[LabeledExample]) -> Model:
    """
    Fit a new model on ``examples`` with the context's backend.

    Args:
        context: Run context
        examples: Training split

    Returns:
        Fitted model

    Raises:
        DegenerateTrainingError: If examples are empty or single-class
    """
    texts = [example.text for example in examples]
    labels = [example.label for example in examples]

    logger.info(f"Building and training model on {len(examples)} reviews...")
    start_time = time.time()

    model = context.backend.fit(texts, labels)

    logger.info(f"Training finished in {time.time() - start_time:.2f}s")
    return model
