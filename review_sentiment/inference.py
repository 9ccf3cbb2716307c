"""
Inference module for review sentiment classification.

Turns positive-class probabilities into labeled results and renders
them for the console.
"""

import logging
from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
from tqdm import tqdm

from .model import Model

logger = logging.getLogger("review_sentiment")


SENTIMENT_LABELS = {False: "negative", True: "positive"}
MAX_TEXT_LENGTH = 50000
SEPARATOR = "-" * 80

DEMO_REVIEWS = [
    "Une fin bâclée extrêmement décevante avec un scénario qui ne pas pas sense. "
    "Zéro adrénaline après 10 ans de série haletante... Bref une fin vraiment nul !",
    "La pire fin de série !!! Pourquoi gâcher un chef d'oeuvres... en fin pourrie !!! "
    "De semaine en semaine les épisodes mon déçus c'était plat et bâclé... la mort de "
    "certains personnages son nul et incompréhensible !! Déçu déçu déçu !!!! "
    "La pire fin de tout les temps",
    "Cette série a marqué toute une décennie et une génération. "
    "Un seul mot peut véritablement la qualifier: magistrale.",
]


@dataclass(frozen=True)
class PredictionExample:
    """Input to inference, carries no ground truth."""

    text: str


@dataclass(frozen=True)
class PredictionResult:
    """
    Result of a sentiment prediction.

    ``probability`` is the probability of the positive class.
    """

    text: str
    predicted_label: bool
    probability: float

    @property
    def sentiment(self) -> str:
        return SENTIMENT_LABELS[self.predicted_label]

    @property
    def confidence(self) -> float:
        """Probability of the predicted class."""
        return self.probability if self.predicted_label else 1.0 - self.probability

    def to_dict(self) -> dict[str, Any]:
        return {
            "text": self.text,
            "predicted_label": self.predicted_label,
            "sentiment": self.sentiment,
            "probability": round(self.probability, 4),
            "confidence": round(self.confidence, 4),
        }


def validate_prediction_input(text: Any) -> tuple[bool, str]:
    """
    Validate input for prediction.

    Args:
        text: Input text

    Returns:
        Tuple of (is_valid, error_message)
    """
    if text is None:
        return False, "Input text cannot be None"

    if not isinstance(text, str):
        return False, f"Input must be string, got {type(text).__name__}"

    if len(text.strip()) == 0:
        return False, "Input text cannot be empty"

    if len(text) > MAX_TEXT_LENGTH:
        return False, f"Input text exceeds maximum length ({MAX_TEXT_LENGTH} characters)"

    return True, ""


def predict(
    model: Model,
    examples: Sequence[PredictionExample],
    threshold: float = 0.5,
    batch_size: int = 256,
    show_progress: bool = False,
) -> list[PredictionResult]:
    """
    Predict sentiment for each example, preserving input order.

    Args:
        model: Fitted model
        examples: Examples to score
        threshold: ``probability >= threshold`` is labeled positive
        batch_size: Number of texts scored per model call
        show_progress: Display a progress bar over batches

    Returns:
        One PredictionResult per example, in input order

    Raises:
        ValueError: If any input text is invalid
    """
    texts = [example.text for example in examples]
    for i, text in enumerate(texts):
        is_valid, error = validate_prediction_input(text)
        if not is_valid:
            raise ValueError(f"Invalid input at index {i}: {error}")

    if not texts:
        return []

    chunks = range(0, len(texts), batch_size)
    probabilities = []
    for start in tqdm(chunks, desc="Predicting", disable=not show_progress, leave=False):
        batch_probs = np.asarray(model.predict_proba(texts[start:start + batch_size]), dtype=float)
        probabilities.extend(batch_probs.tolist())

    if len(probabilities) != len(texts):
        raise RuntimeError(
            f"Model returned {len(probabilities)} probabilities for {len(texts)} inputs"
        )

    results = []
    for text, probability in zip(texts, probabilities):
        probability = min(max(float(probability), 0.0), 1.0)
        results.append(PredictionResult(
            text=text,
            predicted_label=probability >= threshold,
            probability=probability,
        ))

    logger.debug(f"Predicted {len(results)} reviews")
    return results


def format_prediction(result: PredictionResult) -> str:
    """Render one prediction as a console block."""
    return "\n".join([
        f"Review: {result.text}",
        f"Prediction: {result.sentiment} review",
        f"Probability: {result.probability:.2%}",
        SEPARATOR,
    ])


def print_predictions(results: Sequence[PredictionResult]) -> None:
    """Print prediction blocks for every result."""
    print("\n" + "=" * 80)
    print("SAMPLE PREDICTIONS")
    print("=" * 80)

    for result in results:
        print(format_prediction(result))
