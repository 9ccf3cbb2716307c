"""
Text classification model for review sentiment.

Wraps a scikit-learn pipeline (TF-IDF word and character n-grams
followed by logistic regression) behind a small backend interface so
the orchestration code only needs fit / predict_proba / save / load.
"""

import io
import json
import logging
import os
import zipfile
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol, Sequence

import joblib
import numpy as np
import sklearn
from sklearn.feature_extraction.text import TfidfVectorizer
from sklearn.linear_model import LogisticRegression
from sklearn.pipeline import FeatureUnion, Pipeline

logger = logging.getLogger("review_sentiment")


ARTIFACT_FORMAT_VERSION = 1
MODEL_MEMBER = "model.joblib"
METADATA_MEMBER = "metadata.json"


class CorruptArtifactError(Exception):
    """Raised when a persisted model artifact cannot be deserialized."""
    pass


class DegenerateTrainingError(ValueError):
    """Raised when the training data cannot produce a binary classifier."""
    pass


class Model(Protocol):
    """Anything that scores texts with a positive-class probability."""

    def predict_proba(self, texts: Sequence[str]) -> np.ndarray:
        ...


class ModelBackend(Protocol):
    """Capability used by the pipeline to train, persist and restore models."""

    def fit(self, texts: Sequence[str], labels: Sequence[bool]) -> Model:
        ...

    def save(self, model: Model, path: Path) -> None:
        ...

    def load(self, path: Path) -> Model:
        ...


@dataclass(frozen=True)
class SentimentModel:
    """
    Fitted featurizer + classifier pipeline.

    ``predict_proba`` returns the probability of the positive class
    for every input text, in input order.
    """

    pipeline: Pipeline
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def positive_index(self) -> int:
        classes = list(self.pipeline.classes_)
        return classes.index(1)

    def predict_proba(self, texts: Sequence[str]) -> np.ndarray:
        if len(texts) == 0:
            return np.empty(0, dtype=float)
        probabilities = self.pipeline.predict_proba(list(texts))
        return np.asarray(probabilities[:, self.positive_index], dtype=float)


def build_pipeline(
    max_iter: int = 1000,
    C: float = 1.0,
    word_ngram_max: int = 2,
    char_ngram_min: int = 2,
    char_ngram_max: int = 4,
    min_df: int = 1,
    random_state: int | None = None,
) -> Pipeline:
    """
    Build the unfitted text classification pipeline.

    Args:
        max_iter: Maximum optimizer iterations
        C: Inverse L2 regularization strength
        word_ngram_max: Largest word n-gram
        char_ngram_min: Smallest character n-gram
        char_ngram_max: Largest character n-gram
        min_df: Minimum document frequency for a feature
        random_state: Seed forwarded to the optimizer

    Returns:
        Unfitted sklearn Pipeline
    """
    features = FeatureUnion(
        transformer_list=[
            (
                "word_tfidf",
                TfidfVectorizer(
                    analyzer="word",
                    ngram_range=(1, word_ngram_max),
                    min_df=min_df,
                    sublinear_tf=True,
                ),
            ),
            (
                "char_tfidf",
                TfidfVectorizer(
                    analyzer="char_wb",
                    ngram_range=(char_ngram_min, char_ngram_max),
                    min_df=min_df,
                    sublinear_tf=True,
                ),
            ),
        ]
    )

    return Pipeline(
        steps=[
            ("features", features),
            ("clf", LogisticRegression(C=C, max_iter=max_iter, solver="liblinear", random_state=random_state)),
        ]
    )


def check_training_labels(labels: Sequence[bool]) -> None:
    """
    Reject training sets that cannot produce a binary classifier.

    Raises:
        DegenerateTrainingError: On zero examples or a single class
    """
    if len(labels) == 0:
        raise DegenerateTrainingError("Cannot train on zero examples")

    classes = {bool(label) for label in labels}
    if len(classes) < 2:
        only = "positive" if classes == {True} else "negative"
        raise DegenerateTrainingError(
            f"Training data contains only {only} examples, both classes are required"
        )


class SklearnBackend:
    """
    scikit-learn implementation of the model backend.

    Models are persisted as a zip archive holding the joblib-pickled
    pipeline and a JSON metadata document.
    """

    def __init__(self, random_state: int | None = None, **pipeline_params: Any):
        self.random_state = random_state
        self.pipeline_params = pipeline_params

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> "SklearnBackend":
        """Create a backend from the ``model`` and ``training`` config sections."""
        model_config = config.get("model", {})
        return cls(
            random_state=config.get("training", {}).get("random_seed"),
            max_iter=model_config.get("max_iter", 1000),
            C=model_config.get("C", 1.0),
            word_ngram_max=model_config.get("word_ngram_max", 2),
            char_ngram_min=model_config.get("char_ngram_min", 2),
            char_ngram_max=model_config.get("char_ngram_max", 4),
            min_df=model_config.get("min_df", 1),
        )

    def fit(self, texts: Sequence[str], labels: Sequence[bool]) -> SentimentModel:
        check_training_labels(labels)

        pipeline = build_pipeline(random_state=self.random_state, **self.pipeline_params)
        y = np.asarray([int(bool(label)) for label in labels])
        pipeline.fit(list(texts), y)

        metadata = {
            "format_version": ARTIFACT_FORMAT_VERSION,
            "created_at_utc": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "sklearn_version": sklearn.__version__,
            "input_column": "text",
            "train_rows": int(len(y)),
            "labels_positive": int(y.sum()),
            "labels_negative": int(len(y) - y.sum()),
        }
        return SentimentModel(pipeline=pipeline, metadata=metadata)

    def save(self, model: SentimentModel, path: Path) -> None:
        """
        Write ``model`` to ``path``, replacing any existing file.

        The archive is written next to the target and renamed into place.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        buffer = io.BytesIO()
        joblib.dump(model.pipeline, buffer)

        tmp_path = path.with_name(path.name + ".tmp")
        try:
            with zipfile.ZipFile(tmp_path, "w", compression=zipfile.ZIP_DEFLATED) as archive:
                archive.writestr(MODEL_MEMBER, buffer.getvalue())
                archive.writestr(
                    METADATA_MEMBER,
                    json.dumps(model.metadata, ensure_ascii=False, indent=2) + "\n",
                )
            os.replace(tmp_path, path)
        finally:
            if tmp_path.exists():
                tmp_path.unlink()

        logger.info(f"Model saved to {path}")

    def load(self, path: Path) -> SentimentModel:
        """
        Restore a model written by ``save``.

        Raises:
            FileNotFoundError: If ``path`` does not exist
            CorruptArtifactError: If the archive cannot be deserialized
        """
        path = Path(path)
        if not path.is_file():
            raise FileNotFoundError(f"Model artifact not found: {path}")

        try:
            with zipfile.ZipFile(path, "r") as archive:
                model_bytes = archive.read(MODEL_MEMBER)
                metadata_bytes = archive.read(METADATA_MEMBER)
        except (zipfile.BadZipFile, KeyError) as e:
            raise CorruptArtifactError(f"Model artifact {path} is not a valid archive: {e}") from e

        try:
            metadata = json.loads(metadata_bytes.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise CorruptArtifactError(f"Model metadata in {path} is unreadable: {e}") from e

        try:
            pipeline = joblib.load(io.BytesIO(model_bytes))
        except Exception as e:
            raise CorruptArtifactError(f"Model in {path} could not be unpickled: {e}") from e

        if not hasattr(pipeline, "predict_proba") or 1 not in list(getattr(pipeline, "classes_", [])):
            raise CorruptArtifactError(f"Model in {path} is not a fitted binary classifier")

        saved_version = metadata.get("sklearn_version")
        if saved_version and saved_version != sklearn.__version__:
            logger.warning(
                f"Model was trained with scikit-learn {saved_version}, "
                f"running {sklearn.__version__}"
            )

        logger.info(f"Model loaded from {path}")
        return SentimentModel(pipeline=pipeline, metadata=metadata)
