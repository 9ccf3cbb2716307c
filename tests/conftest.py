"""
Pytest configuration and fixtures for review sentiment tests.
"""

import json
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from review_sentiment.context import PipelineContext
from review_sentiment.data_loader import LabeledExample
from review_sentiment.model import CorruptArtifactError, SklearnBackend, check_training_labels


FILLERS = ["movie", "show", "plot", "cast", "ending", "series", "story", "acting", "music", "scene"]


class KeywordModel:
    """Fake model: reviews containing a positive keyword score high."""

    def __init__(self, keyword: str = "great", high: float = 0.9, low: float = 0.1):
        self.keyword = keyword
        self.high = high
        self.low = low
        self.calls: list[list[str]] = []

    def predict_proba(self, texts):
        self.calls.append(list(texts))
        return np.array([self.high if self.keyword in text else self.low for text in texts])


class FakeBackend:
    """Fake backend that records calls and persists the keyword as JSON."""

    def __init__(self):
        self.fit_calls = 0
        self.load_calls = 0
        self.save_calls = 0

    def fit(self, texts, labels):
        check_training_labels(labels)
        self.fit_calls += 1
        return KeywordModel()

    def save(self, model, path):
        self.save_calls += 1
        Path(path).write_text(json.dumps({"keyword": model.keyword}), encoding="utf-8")

    def load(self, path):
        self.load_calls += 1
        try:
            payload = json.loads(Path(path).read_text(encoding="utf-8"))
            return KeywordModel(keyword=payload["keyword"])
        except (ValueError, KeyError) as e:
            raise CorruptArtifactError(str(e)) from e


def write_tsv(path: Path, rows: list[tuple[str, str]], header: str = "SentimentText\tSentiment") -> Path:
    """Write a tab-separated file with quoted text fields."""
    path.parent.mkdir(parents=True, exist_ok=True)
    lines = [header] + [f'"{text}"\t{label}' for text, label in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return path


def make_separable_rows(n_per_class: int, template: str = "the {filler} was {word}") -> list[tuple[str, str]]:
    """Rows where positives contain 'great' and negatives 'terrible'."""
    rows = []
    for i in range(n_per_class):
        filler = FILLERS[i % len(FILLERS)]
        rows.append((template.format(filler=filler, word="great") + f" {i}", "1"))
        rows.append((template.format(filler=filler, word="terrible") + f" {i}", "0"))
    return rows


@pytest.fixture
def sample_examples() -> list[LabeledExample]:
    """Small labeled set."""
    return [
        LabeledExample("This movie was absolutely great! I loved every minute.", True),
        LabeledExample("Terrible film. Complete waste of time.", False),
        LabeledExample("An okay movie, nothing special.", False),
        LabeledExample("Best movie ever, great cast!", True),
        LabeledExample("Boring and predictable story.", False),
    ]


@pytest.fixture
def separable_examples() -> list[LabeledExample]:
    """100 textually separable examples, 50 per class."""
    return [
        LabeledExample(text, label == "1")
        for text, label in make_separable_rows(50)
    ]


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def sklearn_backend() -> SklearnBackend:
    return SklearnBackend(random_state=0)


@pytest.fixture
def workdir(tmp_path) -> Path:
    """Working directory containing data/train.txt with separable reviews."""
    write_tsv(tmp_path / "data" / "train.txt", make_separable_rows(50))
    return tmp_path


def make_context(workdir: Path, backend, **overrides) -> PipelineContext:
    params = {
        "data_path": workdir / "data" / "train.txt",
        "model_path": workdir / "model.zip",
        "backend": backend,
        "random_seed": 42,
    }
    params.update(overrides)
    return PipelineContext(**params)
