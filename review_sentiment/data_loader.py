"""
Data loading and validation module for labeled review data.

Handles reading the tab-separated training file, validation,
basic statistics and the train/test split.
"""

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import numpy as np
import pandas as pd

logger = logging.getLogger("review_sentiment")


TRUE_LABELS = frozenset({"1", "+1", "true", "yes"})
FALSE_LABELS = frozenset({"0", "-1", "false", "no"})


class DataValidationError(Exception):
    """Exception raised for data validation errors."""
    pass


class MissingDataError(FileNotFoundError):
    """Raised when the training data file does not exist."""
    pass


@dataclass(frozen=True)
class LabeledExample:
    """One training or evaluation record."""

    text: str
    label: bool


def parse_label(value: Any) -> bool:
    """
    Parse a raw label cell into a boolean.

    Args:
        value: Raw cell value (string, bool or integer)

    Returns:
        True for the positive class, False for the negative class

    Raises:
        ValueError: If the value is not a recognised label
    """
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, np.integer)) and value in (0, 1):
        return bool(value)
    if value is None or (isinstance(value, float) and np.isnan(value)):
        raise ValueError("Label is missing")

    token = str(value).strip().lower()
    if token in TRUE_LABELS:
        return True
    if token in FALSE_LABELS:
        return False
    raise ValueError(f"Unrecognised label {value!r}")


def validate_sample(text: Any, label: Any) -> tuple[bool, str]:
    """
    Validate a single data sample.

    Args:
        text: Text content
        label: Raw label value

    Returns:
        Tuple of (is_valid, error_message)
    """
    if text is None or (isinstance(text, float) and np.isnan(text)):
        return False, "Text is None"

    if not isinstance(text, str):
        return False, f"Text must be string, got {type(text).__name__}"

    if len(text.strip()) == 0:
        return False, "Text is empty or whitespace only"

    try:
        parse_label(label)
    except ValueError as e:
        return False, str(e)

    return True, ""


def load_labeled_examples(
    data_path: str | Path,
    text_column: int | str = 0,
    label_column: int | str = 1,
) -> list[LabeledExample]:
    """
    Load labeled examples from a tab-separated file with a header row.

    Fields may be double-quoted. Columns are selected by position or
    by header name.

    Args:
        data_path: Path to the training data file
        text_column: Position or name of the text column
        label_column: Position or name of the label column

    Returns:
        List of LabeledExample in file order

    Raises:
        MissingDataError: If the file does not exist
        DataValidationError: If the file or any row is malformed
    """
    data_path = Path(data_path)

    if not data_path.is_file():
        raise MissingDataError(f"Training data file does not exist: {data_path}")

    logger.info(f"Loading labeled reviews from {data_path}")

    # header=None so the header row fixes the field count, every later
    # record with more fields is a tokenizer error instead of an implicit index
    try:
        raw = pd.read_csv(
            data_path,
            sep="\t",
            header=None,
            quotechar='"',
            quoting=csv.QUOTE_MINIMAL,
            dtype=str,
            keep_default_na=False,
            encoding="utf-8",
        )
    except pd.errors.EmptyDataError as e:
        raise DataValidationError(f"Training data file is empty: {data_path}") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise DataValidationError(f"Could not parse {data_path}: {e}") from e

    header = raw.iloc[0].tolist()
    if any(not isinstance(name, str) or not name.strip() for name in header):
        raise DataValidationError(f"Header of {data_path} has an empty column name: {header}")

    rows = raw.iloc[1:]
    text_position = _resolve_column(header, text_column, "text")
    label_position = _resolve_column(header, label_column, "label")

    examples = []
    invalid_samples = []

    for row_number, (text, raw_label) in enumerate(
        zip(rows[text_position].tolist(), rows[label_position].tolist()), start=1
    ):
        is_valid, error = validate_sample(text, raw_label)
        if not is_valid:
            invalid_samples.append((row_number, error))
            continue
        examples.append(LabeledExample(text=text, label=parse_label(raw_label)))

    if invalid_samples:
        raise DataValidationError(
            f"Found {len(invalid_samples)} invalid rows in {data_path}:\n"
            + "\n".join(f"  - data row {row}: {err}" for row, err in invalid_samples[:5])
        )

    logger.info(f"Loaded {len(examples)} valid samples")

    return examples


def _resolve_column(header: list[str], column: int | str, role: str) -> int:
    if isinstance(column, int):
        if not 0 <= column < len(header):
            raise DataValidationError(
                f"Expected a {role} column at position {column}, "
                f"header has {len(header)} column(s): {header}"
            )
        return column
    if column not in header:
        raise DataValidationError(f"Missing {role} column {column!r} in header {header}")
    return header.index(column)


def get_data_statistics(examples: list[LabeledExample]) -> dict[str, Any]:
    """
    Compute statistics for the loaded dataset.

    Args:
        examples: Labeled examples

    Returns:
        Dictionary with dataset statistics
    """
    if not examples:
        return {"error": "Empty dataset"}

    labels_array = np.array([example.label for example in examples], dtype=bool)
    word_counts = [len(example.text.split()) for example in examples]

    pos_count = int(labels_array.sum())
    neg_count = len(examples) - pos_count

    return {
        "total_samples": len(examples),
        "positive_samples": pos_count,
        "negative_samples": neg_count,
        "class_balance": {
            "positive_ratio": pos_count / len(examples),
            "negative_ratio": neg_count / len(examples),
        },
        "word_count": {
            "mean": float(np.mean(word_counts)),
            "min": int(np.min(word_counts)),
            "max": int(np.max(word_counts)),
            "median": float(np.median(word_counts)),
        },
    }


def print_data_statistics(stats: dict[str, Any]) -> None:
    """
    Print dataset statistics in a formatted way.

    Args:
        stats: Statistics dictionary from get_data_statistics
    """
    if "error" in stats:
        print(f"\nDataset statistics unavailable: {stats['error']}\n")
        return

    print("\n" + "=" * 50)
    print("DATASET STATISTICS")
    print("=" * 50)

    print(f"\nTotal samples: {stats['total_samples']}")
    print(f"  - Positive: {stats['positive_samples']} ({stats['class_balance']['positive_ratio']:.1%})")
    print(f"  - Negative: {stats['negative_samples']} ({stats['class_balance']['negative_ratio']:.1%})")

    wc = stats["word_count"]
    print(f"\nWords per review: mean {wc['mean']:.1f}, median {wc['median']:.1f}, "
          f"min {wc['min']}, max {wc['max']}")

    print("=" * 50 + "\n")


def split_data(
    examples: list[LabeledExample],
    test_fraction: float = 0.1,
    random_seed: int | None = 42,
) -> tuple[list[LabeledExample], list[LabeledExample]]:
    """
    Split data into training and test sets.

    Args:
        examples: Labeled examples
        test_fraction: Fraction of data to hold out for evaluation
        random_seed: Seed for the permutation, None for a fresh random split

    Returns:
        Tuple of (train_examples, test_examples)
    """
    if not 0.0 <= test_fraction < 1.0:
        raise ValueError(f"test_fraction must be in [0, 1), got {test_fraction}")

    rng = np.random.default_rng(random_seed)

    n_samples = len(examples)
    indices = rng.permutation(n_samples)

    n_test = int(round(n_samples * test_fraction))
    test_indices = indices[:n_test]
    train_indices = indices[n_test:]

    train = [examples[i] for i in train_indices]
    test = [examples[i] for i in test_indices]

    logger.info(f"Split data: {len(train)} train, {len(test)} test")

    return train, test
