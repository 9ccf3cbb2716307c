"""
Utility functions for the review sentiment project.

Includes logging setup, configuration loading and merging,
reproducibility helpers and path handling.
"""

import copy
import logging
import os
import random
import sys
from pathlib import Path
from typing import Any, TextIO

import numpy as np
import yaml

LOGGER_NAME = "review_sentiment"

DEFAULT_CONFIG: dict[str, Any] = {
    "paths": {
        "data_path": "data/train.txt",
        "model_path": "model.zip",
        "log_dir": None,
    },
    "data": {
        "test_fraction": 0.1,
        "text_column": 0,
        "label_column": 1,
    },
    "training": {
        "random_seed": 42,
    },
    "model": {
        "max_iter": 1000,
        "C": 1.0,
        "word_ngram_max": 2,
        "char_ngram_min": 2,
        "char_ngram_max": 4,
        "min_df": 1,
        "retrain_on_corrupt": False,
    },
    "inference": {
        "threshold": 0.5,
        "batch_size": 256,
    },
    "logging": {
        "level": "INFO",
    },
}


def setup_logging(
    log_level: str = "INFO",
    log_file: str | None = None,
    log_format: str | None = None,
    stream: TextIO | None = None,
) -> logging.Logger:
    """
    Setup logging configuration.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        log_format: Optional custom log format
        stream: Console stream, defaults to stdout

    Returns:
        Configured logger instance

    Raises:
        ValueError: If log_level is not a logging level name
    """
    if log_format is None:
        log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    level = logging.getLevelName(str(log_level).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {log_level!r}")

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)

    logger.handlers.clear()

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(log_format))
    logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(log_format))
        logger.addHandler(file_handler)

    return logger


def merge_config(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """
    Recursively merge ``override`` into a copy of ``base``.

    Nested dictionaries are merged key by key, any other value in
    ``override`` replaces the one in ``base``.
    """
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


def load_config(config_path: str | Path | None = None) -> dict[str, Any]:
    """
    Load configuration from a YAML file on top of the built-in defaults.

    Args:
        config_path: Path to YAML configuration file, or None for defaults only

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid
    """
    if config_path is None:
        return copy.deepcopy(DEFAULT_CONFIG)

    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        user_config = yaml.safe_load(f) or {}

    if not isinstance(user_config, dict):
        raise ValueError(f"Configuration root must be a mapping: {config_path}")

    return merge_config(DEFAULT_CONFIG, user_config)


def set_seed(seed: int | None) -> None:
    """
    Set random seed for reproducibility.

    Args:
        seed: Random seed value, None leaves the generators untouched
    """
    if seed is None:
        return

    random.seed(seed)
    np.random.seed(seed)
    os.environ["PYTHONHASHSEED"] = str(seed)


def resolve_path(path: str | Path, base_dir: str | Path | None = None) -> Path:
    """Resolve ``path`` against ``base_dir`` (defaults to the working directory)."""
    path = Path(path)
    if path.is_absolute():
        return path
    return Path(base_dir or Path.cwd()) / path

