"""
Run context shared by every pipeline step.

Built once at start-up from the configuration and passed explicitly
into acquisition, training, evaluation and inference.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .model import ModelBackend, SklearnBackend
from .utils import resolve_path


@dataclass(frozen=True)
class PipelineContext:
    """Resolved settings and the model backend for one program run."""

    data_path: Path
    model_path: Path
    backend: ModelBackend
    test_fraction: float = 0.1
    random_seed: int | None = 42
    threshold: float = 0.5
    batch_size: int = 256
    text_column: int | str = 0
    label_column: int | str = 1
    retrain_on_corrupt: bool = False

    def __post_init__(self):
        if not 0.0 <= self.threshold <= 1.0:
            raise ValueError(f"threshold must be in [0, 1], got {self.threshold}")
        if not 0.0 <= self.test_fraction < 1.0:
            raise ValueError(f"test_fraction must be in [0, 1), got {self.test_fraction}")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")

    @classmethod
    def from_config(
        cls,
        config: dict[str, Any],
        backend: ModelBackend | None = None,
        base_dir: str | Path | None = None,
    ) -> "PipelineContext":
        """
        Create the context from a configuration dictionary.

        Args:
            config: Merged configuration (see utils.DEFAULT_CONFIG)
            backend: Model backend, defaults to SklearnBackend built from config
            base_dir: Directory relative paths resolve against (default: cwd)

        Returns:
            PipelineContext
        """
        paths = config["paths"]
        data = config.get("data", {})
        inference = config.get("inference", {})

        return cls(
            data_path=resolve_path(paths["data_path"], base_dir),
            model_path=resolve_path(paths["model_path"], base_dir),
            backend=backend or SklearnBackend.from_config(config),
            test_fraction=float(data.get("test_fraction", 0.1)),
            random_seed=config.get("training", {}).get("random_seed"),
            threshold=float(inference.get("threshold", 0.5)),
            batch_size=int(inference.get("batch_size", 256)),
            text_column=data.get("text_column", 0),
            label_column=data.get("label_column", 1),
            retrain_on_corrupt=bool(config.get("model", {}).get("retrain_on_corrupt", False)),
        )
