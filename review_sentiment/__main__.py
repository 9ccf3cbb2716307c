"""
Command line entry point: load or train the model, then run the demo.

Usage:
    python -m review_sentiment
    python -m review_sentiment --config configs/default.yaml --verbose
    python -m review_sentiment --retrain "Un film magnifique" "Quel navet"
    python -m review_sentiment --json > predictions.json
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path

from .acquisition import AcquisitionResult, TrainedFresh, get_model
from .context import PipelineContext
from .evaluate import print_metrics
from .inference import DEMO_REVIEWS, PredictionExample, PredictionResult, predict, print_predictions
from .utils import load_config, set_seed, setup_logging

logger = logging.getLogger("review_sentiment")


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="review-sentiment",
        description="Train or load a review sentiment classifier and run sample predictions",
        formatter_class=argparse.ArgumentDefaultsHelpFormatter,
    )

    parser.add_argument(
        "texts",
        nargs="*",
        help="Reviews to classify instead of the built-in examples",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file",
    )
    parser.add_argument(
        "--data-path",
        type=str,
        default=None,
        help="Training data file (overrides config)",
    )
    parser.add_argument(
        "--model-path",
        type=str,
        default=None,
        help="Model artifact file (overrides config)",
    )
    parser.add_argument(
        "--retrain",
        action="store_true",
        help="Train a new model even if an artifact exists",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print metrics and predictions as one JSON document, logs go to stderr",
    )

    return parser.parse_args(argv)


def run(
    context: PipelineContext,
    texts: list[str] | None = None,
    force_retrain: bool = False,
    verbose: bool = False,
    as_json: bool = False,
) -> tuple[AcquisitionResult, list[PredictionResult]]:
    """
    Acquire the model and predict ``texts`` (default: the demo reviews).

    Returns:
        Tuple of (acquisition result, prediction results)
    """
    acquisition = get_model(context, force_retrain=force_retrain, verbose=verbose and not as_json)
    metrics = acquisition.metrics if isinstance(acquisition, TrainedFresh) else None

    if metrics is not None and not as_json:
        print_metrics(metrics)

    examples = [PredictionExample(text=text) for text in (texts or DEMO_REVIEWS)]
    results = predict(
        acquisition.model,
        examples,
        threshold=context.threshold,
        batch_size=context.batch_size,
        show_progress=len(examples) > context.batch_size,
    )

    if as_json:
        print(json.dumps(
            {
                "trained": isinstance(acquisition, TrainedFresh),
                "metrics": metrics.to_dict() if metrics is not None else None,
                "predictions": [result.to_dict() for result in results],
            },
            ensure_ascii=False,
            indent=2,
        ))
    else:
        print_predictions(results)

    return acquisition, results


def main(argv: list[str] | None = None) -> int:
    """Main entry point, returns the process exit status."""
    args = parse_args(argv)
    log_stream = sys.stderr if args.json else sys.stdout

    setup_logging(log_level="DEBUG" if args.verbose else "INFO", stream=log_stream)

    try:
        config = load_config(args.config)
        paths = config["paths"]
        if args.data_path:
            paths["data_path"] = args.data_path
        if args.model_path:
            paths["model_path"] = args.model_path

        log_level = "DEBUG" if args.verbose else config["logging"]["level"]
        log_file = None
        if paths.get("log_dir"):
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            log_file = str(Path(paths["log_dir"]) / f"run_{timestamp}.log")
        setup_logging(log_level=log_level, log_file=log_file, stream=log_stream)

        set_seed(config["training"].get("random_seed"))

        context = PipelineContext.from_config(config)
        run(
            context,
            texts=args.texts,
            force_retrain=args.retrain,
            verbose=args.verbose,
            as_json=args.json,
        )
    except Exception:
        logger.exception("Fatal error, aborting")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
