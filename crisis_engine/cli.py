# command line entry point
# predict from a json snapshot, summarize stored predictions, or print the default config

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from crisis_engine.config import settings
from crisis_engine.errors import CrisisEngineError
from crisis_engine.services.engine import CrisisPredictionEngine
from crisis_engine.services.history import summarize_predictions

logger = logging.getLogger("crisis_engine")


def _load_json(path: str) -> Any:
    try:
        return json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise SystemExit(f"Could not read {path}: {e}")


def _print(data: Any) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False, default=str))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="crisis-engine", description="Crisis risk scoring engine")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL, help="logging level (default: %(default)s)")
    sub = parser.add_subparsers(dest="command")

    predict = sub.add_parser("predict", help="score a prediction input json file")
    predict.add_argument("input", help="path to the prediction input json")
    predict.add_argument("--previous", help="path to the previous prediction json, for trend comparison")
    predict.add_argument("--config", help="path to a partial config json applied over the defaults")

    summarize = sub.add_parser("summarize", help="summarize a json list of stored predictions")
    summarize.add_argument("history", help="path to a json list of predictions")
    summarize.add_argument("--days", type=int, default=30, help="look-back window in days (default: %(default)s)")

    sub.add_parser("config", help="print the default configuration")

    return parser


def run(args: argparse.Namespace) -> int:
    engine = CrisisPredictionEngine()

    if args.command == "predict":
        if args.config:
            engine = engine.with_config(_load_json(args.config))
        previous = _load_json(args.previous) if args.previous else None
        prediction = engine.predict(_load_json(args.input), previous=previous)
        _print(prediction.model_dump(mode="json", by_alias=True))

    elif args.command == "summarize":
        summary = summarize_predictions(_load_json(args.history), days=args.days)
        last = summary["last_prediction"]
        if last is not None:
            summary["last_prediction"] = last.model_dump(mode="json", by_alias=True)
        _print(summary)

    elif args.command == "config":
        _print(engine.get_config().model_dump(mode="json", by_alias=True))

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, str(args.log_level).upper(), logging.INFO),
        format="%(asctime)s - %(levelname)s - %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 1

    try:
        return run(args)
    except CrisisEngineError as e:
        logger.error(str(e))
        return 2


if __name__ == "__main__":
    sys.exit(main())
