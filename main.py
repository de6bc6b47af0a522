"""CLI entrypoint for predictions, the source catalogue and raw scraping."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys

from aggregator import DataAggregator
from intelligence import TASKS, produce_prediction
from models import ModelId, SourceCategory
from scrapers import default_sources
from utils import InputValidationError, configure_package_logging


def _params(pairs) -> dict:
    params = {}
    for pair in pairs or []:
        key, sep, value = str(pair).partition("=")
        if not sep or not key.strip():
            raise argparse.ArgumentTypeError(f"--param expects key=value, got '{pair}'")
        params[key.strip()] = value.strip()
    return params


def _print(payload) -> None:
    print(json.dumps(payload, ensure_ascii=False, indent=2, default=str))


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Political Pulse CLI")
    parser.add_argument("--log-level", default="WARNING")
    sub = parser.add_subparsers(dest="command", required=True)

    predict = sub.add_parser("predict")
    predict.add_argument("task", choices=sorted(TASKS))
    predict.add_argument("--param", action="append", default=[], metavar="KEY=VALUE")
    predict.add_argument("--model", choices=[m.value for m in ModelId], default=None)
    predict.add_argument("--seed", type=int, default=None)
    predict.add_argument("--no-scrape", action="store_true")

    sources = sub.add_parser("sources")
    sources.add_argument("--category", action="append", choices=[c.value for c in SourceCategory])
    sources.add_argument("--subject", default=None)

    scrape = sub.add_parser("scrape")
    scrape.add_argument("--category", action="append", choices=[c.value for c in SourceCategory])
    scrape.add_argument("--query", default=None)
    scrape.add_argument("--subject", default=None)
    scrape.add_argument("--progress", action="store_true")

    args = parser.parse_args(argv)
    configure_package_logging(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))

    if args.command == "predict":
        try:
            params = _params(args.param)
        except argparse.ArgumentTypeError as e:
            parser.error(str(e))
        try:
            outcome = asyncio.run(
                produce_prediction(
                    args.task,
                    params,
                    model_id=args.model,
                    seed=args.seed,
                    skip_scraping=True if args.no_scrape else None,
                )
            )
        except InputValidationError as e:
            _print({"error": e.message, **e.details})
            return 2
        _print(outcome.model_dump(mode="json"))
        return 0

    categories = [SourceCategory(c) for c in args.category] if args.category else None

    if args.command == "sources":
        configs = default_sources(categories, subject=args.subject)
        _print(
            [
                {"name": c.name, "url": c.url, "category": c.category.value, "max_containers": c.max_containers}
                for c in configs
            ]
        )
        return 0

    if args.command == "scrape":
        context = asyncio.run(
            DataAggregator().aggregate_categories(
                categories,
                query=args.query,
                subject=args.subject,
                show_progress=args.progress,
            )
        )
        _print(context.model_dump(mode="json"))
        return 0

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
