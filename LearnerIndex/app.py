"""Command-line entry point for LearnerIndex."""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from typing import Optional, Sequence

import pandas as pd

from .config import SettingsManager
from .models import LearnerCatalog, describe_task, get_supported_learner_properties, get_supported_task_types
from .utils import setup_logging
from .utils.errors import LearnerIndexError


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="learnerindex", description="List machine-learning learners by task type and properties")
    ap.add_argument("types", nargs="*", metavar="TYPE",
                    help=f"task types to list ({', '.join(get_supported_task_types())}); all if omitted")
    ap.add_argument("-p", "--properties", nargs="+", default=[], metavar="PROP",
                    help=f"required learner properties ({', '.join(get_supported_learner_properties())})")
    ap.add_argument("--task-csv", metavar="PATH", help="describe the task posed by a CSV file and list learners for it")
    ap.add_argument("--target", action="append", metavar="COL", help="target column of --task-csv; repeat for several")
    ap.add_argument("--task-type", choices=get_supported_task_types(), help="task type of --task-csv (inferred if omitted)")
    ap.add_argument("--no-check-packages", action="store_true", help="also list learners whose packages are missing")
    ap.add_argument("--no-warn", action="store_true", help="do not warn about learners with missing packages")
    ap.add_argument("--create", action="store_true", help="construct the learners and print them")
    ap.add_argument("--format", choices=["table", "csv", "json"], default="table")
    ap.add_argument("--log-dir", help="directory for the log file (defaults to paths.logs_dir)")
    return ap


def create_app(settings: Optional[SettingsManager] = None, log_dir: Optional[str] = None) -> LearnerCatalog:
    settings = settings if settings is not None else SettingsManager()

    logs_dir = log_dir or settings.get("paths.logs_dir", "./logs")
    level = logging.getLevelName(str(settings.get("logging.level", "INFO")).upper())
    setup_logging(logs_dir, level=level if isinstance(level, int) else logging.INFO,
                  console=bool(settings.get("logging.console", True)))

    def _excepthook(exc_type, exc, tb):
        logging.getLogger("learnerindex.crash").error(
            "Uncaught exception:\n%s",
            "".join(traceback.format_exception(exc_type, exc, tb)),
        )
        sys.__excepthook__(exc_type, exc, tb)

    sys.excepthook = _excepthook

    return LearnerCatalog(settings=settings)


def run(argv: Optional[Sequence[str]] = None, catalog: Optional[LearnerCatalog] = None) -> int:
    args = build_parser().parse_args(argv)
    if catalog is None:
        catalog = create_app(log_dir=args.log_dir)
    log = logging.getLogger("learnerindex.cli")

    try:
        obj = args.types or None
        if args.task_csv:
            df = pd.read_csv(args.task_csv)
            obj = describe_task(df, target=args.target, task_type=args.task_type)
            log.info("Task from %s: type=%s, properties=%s", args.task_csv, obj.type, obj.learner_properties())

        result = catalog.list_learners(
            obj,
            properties=args.properties,
            warn_missing_packages=not args.no_warn,
            check_packages=not args.no_check_packages,
            create=args.create,
        )
    except (LearnerIndexError, OSError, pd.errors.ParserError) as e:
        log.error("%s", e)
        print(f"error: {e}", file=sys.stderr)
        return 2

    if args.create:
        for learner in result.values():
            print(repr(learner))
            print()
        return 0

    frame = pd.DataFrame(result)
    if args.format == "csv":
        print(frame.to_csv(index=False), end="")
    elif args.format == "json":
        print(frame.to_json(orient="records"))
    else:
        print(frame.drop(columns=["note"]).to_string(index=False))
    return 0
