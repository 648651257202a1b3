from __future__ import annotations

import argparse
import json
from typing import Any, Callable, Dict, List, Mapping, Optional

from pymongo.errors import PyMongoError

from mongocompare.common import PrintLogger
from mongocompare.config import CompareConfig, validate_config
from mongocompare.endpoints.factory import EndpointFactory
from mongocompare.tools.mongo import MongoTool

from .checks import ReconFatalError
from .results import FATAL_EXIT_STATUS
from .runner import run_reconciliation

_CONNECTION_FLAGS = {
    "uri": ("URI", "connection string"),
    "username": ("Username", "username"),
    "password": ("Password", "password"),
    "database": ("Database", "database"),
    "collection": ("CollName", "collection"),
}


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="mongocompare",
        description="Compare a source and a target MongoDB collection with sampled checks.",
    )
    parser.add_argument("--config", help="Optional JSON configuration file", default=None)
    for side in ("source", "target"):
        for name, (legacy, label) in _CONNECTION_FLAGS.items():
            parser.add_argument(
                f"--{side}-{name}",
                f"--{side}{legacy}",
                dest=f"{side}_{name}",
                default=None,
                help=f"{side} {label} (env {side.upper()}_{name.upper()})",
            )
    parser.add_argument(
        "--random-sample-size",
        "--randomSampleSize",
        dest="random_sample_size",
        type=int,
        default=None,
        help="Random sample size used for content comparison (default: 100, 0 disables)",
    )
    parser.add_argument(
        "--first-ids-count",
        "--firstIdsCount",
        dest="first_ids_count",
        type=int,
        default=None,
        help="Number of _id values to compare from the beginning (default: 100)",
    )
    parser.add_argument(
        "--last-ids-count",
        "--lastIdsCount",
        dest="last_ids_count",
        type=int,
        default=None,
        help="Number of _id values to compare from the end (default: 100)",
    )
    parser.add_argument(
        "--ignored-index-options",
        default=None,
        help="Comma separated index options to ignore in addition to 'background'",
    )
    parser.add_argument(
        "--missing-document-fatal",
        action="store_const",
        const=True,
        default=None,
        help="Abort the run when a sampled document is missing from the target",
    )
    parser.add_argument("--output-json", help="Optional path to write the run results as JSON", default=None)
    parser.add_argument("--log-file", help="Optional file that mirrors log lines", default=None)
    return parser.parse_args(argv)


def _load_file_config(path: Optional[str]) -> Dict[str, Any]:
    if not path:
        return {}
    with open(path, "r", encoding="utf-8") as handle:
        cfg = json.load(handle)
    if not isinstance(cfg, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return cfg


def _stop_tool(tool: Any, logger: PrintLogger) -> None:
    # the run's own outcome stands when shutdown fails
    try:
        tool.stop()
    except Exception as exc:
        logger.warn("recon_tool_stop_failed", err=str(exc))


def run_cli(
    argv: Optional[List[str]] = None,
    env: Optional[Mapping[str, str]] = None,
    tool_factory: Callable[[CompareConfig], Any] = MongoTool.from_config,
) -> None:
    args = parse_args(argv)
    try:
        config = CompareConfig.from_sources(args, env=env, file_config=_load_file_config(args.config))
        validate_config(config)
    except (OSError, ValueError) as exc:
        PrintLogger(job_name="mongocompare").error("recon_config_invalid", err=str(exc))
        raise SystemExit(FATAL_EXIT_STATUS) from exc

    logger = PrintLogger(job_name=config.job_name, file_path=config.log_file)
    logger.info(
        "recon_config",
        source=config.source.namespace,
        target=config.target.namespace,
        sample_size=config.sample_size,
        first_ids_count=config.first_ids_count,
        last_ids_count=config.last_ids_count,
    )
    try:
        tool = tool_factory(config)
    except PyMongoError as exc:
        logger.error("recon_connect_failed", err=str(exc))
        raise SystemExit(FATAL_EXIT_STATUS) from exc
    try:
        source, target = EndpointFactory.build_handles(tool)
        summary = run_reconciliation(source=source, target=target, config=config, logger=logger)
    except (ReconFatalError, PyMongoError) as exc:
        logger.error("recon_fatal_error", check=getattr(exc, "check_name", None), err=str(exc))
        raise SystemExit(FATAL_EXIT_STATUS) from exc
    finally:
        _stop_tool(tool, logger)

    print("")
    for line in summary.render_lines():
        print(line)
    if args.output_json:
        with open(args.output_json, "w", encoding="utf-8") as handle:
            json.dump(summary.to_dict(), handle, indent=2, sort_keys=True)
    if summary.exit_status:
        raise SystemExit(summary.exit_status)


def main() -> None:
    run_cli()


__all__ = ["main", "parse_args", "run_cli"]
