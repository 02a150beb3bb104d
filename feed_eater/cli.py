"""Command line interface for a single fetch run."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import orjson

from feed_eater.config import Configuration, initialize_environment
from feed_eater.errors import HandlerError
from feed_eater.logging_setup import configure_logging
from feed_eater.models import Url
from feed_eater.pipeline import eat

logger = logging.getLogger(__name__)


def _parse_url(value: str) -> Url:
    category, sep, link = value.partition("=")
    if not sep or not link:
        raise argparse.ArgumentTypeError(f"expected CATEGORY=LINK, got {value!r}")
    return Url(category=category, link=link)


def _parse_header(value: str) -> tuple[str, str]:
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected 'Name: value', got {value!r}")
    return name.strip(), header_value.strip()


def build_parser(defaults: Optional[Configuration] = None) -> argparse.ArgumentParser:
    """Return the argument parser; ``defaults`` usually comes from the environment."""
    d = defaults or Configuration()
    p = argparse.ArgumentParser(
        description="Fetch categorized urls concurrently and print the bodies per category as JSON")
    src = p.add_argument_group("urls")
    src.add_argument("--file", type=Path, default=d.file_path,
                     help="JSON file with [{\"Category\": ..., \"Link\": ...}] (env FEED_EATER_FILE)")
    src.add_argument("--url", dest="urls", action="append", type=_parse_url, default=[],
                     metavar="CATEGORY=LINK", help="Url to fetch; repeatable. Overrides --file")

    req = p.add_argument_group("requests")
    req.add_argument("--method", default=d.method, help="HTTP method (default: %(default)s)")
    req.add_argument("--header", dest="headers", action="append", type=_parse_header, default=[],
                     metavar="'NAME: VALUE'", help="Header sent with every request; repeatable")
    req.add_argument("--timeout", type=int, default=d.timeout,
                     help="Per-request deadline in milliseconds (default: %(default)s)")
    req.add_argument("--insecure", action="store_true", default=d.insecure_skip_verify,
                     help="Skip TLS certificate verification")
    req.add_argument("--max-process", type=int, default=d.max_process,
                     help="Maximum requests in flight; 0 means all at once (default: %(default)s)")

    run = p.add_argument_group("run")
    run.add_argument("--period", type=float, default=d.period,
                     help="Whole-run deadline in seconds, needs --os-signals (default: %(default)s)")
    run.add_argument("--os-signals", action="store_true", default=d.use_os_exit_signal,
                     help="Stop on SIGINT/SIGTERM and arm the --period deadline")
    run.add_argument("--fail-fast", action="store_true", default=d.fail_fast,
                     help="Abort the whole run on the first failed request")
    run.add_argument("--output", type=Path, default=None,
                     help="Write the JSON result here instead of stdout")
    run.add_argument(
        "--log-level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Defaults to $LOG_LEVEL or INFO.",
    )
    return p


def configuration_from_args(args: argparse.Namespace, base: Configuration) -> Configuration:
    headers: Dict[str, str] = dict(base.headers)
    headers.update(dict(args.headers))
    urls: List[Url] = list(args.urls)
    return Configuration(
        urls=urls,
        file_path=None if urls else args.file,
        method=args.method,
        headers=headers,
        timeout=args.timeout,
        period=args.period,
        use_os_exit_signal=args.os_signals,
        insecure_skip_verify=args.insecure,
        max_process=args.max_process,
        fail_fast=args.fail_fast,
    )


async def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run one fetch from command line arguments and return the exit status."""
    try:
        base = await initialize_environment()
    except ValueError as exc:
        # orjson.JSONDecodeError is a ValueError too
        configure_logging()
        logger.error("Invalid environment configuration: %s", exc)
        return 2
    args = build_parser(base).parse_args(argv)
    configure_logging(args.log_level)

    config = configuration_from_args(args, base)
    try:
        harvest = await eat(config)
    except HandlerError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2
    except Exception:
        logger.exception("Run aborted")
        return 1

    payload = orjson.dumps(harvest.feeds, option=orjson.OPT_INDENT_2)
    if args.output is not None:
        args.output.write_bytes(payload)
        logger.info("Wrote %d entries to %s", harvest.total, args.output)
    else:
        sys.stdout.buffer.write(payload + b"\n")
        sys.stdout.flush()
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(asyncio.run(main()))
