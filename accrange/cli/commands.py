"""
CLI commands for accrange.

Usage:
    accrange
    accrange run
    accrange run --input requests.txt --output report.txt --catalog-root /data/catalog
    accrange lookup AB 100-200
    accrange --log-level DEBUG lookup AB 100-200
"""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from accrange.core.errors import AccessionLookupError
from accrange.core.settings import Settings, settings as default_settings
from accrange.schemas.lookup_schema import LookupRequest
from accrange.services.lookup_service import LookupService, build_resolver, run_lookup
from accrange.utils.file_io import OutputSink
from accrange.utils.logging_setup import setup_logging

logger = logging.getLogger("accrange")


def _apply_overrides(args: argparse.Namespace, base: Settings) -> Settings:
    overrides = {}
    if getattr(args, "input", None):
        overrides["input_path"] = args.input
    if getattr(args, "output", None):
        overrides["output_path"] = args.output
    if getattr(args, "catalog_root", None):
        overrides["catalog_root"] = args.catalog_root
    if getattr(args, "require_containment", False):
        overrides["require_containment"] = True
    if getattr(args, "no_console", False):
        overrides["mirror_console"] = False
    if getattr(args, "log_level", None):
        overrides["log_level"] = args.log_level
    return base.model_copy(update=overrides)


def cmd_run(config: Settings) -> None:
    """Resolve every request in the input file and write the report."""
    logger.info("Starting accession range lookup...")

    try:
        summary = run_lookup(config)
    except AccessionLookupError as e:
        logger.error(f"Lookup run failed: {e}")
        sys.exit(1)

    logger.info(f"Summary: {summary}")


def cmd_lookup(config: Settings, prefix: str, spec: str) -> None:
    """Resolve one point or range and print the result to stdout."""
    service = LookupService(build_resolver(config), OutputSink(mirror_console=True))

    try:
        service.process(LookupRequest(prefix=prefix, spec=spec))
    except AccessionLookupError as e:
        logger.error(f"Lookup failed for {prefix}: {spec}: {e}")
        sys.exit(1)


def _add_common_options(parser: argparse.ArgumentParser, default=None) -> None:
    parser.add_argument(
        "--log-level",
        default=default,
        help="Logging level (default: LOG_LEVEL or INFO)",
    )
    parser.add_argument(
        "--catalog-root",
        type=Path,
        default=default,
        help="Catalog root directory (default: CATALOG_ROOT)",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve accession numbers against the accession range catalog",
        prog="accrange",
    )
    _add_common_options(parser)

    # accepted after the subcommand too; SUPPRESS keeps a value given before it
    common = argparse.ArgumentParser(add_help=False)
    _add_common_options(common, default=argparse.SUPPRESS)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # run command
    run_p = subparsers.add_parser("run", parents=[common], help="Process the request file")
    run_p.add_argument("--input", type=Path, help="Request file (default: ACCRANGE_INPUT)")
    run_p.add_argument("--output", type=Path, help="Report file (default: ACCRANGE_OUTPUT)")
    run_p.add_argument(
        "--require-containment",
        action="store_true",
        help="Report targets in gaps between catalog entries as not found",
    )
    run_p.add_argument(
        "--no-console",
        action="store_true",
        help="Do not echo report lines to stdout",
    )

    # lookup command
    lookup_p = subparsers.add_parser(
        "lookup",
        parents=[common],
        help="Look up a single accession or range",
    )
    lookup_p.add_argument("prefix", help="Accession prefix, e.g. AB")
    lookup_p.add_argument("spec", help="Accession number or range, e.g. 123 or 100-200")
    lookup_p.add_argument(
        "--require-containment",
        action="store_true",
        help="Report targets in gaps between catalog entries as not found",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    # no subcommand runs the batch lookup with configured paths
    command = args.command or "run"

    config = _apply_overrides(args, default_settings)
    setup_logging("accrange", level=config.log_level, log_file=config.log_file)

    if command == "run":
        cmd_run(config)
    else:
        cmd_lookup(config, args.prefix, args.spec)


if __name__ == "__main__":
    main()
