"""CLI entrypoint for pinclude."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pinclude import __version__
from pinclude.compiler import check_syntax, compile_manifest
from pinclude.config import PincludeConfig, load_config
from pinclude.constants.branding import CLI_DESCRIPTION
from pinclude.constants.reporting import DEFAULT_OUTPUT_FORMAT, VALID_OUTPUT_FORMATS
from pinclude.exceptions import ConfigError, PincludeError
from pinclude.reporting import render_result


def build_parser() -> argparse.ArgumentParser:
    """Build top-level CLI parser."""
    parser = argparse.ArgumentParser(
        prog="pinclude",
        description=CLI_DESCRIPTION,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    compile_cmd = subparsers.add_parser("compile", help="Evaluate a site manifest and print the result")
    compile_cmd.add_argument("manifest", type=Path, help="Site manifest to compile")
    compile_cmd.add_argument("-c", "--config", type=Path, help="Explicit config file")
    compile_cmd.add_argument(
        "-f",
        "--format",
        choices=sorted(VALID_OUTPUT_FORMATS),
        default=DEFAULT_OUTPUT_FORMAT,
        help=f"Output format (default: {DEFAULT_OUTPUT_FORMAT})",
    )
    compile_cmd.add_argument("-v", "--verbose", action="store_true", help="Log include tracing at debug level")

    parse_cmd = subparsers.add_parser("parse", help="Check manifest syntax without evaluating it")
    parse_cmd.add_argument("manifest", type=Path, help="Manifest to check")
    parse_cmd.add_argument("-c", "--config", type=Path, help="Explicit config file")
    parse_cmd.add_argument("-v", "--verbose", action="store_true", help="Log at debug level")

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        config = load_config(args.manifest.parent, args.config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    _configure_logging(config, verbose=args.verbose)

    if args.command == "parse":
        return _handle_parse(args, config)
    if args.command != "compile":
        parser.error(f"Unsupported command: {args.command}")

    try:
        result = compile_manifest(args.manifest, config=config)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    except PincludeError as exc:
        print(f"Compile error: {exc}", file=sys.stderr)
        return 1

    print(render_result(result, args.format))
    return 0


def _handle_parse(args: argparse.Namespace, config: PincludeConfig) -> int:
    """Check manifest syntax and report the result."""
    try:
        count = check_syntax(args.manifest, config=config)
    except PincludeError as exc:
        print(f"Parse error: {exc}", file=sys.stderr)
        return 1
    print(f"{args.manifest}: syntax OK ({count} top-level statements)")
    return 0


def _configure_logging(config: PincludeConfig, *, verbose: bool) -> None:
    level = logging.DEBUG if verbose else getattr(logging, config.log_level, logging.INFO)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
