"""Command line entrypoint for the release-age gate.

Usage:
  npm-age-gate check lodash@4 express
  npm-age-gate check-project --root .
  npm-age-gate run [--manager pnpm] install left-pad
  npm-age-gate run -D install jest

Exit codes: 0 when every package is old enough, 1 when validation failed,
2 for manifest or configuration errors. ``run`` otherwise returns the exit
code of the forwarded package manager.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path

from . import __version__
from .config import Config, ConfigError, load_config
from .discovery import SUPPORTED_MANAGERS, detect_package_manager
from .logging_config import configure_logging
from .models import PackageSpec, ValidationResult
from .registry import RegistryClient
from .report import build_report
from .summary import render_summary
from .validator import ManifestError, PackageValidator, ProjectValidationError
from .wrapper import extract_packages, is_install_command, run_package_manager

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2

SUMMARY_ENV_VAR = "GITHUB_STEP_SUMMARY"

_REASON_TEXT = {
    "too-recent": "published too recently",
    "not-found": "version not found",
    "fetch-failed": "registry metadata unavailable",
    "invalid-timestamp": "no valid publish time",
}


@contextmanager
def open_validator(config: Config) -> Iterator[PackageValidator]:
    with RegistryClient(base_url=config.registry_url, timeout=config.fetch_timeout) as client:
        yield PackageValidator(client, config, max_workers=config.max_workers)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="npm-age-gate", description=__doc__.splitlines()[0])
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines")
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the report as JSON"
    )
    parser.add_argument(
        "--summary",
        type=Path,
        default=None,
        help=f"Append a Markdown summary to this file (default: ${SUMMARY_ENV_VAR} when set)",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    check = sub.add_parser("check", help="Validate packages given as name[@version]")
    check.add_argument("packages", nargs="+", metavar="PACKAGE")

    project = sub.add_parser("check-project", help="Validate every dependency in package.json")
    project.add_argument("--root", type=Path, default=Path("."))

    run = sub.add_parser(
        "run", help="Validate an install, then run the package manager", allow_abbrev=False
    )
    run.add_argument("--manager", choices=SUPPORTED_MANAGERS, default=None)
    run.add_argument("--root", type=Path, default=Path("."))
    run.add_argument("args", nargs=argparse.REMAINDER)

    # Options the run subcommand does not know belong to the package manager.
    args, extras = parser.parse_known_args(argv)
    if extras:
        if args.command != "run":
            parser.error(f"unrecognized arguments: {' '.join(extras)}")
        args.args = extras + args.args
    return args


def _print_failures(result: ValidationResult) -> None:
    for entry in result.failed_packages:
        reason = _REASON_TEXT.get(entry.reason, entry.reason)
        line = f"ERROR: {entry.name}@{entry.requested_version}: {reason}"
        if entry.suggested_version:
            line += f" (try {entry.name}@{entry.suggested_version})"
        print(line, file=sys.stderr)


def _emit(args: argparse.Namespace, result: ValidationResult, config: Config) -> None:
    report = build_report(result, config.minimum_age_days)
    if args.as_json:
        print(json.dumps(report, indent=2))

    summary_path = args.summary or (
        Path(os.environ[SUMMARY_ENV_VAR]) if os.environ.get(SUMMARY_ENV_VAR) else None
    )
    if summary_path is not None:
        with summary_path.open("a", encoding="utf-8") as handle:
            handle.write(render_summary(report))

    if not result.is_valid:
        _print_failures(result)
    elif not args.as_json:
        print(f"All {result.checked} package(s) meet the minimum age of {config.minimum_age_days} days")


def _check(args: argparse.Namespace, config: Config) -> int:
    specs = [PackageSpec.parse(token) for token in args.packages]
    with open_validator(config) as validator:
        result = validator.validate_packages(specs)
    _emit(args, result, config)
    return EXIT_OK if result.is_valid else EXIT_INVALID


def _check_project(args: argparse.Namespace, config: Config) -> int:
    try:
        with open_validator(config) as validator:
            result = validator.validate_all_packages_in_project(args.root)
    except ManifestError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_ERROR
    except ProjectValidationError as exc:
        _emit(args, exc.result, config)
        print("ERROR: Some packages do not meet the minimum age requirement", file=sys.stderr)
        return EXIT_INVALID
    _emit(args, result, config)
    return EXIT_OK


def _run(args: argparse.Namespace, config: Config) -> int:
    forwarded = list(args.args)
    if forwarded[:1] == ["--"]:
        forwarded = forwarded[1:]
    manager = args.manager or detect_package_manager(args.root)

    if is_install_command(forwarded):
        specs = extract_packages(forwarded)
        if specs:
            with open_validator(config) as validator:
                result = validator.validate_packages(specs)
            _emit(args, result, config)
            if not result.is_valid:
                print("ERROR: Installation blocked by packages that are too recent", file=sys.stderr)
                return EXIT_INVALID

    if not forwarded:
        return EXIT_OK
    return run_package_manager(manager, forwarded)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    configure_logging(verbose=args.verbose, log_json=args.log_json)

    root = getattr(args, "root", None)
    try:
        config = load_config(cwd=root)
    except ConfigError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_ERROR

    try:
        if args.command == "check":
            return _check(args, config)
        if args.command == "check-project":
            return _check_project(args, config)
        return _run(args, config)
    except ValueError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        return EXIT_ERROR


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
