"""
Top-level CLI dispatcher: reward-checker <command> [args...].

  check ADDRESS     query every enabled provider, print results as they arrive
  providers         list registered providers
  streamlit         launch the dashboard
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import subprocess
import sys
from dataclasses import asdict
from pathlib import Path
from typing import List, Optional

from reward_checker import config
from reward_checker.controller import RewardCheckController
from reward_checker.preferences import JsonFilePreferences
from reward_checker.providers import (
    BUILTIN_PROVIDERS,
    ProviderResult,
    ValidationError,
    create_default_registry,
)
from reward_checker.ui import providers_frame, results_frame

logger = logging.getLogger(__name__)

EXIT_INVALID_ADDRESS = 2
EXIT_UNKNOWN_PROVIDER = 3


def _configure_logging(level: Optional[str]) -> None:
    logging.basicConfig(
        level=(level or config.log_level()).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _print_progress(results: List[ProviderResult]) -> None:
    done = len(results)
    ok = sum(1 for r in results if r.success)
    print(f"  ... {done} provider(s) settled ({ok} ok)", file=sys.stderr, flush=True)


def _main_check(args: argparse.Namespace) -> int:
    unknown = sorted(set(args.include + args.exclude) - set(BUILTIN_PROVIDERS))
    if unknown:
        print(f"error: unknown provider id(s) {unknown}. Available: {list(BUILTIN_PROVIDERS)}", file=sys.stderr)
        return EXIT_UNKNOWN_PROVIDER
    try:
        registry = create_default_registry(enabled=args.providers or None)
    except KeyError as exc:
        print(f"error: {exc.args[0]}", file=sys.stderr)
        return EXIT_UNKNOWN_PROVIDER
    preferences = JsonFilePreferences(config.preferences_path())
    controller = RewardCheckController(
        registry,
        preferences,
        renderer=None if args.quiet else _print_progress,
        timeout_ms=args.timeout_ms,
        include=args.include or None,
        exclude=args.exclude or None,
    )
    address = args.address or controller.restore_address()
    try:
        results = asyncio.run(controller.check(address))
    except ValidationError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID_ADDRESS

    if args.json:
        print(json.dumps([asdict(r) for r in results], indent=2, default=str))
    else:
        frame = results_frame(results, registry)
        print(frame.drop(columns=["amount"]).fillna("").to_string(index=False))
    return 0


def _main_providers(args: argparse.Namespace) -> int:
    registry = create_default_registry()
    print(providers_frame(registry).to_string(index=False))
    return 0


def _main_streamlit(rest: List[str]) -> int:
    app_path = Path(__file__).resolve().parent.parent / "app.py"
    r = subprocess.run([sys.executable, "-m", "streamlit", "run", str(app_path)] + rest, cwd=None)
    return r.returncode


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reward-checker",
        description="Check unclaimed Cardano DeFi rewards for a wallet address",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")
    subparsers = parser.add_subparsers(dest="command", help="command")

    check = subparsers.add_parser("check", help="Check rewards for one address")
    check.add_argument("address", nargs="?", help="addr1... (defaults to the last address used)")
    check.add_argument("--timeout-ms", type=int, default=None, help="Per-provider timeout")
    check.add_argument("--include", nargs="*", default=[], metavar="ID", help="Only these provider ids")
    check.add_argument("--exclude", nargs="*", default=[], metavar="ID", help="Skip these provider ids")
    check.add_argument("--providers", nargs="*", default=[], metavar="ID", help="Override the enabled provider list")
    check.add_argument("--json", action="store_true", help="Print results as JSON")
    check.add_argument("--quiet", action="store_true", help="No progress output")

    subparsers.add_parser("providers", help="List registered providers")
    subparsers.add_parser("streamlit", help="Run the dashboard")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    parser = build_parser()
    args, rest = parser.parse_known_args(argv)
    if not args.command:
        parser.print_help()
        return 0

    _configure_logging(args.log_level)
    if args.command == "streamlit":
        return _main_streamlit(rest)
    if rest:
        parser.error(f"unrecognized arguments: {' '.join(rest)}")
    if args.command == "check":
        return _main_check(args)
    if args.command == "providers":
        return _main_providers(args)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
