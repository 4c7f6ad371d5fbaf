"""
strategy-core command line

  strategy-core validate FILE          print the canonical strategy, or its issues
  strategy-core run FILE [--url URL]   validate, then run on the strategy service
  strategy-core library                print the pre-built strategies

FILE may be canonical JSON or a builder draft. Use '-' for stdin.
"""

import argparse
import json
import logging
import sys
from typing import Any, List, Optional

from .client import run_strategy_sync
from .config import configure_logging, get_service_url
from .exceptions import NetworkError, StrategyValidationError
from .library import get_prebuilt_strategies
from .models import StrategyDefinition
from .serialization import serialize
from .validation import validate_strategy

logger = logging.getLogger(__name__)


def _read_json(path: str) -> Any:
    if path == '-':
        return json.load(sys.stdin)
    with open(path, 'r', encoding='utf-8') as f:
        return json.load(f)


def _load_strategy(path: str) -> Optional[StrategyDefinition]:
    """Parse and validate FILE; prints problems and returns None on failure"""
    try:
        draft = _read_json(path)
    except (OSError, ValueError) as e:
        print(f"Error: cannot read {path}: {e}", file=sys.stderr)
        return None

    if not isinstance(draft, dict):
        print(f"Error: {path} must contain a JSON object", file=sys.stderr)
        return None

    try:
        return validate_strategy(draft)
    except StrategyValidationError as e:
        print(f"Invalid strategy ({len(e.issues)} issue(s)):", file=sys.stderr)
        for issue in e.issues:
            print(f"  - {issue} [{issue.code}]", file=sys.stderr)
        return None


def cmd_validate(args: argparse.Namespace) -> int:
    strategy = _load_strategy(args.file)
    if strategy is None:
        return 1
    print(serialize(strategy))
    return 0


def cmd_run(args: argparse.Namespace) -> int:
    strategy = _load_strategy(args.file)
    if strategy is None:
        return 1
    try:
        results = run_strategy_sync(strategy, url=args.url)
    except NetworkError as e:
        print(e.user_message, file=sys.stderr)
        return 1
    print(json.dumps(results, indent=2))
    return 0


def cmd_library(args: argparse.Namespace) -> int:
    for strategy in get_prebuilt_strategies():
        print(serialize(strategy))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='strategy-core',
        description="Validate, inspect and run trading strategy definitions",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default: LOG_LEVEL env or INFO)")
    subparsers = parser.add_subparsers(dest='command', required=True)

    validate_parser = subparsers.add_parser('validate', help="Validate a strategy file and print it in canonical form")
    validate_parser.add_argument('file', help="Strategy JSON file ('-' for stdin)")
    validate_parser.set_defaults(func=cmd_validate)

    run_parser = subparsers.add_parser('run', help="Run a strategy on the strategy service")
    run_parser.add_argument('file', help="Strategy JSON file ('-' for stdin)")
    run_parser.add_argument(
        '--url',
        default=None,
        help=f"Service endpoint (default: STRATEGY_SERVICE_URL or {get_service_url()})",
    )
    run_parser.set_defaults(func=cmd_run)

    library_parser = subparsers.add_parser('library', help="Print the pre-built strategies")
    library_parser.set_defaults(func=cmd_library)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    return args.func(args)


if __name__ == '__main__':
    sys.exit(main())
