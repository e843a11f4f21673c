"""
CLI for the FindyMail node.

Provides terminal access to:
- Running an operation over a JSON file of items
- Testing an API key
- Listing the supported operations
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from node_sdk import NodeExecutionContext, NodeOperationError
from node_sdk.config import get_settings
from node_sdk.observability import setup_logging

from .credentials import HEADER_SCHEMES, FindyMailApiCredential
from .manifest import CREDENTIAL_TYPES
from .node import FindyMailNode
from .operations import OPERATIONS


def _credential_data(args: argparse.Namespace) -> Dict[str, Any]:
    settings = get_settings()
    api_key = args.api_key
    if not api_key and settings.findymail_api_key is not None:
        api_key = settings.findymail_api_key.get_secret_value()
    return {
        "apiKey": api_key or "",
        "headerScheme": args.header_scheme or settings.findymail_header_scheme,
    }


def parse_params(pairs: List[str]) -> Dict[str, Any]:
    """
    Turn ``key=value`` pairs into node parameters.

    Values that parse as JSON (lists, objects, booleans) are used as such;
    anything else is kept as a string. Repeating ``jobTitles`` appends.
    """
    params: Dict[str, Any] = {}
    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep:
            raise ValueError(f"Expected key=value, got: {pair}")
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            value = raw
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            value = raw

        if key.startswith("additionalOptions."):
            params.setdefault("additionalOptions", {})[key.split(".", 1)[1]] = value
        elif key == "jobTitles" and not isinstance(value, list):
            params.setdefault("jobTitles", []).append(value)
        else:
            params[key] = value
    return params


def load_items(path: str | None) -> List[Dict[str, Any]]:
    """Load input items from a JSON array file; defaults to one empty item."""
    if not path:
        return [{"json": {}}]
    data = json.loads(Path(path).read_text())
    if not isinstance(data, list):
        raise ValueError("Items file must contain a JSON array")
    return [item if isinstance(item, dict) and "json" in item else {"json": item} for item in data]


def cmd_run(args: argparse.Namespace) -> int:
    """Run one operation over the input items and print the results."""
    setup_logging()

    try:
        params = parse_params(args.param or [])
        items = load_items(args.items)
    except (ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    params["operation"] = args.operation

    context = NodeExecutionContext(
        parameters=params,
        credentials={FindyMailApiCredential.name: _credential_data(args)},
        input_data=items,
        credential_types=CREDENTIAL_TYPES,
    )
    node = FindyMailNode(continue_on_fail=args.continue_on_fail)
    node.set_context(context)

    try:
        results = node.execute()
    except NodeOperationError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(json.dumps(results[0], indent=2))
    return 0


def cmd_test_credential(args: argparse.Namespace) -> int:
    """Check that the API key is accepted."""
    setup_logging()

    result = FindyMailApiCredential(_credential_data(args)).test()
    print(result["message"])
    if result["success"] and result.get("data"):
        print(json.dumps(result["data"], indent=2))
    return 0 if result["success"] else 1


def cmd_operations(args: argparse.Namespace) -> int:
    """List supported operations and their body fields."""
    for op in OPERATIONS.values():
        print(f"{op.name}: {op.method} {op.url}")
        for spec in op.required:
            print(f"  {spec.param} -> {spec.body_key} (required)")
        if op.required_any:
            names = ", ".join(f"{s.param} -> {s.body_key}" for s in op.required_any)
            print(f"  one of: {names}")
        for spec in op.optional:
            print(f"  additionalOptions.{spec.param} -> {spec.body_key} (optional)")
    return 0


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="findymail",
        description="FindyMail node command line",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    def add_credential_args(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--api-key", help="FindyMail API key (default: NODE_SDK_FINDYMAIL_API_KEY)")
        sub.add_argument("--header-scheme", choices=sorted(HEADER_SCHEMES),
                         help="Send the key as X-API-Key header or Bearer token")

    run_parser = subparsers.add_parser("run", help="Run an operation over input items")
    run_parser.add_argument("--operation", required=True, help="Operation id, e.g. findFromName")
    run_parser.add_argument("--param", action="append", metavar="KEY=VALUE",
                            help="Node parameter; repeat for more")
    run_parser.add_argument("--items", help="JSON file with an array of input items")
    run_parser.add_argument("--continue-on-fail", action="store_true",
                            help="Record failed items as errors instead of aborting")
    add_credential_args(run_parser)

    test_parser = subparsers.add_parser("test-credential", help="Check an API key")
    add_credential_args(test_parser)

    subparsers.add_parser("operations", help="List supported operations")

    args = parser.parse_args()

    if args.command == "run":
        return cmd_run(args)
    elif args.command == "test-credential":
        return cmd_test_credential(args)
    elif args.command == "operations":
        return cmd_operations(args)
    else:
        parser.print_help()
        return 1


if __name__ == "__main__":
    sys.exit(main())
