"""
Bug Status CLI
==============
Command line entry point (``bugboard``).

    bugboard update <file.json>   apply an update batch and save bugs-data.json
    bugboard report               print aggregate statistics
    bugboard list [status]        list bugs, optionally by status
    bugboard template             write an example update file
    bugboard serve                run the dashboard server
    bugboard help                 show usage

Exit codes: 0 on success, 1 on any reported error (unreadable or malformed
document, bad update file, write failure, unknown command).
"""
import argparse
import logging
import sys
from typing import List, Optional

from bugboard.core import config
from bugboard.core.constants import BUG_STATUSES
from bugboard.services.record_store import RecordStore, RecordStoreError
from bugboard.services.reporting import format_listing, format_report
from bugboard.services.template_writer import write_template
from bugboard.services.update_engine import UpdateFileError, apply_batch, load_update_batch
from bugboard.utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

COMMANDS = ["update", "report", "list", "template", "serve", "help"]

EPILOG = """\
Examples:
  bugboard template               # Create update template
  bugboard update updates.json    # Apply updates from file
  bugboard report                 # Show statistics
  bugboard list fixed             # List fixed bugs

Update file format:
{
  "bugs": [
    {
      "id": "NGE-001",
      "status": "fixed",
      "testResult": "passed",
      "fixedDate": "2026-02-18"
    }
  ],
  "automation": {
    "successRate": "85.5%",
    "testsPassed": 47,
    "testsFailed": 8
  }
}
"""


class CommandError(Exception):
    """Raised instead of argparse's own exit so every usage error exits with 1."""


class _Parser(argparse.ArgumentParser):
    def error(self, message):
        raise CommandError(message)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(
        prog="bugboard",
        description="Bug status updater for bugs-data.json",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
        add_help=False,
    )
    sub = parser.add_subparsers(dest="command", metavar="command")

    update_p = sub.add_parser("update", help="Update bugs from JSON file", add_help=False)
    update_p.add_argument("file", nargs="?", help="update batch file")

    sub.add_parser("report", help="Show current bug statistics", add_help=False)

    list_p = sub.add_parser("list", help=f"List bugs by status ({'|'.join(BUG_STATUSES)})", add_help=False)
    list_p.add_argument("status", nargs="?")

    template_p = sub.add_parser("template", help="Generate update template file", add_help=False)
    template_p.add_argument("--output", default=None, help=f"output path (default: {config.TEMPLATE_FILE})")

    serve_p = sub.add_parser("serve", help="Run the dashboard server", add_help=False)
    serve_p.add_argument("--host", default=None)
    serve_p.add_argument("--port", type=int, default=None)

    sub.add_parser("help", help="Show this help message", add_help=False)
    return parser


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------
def cmd_update(path: Optional[str]) -> int:
    if not path:
        logger.error("Please specify update file")
        return 1

    try:
        store = RecordStore()
        document = store.load()
        batch = load_update_batch(path)
        result = apply_batch(document, batch)
        print(f"Updated {result.updated} bugs")
        timestamp = store.save(document)
    except (RecordStoreError, UpdateFileError) as e:
        logger.error("%s", e)
        return 1

    print(f"Successfully updated {store.path}")
    print(f"   Last updated: {timestamp}")
    return 0


def cmd_report() -> int:
    try:
        document = RecordStore().load()
    except RecordStoreError as e:
        logger.error("%s", e)
        return 1
    print(format_report(document))
    return 0


def cmd_list(status: Optional[str]) -> int:
    try:
        document = RecordStore().load()
    except RecordStoreError as e:
        logger.error("%s", e)
        return 1
    if status and status not in BUG_STATUSES:
        logger.warning("Unknown status '%s', expected one of %s", status, ", ".join(BUG_STATUSES))
    print(format_listing(document.bugs, status))
    return 0


def cmd_template(output: Optional[str]) -> int:
    try:
        path = write_template(output)
    except OSError as e:
        logger.error("Error writing template %s: %s", output or config.TEMPLATE_FILE, e.strerror or e)
        return 1
    print(f"Template generated: {path}")
    return 0


def cmd_serve(host: Optional[str], port: Optional[int]) -> int:
    # Imported lazily so the plain CLI commands do not pull in the web stack
    from bugboard.dashboard.server import run_server

    run_server(host=host, port=port)
    return 0


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------
def main(argv: Optional[List[str]] = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    setup_logging(level=config.LOG_LEVEL, log_dir=config.LOG_DIR)
    parser = build_parser()

    if argv and argv[0] in ("help", "--help", "-h"):
        print(parser.format_help())
        return 0

    try:
        args = parser.parse_args(argv)
    except CommandError as e:
        if not argv:
            print("No command given")
        elif argv[0] not in COMMANDS:
            print(f"Unknown command: {argv[0]}")
        else:
            print(f"Invalid arguments: {e}")
        print(parser.format_help())
        return 1

    if args.command is None:
        print("No command given")
        print(parser.format_help())
        return 1

    if args.command == "update":
        return cmd_update(args.file)
    if args.command == "report":
        return cmd_report()
    if args.command == "list":
        return cmd_list(args.status)
    if args.command == "template":
        return cmd_template(args.output)
    if args.command == "serve":
        return cmd_serve(args.host, args.port)
    return 0


if __name__ == "__main__":
    sys.exit(main())
