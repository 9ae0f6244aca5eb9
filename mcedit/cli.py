import argparse
import json
import logging
import sys
from typing import Any

from mcedit import __version__
from mcedit.config.settings import settings
from mcedit.container import DependencyContainer
from mcedit.exceptions import BaseAppError
from mcedit.mcp.log_forwarding import ClientLogHandler

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mcedit",
        description="Sandboxed file editor speaking JSON-RPC over stdio, with backups and diffs.",
    )
    parser.add_argument("-c", "--config", default=None, help="Path to a JSON config file")
    parser.add_argument(
        "-d", "--dir", default=None, help="Project directory (default: config, env or cwd)"
    )
    parser.add_argument(
        "-V", "--version", action="version", version=f"%(prog)s {__version__}"
    )
    parser.add_argument(
        "--pretty",
        action="store_true",
        help="Pretty print JSON output with colors",
    )

    sub = parser.add_subparsers(dest="command")
    sub.add_parser("mcp", help="Serve the protocol on stdin/stdout")

    edit = sub.add_parser("edit", help="Print a file, or overwrite it with CONTENT")
    edit.add_argument("path")
    edit.add_argument("content", nargs="?", default=None)

    ls = sub.add_parser("list", help="List project files, optionally filtered by regex")
    ls.add_argument("pattern", nargs="?", default=None)

    sub.add_parser("analyze", help="Analyze the project structure")

    search = sub.add_parser("search", help="Search project text files for a regex")
    search.add_argument("query")

    backups = sub.add_parser("backups", help="Show the backups kept for a file")
    backups.add_argument("path")

    restore = sub.add_parser("restore", help="Restore a file from its newest backup")
    restore.add_argument("path")
    restore.add_argument(
        "--backup", default=None, help="Restore from this backup file instead"
    )
    return parser


def _print_json(payload: Any, pretty: bool) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if not pretty:
        print(text)
        return

    from rich import box
    from rich.console import Console
    from rich.panel import Panel
    from rich.syntax import Syntax

    Console(soft_wrap=True).print(
        Panel(
            Syntax(text, "json"),
            title="mcedit",
            box=box.ROUNDED,
            border_style="magenta",
            expand=True,
        )
    )


def _serve(container: DependencyContainer) -> None:
    handler = container.get_mcp_handler()
    forwarder: ClientLogHandler | None = None
    if settings.client_log_level is not None:
        forwarder = ClientLogHandler(container.get_transport(), settings.client_log_level)
        forwarder.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        logging.getLogger().addHandler(forwarder)
    try:
        logger.info(
            f"mcedit {__version__} serving project {container.get_file_service().base_directory}"
        )
        handler.serve()
    finally:
        if forwarder is not None:
            logging.getLogger().removeHandler(forwarder)
        container.get_transport().close()


def run(args: argparse.Namespace, container: DependencyContainer) -> int:
    if args.command == "mcp":
        _serve(container)
        return 0

    files = container.get_file_service()
    if args.command == "edit":
        if args.content is None:
            sys.stdout.write(files.read_file(args.path))
        else:
            path = files.write_file(args.path, args.content)
            print(f"Wrote {path}")
        return 0

    if args.command == "list":
        _print_json(container.get_project_analyzer().list_files(args.pattern), args.pretty)
        return 0

    if args.command == "analyze":
        _print_json(container.get_project_analyzer().analyze_project(), args.pretty)
        return 0

    if args.command == "search":
        results = container.get_project_analyzer().search_files(args.query)
        _print_json({"query": args.query, "results": results}, args.pretty)
        return 0

    if args.command == "backups":
        _print_json(files.backup_stats(args.path), args.pretty)
        return 0

    if args.command == "restore":
        restored_from = files.restore_backup(args.path, args.backup)
        print(f"Restored {args.path} from {restored_from}")
        return 0

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # stdout carries protocol messages, so logs always go to stderr
    logging.basicConfig(level=settings.log_level, format=LOG_FORMAT, stream=sys.stderr)

    if args.command is None:
        parser.print_help(sys.stderr)
        return 0

    container = DependencyContainer(project_dir=args.dir, config_path=args.config)
    try:
        return run(args, container)
    except BaseAppError as e:
        logger.error(f"{args.command} failed: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Interrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
