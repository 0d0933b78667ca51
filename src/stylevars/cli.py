"""Command line entrypoint."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import TextIO

from stylevars.config import CliOverrides, ScopeMode, load_effective_config
from stylevars.index import IndexSchemaUnsupportedError
from stylevars.resolution import describe
from stylevars.service import ProjectService


def build_arg_parser() -> argparse.ArgumentParser:
    """Build argument parser for the stylevars command."""
    parser = argparse.ArgumentParser(prog="stylevars")
    parser.add_argument("--project-root", required=False, default=".")
    parser.add_argument("--data-dir", required=False, default=None)
    parser.add_argument(
        "--scope",
        choices=tuple(mode.value for mode in ScopeMode),
        required=False,
        default=None,
    )
    parser.add_argument("--max-import-depth", type=int, required=False, default=None)
    parser.add_argument("--max-depth", type=int, required=False, default=None)
    subparsers = parser.add_subparsers(dest="command", required=True)

    refresh = subparsers.add_parser("refresh", help="Index stylesheets under the project root.")
    refresh.add_argument("--force", action="store_true")

    resolve = subparsers.add_parser("resolve", help="Resolve every context of a variable.")
    resolve.add_argument("name")
    resolve.add_argument(
        "--import-from",
        action="append",
        default=[],
        help="Stylesheet whose imports join the scope before resolving.",
    )

    imports = subparsers.add_parser("imports", help="Show the import tree of a stylesheet.")
    imports.add_argument("file")

    listing = subparsers.add_parser("list", help="List known variables ordered by value type.")
    listing.add_argument("--prefix", default="")

    subparsers.add_parser("status", help="Show persisted index status.")
    return parser


def create_service(args: argparse.Namespace) -> ProjectService:
    """Build a project service from parsed arguments."""
    overrides = CliOverrides(
        data_dir=Path(args.data_dir).resolve() if args.data_dir is not None else None,
        scope_mode=ScopeMode.parse(args.scope) if args.scope is not None else None,
        max_import_depth=args.max_import_depth,
        max_resolution_depth=args.max_depth,
    )
    config = load_effective_config(Path(args.project_root).resolve(), overrides=overrides)
    return ProjectService(config)


def run(args: argparse.Namespace, out_stream: TextIO) -> int:
    """Execute one parsed command, writing sorted JSON to ``out_stream``."""
    service = create_service(args)
    payload: object
    exit_code = 0
    if args.command == "refresh":
        payload = service.refresh_index(force=args.force)
    elif args.command == "status":
        payload = {
            "config": service.config.to_public_dict(),
            "index": _status_dict(service),
        }
    elif args.command == "imports":
        payload = service.import_tree(Path(args.file)).to_dict()
    else:
        service.refresh_index()
        if args.command == "list":
            payload = service.list_variables(prefix=args.prefix)
        else:
            for source in args.import_from:
                service.register_imports(Path(source))
            resolution = service.resolve(args.name)
            if resolution is None:
                payload = {"name": args.name, "error": "unknown variable"}
                exit_code = 1
            else:
                hint = describe(args.name, resolution.entries[0].info)
                payload = {**resolution.to_dict(), "hint": hint}
    out_stream.write(json.dumps(payload, sort_keys=True, indent=2))
    out_stream.write("\n")
    return exit_code


def main(argv: list[str] | None = None) -> int:
    """Entrypoint for the stylevars command."""
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    try:
        return run(args, sys.stdout)
    except IndexSchemaUnsupportedError as error:
        sys.stderr.write(
            f"Index schema {error.found} is not supported (expected {error.expected}); "
            "run 'stylevars refresh --force'.\n"
        )
        return 2
    except ValueError as error:
        sys.stderr.write(f"{error}\n")
        return 2


def _status_dict(service: ProjectService) -> dict[str, object]:
    status = service.index_manager.status()
    return {
        "index_status": status.index_status,
        "last_refresh_timestamp": status.last_refresh_timestamp,
        "indexed_file_count": status.indexed_file_count,
        "indexed_entry_count": status.indexed_entry_count,
    }
