"""Command-line interface for config-sync.

Subcommands mirror the operator workflows: ``get``, ``set``, ``delete``,
``edit``, ``status``, ``diff``, ``export``, ``import`` and ``init``.
Prompts, editor launching and colour output live here; the core modules
only see ``Confirm`` callables and resolved stores.
"""

import argparse
import json
import logging
import os
import shlex
import subprocess
import sys
from pathlib import Path

from dotenv import load_dotenv

from . import __version__
from .config import (
    Settings,
    get_active_storage,
    get_storage,
    load_settings,
    resolve_directory,
)
from .config_loader import ensure_config, load_hierarchical_config
from .config_schema import UnifiedConfig, build_config
from .confirm import Confirm, always_confirm, never_confirm
from .editor import delete_config, edit_config, get_config, set_config
from .exceptions import ConfigSyncError, ImportAborted
from .logger import setup_logging
from .storage.base import StorageInterface
from .sync import (
    StatusOptions,
    changelist_to_json,
    compare,
    config_status,
    export_config,
    format_changes_table,
    format_status_table,
    import_config,
    status_to_json,
)
from .sync.reporter import format_status_list, format_value

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


def prompt_confirm(question: str) -> bool:
    """Ask *question* on the terminal; anything but y/yes declines."""
    try:
        answer = input(f"{question} (y/n): ")
    except EOFError:
        return False
    return answer.strip().lower() in ("y", "yes")


def launch_editor(path: Path) -> None:
    """Open *path* in ``$VISUAL`` / ``$EDITOR`` (default ``vi``) and wait."""
    editor = os.getenv("VISUAL") or os.getenv("EDITOR") or "vi"
    subprocess.run([*shlex.split(editor), str(path)], check=True)


def _use_color() -> bool:
    return sys.stdout.isatty() and not os.getenv("NO_COLOR")


# ---------------------------------------------------------------------------
# Command handlers
# ---------------------------------------------------------------------------


class _Context:
    """Resolved settings and stores for one CLI invocation."""

    def __init__(
        self,
        args: argparse.Namespace,
        unified: UnifiedConfig,
        settings: Settings,
    ) -> None:
        self.args = args
        self.unified = unified
        self.settings = settings
        self.active: StorageInterface = get_active_storage(settings)
        if args.yes:
            self.confirm: Confirm = always_confirm
        elif args.no:
            self.confirm = never_confirm
        else:
            self.confirm = prompt_confirm

    def sync_storage(
        self, label: str | None = None, directory: str | None = None
    ) -> StorageInterface:
        return get_storage(resolve_directory(self.settings, label, directory))


def _cmd_get(ctx: _Context) -> int:
    args = ctx.args
    value = get_config(ctx.active, args.config_name, args.key or "")
    print(format_value(value, args.format))
    return 0


def _cmd_set(ctx: _Context) -> int:
    args = ctx.args
    value = args.value
    if value == "-":
        value = sys.stdin.read()
    saved = set_config(
        ctx.active,
        args.config_name,
        args.key,
        value,
        confirm=ctx.confirm,
        value_format=args.format,
    )
    if not saved:
        print("Cancelled.", file=sys.stderr)
    return 0


def _cmd_delete(ctx: _Context) -> int:
    args = ctx.args
    if not delete_config(
        ctx.active, args.config_name, args.key, confirm=ctx.confirm
    ):
        print("Cancelled.", file=sys.stderr)
    return 0


def _cmd_edit(ctx: _Context) -> int:
    changes = edit_config(
        ctx.active, ctx.args.config_name, launch_editor, confirm=ctx.confirm
    )
    print(format_changes_table(changes, use_color=_use_color()))
    return 0


def _cmd_status(ctx: _Context) -> int:
    args = ctx.args
    defaults = ctx.unified.status
    options = StatusOptions(
        state=args.state if args.state is not None else defaults.state,
        prefix=args.prefix if args.prefix is not None else defaults.prefix,
        label=args.label if args.label is not None else defaults.label,
    )
    target = ctx.sync_storage(label=options.label or None)
    rows = config_status(ctx.active, target, options)

    match args.format:
        case "json":
            print(json.dumps(status_to_json(rows), indent=2))
        case "list":
            if rows:
                print(format_status_list(rows))
        case _:
            print(format_status_table(rows, use_color=_use_color()))
    return 0


def _cmd_diff(ctx: _Context) -> int:
    args = ctx.args
    target = ctx.sync_storage(args.label, args.directory)
    changes = compare(ctx.active, target)
    if args.format == "json":
        print(json.dumps(changelist_to_json(changes), indent=2))
    else:
        print(format_changes_table(changes, use_color=_use_color()))
    return 0


def _cmd_export(ctx: _Context) -> int:
    args = ctx.args
    target = ctx.sync_storage(args.label, args.destination)
    changes = export_config(ctx.active, target, clean=not args.no_clean)
    if changes.has_changes():
        print(format_changes_table(changes, use_color=_use_color()))
    print(f"Configuration successfully exported to {target.directory}.")
    return 0


def _cmd_import(ctx: _Context) -> int:
    args = ctx.args
    source = ctx.sync_storage(args.label, args.source)
    preview = import_config(
        source, ctx.active, partial=args.partial, dry_run=True
    )
    print(format_changes_table(preview, use_color=_use_color()))
    if not preview.has_changes() or args.dry_run:
        return 0
    import_config(
        source, ctx.active, partial=args.partial, confirm=ctx.confirm
    )
    print("The configuration was imported successfully.")
    return 0


def _cmd_init(ctx: _Context) -> int:
    path = ensure_config(Path(ctx.args.path) if ctx.args.path else None)
    print(f"Settings file: {path}")
    return 0


_COMMANDS = {
    "get": _cmd_get,
    "set": _cmd_set,
    "delete": _cmd_delete,
    "edit": _cmd_edit,
    "status": _cmd_status,
    "diff": _cmd_diff,
    "export": _cmd_export,
    "import": _cmd_import,
    "init": _cmd_init,
}


# ---------------------------------------------------------------------------
# Argument parsing
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="config-sync",
        description="Inspect, edit and synchronize configuration objects",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Show one object, or one key of it
  config-sync get system.site
  config-sync get system.site page.front

  # Set a key without prompting
  config-sync --yes set system.site page.front node

  # What would an import change?
  config-sync status
  config-sync status --state='Only in sync dir' --prefix=node.type.

  # Export the active store, then import it elsewhere
  config-sync export --destination /tmp/config-snapshot
  config-sync --active-dir /srv/other/active import --source /tmp/config-snapshot
        """,
    )
    parser.add_argument(
        "--active-dir",
        help="Active store directory (overrides CONFIG_SYNC_ACTIVE_DIR and settings files)",
    )
    parser.add_argument(
        "--sync-dir",
        help="Default sync directory (overrides CONFIG_SYNC_SYNC_DIR and settings files)",
    )
    parser.add_argument(
        "--debug", action="store_true", help="Enable debug logging"
    )
    answer = parser.add_mutually_exclusive_group()
    answer.add_argument(
        "-y", "--yes", action="store_true", help="Answer yes to all prompts"
    )
    answer.add_argument(
        "-n", "--no", action="store_true", help="Answer no to all prompts"
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"config-sync version {__version__}",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("get", help="Display a config value or a whole object")
    p.add_argument("config_name", help='Object name, e.g. "system.site"')
    p.add_argument("key", nargs="?", help='Dotted key, e.g. "page.front"')
    p.add_argument("--format", choices=["yaml", "json"], default="yaml")

    p = sub.add_parser("set", help="Set a config value directly")
    p.add_argument("config_name")
    p.add_argument("key")
    p.add_argument("value", nargs="?", help="Value; '-' reads from stdin")
    p.add_argument(
        "--format",
        choices=["string", "yaml"],
        default="string",
        help="How to parse the value (default: string)",
    )

    p = sub.add_parser("delete", help="Delete a key, or a whole object")
    p.add_argument("config_name")
    p.add_argument("key", nargs="?")

    p = sub.add_parser(
        "edit", help="Edit an object in $EDITOR and import the result"
    )
    p.add_argument("config_name")

    p = sub.add_parser(
        "status", help="Show differences between active store and sync dir"
    )
    p.add_argument(
        "--state",
        help="Comma-separated states to show, or 'Any' "
        "(default: Only in DB,Only in sync dir,Different)",
    )
    p.add_argument("--prefix", help='Name prefix, e.g. "system."')
    p.add_argument("--label", help="Sync directory label from settings")
    p.add_argument(
        "--format", choices=["table", "json", "list"], default="table"
    )

    p = sub.add_parser(
        "diff", help="List the changes an export would make to a sync dir"
    )
    p.add_argument("--label")
    p.add_argument("--directory")
    p.add_argument("--format", choices=["table", "json"], default="table")

    p = sub.add_parser("export", help="Write the active store to a sync dir")
    p.add_argument("--label")
    p.add_argument("--destination")
    p.add_argument(
        "--no-clean",
        action="store_true",
        help="Keep sync documents the active store does not have",
    )

    p = sub.add_parser("import", help="Apply a sync dir to the active store")
    p.add_argument("--label")
    p.add_argument("--source")
    p.add_argument(
        "--partial",
        action="store_true",
        help="Only create and update; never delete active objects",
    )
    p.add_argument(
        "--dry-run", action="store_true", help="Show changes only"
    )

    p = sub.add_parser(
        "init", help="Write a commented starter settings file if none exists"
    )
    p.add_argument(
        "--path", help="Where to write it (default: .config_sync/config.yml)"
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Parse *argv*, run one command and return the exit code."""
    args = build_parser().parse_args(argv)

    try:
        load_dotenv()
        unified = build_config(load_hierarchical_config())
        setup_logging(
            mode="cli",
            debug=args.debug,
            log_file=unified.logging.file,
            level=unified.logging.level,
        )
        settings = load_settings(
            active_dir=args.active_dir,
            sync_dir=args.sync_dir,
            yaml_fallbacks=unified.storage.model_dump(),
        )
        ctx = _Context(args, unified, settings)
        return _COMMANDS[args.command](ctx)
    except ImportAborted as e:
        print(str(e), file=sys.stderr)
        return 1
    except (ConfigSyncError, ValueError) as e:
        logger.debug("Command %s failed", args.command, exc_info=True)
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except subprocess.CalledProcessError as e:
        print(f"Error: editor exited with status {e.returncode}", file=sys.stderr)
        return 1


def run() -> None:
    """Console entry point."""
    try:
        sys.exit(main())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(0)


if __name__ == "__main__":
    run()
