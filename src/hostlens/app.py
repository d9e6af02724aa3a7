"""Command line harness for hostlens."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence, TextIO

from .docs import MarkdownDocumentStore
from .host import ImageHost
from .services.settings import Settings, SettingsStore
from .tools import (
    DispatchResult,
    ResultStatus,
    ToolDispatcher,
    ToolInvocation,
    ToolRegistry,
    ToolSpec,
    register_builtin_tools,
)
from .utils import logging as logging_utils

_TRUE_VALUES = {"1", "true", "yes", "on", "debug"}
_LOGGER = logging.getLogger(__name__)


def configure_logging(debug: bool = False, *, log_dir: str | None = None, force: bool = False) -> None:
    """Configure logging for the command line tool."""

    log_path = logging_utils.setup_logging(debug, log_dir=log_dir, force=force)
    _LOGGER.debug("Logging configured (debug=%s, file=%s)", debug, log_path)


def load_settings(
    path: Optional[Path] = None,
    *,
    store: SettingsStore | None = None,
    overrides: Mapping[str, Any] | None = None,
) -> Settings:
    """Load persisted settings or fall back to defaults."""

    active_store = store or SettingsStore(path)
    try:
        settings = active_store.load(overrides=overrides)
    except OSError as exc:
        _LOGGER.warning("Failed to load settings from %s: %s", active_store.path, exc)
        settings = Settings()
    return settings


def build_dispatcher(
    settings: Settings,
    *,
    confirmation_gate: Any = None,
    on_async_result: Any = None,
) -> ToolDispatcher:
    """Wire a host, a manual store and the builtin tools from ``settings``."""

    suffixes = settings.language_tags()
    host = ImageHost.from_source_tree(settings.source_roots, suffixes=suffixes)
    store = MarkdownDocumentStore(settings.manual_roots)
    registry = ToolRegistry()
    register_builtin_tools(registry, host=host, store=store, settings=settings)
    _LOGGER.debug(
        "Indexed %d symbols from %d source roots",
        sum(1 for _ in host.symbol_names()),
        len(settings.source_roots),
    )
    return ToolDispatcher(
        registry,
        confirmation_gate=confirmation_gate,
        on_async_result=on_async_result,
        max_result_chars=settings.max_result_chars,
    )


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point invoked by the `hostlens` console script."""

    args = _parse_cli_args(argv)

    debug = bool(args.debug) or _env_flag("HOSTLENS_DEBUG", default=False)
    configure_logging(debug)

    settings_path = args.settings_path or os.environ.get("HOSTLENS_SETTINGS_PATH")
    resolved_path = Path(settings_path).expanduser() if settings_path else None
    settings_store = SettingsStore(resolved_path)
    cli_overrides = _cli_overrides(args)
    settings = load_settings(resolved_path, store=settings_store, overrides=cli_overrides or None)

    if settings.debug_logging and not debug:
        debug = True
    if debug or settings.log_dir:
        configure_logging(debug, log_dir=settings.log_dir, force=True)

    if args.dump_settings:
        _dump_settings(settings, settings_store, overrides=cli_overrides)
        return 0

    if args.command == "tools":
        dispatcher = build_dispatcher(settings)
        json.dump(dispatcher.registry.to_openai_tools(), sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 0

    if args.command == "call":
        try:
            arguments = json.loads(args.args or "{}")
        except json.JSONDecodeError as exc:
            print(f"Invalid --args JSON: {exc}", file=sys.stderr)
            return 2
        return asyncio.run(_run_call(settings, args.name, arguments, assume_yes=args.yes))

    print("No command given; try 'hostlens tools' or 'hostlens call NAME'.", file=sys.stderr)
    return 2


async def _run_call(
    settings: Settings,
    name: str,
    arguments: Any,
    *,
    assume_yes: bool,
    stream: TextIO | None = None,
) -> int:
    destination = stream or sys.stdout
    delivered: list[DispatchResult] = []
    dispatcher = build_dispatcher(
        settings,
        confirmation_gate=_approve_all if assume_yes else _ask_operator,
        on_async_result=delivered.append,
    )
    result = await dispatcher.dispatch(ToolInvocation(name, arguments))
    if result.status is ResultStatus.PENDING:
        await dispatcher.wait_pending()
        matching = [item for item in delivered if item.correlation_id == result.correlation_id]
        result = matching[0] if matching else result
    destination.write(result.to_text())
    destination.write("\n")
    return 0 if result.status is ResultStatus.OK else 1


def _approve_all(spec: ToolSpec, invocation: ToolInvocation) -> bool:
    return True


def _ask_operator(spec: ToolSpec, invocation: ToolInvocation) -> bool:
    if not sys.stdin.isatty():
        _LOGGER.warning("Cannot confirm %s: stdin is not interactive", spec.name)
        return False
    summary = json.dumps(dict(invocation.arguments), sort_keys=True)
    sys.stderr.write(f"Run '{spec.name}' with {summary}? [y/N] ")
    sys.stderr.flush()
    answer = sys.stdin.readline()
    return answer.strip().lower() in {"y", "yes"}


def _env_flag(name: str, *, default: bool = False) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in _TRUE_VALUES


def _parse_cli_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="hostlens",
        add_help=True,
        description="Inspect a host runtime and its manuals through agent tools.",
    )
    parser.add_argument(
        "--dump-settings",
        action="store_true",
        help="Print the effective settings payload and exit.",
    )
    parser.add_argument(
        "--settings-path",
        metavar="PATH",
        help="Override the default ~/.hostlens/settings.json path.",
    )
    parser.add_argument(
        "--source-root",
        dest="source_roots",
        metavar="DIR",
        action="append",
        default=[],
        help="Directory to index for definitions (repeatable; replaces configured roots).",
    )
    parser.add_argument(
        "--manual-root",
        dest="manual_roots",
        metavar="DIR",
        action="append",
        default=[],
        help="Directory holding Markdown manuals (repeatable; replaces configured roots).",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")

    commands = parser.add_subparsers(dest="command")
    commands.add_parser("tools", help="Print tool definitions as JSON.")
    call = commands.add_parser("call", help="Invoke one tool and print its result.")
    call.add_argument("name", help="Tool name.")
    call.add_argument("--args", metavar="JSON", default="{}", help="Arguments as a JSON object.")
    call.add_argument(
        "--yes",
        action="store_true",
        help="Approve confirmation-gated tools without asking.",
    )
    return parser.parse_args(argv)


def _cli_overrides(args: argparse.Namespace) -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    if args.source_roots:
        overrides["source_roots"] = list(args.source_roots)
    if args.manual_roots:
        overrides["manual_roots"] = list(args.manual_roots)
    if args.debug:
        overrides["debug_logging"] = True
    return overrides


def _dump_settings(
    settings: Settings,
    store: SettingsStore,
    *,
    overrides: Mapping[str, Any],
    stream: TextIO | None = None,
) -> None:
    destination = stream or sys.stdout
    metadata = {
        "path": str(store.path),
        "cli_overrides": sorted(overrides.keys()),
        "environment_variables": _active_env_overrides(),
    }
    output = {"settings": asdict(settings), "meta": metadata}
    json.dump(output, destination, indent=2)
    destination.write("\n")


def _active_env_overrides() -> list[str]:
    return sorted(name for name in os.environ if name.startswith("HOSTLENS_"))


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
