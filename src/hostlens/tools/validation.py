"""Argument validation against a tool's parameter schema."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Iterable

from jsonschema import Draft202012Validator

from .errors import ValidationError
from .types import ToolSpec

__all__ = ["MAX_SCHEMA_ERRORS", "collect_problems", "validate_arguments"]

MAX_SCHEMA_ERRORS = 25


def collect_problems(spec: ToolSpec, arguments: Any) -> list[str]:
    """Return readable schema violations, in a stable order."""

    if not isinstance(arguments, Mapping):
        return [f"arguments must be an object, got {type(arguments).__name__}"]

    validator = Draft202012Validator(spec.json_schema)
    issues = sorted(
        validator.iter_errors(dict(arguments)),
        key=lambda issue: (list(map(str, issue.absolute_path)), issue.message),
    )
    problems: list[str] = []
    for issue in issues:
        path = _format_schema_path(issue.absolute_path)
        problems.append(f"{path}: {issue.message}" if path else issue.message)
        if len(problems) >= MAX_SCHEMA_ERRORS:
            problems.append("Too many validation errors; stopping early.")
            break
    return problems


def validate_arguments(spec: ToolSpec, arguments: Any) -> ValidationError | None:
    """Validate ``arguments`` for ``spec``.

    Returns:
        A :class:`ValidationError` describing every problem, or ``None``.
    """

    problems = collect_problems(spec, arguments)
    if not problems:
        return None
    message = problems[0]
    if len(problems) > 1:
        remaining = len(problems) - 1
        plural = "s" if remaining > 1 else ""
        message = f"{message} (+{remaining} more issue{plural})"
    return ValidationError(
        message=f"Invalid arguments for '{spec.name}': {message}",
        problems=problems,
    )


def _format_schema_path(path: Iterable[Any]) -> str:
    parts: list[str] = []
    for item in path:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        elif parts:
            parts.append(f".{item}")
        else:
            parts.append(str(item))
    return "".join(parts)
