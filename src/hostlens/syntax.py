"""Delimiter scanners for bracket- and block-structured source text.

These functions are pure: they take text and an offset and return the index
just past the construct that starts there.
"""

from __future__ import annotations

__all__ = [
    "SpanError",
    "UnbalancedFormError",
    "skip_blank",
    "skip_bracket_form",
    "bracket_span_end",
    "block_span_end",
]

_BRACKET_OPENERS = {"(": ")", "[": "]"}
_BRACKET_CLOSERS = frozenset(_BRACKET_OPENERS.values())
_ATOM_TERMINATORS = frozenset("()[]\";'`,") | frozenset(" \t\r\n\f\v")
_QUOTE_PREFIXES = ("#'", ",@", "'", "`", ",")


class SpanError(ValueError):
    """Raised when a span cannot be extracted."""


class UnbalancedFormError(SpanError):
    """Raised when delimiters never balance or close out of order."""

    def __init__(self, message: str, *, offset: int) -> None:
        self.offset = offset
        super().__init__(f"{message} (offset {offset})")


# ---------------------------------------------------------------------------
# Bracket-structured sources
# ---------------------------------------------------------------------------


def skip_blank(text: str, position: int, *, comment_start: str = ";") -> int:
    """Skip whitespace and line comments."""

    length = len(text)
    while position < length:
        char = text[position]
        if char.isspace():
            position += 1
        elif text.startswith(comment_start, position):
            newline = text.find("\n", position)
            position = length if newline == -1 else newline + 1
        else:
            break
    return position


def _skip_lisp_string(text: str, position: int) -> int:
    # ``position`` is at the opening quote; return the index after the close.
    index = position + 1
    length = len(text)
    while index < length:
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char == '"':
            return index + 1
        index += 1
    raise UnbalancedFormError("Unterminated string", offset=position)


def _skip_char_literal(text: str, position: int) -> int:
    # ?x, ?\x, ?\C-x and friends: consume the escape then the rest of the token.
    index = position + 1
    if index < len(text) and text[index] == "\\":
        index += 2
    else:
        index += 1
    while index < len(text) and text[index] not in _ATOM_TERMINATORS:
        if text[index] == "\\":
            index += 2
        else:
            index += 1
    return min(index, len(text))


def _skip_atom(text: str, position: int) -> int:
    index = position
    length = len(text)
    while index < length and text[index] not in _ATOM_TERMINATORS:
        index += 2 if text[index] == "\\" else 1
    return min(index, length)


def _at_token_start(text: str, index: int) -> bool:
    return index == 0 or text[index - 1].isspace() or text[index - 1] in "([`',"


def skip_bracket_form(text: str, position: int) -> int:
    """Return the index just past the form starting at ``position``."""

    length = len(text)
    if position >= length:
        raise UnbalancedFormError("No form at end of text", offset=position)

    for prefix in _QUOTE_PREFIXES:
        if text.startswith(prefix, position):
            inner = skip_blank(text, position + len(prefix))
            return skip_bracket_form(text, inner)

    char = text[position]
    if char == '"':
        return _skip_lisp_string(text, position)
    if char == "?":
        return _skip_char_literal(text, position)
    if char in _BRACKET_CLOSERS:
        raise UnbalancedFormError(f"Unexpected '{char}'", offset=position)
    if char not in _BRACKET_OPENERS:
        return _skip_atom(text, position)

    stack: list[str] = [_BRACKET_OPENERS[char]]
    index = position + 1
    while index < length:
        char = text[index]
        if char == '"':
            index = _skip_lisp_string(text, index)
            continue
        if char == ";":
            newline = text.find("\n", index)
            index = length if newline == -1 else newline + 1
            continue
        if text.startswith("#|", index):
            close = text.find("|#", index + 2)
            if close == -1:
                raise UnbalancedFormError("Unterminated block comment", offset=index)
            index = close + 2
            continue
        if char == "?" and _at_token_start(text, index):
            index = _skip_char_literal(text, index)
            continue
        if char == "\\":
            index += 2
            continue
        if char in _BRACKET_OPENERS:
            stack.append(_BRACKET_OPENERS[char])
        elif char in _BRACKET_CLOSERS:
            expected = stack.pop()
            if char != expected:
                raise UnbalancedFormError(
                    f"Expected '{expected}' but found '{char}'", offset=index
                )
            if not stack:
                return index + 1
        index += 1
    raise UnbalancedFormError("Form is never closed", offset=position)


def bracket_span_end(text: str, offset: int) -> int:
    """End index of the single top-level form at ``offset``."""

    start = skip_blank(text, offset)
    return skip_bracket_form(text, start)


# ---------------------------------------------------------------------------
# Block-structured sources
# ---------------------------------------------------------------------------


def _skip_c_opaque(text: str, index: int) -> int | None:
    """Skip a string, character literal or comment starting at ``index``.

    Returns the index after it, or ``None`` if nothing opaque starts there.
    """

    char = text[index]
    if char in "\"'":
        cursor = index + 1
        while cursor < len(text):
            if text[cursor] == "\\":
                cursor += 2
                continue
            if text[cursor] == char:
                return cursor + 1
            if text[cursor] == "\n" and char == "'":
                break
            cursor += 1
        raise UnbalancedFormError("Unterminated literal", offset=index)
    if text.startswith("//", index):
        newline = text.find("\n", index)
        return len(text) if newline == -1 else newline + 1
    if text.startswith("/*", index):
        close = text.find("*/", index + 2)
        if close == -1:
            raise UnbalancedFormError("Unterminated comment", offset=index)
        return close + 2
    return None


_C_PAIRS = {"(": ")", "[": "]", "{": "}"}
_C_CLOSERS = frozenset(_C_PAIRS.values())


def _skip_c_group(text: str, position: int) -> int:
    """Return the index past the balanced group opened at ``position``."""

    stack = [_C_PAIRS[text[position]]]
    index = position + 1
    while index < len(text):
        skipped = _skip_c_opaque(text, index)
        if skipped is not None:
            index = skipped
            continue
        char = text[index]
        if char in _C_PAIRS:
            stack.append(_C_PAIRS[char])
        elif char in _C_CLOSERS:
            expected = stack.pop()
            if char != expected:
                raise UnbalancedFormError(
                    f"Expected '{expected}' but found '{char}'", offset=index
                )
            if not stack:
                return index + 1
        index += 1
    raise UnbalancedFormError("Group is never closed", offset=position)


def block_span_end(text: str, offset: int) -> int:
    """End index of the declaration + body block at ``offset``.

    A declaration that reaches a top-level ``;`` before any body block is a
    complete statement and ends there.
    """

    index = offset
    length = len(text)
    body_start: int | None = None
    while index < length:
        skipped = _skip_c_opaque(text, index)
        if skipped is not None:
            index = skipped
            continue
        char = text[index]
        if char == "{":
            body_start = index
            break
        if char == ";":
            return index + 1
        if char in "([":
            index = _skip_c_group(text, index)
            continue
        if char in _C_CLOSERS:
            raise UnbalancedFormError(f"Unexpected '{char}'", offset=index)
        index += 1
    if body_start is None:
        raise UnbalancedFormError("Declaration has no body", offset=offset)

    end = _skip_c_group(text, body_start)
    cursor = end
    while cursor < length and text[cursor].isspace():
        cursor += 1
    if cursor < length and text[cursor] == ";":
        return cursor + 1
    return end

