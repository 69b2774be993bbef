"""Format-preserving status updates.

Documents are hand-edited, so updates never re-serialize YAML. Each update
locates the single value token that holds the item's status and splices the
new value into the original text. Comments, key order, indentation and every
other byte are left as they were.

The search is scoped to the owning top-level section (``workflows:``,
``workflow_status:`` or ``development_status:``) and, for nested and legacy
workflow documents, to the item's own block.
"""

from __future__ import annotations

import logging
import re
from typing import Any, Iterator

import yaml

from .exceptions import (
    InvalidStatusValueError,
    ItemNotFoundError,
    MutationVerificationError,
)
from .formats import (
    FLAT_KEY,
    LEGACY_KEY,
    NESTED_KEY,
    SPRINT_KEY,
    WorkflowFormat,
    detect_workflow_format,
    load_yaml,
    scalar_text,
    sprint_entries,
)
from .inference import is_safe_identifier

logger = logging.getLogger(__name__)

_TRAILING_COMMENT = re.compile(r"[ \t]#")
_STATUS_KEY = re.compile(r"^(?P<indent>[ \t]*)status[ \t]*:(?=[ \t]|$)")
_YAML_INDICATORS = set("-?:,[]{}#&*!|>'\"%@`")


# ---------------------------------------------------------------------------
# Line scanning
# ---------------------------------------------------------------------------

def _iter_lines(text: str, start: int, end: int) -> Iterator[tuple[int, str]]:
    """Yield (offset, line) pairs without line terminators."""
    pos = start
    while pos < end:
        newline = text.find("\n", pos, end)
        stop = end if newline == -1 else newline
        yield pos, text[pos:stop].rstrip("\r")
        pos = stop + 1


def _indent(line: str) -> int:
    return len(line) - len(line.lstrip(" \t"))


def _is_filler(line: str) -> bool:
    stripped = line.strip()
    return not stripped or stripped.startswith("#")


def _key_pattern(key: str) -> re.Pattern:
    k = re.escape(key)
    return re.compile(rf"^(?P<indent>[ \t]*)(?:{k}|\"{k}\"|'{k}')[ \t]*:(?=[ \t]|$)")


def _section_span(text: str, key: str) -> tuple[int, int] | None:
    """Byte range of the block under a top-level ``key:`` line."""
    k = re.escape(key)
    header = re.compile(rf"^(?:{k}|\"{k}\"|'{k}')[ \t]*:[ \t]*(?:#[^\n]*)?\r?$", re.MULTILINE)
    m = header.search(text)
    if not m:
        return None

    newline = text.find("\n", m.end())
    if newline == -1:
        return len(text), len(text)
    start = newline + 1

    for offset, line in _iter_lines(text, start, len(text)):
        if _is_filler(line) or line[0] in " \t":
            continue
        # a sequence may sit at the same indentation as its parent key
        if line.startswith("-") and not line.startswith("---"):
            continue
        return start, offset
    return start, len(text)


def _child_indent(text: str, start: int, end: int) -> int | None:
    for _, line in _iter_lines(text, start, end):
        if not _is_filler(line):
            return _indent(line)
    return None


def _find_child_key(
    text: str, start: int, end: int, key: str
) -> tuple[int, str, re.Match] | None:
    """Find ``key:`` as a direct child of the block spanning start..end."""
    indent = _child_indent(text, start, end)
    if indent is None:
        return None
    pattern = _key_pattern(key)
    for offset, line in _iter_lines(text, start, end):
        if _is_filler(line) or _indent(line) != indent:
            continue
        m = pattern.match(line)
        if m:
            return offset, line, m
    return None


def _block_end(text: str, start: int, end: int, parent_indent: int) -> int:
    """End of the lines nested deeper than parent_indent, starting at start."""
    for offset, line in _iter_lines(text, start, end):
        if not _is_filler(line) and _indent(line) <= parent_indent:
            return offset
    return end


def _next_line(text: str, offset: int, end: int) -> int:
    newline = text.find("\n", offset, end)
    return end if newline == -1 else newline + 1


# ---------------------------------------------------------------------------
# Value tokens
# ---------------------------------------------------------------------------

def _value_bounds(line: str, pos: int) -> tuple[int, int]:
    """Span of the scalar token that starts after pos, comments excluded."""
    start = pos
    while start < len(line) and line[start] in " \t":
        start += 1
    if start >= len(line) or line[start] == "#":
        return start, start

    quote = line[start]
    if quote == '"':
        i = start + 1
        while i < len(line):
            if line[i] == "\\":
                i += 2
                continue
            if line[i] == '"':
                return start, i + 1
            i += 1
        return start, len(line)
    if quote == "'":
        i = start + 1
        while i < len(line):
            if line[i] == "'":
                if line[i + 1:i + 2] == "'":
                    i += 2
                    continue
                return start, i + 1
            i += 1
        return start, len(line)

    comment = _TRAILING_COMMENT.search(line, start)
    end = comment.start() if comment else len(line)
    while end > start and line[end - 1] in " \t":
        end -= 1
    return start, end


def _double_quoted(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


def _single_quoted(value: str) -> str:
    return "'" + value.replace("'", "''") + "'"


def needs_quotes(value: str) -> bool:
    """True when a plain scalar would not read back as this exact string."""
    if not value or value != value.strip():
        return True
    if "/" in value or "\\" in value or ":" in value or " #" in value:
        return True
    if value[0] in _YAML_INDICATORS:
        return True
    try:
        return yaml.safe_load(value) != value
    except yaml.YAMLError:
        return True


def render_value(value: str, original_token: str, always_quote: bool = False) -> str:
    if always_quote or original_token.startswith('"'):
        return _double_quoted(value)
    if original_token.startswith("'"):
        return _single_quoted(value)
    if needs_quotes(value):
        return _double_quoted(value)
    return value


def _splice(
    text: str, offset: int, line: str, after_key: int, value: str, always_quote: bool = False
) -> str:
    start, end = _value_bounds(line, after_key)
    rendered = render_value(value, line[start:end], always_quote)
    if start == end:
        if start == after_key:
            rendered = " " + rendered
        if start < len(line):
            rendered += " "
    return text[: offset + start] + rendered + text[offset + end:]


# ---------------------------------------------------------------------------
# Lookup against the parsed document
# ---------------------------------------------------------------------------

def _lookup(mapping: dict, key: str) -> tuple[bool, Any]:
    for k, v in mapping.items():
        if scalar_text(k) == key:
            return True, v
    return False, None


def _read_workflow_status(data: dict, fmt: WorkflowFormat, item_id: str) -> tuple[bool, Any]:
    if fmt is WorkflowFormat.NESTED:
        found, entry = _lookup(data[NESTED_KEY], item_id)
        if not found:
            return False, None
        return True, entry.get("status") if isinstance(entry, dict) else None
    if fmt is WorkflowFormat.FLAT:
        return _lookup(data[FLAT_KEY], item_id)

    entries = data.get(LEGACY_KEY)
    for entry in entries if isinstance(entries, list) else []:
        if isinstance(entry, dict) and scalar_text(entry.get("id")) == item_id:
            return True, entry.get("status")
    return False, None


def _check_inputs(item_id: str, new_status: str) -> None:
    if not is_safe_identifier(item_id):
        raise InvalidStatusValueError("identifier", item_id)
    if not is_safe_identifier(new_status):
        raise InvalidStatusValueError("status", new_status)


# ---------------------------------------------------------------------------
# Per-format locators
# ---------------------------------------------------------------------------

def _update_nested(text: str, item_id: str, new_status: str) -> str:
    span = _section_span(text, NESTED_KEY)
    found = span and _find_child_key(text, *span, item_id)
    if not found:
        raise ItemNotFoundError(item_id)
    offset, line, m = found

    # inline mappings ("prd: {status: x}") are not rewritten
    if line[m.end():].strip() and not line[m.end():].strip().startswith("#"):
        raise ItemNotFoundError(item_id)

    key_indent = len(m.group("indent"))
    body_start = _next_line(text, offset, span[1])
    body_end = _block_end(text, body_start, span[1], key_indent)
    field_indent = _child_indent(text, body_start, body_end)

    for line_offset, body_line in _iter_lines(text, body_start, body_end):
        if _is_filler(body_line) or _indent(body_line) != field_indent:
            continue
        status = _STATUS_KEY.match(body_line)
        if status:
            return _splice(text, line_offset, body_line, status.end(), new_status)
    raise ItemNotFoundError(item_id)


def _update_flat(text: str, item_id: str, new_status: str) -> str:
    span = _section_span(text, FLAT_KEY)
    found = span and _find_child_key(text, *span, item_id)
    if not found:
        raise ItemNotFoundError(item_id)
    offset, line, m = found
    return _splice(text, offset, line, m.end(), new_status)


def _update_legacy(text: str, item_id: str, new_status: str) -> str:
    span = _section_span(text, LEGACY_KEY)
    if not span:
        raise ItemNotFoundError(item_id)

    k = re.escape(item_id)
    entry_line = re.compile(
        rf"^(?P<indent>[ \t]*)-(?P<gap>[ \t]+)id[ \t]*:[ \t]*(?:{k}|\"{k}\"|'{k}')[ \t]*(?:#.*)?$"
    )
    for offset, line in _iter_lines(text, *span):
        m = entry_line.match(line)
        if not m:
            continue
        dash_indent = len(m.group("indent"))
        field_indent = dash_indent + 1 + len(m.group("gap"))
        body_start = _next_line(text, offset, span[1])
        body_end = _block_end(text, body_start, span[1], dash_indent)

        for line_offset, body_line in _iter_lines(text, body_start, body_end):
            if _is_filler(body_line) or _indent(body_line) != field_indent:
                continue
            status = _STATUS_KEY.match(body_line)
            if status:
                return _splice(
                    text, line_offset, body_line, status.end(), new_status, always_quote=True
                )
        break
    raise ItemNotFoundError(item_id)


_UPDATERS = {
    WorkflowFormat.NESTED: _update_nested,
    WorkflowFormat.FLAT: _update_flat,
    WorkflowFormat.LEGACY: _update_legacy,
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def update_workflow_status(text: str, item_id: str, new_status: str) -> str:
    """Return text with one workflow item's status replaced.

    Raises ItemNotFoundError when the item is absent, DocumentParseError when
    the text is not a workflow document, and MutationVerificationError when
    the result would not read back the new value.
    """
    _check_inputs(item_id, new_status)
    data = load_yaml(text)
    fmt = detect_workflow_format(data)

    found, _ = _read_workflow_status(data, fmt, item_id)
    if not found:
        raise ItemNotFoundError(item_id)

    updated = _UPDATERS[fmt](text, item_id, new_status)

    found, actual = _read_workflow_status(load_yaml(updated), fmt, item_id)
    if not found or scalar_text(actual) != new_status:
        raise MutationVerificationError(item_id, new_status, actual)
    logger.debug(f"Rewrote {fmt.value} status of '{item_id}' to '{new_status}'")
    return updated


def update_story_status(text: str, story_id: str, new_status: str) -> str:
    """Return text with one development_status entry replaced.

    Works for epics and retrospectives as well as stories.
    """
    _check_inputs(story_id, new_status)
    found, _ = _lookup(sprint_entries(load_yaml(text)), story_id)
    if not found:
        raise ItemNotFoundError(story_id)

    span = _section_span(text, SPRINT_KEY)
    located = span and _find_child_key(text, *span, story_id)
    if not located:
        raise ItemNotFoundError(story_id)
    offset, line, m = located
    updated = _splice(text, offset, line, m.end(), new_status)

    found, actual = _lookup(sprint_entries(load_yaml(updated)), story_id)
    if not found or scalar_text(actual) != new_status:
        raise MutationVerificationError(story_id, new_status, actual)
    logger.debug(f"Rewrote status of '{story_id}' to '{new_status}'")
    return updated
