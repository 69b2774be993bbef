"""Build a normalized WorkflowDocument from any of the three workflow schemas."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .config import StatusConfig
from .formats import (
    FLAT_KEY,
    LEGACY_KEY,
    NESTED_KEY,
    WorkflowFormat,
    detect_workflow_format,
    load_yaml,
    optional_text,
    scalar_text,
)
from .inference import coerce_phase, infer_agent, infer_command, looks_like_path
from .models import Phase, WorkflowDocument, WorkflowItem

logger = logging.getLogger(__name__)


def _sorted(items: list[WorkflowItem]) -> list[WorkflowItem]:
    return sorted(items, key=WorkflowItem.sort_key)


def _parse_nested(data: dict[str, Any]) -> list[WorkflowItem]:
    items = []
    for key, entry in data[NESTED_KEY].items():
        item_id = scalar_text(key)
        entry = entry if isinstance(entry, dict) else {}

        output_file = optional_text(entry.get("output_file"))
        status = scalar_text(entry.get("status"), "not_started")
        if status == "complete" and output_file:
            status = output_file
        elif status == "not_started":
            status = "required"

        items.append(WorkflowItem(
            id=item_id,
            phase=coerce_phase(entry.get("phase"), item_id),
            status=status,
            agent=optional_text(entry.get("agent")) or infer_agent(item_id),
            command=optional_text(entry.get("command")) or infer_command(item_id),
            note=optional_text(entry.get("notes")) or optional_text(entry.get("note")),
            output_file=output_file,
        ))
    return items


def _parse_flat(data: dict[str, Any]) -> list[WorkflowItem]:
    items = []
    for key, value in data[FLAT_KEY].items():
        item_id = scalar_text(key)
        status = scalar_text(value)
        items.append(WorkflowItem(
            id=item_id,
            phase=coerce_phase(None, item_id),
            status=status,
            agent=infer_agent(item_id),
            command=infer_command(item_id),
            output_file=status if looks_like_path(status) else None,
        ))
    return items


def _parse_legacy(data: dict[str, Any]) -> list[WorkflowItem]:
    entries = data.get(LEGACY_KEY)
    if not isinstance(entries, list):
        return []

    items = []
    for index, entry in enumerate(entries):
        if not isinstance(entry, dict) or entry.get("id") is None:
            logger.debug(f"Skipping legacy workflow entry {index}: no id")
            continue
        item_id = scalar_text(entry["id"])
        items.append(WorkflowItem(
            id=item_id,
            phase=coerce_phase(entry.get("phase"), item_id),
            status=scalar_text(entry.get("status")),
            agent=optional_text(entry.get("agent")) or infer_agent(item_id),
            command=optional_text(entry.get("command")) or infer_command(item_id),
            note=optional_text(entry.get("note")),
            output_file=optional_text(entry.get("output_file")),
        ))
    return items


_PARSERS = {
    WorkflowFormat.NESTED: _parse_nested,
    WorkflowFormat.FLAT: _parse_flat,
    WorkflowFormat.LEGACY: _parse_legacy,
}


def parse_workflow_data(data: dict[str, Any]) -> WorkflowDocument:
    """Normalize an already-loaded YAML mapping."""
    fmt = detect_workflow_format(data)
    items = _sorted(_PARSERS[fmt](data))

    return WorkflowDocument(
        project=scalar_text(data.get("project")) or scalar_text(data.get("project_name")),
        project_type=scalar_text(data.get("project_type")),
        selected_track=scalar_text(data.get("selected_track")),
        field_type=scalar_text(data.get("field_type")),
        workflow_path=scalar_text(data.get("workflow_path")),
        last_updated=scalar_text(data.get("last_updated")),
        status=scalar_text(data.get("status")),
        status_note=optional_text(data.get("status_note")),
        items=items,
    )


def parse_workflow_text(text: str) -> WorkflowDocument:
    """Parse workflow status YAML. Raises DocumentParseError."""
    return parse_workflow_data(load_yaml(text))


def items_for_phase(document: WorkflowDocument, phase: Phase) -> list[WorkflowItem]:
    return [item for item in document.items if item.phase == phase]


def next_actionable(document: WorkflowDocument, phase: Phase) -> WorkflowItem | None:
    """First item of the phase that can be started now."""
    for item in items_for_phase(document, phase):
        if item.is_actionable:
            return item
    return None


def find_workflow_status_file(
    workspace_root: Path | str, config: StatusConfig | None = None
) -> Path | None:
    """Return the first existing workflow status file in the search order."""
    config = config or StatusConfig()
    root = Path(workspace_root)
    for directory in config.workflow_search_dirs:
        candidate = root / directory / config.workflow_file_name
        if candidate.is_file():
            return candidate
    return None
