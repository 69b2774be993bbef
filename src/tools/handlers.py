"""Pure handler functions for workflow status MCP tools.

Each handler takes (args, status_files) and returns MCP result format.
No SDK dependency, so they run against a tmp_path workspace.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

from ..adapters.status_files import StatusFiles
from ..workflow.inference import build_command, is_valid_phase, phase_label
from ..workflow.models import PHASES, PREREQUISITE, WorkflowItem
from ..workflow.parser import items_for_phase, next_actionable


def _text_result(text: str) -> dict[str, Any]:
    """Build MCP tool result with a text content block."""
    return {"content": [{"type": "text", "text": text}]}


def _json_result(data: Any) -> dict[str, Any]:
    """Build MCP tool result with JSON-serialized content."""
    return _text_result(json.dumps(data, indent=2, default=str))


def _item_dict(item: WorkflowItem, status_files: StatusFiles) -> dict[str, Any]:
    data = asdict(item)
    data["state"] = item.state.value
    data["invocation"] = build_command(item.command, status_files.config.command_prefix)
    return data


def _parse_phase(raw: Any):
    if raw == PREREQUISITE:
        return PREREQUISITE
    phase = int(raw)
    if not is_valid_phase(phase):
        raise ValueError(f"phase out of range: {phase}")
    return phase


async def get_workflow_status_handler(
    args: dict[str, Any], status_files: StatusFiles
) -> dict[str, Any]:
    """Project metadata, progress and the next action of every phase."""
    result = status_files.load_workflow()
    if result.error:
        return _text_result(f"Error: Failed to parse workflow status: {result.error}")
    doc = result.document
    if doc is None:
        return _text_result("Error: No workflow status file found. Run workflow-init first.")

    phases = {}
    for config in PHASES:
        nxt = next_actionable(doc, config.number)
        phases[config.id] = {
            "label": config.label,
            "items": len(items_for_phase(doc, config.number)),
            "next_action": nxt.id if nxt else None,
        }

    return _json_result({
        "project": doc.project,
        "track": doc.selected_track,
        "last_updated": doc.last_updated,
        "progress": doc.progress(),
        "phases": phases,
    })


async def list_phase_items_handler(
    args: dict[str, Any], status_files: StatusFiles
) -> dict[str, Any]:
    """List the workflow items of one phase in display order."""
    try:
        phase = _parse_phase(args["phase"])
    except (KeyError, TypeError, ValueError):
        return _text_result(f"Error: Invalid phase: {args.get('phase')}")

    doc = status_files.parse_workflow_document()
    if doc is None:
        return _text_result("Error: Workflow status not available")

    return _json_result({
        "phase": phase,
        "label": phase_label(phase),
        "items": [_item_dict(i, status_files) for i in items_for_phase(doc, phase)],
    })


async def update_workflow_item_handler(
    args: dict[str, Any], status_files: StatusFiles
) -> dict[str, Any]:
    """Set the status of one workflow item without reformatting the file."""
    item_id = args.get("item_id", "")
    status = args.get("status", "")
    result = status_files.set_workflow_item_status(item_id, status)
    if not result.success:
        return _text_result(f"Error: Failed to update {item_id}: {result.error}")
    return _text_result(f"Set {item_id} to {status}")
