"""Pure handler functions for sprint status MCP tools.

Each handler takes (args, status_files) and returns MCP result format.
No SDK dependency, so they run against a tmp_path workspace.
"""

from __future__ import annotations

import json
from dataclasses import asdict
from typing import Any

from ..adapters.status_files import StatusFiles
from ..workflow.inference import story_action


def _text_result(text: str) -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}]}


def _json_result(data: Any) -> dict[str, Any]:
    return _text_result(json.dumps(data, indent=2, default=str))


async def get_sprint_status_handler(
    args: dict[str, Any], status_files: StatusFiles
) -> dict[str, Any]:
    """Sprint overview: epics with story counts and a status breakdown."""
    result = status_files.load_sprint(args.get("path") or None)
    if result.error:
        return _text_result(f"Error: Failed to parse sprint status: {result.error}")
    doc = result.document
    if doc is None:
        return _text_result("Error: No sprint status file selected")

    return _json_result({
        "project": doc.project,
        "project_key": doc.project_key,
        "epics": {
            e.id: {
                "status": e.status,
                "stories": f"{e.completed_stories}/{len(e.stories)}",
            }
            for e in doc.epics
        },
        "by_status": doc.status_counts(),
        "dropped_stories": doc.dropped_stories,
    })


async def get_epic_handler(
    args: dict[str, Any], status_files: StatusFiles
) -> dict[str, Any]:
    """Epic detail with each story and its next workflow, if any."""
    epic_id = args["epic_id"]
    result = status_files.load_sprint(args.get("path") or None)
    if result.error:
        return _text_result(f"Error: Failed to parse sprint status: {result.error}")
    doc = result.document
    epic = doc.get_epic(epic_id) if doc else None
    if not epic:
        return _text_result(f"Error: Epic {epic_id} not found")

    stories = []
    for story in epic.stories:
        data = asdict(story)
        action = story_action(story.status)
        data["next_action"] = action[1] if action else None
        stories.append(data)

    return _json_result({
        "id": epic.id,
        "name": epic.name,
        "status": epic.status,
        "stories": stories,
    })


async def update_story_status_handler(
    args: dict[str, Any], status_files: StatusFiles
) -> dict[str, Any]:
    """Set a story's status in place, keeping comments and layout."""
    story_id = args.get("story_id", "")
    status = args.get("status", "")
    result = status_files.set_story_status(story_id, status, args.get("path") or None)
    if not result.success:
        return _text_result(f"Error: Failed to update status for {story_id}: {result.error}")
    return _text_result(f"Set {story_id} to {status}")
