"""MCP server factory binding status handlers to a workspace."""

from typing import Any

from claude_agent_sdk import create_sdk_mcp_server, tool

from ..adapters.status_files import StatusFiles
from ..sprint import handlers as sprint_handlers
from . import handlers


def create_status_server(status_files: StatusFiles):
    """Create an MCP server exposing workflow and sprint status tools.

    The wrappers close over status_files, so one server serves one workspace.
    """

    # --- Workflow document tools ---

    @tool(
        "get_workflow_status",
        "Get project workflow status: progress counts and the next action in each phase",
        {},
    )
    async def get_workflow_status(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.get_workflow_status_handler(args, status_files)

    @tool(
        "list_phase_items",
        "List workflow items of a phase (0-3 or 'prerequisite') with agent and command",
        {"phase": str},
    )
    async def list_phase_items(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.list_phase_items_handler(args, status_files)

    @tool(
        "update_workflow_item",
        "Set a workflow item's status (required, optional, skipped, or an output file path)",
        {"item_id": str, "status": str},
    )
    async def update_workflow_item(args: dict[str, Any]) -> dict[str, Any]:
        return await handlers.update_workflow_item_handler(args, status_files)

    # --- Sprint document tools ---

    @tool(
        "get_sprint_status",
        "Get sprint overview: epics with story progress and a status breakdown",
        {"path": str},
    )
    async def get_sprint_status(args: dict[str, Any]) -> dict[str, Any]:
        return await sprint_handlers.get_sprint_status_handler(args, status_files)

    @tool(
        "get_epic",
        "Get an epic (e.g. epic-1) with its stories and their next workflow",
        {"epic_id": str, "path": str},
    )
    async def get_epic(args: dict[str, Any]) -> dict[str, Any]:
        return await sprint_handlers.get_epic_handler(args, status_files)

    @tool(
        "update_story_status",
        "Set a story's status (backlog, ready-for-dev, in-progress, review, done)",
        {"story_id": str, "status": str, "path": str},
    )
    async def update_story_status(args: dict[str, Any]) -> dict[str, Any]:
        return await sprint_handlers.update_story_status_handler(args, status_files)

    return create_sdk_mcp_server(
        name="clique_status",
        version="0.1.0",
        tools=[
            get_workflow_status,
            list_phase_items,
            update_workflow_item,
            get_sprint_status,
            get_epic,
            update_story_status,
        ],
    )
