"""Tests for workflow and sprint tool handler functions."""

import json
from typing import Any

import pytest

from src.adapters.status_files import StatusFiles
from src.sprint.handlers import (
    get_epic_handler,
    get_sprint_status_handler,
    update_story_status_handler,
)
from src.tools.handlers import (
    get_workflow_status_handler,
    list_phase_items_handler,
    update_workflow_item_handler,
)


@pytest.fixture
def status_files(workspace):
    return StatusFiles(workspace)


def _parse_result(result: dict) -> Any:
    """Extract and parse the text content from an MCP result."""
    text = result["content"][0]["text"]
    try:
        return json.loads(text)
    except json.JSONDecodeError:
        return text


# --- get_workflow_status ---


class TestGetWorkflowStatus:
    @pytest.mark.asyncio
    async def test_overview(self, status_files, workflow_file):
        data = _parse_result(await get_workflow_status_handler({}, status_files))
        assert data["project"] == "Demo Project"
        assert data["track"] == "bmad-method"
        assert data["last_updated"] == "2025-12-01"
        assert data["progress"] == {
            "completed": 1, "actionable": 3, "conditional": 0, "skipped": 0, "total": 4,
        }
        assert list(data["phases"]) == ["discovery", "planning", "solutioning", "implementation"]
        assert data["phases"]["discovery"] == {"label": "Discovery", "items": 1, "next_action": None}
        assert data["phases"]["planning"]["next_action"] == "prd"

    @pytest.mark.asyncio
    async def test_no_file(self, status_files):
        text = _parse_result(await get_workflow_status_handler({}, status_files))
        assert text.startswith("Error: No workflow status file found")

    @pytest.mark.asyncio
    async def test_malformed_file(self, status_files, workspace):
        (workspace / "bmm-workflow-status.yaml").write_text("workflows: [\n")
        text = _parse_result(await get_workflow_status_handler({}, status_files))
        assert text.startswith("Error: Failed to parse workflow status: Invalid YAML")


# --- list_phase_items ---


class TestListPhaseItems:
    @pytest.mark.asyncio
    async def test_phase_items(self, status_files, workflow_file):
        data = _parse_result(await list_phase_items_handler({"phase": "2"}, status_files))
        assert data["label"] == "Solutioning"
        [item] = data["items"]
        assert item["id"] == "architecture"
        assert item["agent"] == "architect"
        assert item["state"] == "actionable"
        assert item["invocation"] == "/bmad:bmm:workflows:architecture"

    @pytest.mark.asyncio
    async def test_completed_item_keeps_output_file(self, status_files, workflow_file):
        data = _parse_result(await list_phase_items_handler({"phase": 0}, status_files))
        [item] = data["items"]
        assert item["status"] == "docs/brainstorm.md"
        assert item["state"] == "completed"

    @pytest.mark.asyncio
    async def test_prerequisite_phase(self, status_files, workflow_file):
        data = _parse_result(await list_phase_items_handler({"phase": "prerequisite"}, status_files))
        assert data["label"] == "Prerequisites"
        assert data["items"] == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize("args", [{}, {"phase": "planning"}, {"phase": None}, {"phase": "7"}, {"phase": -1}])
    async def test_invalid_phase(self, status_files, workflow_file, args):
        text = _parse_result(await list_phase_items_handler(args, status_files))
        assert text.startswith("Error: Invalid phase")

    @pytest.mark.asyncio
    async def test_no_document(self, status_files):
        text = _parse_result(await list_phase_items_handler({"phase": "1"}, status_files))
        assert text == "Error: Workflow status not available"


# --- update_workflow_item ---


class TestUpdateWorkflowItem:
    @pytest.mark.asyncio
    async def test_update(self, status_files, workflow_file):
        result = await update_workflow_item_handler(
            {"item_id": "architecture", "status": "skipped"}, status_files
        )
        assert _parse_result(result) == "Set architecture to skipped"
        assert status_files.parse_workflow_document().get_item("architecture").status == "skipped"

    @pytest.mark.asyncio
    async def test_unknown_item(self, status_files, workflow_file):
        result = await update_workflow_item_handler(
            {"item_id": "deploy", "status": "skipped"}, status_files
        )
        assert _parse_result(result) == "Error: Failed to update deploy: Item not found: deploy"


# --- sprint tools ---


class TestGetSprintStatus:
    @pytest.mark.asyncio
    async def test_overview(self, status_files, sprint_file):
        data = _parse_result(await get_sprint_status_handler({}, status_files))
        assert data["project_key"] == "DMO"
        assert data["epics"]["epic-1"] == {"status": "in-progress", "stories": "0/2"}
        assert data["by_status"] == {"backlog": 2, "ready-for-dev": 1}
        assert data["dropped_stories"] == ["99-orphan"]

    @pytest.mark.asyncio
    async def test_explicit_path(self, status_files, sprint_file, workspace):
        rel = str(sprint_file.relative_to(workspace))
        data = _parse_result(await get_sprint_status_handler({"path": rel}, status_files))
        assert data["project"] == "Demo Project"

    @pytest.mark.asyncio
    async def test_no_file(self, status_files):
        text = _parse_result(await get_sprint_status_handler({"path": ""}, status_files))
        assert text == "Error: No sprint status file selected"


class TestGetEpic:
    @pytest.mark.asyncio
    async def test_epic_with_actions(self, status_files, sprint_file):
        data = _parse_result(await get_epic_handler({"epic_id": "epic-1"}, status_files))
        assert data["name"] == "Epic 1"
        assert [(s["id"], s["next_action"]) for s in data["stories"]] == [
            ("1-1-login", "create-story"),
            ("1-2-signup", "dev-story"),
        ]

    @pytest.mark.asyncio
    async def test_missing_epic(self, status_files, sprint_file):
        text = _parse_result(await get_epic_handler({"epic_id": "epic-9"}, status_files))
        assert text == "Error: Epic epic-9 not found"

    @pytest.mark.asyncio
    async def test_malformed_file(self, status_files, sprint_file):
        sprint_file.write_text("development_status: [\n")
        text = _parse_result(await get_epic_handler({"epic_id": "epic-1"}, status_files))
        assert text.startswith("Error: Failed to parse sprint status: Invalid YAML")


class TestUpdateStoryStatus:
    @pytest.mark.asyncio
    async def test_update(self, status_files, sprint_file):
        result = await update_story_status_handler(
            {"story_id": "1-1-login", "status": "ready-for-dev"}, status_files
        )
        assert _parse_result(result) == "Set 1-1-login to ready-for-dev"
        assert "  1-1-login: ready-for-dev  # needs design\n" in sprint_file.read_text()

    @pytest.mark.asyncio
    async def test_empty_status_rejected(self, status_files, sprint_file):
        before = sprint_file.read_text()
        result = await update_story_status_handler({"story_id": "1-1-login"}, status_files)
        assert _parse_result(result).startswith("Error: Failed to update status for 1-1-login")
        assert sprint_file.read_text() == before


class TestServer:
    def test_creates_server(self, status_files):
        from src.tools.server import create_status_server

        server = create_status_server(status_files)
        assert server is not None
