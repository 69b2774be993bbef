"""Tests for status document models."""

from src.sprint.models import Epic, SprintDocument, Story, StoryStatus
from src.workflow.models import (
    ItemState,
    PHASES,
    WorkflowDocument,
    WorkflowItem,
    phase_sort_key,
    state_of,
)


def _item(item_id, status, phase=1):
    return WorkflowItem(id=item_id, phase=phase, status=status, agent="pm", command=item_id)


class TestItemState:
    def test_reserved_statuses(self):
        assert state_of("required") is ItemState.ACTIONABLE
        assert state_of("optional") is ItemState.ACTIONABLE
        assert state_of("recommended") is ItemState.ACTIONABLE
        assert state_of("conditional") is ItemState.CONDITIONAL
        assert state_of("skipped") is ItemState.SKIPPED

    def test_anything_else_is_completed(self):
        assert state_of("docs/prd.md") is ItemState.COMPLETED
        assert state_of("complete") is ItemState.COMPLETED

    def test_item_properties(self):
        assert _item("prd", "required").is_actionable
        assert _item("prd", "docs/prd.md").is_completed
        assert not _item("prd", "conditional").is_actionable


class TestOrdering:
    def test_prerequisite_sorts_first(self):
        assert phase_sort_key("prerequisite") < phase_sort_key(0)

    def test_sort_key(self):
        items = [_item("b", "required", 2), _item("a", "required", 2), _item("z", "required", 0)]
        assert [i.id for i in sorted(items, key=WorkflowItem.sort_key)] == ["z", "a", "b"]

    def test_phase_table(self):
        assert [p.number for p in PHASES] == [0, 1, 2, 3]


class TestWorkflowDocument:
    def test_progress(self):
        doc = WorkflowDocument(items=[
            _item("a", "docs/a.md"),
            _item("b", "required"),
            _item("c", "skipped"),
            _item("d", "conditional"),
        ])
        progress = doc.progress()
        assert progress["completed"] == 1
        assert progress["actionable"] == 1
        assert progress["skipped"] == 1
        assert progress["total"] == 3

    def test_get_item(self):
        doc = WorkflowDocument(items=[_item("prd", "required")])
        assert doc.get_item("prd").status == "required"
        assert doc.get_item("nope") is None


class TestSprintModels:
    def test_story_status_values(self):
        assert StoryStatus("ready-for-dev") is StoryStatus.READY_FOR_DEV
        assert StoryStatus.IN_PROGRESS.value == "in-progress"

    def test_epic_completion(self):
        epic = Epic(id="epic-1", number=1, name="Epic 1", status="in-progress", stories=[
            Story(id="1-1-a", status="done", epic_id="epic-1"),
            Story(id="1-2-b", status="completed", epic_id="epic-1"),
            Story(id="1-3-c", status="review", epic_id="epic-1"),
        ])
        assert epic.completed_stories == 2

    def test_document_lookups(self):
        story = Story(id="1-1-a", status="backlog", epic_id="epic-1")
        doc = SprintDocument(epics=[
            Epic(id="epic-1", number=1, name="Epic 1", status="backlog", stories=[story]),
        ])
        assert doc.get_epic("epic-1").stories == [story]
        assert doc.get_story("1-1-a") is story
        assert doc.get_story("2-1-x") is None
        assert doc.status_counts() == {"backlog": 1}
