"""Shared test configuration."""

from __future__ import annotations

import textwrap

import pytest

NESTED_DOC = textwrap.dedent("""\
    # Workflow status for Demo
    project: Demo Project
    selected_track: bmad-method
    last_updated: 2025-12-01
    workflows:
      brainstorm:
        status: complete
        output_file: docs/brainstorm.md
      prd:
        status: not_started  # next up
        notes: Needs stakeholder input
      architecture:
        status: required
      sprint-planning:
        status: optional
""")

FLAT_DOC = textwrap.dedent("""\
    project: Demo Project
    workflow_status:
      brainstorm: "docs/brainstorm.md"
      prd: required
      architecture: required
      sprint-planning: optional
""")

LEGACY_DOC = textwrap.dedent("""\
    project_name: Demo Project
    workflow_status:
      - id: "architecture"
        phase: 2
        status: "required"
        agent: "architect"
        command: "create-architecture"
      - id: "prd"
        phase: 1
        status: "required"
        note: "Start here"
      - id: "brainstorm"
        phase: 0
        status: "docs/brainstorm.md"
""")

SPRINT_DOC = textwrap.dedent("""\
    project: Demo Project
    project_key: DMO
    development_status:
      epic-1: in-progress
      1-1-login: backlog  # needs design
      1-2-signup: ready-for-dev
      epic-1-retrospective: optional
      epic-2: backlog
      2-1-billing: backlog
      99-orphan: done
""")


@pytest.fixture
def workspace(tmp_path):
    """An empty workspace root."""
    root = tmp_path / "ws"
    root.mkdir()
    return root


@pytest.fixture
def workflow_file(workspace):
    """Nested-format workflow document in the docs/ search location."""
    path = workspace / "docs" / "bmm-workflow-status.yaml"
    path.parent.mkdir()
    path.write_text(NESTED_DOC)
    return path


@pytest.fixture
def sprint_file(workspace):
    path = workspace / "_bmad-output" / "implementation-artifacts" / "sprint-status.yaml"
    path.parent.mkdir(parents=True)
    path.write_text(SPRINT_DOC)
    return path


@pytest.fixture
def nested_doc():
    return NESTED_DOC


@pytest.fixture
def flat_doc():
    return FLAT_DOC


@pytest.fixture
def legacy_doc():
    return LEGACY_DOC


@pytest.fixture
def sprint_doc():
    return SPRINT_DOC
