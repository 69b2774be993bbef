"""Static lookup tables for workflow metadata the document may omit.

Phase, responsible agent and command fragment are all keyed by workflow id.
Unknown ids default to the planning phase and the ``pm`` agent so they still
render in a sensible place.
"""

from __future__ import annotations

import logging
import re
from types import MappingProxyType

from .models import PHASES, PREREQUISITE, Phase

logger = logging.getLogger(__name__)

DEFAULT_PHASE = 1
DEFAULT_AGENT = "pm"

WORKFLOW_PHASES = MappingProxyType({
    # Discovery
    "brainstorm": 0,
    "brainstorm-project": 0,
    "research": 0,
    "product-brief": 0,
    # Planning
    "prd": 1,
    "validate-prd": 1,
    "ux-design": 1,
    "create-ux-design": 1,
    # Solutioning
    "architecture": 2,
    "create-architecture": 2,
    "epics-stories": 2,
    "create-epics-and-stories": 2,
    "test-design": 2,
    "implementation-readiness": 2,
    # Implementation
    "sprint-planning": 3,
})

WORKFLOW_AGENTS = MappingProxyType({
    "brainstorm": "analyst",
    "brainstorm-project": "analyst",
    "research": "analyst",
    "product-brief": "analyst",
    "prd": "pm",
    "validate-prd": "pm",
    "ux-design": "ux-designer",
    "create-ux-design": "ux-designer",
    "architecture": "architect",
    "create-architecture": "architect",
    "epics-stories": "pm",
    "create-epics-and-stories": "pm",
    "test-design": "tea",
    "implementation-readiness": "architect",
    "sprint-planning": "sm",
})

# Story status -> (action label, workflow command)
STORY_ACTIONS = MappingProxyType({
    "backlog": ("Create Story", "create-story"),
    "ready-for-dev": ("Start Dev", "dev-story"),
    "review": ("Code Review", "code-review"),
})

DOCUMENT_EXTENSIONS = (".md", ".yaml", ".yml", ".json", ".txt")

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def is_known_workflow(workflow_id: str) -> bool:
    return workflow_id in WORKFLOW_PHASES


def infer_phase(workflow_id: str) -> int:
    phase = WORKFLOW_PHASES.get(workflow_id)
    if phase is None:
        logger.debug(f"Unknown workflow id '{workflow_id}', defaulting to phase {DEFAULT_PHASE}")
        return DEFAULT_PHASE
    return phase


def infer_agent(workflow_id: str) -> str:
    return WORKFLOW_AGENTS.get(workflow_id, DEFAULT_AGENT)


def infer_command(workflow_id: str) -> str:
    """The command fragment is the workflow id itself."""
    return workflow_id


def is_valid_phase(value) -> bool:
    if value == PREREQUISITE:
        return True
    # bool is an int subclass; "phase: true" is not a phase
    return isinstance(value, int) and not isinstance(value, bool) and 0 <= value <= 3


def coerce_phase(value, workflow_id: str) -> Phase:
    """Keep a document-supplied phase when it is in range, else infer it."""
    if is_valid_phase(value):
        return value
    if value is not None:
        logger.debug(f"Ignoring out-of-range phase {value!r} for '{workflow_id}'")
    return infer_phase(workflow_id)


def phase_label(phase: Phase) -> str:
    for config in PHASES:
        if config.number == phase:
            return config.label
    return "Prerequisites" if phase == PREREQUISITE else f"Phase {phase}"


def looks_like_path(value: str) -> bool:
    """True for status values that name an output document."""
    return "/" in value or "\\" in value or value.endswith(DOCUMENT_EXTENSIONS)


def is_safe_identifier(value) -> bool:
    """Non-empty and free of control characters."""
    return isinstance(value, str) and bool(value) and not _CONTROL_CHARS.search(value)


def build_command(command: str, prefix: str = "/bmad:bmm:workflows:") -> str | None:
    """Turn a command fragment into an invocable slash command."""
    if not is_safe_identifier(command):
        return None
    return f"{prefix}{command}"


def story_action(status: str) -> tuple[str, str] | None:
    """Return (label, command) for stories whose status has a next workflow."""
    return STORY_ACTIONS.get(status)
