"""Domain models for the workflow status document."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

PREREQUISITE = "prerequisite"

Phase = Union[int, str]


class ItemState(Enum):
    COMPLETED = "completed"
    ACTIONABLE = "actionable"
    CONDITIONAL = "conditional"
    SKIPPED = "skipped"


class WorkflowStatus(Enum):
    """Reserved status tokens. Any other status string marks completion."""

    REQUIRED = "required"
    OPTIONAL = "optional"
    RECOMMENDED = "recommended"
    CONDITIONAL = "conditional"
    SKIPPED = "skipped"


RESERVED_STATUSES: frozenset[str] = frozenset(s.value for s in WorkflowStatus)

ACTIONABLE_STATUSES: frozenset[str] = frozenset(
    {
        WorkflowStatus.REQUIRED.value,
        WorkflowStatus.OPTIONAL.value,
        WorkflowStatus.RECOMMENDED.value,
    }
)


def state_of(status: str) -> ItemState:
    """Classify a raw status string."""
    if status not in RESERVED_STATUSES:
        return ItemState.COMPLETED
    if status in ACTIONABLE_STATUSES:
        return ItemState.ACTIONABLE
    if status == WorkflowStatus.CONDITIONAL.value:
        return ItemState.CONDITIONAL
    return ItemState.SKIPPED


def phase_sort_key(phase: Phase) -> int:
    # prerequisite work precedes discovery
    return -1 if phase == PREREQUISITE else int(phase)


@dataclass(frozen=True)
class PhaseConfig:
    id: str
    number: Phase
    label: str


PHASES: tuple[PhaseConfig, ...] = (
    PhaseConfig("discovery", 0, "Discovery"),
    PhaseConfig("planning", 1, "Planning"),
    PhaseConfig("solutioning", 2, "Solutioning"),
    PhaseConfig("implementation", 3, "Implementation"),
)


@dataclass
class WorkflowItem:
    id: str
    phase: Phase
    status: str
    agent: str
    command: str
    note: str | None = None
    output_file: str | None = None

    @property
    def state(self) -> ItemState:
        return state_of(self.status)

    @property
    def is_completed(self) -> bool:
        return self.state is ItemState.COMPLETED

    @property
    def is_actionable(self) -> bool:
        return self.state is ItemState.ACTIONABLE

    def sort_key(self) -> tuple[int, str]:
        return (phase_sort_key(self.phase), self.id)


@dataclass
class WorkflowDocument:
    project: str = ""
    project_type: str = ""
    selected_track: str = ""
    field_type: str = ""
    workflow_path: str = ""
    last_updated: str = ""
    status: str = ""
    status_note: str | None = None
    items: list[WorkflowItem] = field(default_factory=list)

    def get_item(self, item_id: str) -> WorkflowItem | None:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def progress(self) -> dict[str, int]:
        """Count items per state, skipped items excluded from the total."""
        counts = {state.value: 0 for state in ItemState}
        for item in self.items:
            counts[item.state.value] += 1
        counts["total"] = len(self.items) - counts[ItemState.SKIPPED.value]
        return counts
