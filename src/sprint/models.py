"""Sprint status data models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class StoryStatus(Enum):
    BACKLOG = "backlog"
    DRAFTED = "drafted"
    READY_FOR_DEV = "ready-for-dev"
    IN_PROGRESS = "in-progress"
    REVIEW = "review"
    DONE = "done"
    OPTIONAL = "optional"
    COMPLETED = "completed"


DONE_STATUSES: frozenset[str] = frozenset(
    {StoryStatus.DONE.value, StoryStatus.COMPLETED.value}
)


@dataclass
class Story:
    id: str
    status: str
    epic_id: str

    @property
    def is_done(self) -> bool:
        return self.status in DONE_STATUSES


@dataclass
class Epic:
    id: str
    number: int
    name: str
    status: str
    stories: list[Story] = field(default_factory=list)

    @property
    def completed_stories(self) -> int:
        return sum(1 for s in self.stories if s.is_done)


@dataclass
class SprintDocument:
    project: str = "Unknown"
    project_key: str = ""
    epics: list[Epic] = field(default_factory=list)
    dropped_stories: list[str] = field(default_factory=list)

    def get_epic(self, epic_id: str) -> Epic | None:
        for epic in self.epics:
            if epic.id == epic_id:
                return epic
        return None

    def get_story(self, story_id: str) -> Story | None:
        for epic in self.epics:
            for story in epic.stories:
                if story.id == story_id:
                    return story
        return None

    def status_counts(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        for epic in self.epics:
            for story in epic.stories:
                counts[story.status] = counts.get(story.status, 0) + 1
        return counts
