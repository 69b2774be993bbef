from .models import Epic, SprintDocument, Story, StoryStatus
from .scanner import find_sprint_status_files, parse_sprint_text

__all__ = [
    "Story",
    "Epic",
    "SprintDocument",
    "StoryStatus",
    "parse_sprint_text",
    "find_sprint_status_files",
]
