"""Status document configuration."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class StatusConfig:
    """File names and search locations for status documents."""

    workflow_file_name: str = "bmm-workflow-status.yaml"
    sprint_file_name: str = "sprint-status.yaml"
    workflow_search_dirs: tuple[str, ...] = (
        "_bmad-output/planning-artifacts",
        "_bmad-output",
        "docs",
        ".",
    )
    skip_dirs: frozenset[str] = field(
        default_factory=lambda: frozenset({"node_modules", ".git", ".hg", ".svn"})
    )
    command_prefix: str = "/bmad:bmm:workflows:"
    encoding: str = "utf-8"
