"""Derive epics and stories from a sprint status document.

The document is a flat ``development_status`` mapping. Structure comes from
the key names alone:
- ``epic-N`` is epic N
- ``N-...`` is a story of epic N
- anything mentioning ``retrospective`` is ignored
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Any

from ..workflow.config import StatusConfig
from ..workflow.formats import is_sprint_document, load_yaml, scalar_text, sprint_entries
from .models import Epic, SprintDocument, Story

logger = logging.getLogger(__name__)

_EPIC_KEY = re.compile(r"^epic-(\d+)$")
_STORY_KEY = re.compile(r"^(\d+)-")


def _extract_number(pattern: re.Pattern, key: str) -> int | None:
    match = pattern.match(key)
    return int(match.group(1)) if match else None


def parse_sprint_data(data: dict[str, Any]) -> SprintDocument:
    """Build a SprintDocument from an already-loaded YAML mapping."""
    if not is_sprint_document(data):
        logger.debug("No development_status mapping, sprint is empty")
    entries = {scalar_text(k): scalar_text(v) for k, v in sprint_entries(data).items()}
    doc = SprintDocument(
        project=scalar_text(data.get("project")) or "Unknown",
        project_key=scalar_text(data.get("project_key")),
    )

    epics: dict[int, Epic] = {}
    for key, status in entries.items():
        num = _extract_number(_EPIC_KEY, key)
        if num is None:
            continue
        if num in epics:
            logger.warning(f"Ignoring '{key}': epic {num} is already '{epics[num].id}'")
            continue
        epics[num] = Epic(id=key, number=num, name=f"Epic {num}", status=status)

    for key, status in entries.items():
        if _EPIC_KEY.match(key) or "retrospective" in key:
            continue
        num = _extract_number(_STORY_KEY, key)
        if num is None:
            continue
        epic = epics.get(num)
        if epic is None:
            logger.debug(f"Dropping story '{key}': no epic-{num}")
            doc.dropped_stories.append(key)
            continue
        epic.stories.append(Story(id=key, status=status, epic_id=epic.id))

    doc.epics = [epics[n] for n in sorted(epics)]
    return doc


def parse_sprint_text(text: str) -> SprintDocument:
    """Parse sprint status YAML. Raises DocumentParseError."""
    return parse_sprint_data(load_yaml(text))


def find_sprint_status_files(
    workspace_root: Path | str, config: StatusConfig | None = None
) -> list[Path]:
    """Search the whole workspace for sprint status files."""
    config = config or StatusConfig()
    results = []
    # os.walk swallows unreadable directories unless onerror is given
    for dirpath, dirnames, filenames in os.walk(workspace_root):
        dirnames[:] = sorted(d for d in dirnames if d not in config.skip_dirs)
        if config.sprint_file_name in filenames:
            results.append(Path(dirpath) / config.sprint_file_name)
    return sorted(results)


# --- Query helpers ---


def get_stories_by_status(doc: SprintDocument, status: str) -> list[Story]:
    return [s for e in doc.epics for s in e.stories if s.status == status]
