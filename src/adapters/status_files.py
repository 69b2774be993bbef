"""Filesystem access to the workflow and sprint status documents.

Wraps the pure text-level parser and mutator with workspace validation,
reading and writing. Expected failures come back as values:
- a missing file and a path outside the workspace both give no document
  and no error
- a malformed document gives no document and an error message
- a failed update leaves the file untouched and reports why
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Generic, TypeVar

from ..sprint.models import SprintDocument
from ..sprint.scanner import find_sprint_status_files, parse_sprint_text
from ..workflow import mutator
from ..workflow.config import StatusConfig
from ..workflow.exceptions import (
    DocumentParseError,
    InvalidStatusValueError,
    ItemNotFoundError,
    StatusDocumentError,
)
from ..workflow.models import WorkflowDocument
from ..workflow.parser import find_workflow_status_file, parse_workflow_text
from ..workspace.validation import get_validated_path

logger = logging.getLogger(__name__)

WORKFLOW = "workflow"
SPRINT = "sprint"

D = TypeVar("D")


@dataclass
class LoadResult(Generic[D]):
    document: D | None = None
    error: str | None = None
    # False when the same error was already reported for this document kind
    is_new_error: bool = False


@dataclass
class UpdateResult:
    success: bool
    error: str | None = None


class ErrorDeduplicator:
    """Remember the last error per document kind so repeats stay quiet."""

    def __init__(self):
        self._last: dict[str, str] = {}

    def should_report(self, kind: str, message: str) -> bool:
        if self._last.get(kind) == message:
            return False
        self._last[kind] = message
        return True

    def clear(self, kind: str) -> None:
        self._last.pop(kind, None)


class _Unavailable(Exception):
    """File is missing or outside the workspace."""


class StatusFiles:
    """Status documents of one workspace."""

    def __init__(self, workspace_root: Path | str, config: StatusConfig | None = None):
        self._root = Path(workspace_root).resolve()
        self._config = config or StatusConfig()
        self._errors = ErrorDeduplicator()

    @property
    def workspace_root(self) -> Path:
        return self._root

    @property
    def config(self) -> StatusConfig:
        return self._config

    # --- discovery ---

    def find_workflow_file(self) -> Path | None:
        return find_workflow_status_file(self._root, self._config)

    def find_sprint_files(self) -> list[Path]:
        return find_sprint_status_files(self._root, self._config)

    def default_sprint_file(self) -> Path | None:
        """The sprint file to use when the workspace holds exactly one."""
        files = self.find_sprint_files()
        return files[0] if len(files) == 1 else None

    # --- raw access ---

    def _resolve(self, path: Path | str) -> Path:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self._root / candidate
        validated = get_validated_path(candidate, self._root)
        if validated is None:
            logger.warning("Path validation failed: file outside workspace")
            raise _Unavailable()
        if not validated.is_file():
            raise _Unavailable()
        return validated

    def _read(self, path: Path) -> str:
        with path.open(encoding=self._config.encoding, newline="") as f:
            return f.read()

    def _write(self, path: Path, text: str) -> None:
        # encode before opening so a failure leaves the file as it was
        path.write_bytes(text.encode(self._config.encoding))

    # --- loading ---

    def _load(self, kind: str, path: Path | str | None, parse: Callable[[str], D]) -> LoadResult[D]:
        if path is None:
            return LoadResult()
        try:
            resolved = self._resolve(path)
            document = parse(self._read(resolved))
        except _Unavailable:
            return LoadResult()
        except (DocumentParseError, OSError, UnicodeError) as e:
            message = e.message if isinstance(e, DocumentParseError) else str(e)
            is_new = self._errors.should_report(kind, message)
            if is_new:
                logger.error(f"Failed to parse {kind} status: {message}")
            return LoadResult(error=message, is_new_error=is_new)

        self._errors.clear(kind)
        return LoadResult(document=document)

    def load_workflow(self, path: Path | str | None = None) -> LoadResult[WorkflowDocument]:
        """Load the workflow document, discovering it when no path is given."""
        if path is None:
            path = self.find_workflow_file()
        result = self._load(WORKFLOW, path, parse_workflow_text)
        if result.document is not None:
            logger.info(f"Loaded {len(result.document.items)} workflow items")
        return result

    def load_sprint(self, path: Path | str | None = None) -> LoadResult[SprintDocument]:
        if path is None:
            path = self.default_sprint_file()
        result = self._load(SPRINT, path, parse_sprint_text)
        if result.document is not None:
            total = sum(len(e.stories) for e in result.document.epics)
            logger.info(f"Loaded {total} stories")
        return result

    def parse_workflow_document(self, path: Path | str | None = None) -> WorkflowDocument | None:
        return self.load_workflow(path).document

    def parse_sprint_document(self, path: Path | str | None = None) -> SprintDocument | None:
        return self.load_sprint(path).document

    # --- updates ---

    def _update(
        self, path: Path | str | None, item_id: str, new_status: str,
        mutate: Callable[[str, str, str], str],
    ) -> UpdateResult:
        if path is None:
            return UpdateResult(False, "Status file not found")
        try:
            resolved = self._resolve(path)
            updated = mutate(self._read(resolved), item_id, new_status)
            self._write(resolved, updated)
        except _Unavailable:
            return UpdateResult(False, "Status file not found")
        except ItemNotFoundError:
            logger.warning(f"No status entry for '{item_id}'")
            return UpdateResult(False, f"Item not found: {item_id}")
        except InvalidStatusValueError as e:
            return UpdateResult(False, str(e))
        except (StatusDocumentError, OSError, UnicodeError) as e:
            logger.error(f"Failed to update status of '{item_id}': {e}")
            return UpdateResult(False, str(e))
        return UpdateResult(True)

    def set_workflow_item_status(
        self, item_id: str, new_status: str, path: Path | str | None = None
    ) -> UpdateResult:
        if path is None:
            path = self.find_workflow_file()
        return self._update(path, item_id, new_status, mutator.update_workflow_status)

    def set_story_status(
        self, story_id: str, new_status: str, path: Path | str | None = None
    ) -> UpdateResult:
        if path is None:
            path = self.default_sprint_file()
        return self._update(path, story_id, new_status, mutator.update_story_status)

    def update_workflow_item_status(self, path: Path | str, item_id: str, new_status: str) -> bool:
        return self.set_workflow_item_status(item_id, new_status, path).success

    def update_story_status(self, path: Path | str, story_id: str, new_status: str) -> bool:
        return self.set_story_status(story_id, new_status, path).success


# ---------------------------------------------------------------------------
# Module-level contracts
# ---------------------------------------------------------------------------

def parse_workflow_document(path: Path | str, workspace_root: Path | str) -> WorkflowDocument | None:
    return StatusFiles(workspace_root).parse_workflow_document(path)


def parse_sprint_document(path: Path | str, workspace_root: Path | str) -> SprintDocument | None:
    return StatusFiles(workspace_root).parse_sprint_document(path)


def update_workflow_item_status(
    path: Path | str, item_id: str, new_status: str, workspace_root: Path | str
) -> bool:
    return StatusFiles(workspace_root).update_workflow_item_status(path, item_id, new_status)


def update_story_status(
    path: Path | str, story_id: str, new_status: str, workspace_root: Path | str
) -> bool:
    return StatusFiles(workspace_root).update_story_status(path, story_id, new_status)
