"""Classification of status documents by YAML shape.

Workflow documents have been written in three schemas over time:

- NESTED: ``workflows`` maps each id to a mapping with ``status`` and
  optional ``output_file`` / ``notes``.
- FLAT: ``workflow_status`` maps each id straight to a status string.
- LEGACY: ``workflow_status`` is a sequence of mappings with ``id``,
  ``phase``, ``status`` and friends.

Nested wins over flat, and anything that is neither falls back to legacy.
"""

from __future__ import annotations

import datetime
import logging
from enum import Enum
from typing import Any

import yaml

from .exceptions import DocumentParseError

logger = logging.getLogger(__name__)

NESTED_KEY = "workflows"
FLAT_KEY = "workflow_status"
LEGACY_KEY = "workflow_status"
SPRINT_KEY = "development_status"


class WorkflowFormat(Enum):
    NESTED = "nested"
    FLAT = "flat"
    LEGACY = "legacy"


def load_yaml(text: str) -> dict[str, Any]:
    """Parse document text into a top-level mapping.

    An empty document is an empty mapping. A root that is a list or scalar
    cannot be classified and is reported as a parse error.
    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise DocumentParseError(f"Invalid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise DocumentParseError(
            f"Expected a mapping at the top level, got {type(data).__name__}"
        )
    return data


def detect_workflow_format(data: dict[str, Any]) -> WorkflowFormat:
    if isinstance(data.get(NESTED_KEY), dict):
        fmt = WorkflowFormat.NESTED
    elif isinstance(data.get(FLAT_KEY), dict):
        fmt = WorkflowFormat.FLAT
    else:
        fmt = WorkflowFormat.LEGACY
    logger.debug(f"Detected {fmt.value} workflow document")
    return fmt


def is_sprint_document(data: dict[str, Any]) -> bool:
    return isinstance(data.get(SPRINT_KEY), dict)


def sprint_entries(data: dict[str, Any]) -> dict[str, Any]:
    """The development_status mapping, or empty when absent or malformed."""
    section = data.get(SPRINT_KEY)
    return section if isinstance(section, dict) else {}


def scalar_text(value: Any, default: str = "") -> str:
    """Render a YAML scalar as the string it was written as.

    PyYAML resolves dates, numbers and booleans; the documents treat every
    scalar as text.
    """
    if value is None:
        return default
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (datetime.date, datetime.datetime)):
        return value.isoformat()
    if isinstance(value, (dict, list)):
        return default
    return str(value)


def optional_text(value: Any) -> str | None:
    text = scalar_text(value)
    return text or None
