from .exceptions import DocumentParseError, ItemNotFoundError, StatusDocumentError
from .formats import WorkflowFormat, detect_workflow_format
from .models import ItemState, PHASES, WorkflowDocument, WorkflowItem
from .mutator import update_story_status, update_workflow_status
from .parser import parse_workflow_text

__all__ = [
    "WorkflowItem",
    "WorkflowDocument",
    "ItemState",
    "PHASES",
    "WorkflowFormat",
    "detect_workflow_format",
    "parse_workflow_text",
    "update_workflow_status",
    "update_story_status",
    "StatusDocumentError",
    "DocumentParseError",
    "ItemNotFoundError",
]
