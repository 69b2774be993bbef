"""CLI entry point for reading and updating status documents.

Usage:
  python -m src.workflow show [--workspace PATH] [--phase N]
  python -m src.workflow sprint [--workspace PATH] [--file PATH]
  python -m src.workflow set-workflow <item_id> <status> [--workspace PATH]
  python -m src.workflow skip <item_id> [--workspace PATH]
  python -m src.workflow set-story <story_id> <status> [--workspace PATH] [--file PATH]
  python -m src.workflow find [--workspace PATH]
"""

from __future__ import annotations

import argparse
import logging
import sys


def _add_common(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--workspace", default=".", help="Workspace root")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Workflow and sprint status CLI")
    subparsers = parser.add_subparsers(dest="command")

    show_parser = subparsers.add_parser("show", help="Show workflow status by phase")
    _add_common(show_parser)
    show_parser.add_argument("--phase", default=None, help="Only this phase (0-3 or prerequisite)")

    sprint_parser = subparsers.add_parser("sprint", help="Show epics and stories")
    _add_common(sprint_parser)
    sprint_parser.add_argument("--file", default=None, help="Sprint status file")

    set_wf_parser = subparsers.add_parser("set-workflow", help="Set a workflow item's status")
    _add_common(set_wf_parser)
    set_wf_parser.add_argument("item_id", help="Workflow id, e.g. prd")
    set_wf_parser.add_argument("status", help="New status or output file path")

    skip_parser = subparsers.add_parser("skip", help="Mark a workflow item skipped")
    _add_common(skip_parser)
    skip_parser.add_argument("item_id", help="Workflow id")

    set_story_parser = subparsers.add_parser("set-story", help="Set a story's status")
    _add_common(set_story_parser)
    set_story_parser.add_argument("story_id", help="Story id, e.g. 1-2-signup")
    set_story_parser.add_argument("status", help="New status, e.g. in-progress")
    set_story_parser.add_argument("--file", default=None, help="Sprint status file")

    find_parser = subparsers.add_parser("find", help="List status files in the workspace")
    _add_common(find_parser)

    return parser


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    from src.adapters.status_files import StatusFiles

    status_files = StatusFiles(args.workspace)
    commands = {
        "show": _show_command,
        "sprint": _sprint_command,
        "set-workflow": _set_workflow_command,
        "skip": _skip_command,
        "set-story": _set_story_command,
        "find": _find_command,
    }
    ok = commands[args.command](args, status_files)
    if not ok:
        sys.exit(1)


def _show_command(args, status_files) -> bool:
    from src.workflow.inference import is_valid_phase, phase_label
    from src.workflow.models import PHASES, PREREQUISITE
    from src.workflow.parser import items_for_phase, next_actionable

    result = status_files.load_workflow()
    if result.error:
        print(f"Error: Failed to parse workflow status: {result.error}", file=sys.stderr)
        return False
    doc = result.document
    if doc is None:
        print("No workflow status file found. Run workflow-init to create one.", file=sys.stderr)
        return False

    if args.phase is None:
        phases = [PREREQUISITE] + [p.number for p in PHASES]
    elif args.phase == PREREQUISITE:
        phases = [PREREQUISITE]
    else:
        try:
            phases = [int(args.phase)]
        except ValueError:
            phases = []
        if not phases or not is_valid_phase(phases[0]):
            print(f"Invalid phase: {args.phase}", file=sys.stderr)
            return False

    print(f"Project: {doc.project or '(unnamed)'}  Track: {doc.selected_track or '-'}")
    progress = doc.progress()
    print(f"Completed: {progress['completed']}/{progress['total']}")

    for phase in phases:
        items = items_for_phase(doc, phase)
        if not items:
            continue
        nxt = next_actionable(doc, phase)
        print(f"\n{phase_label(phase)}")
        for item in items:
            marker = ">" if item is nxt else " "
            print(f" {marker} [{item.state.value:<11}] {item.id} ({item.agent}) {item.status}")
    return True


def _sprint_command(args, status_files) -> bool:
    result = status_files.load_sprint(args.file)
    if result.error:
        print(f"Error: Failed to parse sprint status: {result.error}", file=sys.stderr)
        return False
    doc = result.document
    if doc is None:
        files = status_files.find_sprint_files()
        if len(files) > 1:
            print("Several sprint status files found; pick one with --file:", file=sys.stderr)
            for f in files:
                print(f"  {f}", file=sys.stderr)
        else:
            print("No sprint status file found.", file=sys.stderr)
        return False

    print(f"Project: {doc.project} ({doc.project_key or '-'})")
    for epic in doc.epics:
        print(f"\n{epic.name} [{epic.status}] {epic.completed_stories}/{len(epic.stories)}")
        for story in epic.stories:
            print(f"  {story.id}: {story.status}")
    if doc.dropped_stories:
        print(f"\nIgnored {len(doc.dropped_stories)} stories without an epic")
    return True


def _report_update(result, item_id: str, status: str) -> bool:
    if result.success:
        print(f"Set {item_id} to {status}")
        return True
    print(f"Error: {result.error}", file=sys.stderr)
    return False


def _set_workflow_command(args, status_files) -> bool:
    result = status_files.set_workflow_item_status(args.item_id, args.status)
    return _report_update(result, args.item_id, args.status)


def _skip_command(args, status_files) -> bool:
    result = status_files.set_workflow_item_status(args.item_id, "skipped")
    return _report_update(result, args.item_id, "skipped")


def _set_story_command(args, status_files) -> bool:
    result = status_files.set_story_status(args.story_id, args.status, args.file)
    return _report_update(result, args.story_id, args.status)


def _find_command(args, status_files) -> bool:
    workflow = status_files.find_workflow_file()
    print(f"Workflow status: {workflow or '(none)'}")
    sprint_files = status_files.find_sprint_files()
    print(f"Sprint status files: {len(sprint_files)}")
    for f in sprint_files:
        print(f"  {f}")
    return True


if __name__ == "__main__":
    main()
