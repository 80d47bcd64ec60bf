# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Static rule tables for GitHub Actions workflows.

Reference: https://docs.github.com/en/actions/using-workflows/events-that-trigger-workflows
"""

import re
from typing import Dict, FrozenSet, Optional

VALID_TRIGGER_EVENTS: FrozenSet[str] = frozenset(
    {
        "branch_protection_rule",
        "check_run",
        "check_suite",
        "create",
        "delete",
        "deployment",
        "deployment_status",
        "discussion",
        "discussion_comment",
        "fork",
        "gollum",
        "issue_comment",
        "issues",
        "label",
        "merge_group",
        "milestone",
        "page_build",
        "project",
        "project_card",
        "project_column",
        "public",
        "pull_request",
        "pull_request_review",
        "pull_request_review_comment",
        "pull_request_target",
        "push",
        "registry_package",
        "release",
        "repository_dispatch",
        "schedule",
        "status",
        "watch",
        "workflow_call",
        "workflow_dispatch",
        "workflow_run",
    }
)

_PULL_REQUEST_TYPES = frozenset(
    {
        "assigned",
        "auto_merge_disabled",
        "auto_merge_enabled",
        "closed",
        "converted_to_draft",
        "edited",
        "labeled",
        "locked",
        "opened",
        "ready_for_review",
        "reopened",
        "review_requested",
        "review_request_removed",
        "synchronize",
        "unassigned",
        "unlabeled",
        "unlocked",
    }
)

_CREATED_EDITED_DELETED = frozenset({"created", "edited", "deleted"})

# Activity types accepted by each event's ``types`` filter.  ``None`` marks an
# event whose types are free-form (only checked for being strings).
ACTIVITY_TYPES: Dict[str, Optional[FrozenSet[str]]] = {
    "branch_protection_rule": _CREATED_EDITED_DELETED,
    "check_run": frozenset({"created", "rerequested", "completed", "requested_action"}),
    "check_suite": frozenset({"completed"}),
    "discussion": frozenset(
        {
            "created",
            "edited",
            "deleted",
            "transferred",
            "pinned",
            "unpinned",
            "labeled",
            "unlabeled",
            "locked",
            "unlocked",
            "category_changed",
            "answered",
            "unanswered",
        }
    ),
    "discussion_comment": _CREATED_EDITED_DELETED,
    "issue_comment": _CREATED_EDITED_DELETED,
    "issues": frozenset(
        {
            "opened",
            "edited",
            "deleted",
            "transferred",
            "pinned",
            "unpinned",
            "closed",
            "reopened",
            "assigned",
            "unassigned",
            "labeled",
            "unlabeled",
            "locked",
            "unlocked",
            "milestoned",
            "demilestoned",
            "typed",
            "untyped",
        }
    ),
    "label": _CREATED_EDITED_DELETED,
    "merge_group": frozenset({"checks_requested"}),
    "milestone": frozenset({"created", "closed", "opened", "edited", "deleted"}),
    "pull_request": _PULL_REQUEST_TYPES,
    "pull_request_review": frozenset({"submitted", "edited", "dismissed"}),
    "pull_request_review_comment": _CREATED_EDITED_DELETED,
    "pull_request_target": _PULL_REQUEST_TYPES,
    "registry_package": frozenset({"published", "updated"}),
    "release": frozenset(
        {"published", "unpublished", "created", "edited", "deleted", "prereleased", "released"}
    ),
    "repository_dispatch": None,
    "watch": frozenset({"started"}),
    "workflow_run": frozenset({"completed", "requested", "in_progress"}),
}

# Events where an unknown activity type is an error rather than a warning.
STRICT_TYPE_EVENTS: FrozenSet[str] = frozenset({"workflow_run"})

# Trigger filters that must be lists of strings.
FILTERED_EVENTS: FrozenSet[str] = frozenset({"push", "pull_request"})
FILTER_KEYS = ("branches", "tags", "paths", "paths-ignore")

KNOWN_RUNNERS = (
    "ubuntu-latest",
    "ubuntu-24.04",
    "ubuntu-22.04",
    "ubuntu-20.04",
    "ubuntu-24.04-arm",
    "ubuntu-22.04-arm",
    "windows-latest",
    "windows-2025",
    "windows-2022",
    "windows-2019",
    "macos-latest",
    "macos-15",
    "macos-14",
    "macos-13",
    "macos-12",
    "self-hosted",
)

CRON_FIELD_RE = re.compile(r"^[0-9*,/-]+$")

ACTION_REF_RE = re.compile(r"^[\w.-]+/[\w.-]+(@[\w.-]+)?(/[\w./-]+)?(@[\w.-]+)?$")


def is_valid_cron(cron: str) -> bool:
    """Five whitespace-separated fields of digits, ``*``, ``,``, ``/`` or ``-``."""
    parts = cron.split()
    if len(parts) != 5:
        return False
    return all(CRON_FIELD_RE.match(part) for part in parts)


def is_action_reference(uses: str) -> bool:
    """``owner/repo[/path]@ref``, a local ``./path`` action, or a ``docker://`` image."""
    if uses.startswith("./") or uses.startswith("docker://"):
        return True
    return ACTION_REF_RE.match(uses) is not None
