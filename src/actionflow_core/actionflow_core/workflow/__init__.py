# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Workflow document model and the operations on it.

Public API
----------
================================  ==============================================
Symbol                            Description
================================  ==============================================
:func:`parse_workflow`            YAML text to model plus structural errors
:func:`serialize_workflow`        Model to canonical YAML text
:func:`lint_workflow`             Semantic checks returning :class:`LintError`
:func:`layout_workflow`           Node positions and edges for display
:func:`parse_triggers`            Flatten the ``on`` field into trigger records
:func:`triggers_to_on`            Rebuild the most compact ``on`` value
================================  ==============================================
"""

from .edits import (
    add_job,
    add_step,
    add_trigger,
    remove_job,
    remove_step,
    set_triggers,
    unique_job_id,
    update_job,
    update_step,
    workflow_filename,
)
from .layout import GraphLayout, layout_workflow
from .linter import LintError, Severity, errors_of, has_errors, lint_workflow, warnings_of
from .model import Job, Step, Strategy, Workflow, empty_workflow, new_workflow, sample_workflow
from .parser import ParseResult, parse_workflow
from .serializer import check_round_trip, serialize_workflow
from .triggers import ParsedTrigger, format_trigger, parse_triggers, trigger_label, triggers_to_on

__all__ = [
    "GraphLayout",
    "Job",
    "LintError",
    "ParseResult",
    "ParsedTrigger",
    "Severity",
    "Step",
    "Strategy",
    "Workflow",
    "add_job",
    "add_step",
    "add_trigger",
    "check_round_trip",
    "empty_workflow",
    "errors_of",
    "format_trigger",
    "has_errors",
    "layout_workflow",
    "lint_workflow",
    "new_workflow",
    "parse_triggers",
    "parse_workflow",
    "remove_job",
    "remove_step",
    "sample_workflow",
    "serialize_workflow",
    "set_triggers",
    "trigger_label",
    "triggers_to_on",
    "unique_job_id",
    "update_job",
    "update_step",
    "warnings_of",
    "workflow_filename",
]
