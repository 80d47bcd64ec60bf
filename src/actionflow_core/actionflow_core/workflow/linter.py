# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Semantic lint rules for workflow models.

:func:`lint_workflow` runs every rule and returns the issues in a fixed
order: triggers (in ``on`` order), the job-count check, the dependency-cycle
check, then each job in declaration order with its steps in step order.
Rules are independent; a failure in one never hides another.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from actionflow_common.validation import find_cycles, suggest

from .model import Job, Workflow
from .rules import (
    ACTIVITY_TYPES,
    FILTER_KEYS,
    FILTERED_EVENTS,
    KNOWN_RUNNERS,
    STRICT_TYPE_EVENTS,
    VALID_TRIGGER_EVENTS,
    is_action_reference,
    is_valid_cron,
)
from .triggers import ParsedTrigger, parse_triggers

LOGGER = logging.getLogger(__name__)


class Severity(Enum):
    ERROR = "error"
    WARNING = "warning"


@dataclass
class LintError:
    """A problem found in a workflow model."""

    message: str
    path: Optional[str] = None  # e.g. "jobs.build.steps[0]"
    severity: Severity = Severity.ERROR
    suggestion: Optional[str] = None

    def __str__(self) -> str:
        msg = f"{self.severity.value}: {self.message}"
        if self.path:
            msg += f" (at {self.path})"
        if self.suggestion:
            msg += f". Did you mean {self.suggestion}?"
        return msg


def _error(message: str, path: Optional[str] = None, suggestion: Optional[str] = None) -> LintError:
    return LintError(message, path, Severity.ERROR, suggestion)


def _warn(message: str, path: Optional[str] = None, suggestion: Optional[str] = None) -> LintError:
    return LintError(message, path, Severity.WARNING, suggestion)


def has_errors(issues: List[LintError]) -> bool:
    return any(i.severity == Severity.ERROR for i in issues)


def errors_of(issues: List[LintError]) -> List[LintError]:
    return [i for i in issues if i.severity == Severity.ERROR]


def warnings_of(issues: List[LintError]) -> List[LintError]:
    return [i for i in issues if i.severity == Severity.WARNING]


def _as_list(value) -> list:
    return value if isinstance(value, list) else [value]


# ---------------------------------------------------------------------------
# Triggers
# ---------------------------------------------------------------------------


def _lint_trigger(trigger: ParsedTrigger, index: int) -> List[LintError]:
    issues: List[LintError] = []
    event = trigger.event
    config = trigger.config
    path = f"on[{index}].{event}"

    if event not in VALID_TRIGGER_EVENTS:
        issues.append(
            _error(
                f'Invalid trigger event: "{event}"',
                path,
                suggestion=suggest(event, sorted(VALID_TRIGGER_EVENTS)),
            )
        )

    if event in FILTERED_EVENTS:
        for key in FILTER_KEYS:
            values = config.get(key)
            if not values:
                continue
            if not all(isinstance(v, str) for v in _as_list(values)):
                issues.append(
                    _error(
                        f"Invalid {key} format in {event} trigger. {key.capitalize()} must be strings.",
                        f"{path}.{key}",
                    )
                )

    if config.get("types"):
        types = _as_list(config["types"])
        if event == "repository_dispatch":
            if not all(isinstance(t, str) for t in types):
                issues.append(_error("repository_dispatch types must be strings", f"{path}.types"))
        elif ACTIVITY_TYPES.get(event) is not None:
            allowed = ACTIVITY_TYPES[event]
            make = _error if event in STRICT_TYPE_EVENTS else _warn
            for activity in types:
                if isinstance(activity, str) and activity not in allowed:
                    issues.append(
                        make(
                            f'Invalid {event} type: "{activity}". '
                            f"Valid types: {', '.join(sorted(allowed))}",
                            f"{path}.types",
                            suggestion=suggest(activity, sorted(allowed)),
                        )
                    )

    if event == "workflow_run":
        workflows = config.get("workflows")
        valid = (isinstance(workflows, str) and workflows) or (
            isinstance(workflows, list)
            and workflows
            and all(isinstance(w, str) for w in workflows)
        )
        if not valid:
            issues.append(
                _error(
                    'workflow_run trigger requires a "workflows" field (string or list of strings)',
                    path,
                )
            )

    if event == "schedule":
        cron = config.get("cron")
        if not cron or not isinstance(cron, str):
            issues.append(_error('schedule trigger requires a "cron" field (string)', path))
        elif not is_valid_cron(cron):
            issues.append(
                _error(
                    f'Invalid cron expression: "{cron}". '
                    'Format: "minute hour day month weekday" (e.g., "0 0 * * *")',
                    f"{path}.cron",
                )
            )

    return issues


# ---------------------------------------------------------------------------
# Jobs
# ---------------------------------------------------------------------------


def _needs_graph(jobs: Dict[str, Job]) -> Dict[str, List[str]]:
    return {
        job_id: [n for n in job.needs_list() if isinstance(n, str)]
        for job_id, job in jobs.items()
    }


def _lint_cycles(jobs: Dict[str, Job]) -> List[LintError]:
    issues = []
    for job_id, cycle in find_cycles(jobs.keys(), _needs_graph(jobs)):
        issues.append(
            _error(
                f'Circular dependency detected involving job "{job_id}" ({" -> ".join(cycle)})',
                f"jobs.{job_id}.needs",
            )
        )
    return issues


def _lint_job(job_id: str, job: Job, job_ids: List[str]) -> List[LintError]:
    issues: List[LintError] = []
    path = f"jobs.{job_id}"

    if not job.runs_on:
        issues.append(_error(f'Job "{job_id}" is missing required field "runs-on"', f"{path}.runs-on"))
    else:
        for runner in job.runs_on_list():
            if not isinstance(runner, str):
                continue
            if runner.startswith("self-hosted") or runner in KNOWN_RUNNERS:
                continue
            # Expressions and bracketed label lists are resolved at run time
            if "[" in runner or "${{" in runner:
                continue
            issues.append(
                _warn(
                    f'Unknown runner label: "{runner}". Common runners: {", ".join(KNOWN_RUNNERS)}',
                    f"{path}.runs-on",
                    suggestion=suggest(runner, KNOWN_RUNNERS, n=1),
                )
            )

    for need in job.needs_list():
        if isinstance(need, str) and need not in job_ids:
            issues.append(
                _error(
                    f'Job "{job_id}" depends on job "{need}" which does not exist',
                    f"{path}.needs",
                    suggestion=suggest(need, [j for j in job_ids if j != job_id]),
                )
            )

    strategy = job.strategy
    if strategy is not None:
        if strategy.matrix is not None:
            if not strategy.matrix:
                issues.append(
                    _warn(
                        f'Job "{job_id}" has an empty matrix. Remove strategy or add matrix variables.',
                        f"{path}.strategy.matrix",
                    )
                )
            for key, values in strategy.matrix.items():
                if not isinstance(values, list) or not values:
                    issues.append(
                        _error(
                            f'Matrix variable "{key}" in job "{job_id}" must be a non-empty list',
                            f"{path}.strategy.matrix.{key}",
                        )
                    )
        max_parallel = strategy.max_parallel
        if isinstance(max_parallel, (int, float)) and max_parallel < 1:
            issues.append(
                _error(
                    f'max-parallel in job "{job_id}" must be at least 1',
                    f"{path}.strategy.max-parallel",
                )
            )

    if not job.steps:
        issues.append(_warn(f'Job "{job_id}" has no steps', f"{path}.steps"))

    for index, step in enumerate(job.steps):
        step_path = f"{path}.steps[{index}]"
        if not step.run and not step.uses:
            issues.append(
                _error(
                    f'Step {index + 1} in job "{job_id}" must have either "run" or "uses"',
                    step_path,
                )
            )
        if step.run and step.uses:
            issues.append(
                _error(
                    f'Step {index + 1} in job "{job_id}" cannot have both "run" and "uses"',
                    step_path,
                )
            )
        if isinstance(step.uses, str) and step.uses and not is_action_reference(step.uses):
            issues.append(
                _warn(
                    f'Invalid action reference format: "{step.uses}". '
                    'Expected format: "owner/repo@ref"',
                    f"{step_path}.uses",
                )
            )

    return issues


def lint_workflow(workflow: Workflow) -> List[LintError]:
    """Return every lint issue in *workflow*, in a deterministic order."""
    issues: List[LintError] = []

    triggers = parse_triggers(workflow.on)
    if not triggers:
        issues.append(_error('Workflow must have at least one trigger in "on" field', "on"))
    for index, trigger in enumerate(triggers):
        issues.extend(_lint_trigger(trigger, index))

    job_ids = list(workflow.jobs)
    if not job_ids:
        issues.append(_error("Workflow must have at least one job", "jobs"))
    else:
        issues.extend(_lint_cycles(workflow.jobs))
        for job_id in job_ids:
            issues.extend(_lint_job(job_id, workflow.jobs[job_id], job_ids))

    LOGGER.debug(
        "Linted workflow: %d error(s), %d warning(s)",
        len(errors_of(issues)),
        len(warnings_of(issues)),
    )
    return issues
