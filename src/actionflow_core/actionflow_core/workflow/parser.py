# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""YAML text to :class:`~actionflow_core.workflow.model.Workflow`.

The parser is permissive: it always returns a model, and only a YAML syntax
error, a non-mapping root, a missing ``jobs`` mapping or a non-mapping job
entry are reported.  Everything semantic is left to the linter.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import yaml

from . import yaml_support
from .model import DEFAULT_RUNNER, Job, Step, Strategy, Workflow, empty_workflow

LOGGER = logging.getLogger(__name__)

WORKFLOW_FIELDS = ("name", "run-name", "on", "env", "jobs")
JOB_FIELDS = ("name", "runs-on", "needs", "permissions", "env", "strategy", "steps")
STEP_FIELDS = ("id", "name", "uses", "run", "with", "env", "shell")


@dataclass
class ParseResult:
    workflow: Workflow
    errors: List[str] = field(default_factory=list)


def _describe_yaml_error(exc: yaml.YAMLError) -> str:
    mark = getattr(exc, "problem_mark", None)
    problem = getattr(exc, "problem", None)
    if problem and mark is not None:
        return f"{problem} (line {mark.line + 1}, column {mark.column + 1})"
    return str(exc)


def _str_or_none(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _mapping_or_none(value: Any) -> Optional[Dict[str, Any]]:
    if isinstance(value, dict):
        return {str(k): v for k, v in value.items()}
    return None


def _non_empty_mapping_or_none(value: Any) -> Optional[Dict[str, Any]]:
    mapping = _mapping_or_none(value)
    return mapping or None


def _extra(data: Dict[Any, Any], known) -> Dict[str, Any]:
    return {str(k): v for k, v in data.items() if k not in known}


def _parse_strategy(raw: Any) -> Optional[Strategy]:
    if not isinstance(raw, dict):
        return None
    matrix = _mapping_or_none(raw.get("matrix"))
    fail_fast = raw.get("fail-fast")
    if not isinstance(fail_fast, bool):
        fail_fast = None
    max_parallel = raw.get("max-parallel")
    if isinstance(max_parallel, bool) or not isinstance(max_parallel, (int, float)):
        max_parallel = None
    strategy = Strategy(matrix=matrix, fail_fast=fail_fast, max_parallel=max_parallel)
    return None if strategy.is_empty else strategy


def _parse_step(raw: Any, index: int) -> Step:
    if not isinstance(raw, dict):
        return Step(name=f"Step {index + 1}", run="")
    return Step(
        id=_str_or_none(raw.get("id")),
        name=_str_or_none(raw.get("name")),
        uses=_str_or_none(raw.get("uses")),
        run=_str_or_none(raw.get("run")),
        with_=_non_empty_mapping_or_none(raw.get("with")),
        env=_non_empty_mapping_or_none(raw.get("env")),
        shell=_str_or_none(raw.get("shell")),
        extra=_extra(raw, STEP_FIELDS),
    )


def _parse_job(raw: Dict[Any, Any]) -> Job:
    runs_on = raw.get("runs-on")
    if not isinstance(runs_on, (str, list)):
        runs_on = DEFAULT_RUNNER
    steps = raw.get("steps")
    if not isinstance(steps, list):
        steps = []
    return Job(
        runs_on=runs_on,
        name=_str_or_none(raw.get("name")),
        needs=raw.get("needs"),
        permissions=_mapping_or_none(raw.get("permissions")),
        env=_mapping_or_none(raw.get("env")),
        strategy=_parse_strategy(raw.get("strategy")),
        steps=[_parse_step(s, i) for i, s in enumerate(steps)],
        extra=_extra(raw, JOB_FIELDS),
    )


def parse_workflow(text: str) -> ParseResult:
    """Parse *text* into a workflow model plus a list of structural errors.

    Never raises.  On unrecoverable input the returned workflow is
    :func:`~actionflow_core.workflow.model.empty_workflow`.
    """
    try:
        data = yaml_support.load(text)
    except yaml.YAMLError as exc:
        LOGGER.debug("YAML parse failure: %s", exc)
        return ParseResult(empty_workflow(), [f"YAML parse error: {_describe_yaml_error(exc)}"])

    if not isinstance(data, dict):
        return ParseResult(empty_workflow(), ["Invalid workflow: root must be a mapping"])

    errors: List[str] = []
    raw_jobs = data.get("jobs")
    if not isinstance(raw_jobs, dict):
        errors.append('Workflow must have a "jobs" mapping')
        raw_jobs = {}

    on = data.get("on")
    if not isinstance(on, (str, list, dict)):
        on = {}

    jobs: Dict[str, Job] = {}
    for job_id, raw_job in raw_jobs.items():
        job_id = str(job_id)
        if not isinstance(raw_job, dict):
            errors.append(f'Job "{job_id}" must be a mapping')
            continue
        jobs[job_id] = _parse_job(raw_job)

    workflow = Workflow(
        name=_str_or_none(data.get("name")),
        run_name=_str_or_none(data.get("run-name")),
        on=on,
        env=_non_empty_mapping_or_none(data.get("env")),
        jobs=jobs,
        extra=_extra(data, WORKFLOW_FIELDS),
    )
    LOGGER.debug("Parsed workflow with %d job(s), %d error(s)", len(jobs), len(errors))
    return ParseResult(workflow, errors)
