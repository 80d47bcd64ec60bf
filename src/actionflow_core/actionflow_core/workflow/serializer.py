# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Workflow model to canonical YAML text.

The output re-parses to an equal model for anything produced by
:func:`~actionflow_core.workflow.parser.parse_workflow`.
"""

import logging
from typing import Any, Dict, List

from . import yaml_support
from .model import Job, Step, Strategy, Workflow
from .parser import parse_workflow

LOGGER = logging.getLogger(__name__)


def _strategy_to_dict(strategy: Strategy) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if strategy.matrix is not None:
        out["matrix"] = strategy.matrix
    if strategy.fail_fast is not None:
        out["fail-fast"] = strategy.fail_fast
    if strategy.max_parallel is not None:
        out["max-parallel"] = strategy.max_parallel
    return out


def step_to_dict(step: Step) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if step.id is not None:
        out["id"] = step.id
    if step.name is not None:
        out["name"] = step.name
    if step.uses is not None:
        out["uses"] = step.uses
    if step.run is not None:
        out["run"] = step.run
    if step.with_:
        out["with"] = step.with_
    if step.env:
        out["env"] = step.env
    if step.shell is not None:
        out["shell"] = step.shell
    out.update(step.extra)
    return out


def job_to_dict(job: Job) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    if job.name is not None:
        out["name"] = job.name
    out["runs-on"] = job.runs_on
    if job.needs is not None:
        out["needs"] = job.needs
    if job.permissions is not None:
        out["permissions"] = job.permissions
    if job.env is not None:
        out["env"] = job.env
    if job.strategy is not None:
        strategy = _strategy_to_dict(job.strategy)
        if strategy:
            out["strategy"] = strategy
    out.update(job.extra)
    out["steps"] = [step_to_dict(s) for s in job.steps]
    return out


def workflow_to_dict(workflow: Workflow) -> Dict[str, Any]:
    """Plain-data view of *workflow* with keys in canonical order."""
    out: Dict[str, Any] = {}
    if workflow.name is not None:
        out["name"] = workflow.name
    if workflow.run_name is not None:
        out["run-name"] = workflow.run_name
    out["on"] = workflow.on
    if workflow.env:
        out["env"] = workflow.env
    out.update(workflow.extra)
    out["jobs"] = {job_id: job_to_dict(job) for job_id, job in workflow.jobs.items()}
    return out


def serialize_workflow(workflow: Workflow) -> str:
    text = yaml_support.dump(workflow_to_dict(workflow))
    LOGGER.debug("Serialized workflow with %d job(s) to %d chars", len(workflow.jobs), len(text))
    return text


def check_round_trip(workflow: Workflow) -> List[str]:
    """Return the parse errors produced by re-reading the workflow's own serialization."""
    return parse_workflow(serialize_workflow(workflow)).errors
