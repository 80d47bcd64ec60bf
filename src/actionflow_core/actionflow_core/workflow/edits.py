# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Pure edit operations on workflow models.

Each function returns a new :class:`~actionflow_core.workflow.model.Workflow`
and leaves its input untouched.  Unknown job ids raise ``KeyError`` and
out-of-range step indexes raise ``IndexError``.
"""

import re
from dataclasses import replace
from typing import Any, Iterable, List, Optional

from .model import DEFAULT_RUNNER, Job, Step, Workflow
from .triggers import ParsedTrigger, parse_triggers, triggers_to_on

DEFAULT_STEP_RUN = 'echo "Hello, World!"'


def unique_job_id(existing: Iterable[str]) -> str:
    """First of ``job-1``, ``job-2``, ... not in *existing*."""
    taken = set(existing)
    counter = 1
    while f"job-{counter}" in taken:
        counter += 1
    return f"job-{counter}"


def compact_needs(needs: List[str]) -> Optional[Any]:
    """``None`` for no prerequisites, a bare id for one, the list otherwise."""
    if not needs:
        return None
    if len(needs) == 1:
        return needs[0]
    return list(needs)


def workflow_filename(workflow: Workflow) -> str:
    """Download name for *workflow*: its name, lowercased and dash-joined."""
    name = re.sub(r"\s+", "-", workflow.name or "").lower()
    return f"{name or 'workflow'}.yml"


def _job(workflow: Workflow, job_id: str) -> Job:
    try:
        return workflow.jobs[job_id]
    except KeyError:
        raise KeyError(f"Unknown job: {job_id}") from None


def _with_job(workflow: Workflow, job_id: str, job: Job) -> Workflow:
    jobs = dict(workflow.jobs)
    jobs[job_id] = job
    return replace(workflow, jobs=jobs)


def add_job(workflow: Workflow, needs: Optional[List[str]] = None) -> Workflow:
    """Append a default job under a fresh id, depending on *needs* if given."""
    job_id = unique_job_id(workflow.jobs)
    job = Job(
        runs_on=DEFAULT_RUNNER,
        needs=compact_needs(list(needs or [])),
        steps=[Step(run=DEFAULT_STEP_RUN)],
    )
    return _with_job(workflow, job_id, job)


def remove_job(workflow: Workflow, job_id: str) -> Workflow:
    """Delete *job_id* and drop it from every other job's ``needs``."""
    _job(workflow, job_id)
    jobs = {}
    for other_id, job in workflow.jobs.items():
        if other_id == job_id:
            continue
        needs = job.needs_list()
        remaining = [n for n in needs if n != job_id]
        if len(remaining) != len(needs):
            job = replace(job, needs=compact_needs(remaining))
        jobs[other_id] = job
    return replace(workflow, jobs=jobs)


def update_job(workflow: Workflow, job_id: str, **changes) -> Workflow:
    """Replace fields of one job, e.g. ``update_job(wf, "build", runs_on="macos-latest")``."""
    return _with_job(workflow, job_id, replace(_job(workflow, job_id), **changes))


def add_step(workflow: Workflow, job_id: str, step: Optional[Step] = None) -> Workflow:
    job = _job(workflow, job_id)
    steps = list(job.steps) + [step if step is not None else Step(run="")]
    return _with_job(workflow, job_id, replace(job, steps=steps))


def update_step(workflow: Workflow, job_id: str, index: int, **changes) -> Workflow:
    job = _job(workflow, job_id)
    steps = list(job.steps)
    if not 0 <= index < len(steps):
        raise IndexError(f"Job {job_id} has no step {index}")
    steps[index] = replace(steps[index], **changes)
    return _with_job(workflow, job_id, replace(job, steps=steps))


def remove_step(workflow: Workflow, job_id: str, index: int) -> Workflow:
    job = _job(workflow, job_id)
    if not 0 <= index < len(job.steps):
        raise IndexError(f"Job {job_id} has no step {index}")
    steps = [s for i, s in enumerate(job.steps) if i != index]
    return _with_job(workflow, job_id, replace(job, steps=steps))


def set_triggers(workflow: Workflow, triggers: List[ParsedTrigger]) -> Workflow:
    """Rewrite ``on`` from *triggers* in its most compact shape."""
    return replace(workflow, on=triggers_to_on(triggers))


def add_trigger(workflow: Workflow, event: str = "push") -> Workflow:
    """Append a trigger with empty configuration."""
    return set_triggers(workflow, parse_triggers(workflow.on) + [ParsedTrigger(event)])
