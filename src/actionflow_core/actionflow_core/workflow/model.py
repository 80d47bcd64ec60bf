# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""In-memory model of a GitHub-Actions-style workflow.

Entities are frozen dataclasses: every edit produces a new value through
``dataclasses.replace`` and untouched subtrees are shared.  Keys the model
does not know about are carried in each entity's ``extra`` mapping, in
source order, so they survive a parse/serialize round trip.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

DEFAULT_RUNNER = "ubuntu-latest"

RunsOn = Union[str, List[str]]
Needs = Union[str, List[str]]
TriggerSpec = Union[str, List[Any], Dict[str, Any]]


def as_list(value: Any) -> List[Any]:
    """Interpret a scalar-or-list field as a list (``None`` is empty)."""
    if value is None:
        return []
    if isinstance(value, list):
        return list(value)
    return [value]


@dataclass(frozen=True)
class Step:
    id: Optional[str] = None
    name: Optional[str] = None
    uses: Optional[str] = None
    run: Optional[str] = None
    with_: Optional[Dict[str, Any]] = None
    env: Optional[Dict[str, Any]] = None
    shell: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class Strategy:
    """Matrix fan-out settings.

    ``fail_fast=None`` behaves as true and ``max_parallel=None`` as unbounded.
    """

    matrix: Optional[Dict[str, Any]] = None
    fail_fast: Optional[bool] = None
    max_parallel: Optional[Union[int, float]] = None

    @property
    def is_empty(self) -> bool:
        return self.matrix is None and self.fail_fast is None and self.max_parallel is None


@dataclass(frozen=True)
class Job:
    runs_on: RunsOn = DEFAULT_RUNNER
    name: Optional[str] = None
    needs: Optional[Any] = None
    permissions: Optional[Dict[str, Any]] = None
    env: Optional[Dict[str, Any]] = None
    strategy: Optional[Strategy] = None
    steps: List[Step] = field(default_factory=list)
    extra: Dict[str, Any] = field(default_factory=dict)

    def needs_list(self) -> List[Any]:
        """Prerequisites as a list, whichever shape ``needs`` was written in."""
        return as_list(self.needs)

    def runs_on_list(self) -> List[Any]:
        return as_list(self.runs_on)


@dataclass(frozen=True)
class Workflow:
    on: TriggerSpec = field(default_factory=dict)
    jobs: Dict[str, Job] = field(default_factory=dict)
    name: Optional[str] = None
    run_name: Optional[str] = None
    env: Optional[Dict[str, Any]] = None
    extra: Dict[str, Any] = field(default_factory=dict)


def empty_workflow() -> Workflow:
    """The fallback model handed out when a document cannot be read."""
    return Workflow(name="", on={}, jobs={})


def new_workflow() -> Workflow:
    """A blank workflow as created by the editor's "new" action."""
    return Workflow(name="Untitled Workflow", on={"push": {"branches": ["main"]}}, jobs={})


def sample_workflow() -> Workflow:
    """Two-job build/test workflow used as the editor's sample document."""
    return Workflow(
        name="Sample",
        on={"push": {"branches": ["main"]}},
        jobs={
            "build": Job(runs_on=DEFAULT_RUNNER, steps=[Step(run="echo build")]),
            "test": Job(runs_on=DEFAULT_RUNNER, needs="build", steps=[Step(run="echo test")]),
        },
    )
