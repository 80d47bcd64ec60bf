# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Leveled layout of the job dependency graph.

Jobs are placed left to right by dependency level (column 0 needs nothing,
column 1 needs only column-0 jobs, ...) and stacked top to bottom within a
column in declaration order.  A leading column holds one node per trigger
and a trailing "add job" node follows the last job column.

This is a leveling heuristic, not a general DAG layout: there is no crossing
minimization.  Cyclic or dangling ``needs`` never stop it; when no job is
ready the first remaining job is placed on its own column.
"""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, Union

from .model import Workflow
from .triggers import ParsedTrigger, parse_triggers

LOGGER = logging.getLogger(__name__)

NODE_WIDTH = 200
NODE_HEIGHT = 80
HORIZONTAL_GAP = 80
VERTICAL_GAP = 60

COLUMN_STEP = NODE_WIDTH + HORIZONTAL_GAP
ROW_STEP = NODE_HEIGHT + VERTICAL_GAP
# Horizontal space reserved for the trigger column.
TRIGGER_BAND = COLUMN_STEP

TRIGGER_NODE_PREFIX = "__trigger__"
ADD_JOB_NODE_ID = "__add_job__"


@dataclass
class Position:
    x: int
    y: int


@dataclass
class JobNodeData:
    job_id: str
    label: str
    runs_on: str
    step_count: int
    needs: List[str] = field(default_factory=list)


@dataclass
class TriggerNodeData:
    """Payload of a trigger node; empty ``triggers`` marks the placeholder."""

    triggers: List[ParsedTrigger] = field(default_factory=list)


@dataclass
class AddJobNodeData:
    """Candidate prerequisites for a job appended after the last column."""

    needs: List[str] = field(default_factory=list)


NodeData = Union[JobNodeData, TriggerNodeData, AddJobNodeData]


@dataclass
class FlowNode:
    id: str
    type: str  # "job" | "trigger" | "addJob"
    position: Position
    data: NodeData


@dataclass
class FlowEdge:
    id: str
    source: str
    target: str


@dataclass
class GraphLayout:
    nodes: List[FlowNode] = field(default_factory=list)
    edges: List[FlowEdge] = field(default_factory=list)

    def connect(self, source: str, target: str) -> FlowEdge:
        """Append an edge ``source -> target`` with an id unique within this layout.

        Ids read ``<source>-<target>``.  Job ids may contain ``-`` themselves, so
        an id already taken gets a ``-2``, ``-3``... suffix.
        """
        taken = {e.id for e in self.edges}
        edge_id = base = f"{source}-{target}"
        suffix = 2
        while edge_id in taken:
            edge_id = f"{base}-{suffix}"
            suffix += 1
        edge = FlowEdge(edge_id, source, target)
        self.edges.append(edge)
        return edge

    def node(self, node_id: str) -> FlowNode:
        for node in self.nodes:
            if node.id == node_id:
                return node
        raise KeyError(node_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [asdict(n) for n in self.nodes],
            "edges": [asdict(e) for e in self.edges],
        }


def needs_map(workflow: Workflow) -> Dict[str, List[str]]:
    """Job id to prerequisite ids; non-string and repeated entries are dropped."""
    result: Dict[str, List[str]] = {}
    for job_id, job in workflow.jobs.items():
        result[job_id] = list(dict.fromkeys(n for n in job.needs_list() if isinstance(n, str)))
    return result


def level_columns(needs: Dict[str, List[str]]) -> List[List[str]]:
    """Greedily group job ids into columns of jobs whose prerequisites are placed."""
    columns: List[List[str]] = []
    placed = set()
    remaining = list(needs)
    while remaining:
        column = [job_id for job_id in remaining if all(n in placed for n in needs[job_id])]
        if not column:
            LOGGER.debug("No ready job among %s; forcing %s", remaining, remaining[0])
            column = [remaining[0]]
        placed.update(column)
        columns.append(column)
        remaining = [job_id for job_id in remaining if job_id not in placed]
    return columns


def _span(count: int) -> int:
    """Height covered by *count* stacked nodes."""
    if count <= 0:
        return 0
    return count * NODE_HEIGHT + (count - 1) * VERTICAL_GAP


def _column_x(column_index: int) -> int:
    return TRIGGER_BAND + column_index * COLUMN_STEP


def layout_workflow(workflow: Workflow) -> GraphLayout:
    """Compute node positions and edges for *workflow*.  Pure and deterministic."""
    needs = needs_map(workflow)
    columns = level_columns(needs)
    result = GraphLayout()

    for column_index, column in enumerate(columns):
        x = _column_x(column_index)
        for row_index, job_id in enumerate(column):
            job = workflow.jobs[job_id]
            result.nodes.append(
                FlowNode(
                    id=job_id,
                    type="job",
                    position=Position(x, row_index * ROW_STEP),
                    data=JobNodeData(
                        job_id=job_id,
                        label=job.name or job_id,
                        runs_on=", ".join(str(r) for r in job.runs_on_list()),
                        step_count=len(job.steps),
                        needs=needs[job_id],
                    ),
                )
            )

    for job_id, prerequisites in needs.items():
        for need in prerequisites:
            # A dangling prerequisite has no node to connect from
            if need in needs:
                result.connect(need, job_id)

    first_column = columns[0] if columns else []
    triggers = parse_triggers(workflow.on)
    payloads = [[t] for t in triggers] or [[]]
    top = (_span(len(first_column)) - _span(len(payloads))) // 2
    for index, payload in enumerate(payloads):
        node_id = f"{TRIGGER_NODE_PREFIX}{index}"
        result.nodes.append(
            FlowNode(
                id=node_id,
                type="trigger",
                position=Position(0, top + index * ROW_STEP),
                data=TriggerNodeData(triggers=payload),
            )
        )
        for job_id in first_column:
            result.connect(node_id, job_id)

    last_column = columns[-1] if columns else []
    result.nodes.append(
        FlowNode(
            id=ADD_JOB_NODE_ID,
            type="addJob",
            position=Position(_column_x(len(columns)), (_span(len(last_column)) - NODE_HEIGHT) // 2)
            if last_column
            else Position(_column_x(0), 0),
            data=AddJobNodeData(needs=list(last_column)),
        )
    )
    for job_id in last_column:
        result.connect(job_id, ADD_JOB_NODE_ID)

    LOGGER.debug(
        "Laid out %d job(s) in %d column(s) with %d trigger node(s)",
        len(needs),
        len(columns),
        len(payloads),
    )
    return result
