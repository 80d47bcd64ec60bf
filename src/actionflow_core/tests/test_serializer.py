# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import pytest

from actionflow_core.workflow.model import Job, Step, Workflow, new_workflow, sample_workflow
from actionflow_core.workflow.parser import parse_workflow
from actionflow_core.workflow.serializer import (
    check_round_trip,
    job_to_dict,
    serialize_workflow,
    step_to_dict,
    workflow_to_dict,
)

ROUND_TRIP_DOCS = [
    "on: push\njobs: {}\n",
    "name: x\non: [push, pull_request]\njobs:\n  a:\n    runs-on: ubuntu-latest\n    steps:\n      - run: echo\n",
    "on:\n  schedule:\n    - cron: '0 0 * * *'\njobs:\n  a:\n    needs: [b]\n  b:\n    needs: a\n",
    "on: push\njobs:\n  a:\n    strategy: {matrix: {}}\n    steps: [plain, {uses: ./local}]\n",
    "name: 123\non: push\nweird: {nested: [1, 2, {x: y}]}\njobs:\n  a: {runs-on: 7, needs: 5}\n",
    "on: push\njobs:\n  a:\n    env: {}\n    permissions: {}\n    steps:\n      - run: \"line one\\nline two\"\n",
]


@pytest.mark.parametrize("text", ROUND_TRIP_DOCS)
def test_round_trip_is_lossless(text):
    first = parse_workflow(text).workflow
    again = parse_workflow(serialize_workflow(first))
    assert again.errors == []
    assert again.workflow == first


def test_round_trip_full(full_yaml):
    first = parse_workflow(full_yaml).workflow
    again = parse_workflow(serialize_workflow(first))
    assert again.errors == []
    assert again.workflow == first


def test_check_round_trip_reports_no_errors():
    assert check_round_trip(sample_workflow()) == []
    assert check_round_trip(new_workflow()) == []


def test_on_key_is_not_quoted():
    text = serialize_workflow(sample_workflow())
    assert "\non:\n" in text
    assert "'on'" not in text


def test_workflow_key_order(full_yaml):
    data = workflow_to_dict(parse_workflow(full_yaml).workflow)
    assert list(data) == ["name", "run-name", "on", "env", "concurrency", "jobs"]


def test_job_key_order(full_yaml):
    data = job_to_dict(parse_workflow(full_yaml).workflow.jobs["build"])
    assert list(data) == [
        "name",
        "runs-on",
        "needs",
        "permissions",
        "strategy",
        "timeout-minutes",
        "steps",
    ]


def test_step_key_order():
    step = Step(id="s", name="n", uses="a/b@v1", with_={"k": "v"}, env={"E": "1"}, shell="bash", extra={"if": "always()"})
    assert list(step_to_dict(step)) == ["id", "name", "uses", "with", "env", "shell", "if"]


def test_omits_absent_fields():
    assert job_to_dict(Job()) == {"runs-on": "ubuntu-latest", "steps": []}
    assert step_to_dict(Step(run="x", with_={}, env=None)) == {"run": "x"}


def test_multiline_run_uses_literal_block():
    wf = Workflow(on="push", jobs={"a": Job(steps=[Step(run="one\ntwo\n")])})
    text = serialize_workflow(wf)
    assert "run: |\n" in text
    assert "one\n" in text


def test_sequences_are_indented_under_keys():
    text = serialize_workflow(sample_workflow())
    assert "    steps:\n      - run: echo build\n" in text


def test_shared_subtrees_are_not_aliased():
    branches = ["main"]
    wf = Workflow(
        on={"push": {"branches": branches}, "pull_request": {"branches": branches}},
        jobs={"a": Job(steps=[Step(run="x")])},
    )
    text = serialize_workflow(wf)
    assert "&" not in text and "*" not in text
    assert parse_workflow(text).workflow == wf


def test_boolean_like_strings_stay_strings():
    wf = Workflow(on="push", env={"FLAG": "true", "ON": "on"}, jobs={})
    assert parse_workflow(serialize_workflow(wf)).workflow.env == {"FLAG": "true", "ON": "on"}
