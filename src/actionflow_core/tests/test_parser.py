# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import re

import pytest

from actionflow_core.workflow.model import DEFAULT_RUNNER, Step, Strategy, empty_workflow
from actionflow_core.workflow.parser import parse_workflow


def test_parse_sample(sample_yaml):
    result = parse_workflow(sample_yaml)
    assert result.errors == []
    wf = result.workflow
    assert wf.name == "Sample"
    assert wf.on == {"push": {"branches": ["main"]}}
    assert list(wf.jobs) == ["build", "test"]
    assert wf.jobs["test"].needs == "build"
    assert wf.jobs["build"].steps == [Step(run="echo build")]


def test_on_key_stays_a_string():
    result = parse_workflow("on: push\njobs: {}\n")
    assert result.workflow.on == "push"
    assert result.workflow.extra == {}


def test_yes_no_are_not_booleans():
    result = parse_workflow("on: push\nyes: no\njobs: {}\n")
    assert result.workflow.extra == {"yes": "no"}


def test_invalid_yaml_is_reported_not_raised():
    result = parse_workflow("not: valid: yaml: [")
    assert result.workflow is not None
    assert result.workflow.jobs == {}
    assert len(result.errors) == 1
    assert re.match(r"YAML parse error: .* \(line \d+, column \d+\)", result.errors[0])


@pytest.mark.parametrize("text", ["", "just a string", "- a\n- b\n", "42"])
def test_non_mapping_root(text):
    result = parse_workflow(text)
    assert result.workflow == empty_workflow()
    assert result.errors == ["Invalid workflow: root must be a mapping"]


def test_missing_jobs_is_tolerated():
    result = parse_workflow("name: No jobs\non: push\n")
    assert result.workflow.jobs == {}
    assert result.workflow.name == "No jobs"
    assert any("jobs" in e for e in result.errors)


def test_non_mapping_job_is_skipped():
    result = parse_workflow("on: push\njobs:\n  a: nope\n  b:\n    runs-on: ubuntu-latest\n")
    assert result.errors == ['Job "a" must be a mapping']
    assert list(result.workflow.jobs) == ["b"]


def test_needs_shape_is_preserved():
    text = "on: push\njobs:\n  one: {}\n  two: {needs: one}\n  three: {needs: [one, two]}\n"
    jobs = parse_workflow(text).workflow.jobs
    assert jobs["two"].needs == "one"
    assert jobs["two"].needs_list() == ["one"]
    assert jobs["three"].needs == ["one", "two"]
    assert jobs["one"].needs is None


def test_missing_runs_on_defaults():
    job = parse_workflow("on: push\njobs:\n  a: {steps: []}\n").workflow.jobs["a"]
    assert job.runs_on == DEFAULT_RUNNER


def test_runs_on_list_is_kept():
    job = parse_workflow("on: push\njobs:\n  a: {runs-on: [self-hosted, linux]}\n").workflow.jobs["a"]
    assert job.runs_on == ["self-hosted", "linux"]


def test_non_mapping_step_becomes_placeholder():
    text = "on: push\njobs:\n  a:\n    runs-on: ubuntu-latest\n    steps:\n      - run: ok\n      - just text\n"
    steps = parse_workflow(text).workflow.jobs["a"].steps
    assert steps[1] == Step(name="Step 2", run="")


def test_strategy_fields():
    text = (
        "on: push\njobs:\n  a:\n    strategy:\n      matrix: {os: [a, b]}\n"
        "      fail-fast: false\n      max-parallel: 2\n"
    )
    strategy = parse_workflow(text).workflow.jobs["a"].strategy
    assert strategy == Strategy(matrix={"os": ["a", "b"]}, fail_fast=False, max_parallel=2)


def test_ill_typed_strategy_is_dropped():
    text = "on: push\njobs:\n  a:\n    strategy:\n      fail-fast: maybe\n      max-parallel: true\n"
    assert parse_workflow(text).workflow.jobs["a"].strategy is None


def test_unknown_fields_are_kept_in_extra(full_yaml):
    wf = parse_workflow(full_yaml).workflow
    assert wf.extra == {"concurrency": "ci-${{ github.ref }}"}
    assert wf.jobs["build"].extra == {"timeout-minutes": 30}
    assert wf.jobs["build"].steps[0].extra == {"continue-on-error": True}


def test_full_workflow_fields(full_yaml):
    result = parse_workflow(full_yaml)
    assert result.errors == []
    wf = result.workflow
    assert wf.run_name == "Deploy by ${{ github.actor }}"
    assert wf.env == {"CI": "true"}
    build = wf.jobs["build"]
    assert build.name == "Build"
    assert build.permissions == {"contents": "read"}
    setup, test = build.steps
    assert setup.id == "setup"
    assert setup.with_ == {"python-version": "${{ matrix.python }}"}
    assert test.run == "pip install .\npytest\n"
    assert test.env == {"PYTHONUNBUFFERED": "1"}
    assert test.shell == "bash"


def test_empty_step_mappings_normalize_to_none():
    text = "on: push\nenv: {}\njobs:\n  a:\n    steps:\n      - run: x\n        with: {}\n        env: {}\n"
    wf = parse_workflow(text).workflow
    assert wf.env is None
    assert wf.jobs["a"].steps[0] == Step(run="x")


def test_unusable_on_becomes_empty_mapping():
    assert parse_workflow("on: 5\njobs: {}\n").workflow.on == {}
