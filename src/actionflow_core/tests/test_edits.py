# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import pytest

from actionflow_core.workflow.edits import (
    DEFAULT_STEP_RUN,
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
from actionflow_core.workflow.model import DEFAULT_RUNNER, Job, Step, Workflow, new_workflow, sample_workflow
from actionflow_core.workflow.triggers import ParsedTrigger


class TestJobs:
    def test_unique_job_id(self):
        assert unique_job_id([]) == "job-1"
        assert unique_job_id(["job-1", "job-3"]) == "job-2"

    def test_add_job_defaults(self):
        wf = add_job(new_workflow())
        job = wf.jobs["job-1"]
        assert job.runs_on == DEFAULT_RUNNER
        assert job.needs is None
        assert job.steps == [Step(run=DEFAULT_STEP_RUN)]

    @pytest.mark.parametrize(
        "needs, expected",
        [([], None), (["build"], "build"), (["build", "test"], ["build", "test"])],
    )
    def test_add_job_compacts_needs(self, needs, expected):
        wf = add_job(sample_workflow(), needs)
        assert wf.jobs["job-1"].needs == expected

    def test_add_job_leaves_input_untouched(self):
        original = sample_workflow()
        add_job(original)
        assert list(original.jobs) == ["build", "test"]

    def test_remove_job_strips_needs(self):
        wf = Workflow(
            on="push",
            jobs={
                "a": Job(),
                "b": Job(needs="a"),
                "c": Job(needs=["a", "b"]),
                "d": Job(needs=["b"]),
            },
        )
        result = remove_job(wf, "a")
        assert list(result.jobs) == ["b", "c", "d"]
        assert result.jobs["b"].needs is None
        assert result.jobs["c"].needs == "b"
        # Untouched jobs are shared, not copied
        assert result.jobs["d"] is wf.jobs["d"]

    def test_remove_unknown_job(self):
        with pytest.raises(KeyError):
            remove_job(sample_workflow(), "nope")

    def test_update_job(self):
        original = sample_workflow()
        wf = update_job(original, "build", runs_on="macos-latest", name="Build")
        assert wf.jobs["build"].runs_on == "macos-latest"
        assert wf.jobs["build"].name == "Build"
        assert wf.jobs["test"] is original.jobs["test"]
        assert original.jobs["build"].runs_on == DEFAULT_RUNNER

    def test_update_unknown_job(self):
        with pytest.raises(KeyError):
            update_job(sample_workflow(), "nope", name="x")


class TestSteps:
    def test_add_step_default(self):
        wf = add_step(sample_workflow(), "build")
        assert wf.jobs["build"].steps[-1] == Step(run="")

    def test_add_given_step(self):
        wf = add_step(sample_workflow(), "build", Step(uses="actions/checkout@v4"))
        assert wf.jobs["build"].steps[-1].uses == "actions/checkout@v4"

    def test_update_step(self):
        wf = update_step(sample_workflow(), "build", 0, run="make", name="Make")
        assert wf.jobs["build"].steps[0] == Step(name="Make", run="make")

    def test_remove_step(self):
        wf = remove_step(sample_workflow(), "test", 0)
        assert wf.jobs["test"].steps == []

    @pytest.mark.parametrize("index", [-1, 1, 5])
    def test_bad_step_index(self, index):
        with pytest.raises(IndexError):
            update_step(sample_workflow(), "build", index, run="x")
        with pytest.raises(IndexError):
            remove_step(sample_workflow(), "build", index)


class TestTriggers:
    def test_add_trigger_to_compact_push(self):
        wf = add_trigger(Workflow(on="push"))
        assert wf.on == ["push", "push"]

    def test_add_trigger_to_empty(self):
        assert add_trigger(Workflow(on={}), "workflow_dispatch").on == "workflow_dispatch"

    def test_set_triggers(self):
        wf = set_triggers(new_workflow(), [ParsedTrigger("schedule", {"cron": "0 1 * * *"})])
        assert wf.on == {"schedule": [{"cron": "0 1 * * *"}]}


@pytest.mark.parametrize(
    "name, expected",
    [("My  CI Build", "my-ci-build.yml"), ("", "workflow.yml"), (None, "workflow.yml")],
)
def test_workflow_filename(name, expected):
    assert workflow_filename(Workflow(name=name)) == expected
