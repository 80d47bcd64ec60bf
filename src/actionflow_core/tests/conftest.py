# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

import pytest

import actionflow_core.cli.config as config_mod

SAMPLE_YAML = """\
name: Sample
on: {push: {branches: [main]}}
jobs: {build: {runs-on: ubuntu-latest, steps: [{run: "echo build"}]}, test: {needs: build, runs-on: ubuntu-latest, steps: [{run: "echo test"}]}}
"""

FULL_YAML = """\
name: CI
run-name: Deploy by ${{ github.actor }}
on:
  push:
    branches: [main]
    paths-ignore: ["docs/**"]
  pull_request:
    types: [opened, synchronize]
  schedule:
    - cron: "0 0 * * *"
    - cron: "30 6 * * 1"
env:
  CI: "true"
concurrency: ci-${{ github.ref }}
jobs:
  lint:
    runs-on: ubuntu-latest
    steps:
      - uses: actions/checkout@v4
      - run: make lint
  build:
    name: Build
    runs-on: [ubuntu-latest, macos-latest]
    needs: lint
    permissions:
      contents: read
    strategy:
      matrix:
        python: ["3.10", "3.11"]
      fail-fast: false
      max-parallel: 2
    timeout-minutes: 30
    steps:
      - id: setup
        name: Set up Python
        uses: actions/setup-python@v5
        with:
          python-version: ${{ matrix.python }}
        continue-on-error: true
      - name: Test
        run: |
          pip install .
          pytest
        env:
          PYTHONUNBUFFERED: "1"
        shell: bash
  deploy:
    needs: [lint, build]
    runs-on: ubuntu-latest
    steps:
      - run: ./deploy.sh
"""


@pytest.fixture
def sample_yaml() -> str:
    return SAMPLE_YAML


@pytest.fixture
def full_yaml() -> str:
    return FULL_YAML


@pytest.fixture(autouse=True)
def reset_config_singleton():
    config_mod._config = None
    yield
    config_mod._config = None
