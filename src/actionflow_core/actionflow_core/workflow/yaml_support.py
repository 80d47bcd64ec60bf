# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""PyYAML loader and dumper tuned for workflow files.

PyYAML implements YAML 1.1, where ``on``, ``off``, ``yes`` and ``no`` are
booleans.  Workflow files are read by YAML 1.2 tooling, so both classes
restrict the boolean resolver to ``true``/``false``.  Without that the
``on:`` key loads as ``True`` and is dumped back as ``'on'``.
"""

import re

import yaml

_BOOL_TAG = "tag:yaml.org,2002:bool"
_YAML12_BOOL_RE = re.compile(r"^(?:true|True|TRUE|false|False|FALSE)$")


def _yaml12_resolvers(base):
    resolvers = {
        first: [(tag, regexp) for tag, regexp in entries if tag != _BOOL_TAG]
        for first, entries in base.yaml_implicit_resolvers.items()
    }
    for first in "tTfF":
        resolvers.setdefault(first, []).insert(0, (_BOOL_TAG, _YAML12_BOOL_RE))
    return resolvers


class WorkflowLoader(yaml.SafeLoader):
    """SafeLoader with YAML 1.2 booleans."""

    pass


WorkflowLoader.yaml_implicit_resolvers = _yaml12_resolvers(yaml.SafeLoader)


class WorkflowDumper(yaml.SafeDumper):
    """SafeDumper producing GitHub-style block YAML.

    Sequences are indented under their parent key, multi-line strings use
    literal blocks and shared objects are written out in full instead of as
    anchors and aliases.
    """

    def increase_indent(self, flow=False, indentless=False):
        return super().increase_indent(flow, False)

    def ignore_aliases(self, data):
        return True


WorkflowDumper.yaml_implicit_resolvers = _yaml12_resolvers(yaml.SafeDumper)


def _represent_str(dumper: WorkflowDumper, data: str) -> yaml.ScalarNode:
    if "\n" in data:
        return dumper.represent_scalar("tag:yaml.org,2002:str", data, style="|")
    return dumper.represent_scalar("tag:yaml.org,2002:str", data)


WorkflowDumper.add_representer(str, _represent_str)


def load(text: str):
    return yaml.load(text, Loader=WorkflowLoader)


def dump(data) -> str:
    return yaml.dump(
        data,
        Dumper=WorkflowDumper,
        default_flow_style=False,
        sort_keys=False,
        allow_unicode=True,
        indent=2,
        width=float("inf"),
    )
