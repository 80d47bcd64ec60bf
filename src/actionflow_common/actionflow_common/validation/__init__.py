# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Workflow-agnostic validation helpers shared by the linter and the CLI.

Public API
----------
find_cycles             DFS cycle search over an adjacency mapping.
extract_line_map        Map YAML key-paths to 1-based source line numbers.
line_for_path           Line number of a key-path or its nearest ancestor.
find_workflow_files     Enumerate workflow files under a path.
suggest                 Return edit-distance suggestions for a misspelled reference.
"""

from .cycle_detector import find_cycles
from .line_tracker import extract_line_map, line_for_path
from .suggestions import DEFAULT_EXTENSIONS, find_workflow_files, suggest

__all__ = [
    "find_cycles",
    "extract_line_map",
    "line_for_path",
    "find_workflow_files",
    "suggest",
    "DEFAULT_EXTENSIONS",
]
