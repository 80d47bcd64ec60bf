# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Map workflow key-paths to 1-based line numbers using PyYAML's AST."""

import re
from typing import Dict, Optional

import yaml

_PATH_TAIL_RE = re.compile(r"(\.[^.\[]*|\[\d+\])$")


def extract_line_map(content: str) -> Dict[str, int]:
    """Compose *content* and map every key-path in it to the line it starts on.

    Key-paths use the notation of lint diagnostics: ``jobs.build.needs`` for
    mapping keys and ``jobs.build.steps[0]`` for sequence items.  A mapping
    entry is located at its key, a sequence item at its first token.

    Unparseable YAML yields an empty map.
    """
    try:
        doc = yaml.compose(content)
    except yaml.YAMLError:
        return {}

    result: Dict[str, int] = {}
    pending = [("", doc)]
    while pending:
        prefix, node = pending.pop()
        if isinstance(node, yaml.MappingNode):
            for key_node, value_node in node.value:
                key = str(key_node.value)
                path = f"{prefix}.{key}" if prefix else key
                result[path] = key_node.start_mark.line + 1
                pending.append((path, value_node))
        elif isinstance(node, yaml.SequenceNode):
            for index, item in enumerate(node.value):
                path = f"{prefix}[{index}]"
                result[path] = item.start_mark.line + 1
                pending.append((path, item))
    return result


def line_for_path(line_map: Dict[str, int], path: Optional[str]) -> Optional[int]:
    """Return the line of *path* or of its closest mapped ancestor.

    ``jobs.build.steps[2].uses`` falls back to ``jobs.build.steps[2]``, then
    ``jobs.build.steps`` and so on.  Paths that do not mirror the document
    (``on[0].push`` for a mapping-shaped ``on``) resolve to the nearest key
    that does exist.
    """
    while path:
        if path in line_map:
            return line_map[path]
        trimmed = _PATH_TAIL_RE.sub("", path)
        if trimmed == path:
            break
        path = trimmed
    return None
