# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""Edit-distance suggestions and workflow file discovery."""

import difflib
import os
from typing import Iterable, List, Optional

DEFAULT_EXTENSIONS = (".yml", ".yaml")


def find_workflow_files(path: str, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> List[str]:
    """Return workflow files under *path*, sorted.

    A file path is returned as-is when it exists.  Directories are walked
    recursively and filtered by *extensions*.
    """
    if os.path.isfile(path):
        return [path]
    results: List[str] = []
    if not os.path.isdir(path):
        return results
    suffixes = tuple(extensions)
    for root, _dirs, files in os.walk(path):
        for fname in files:
            if fname.endswith(suffixes):
                results.append(os.path.join(root, fname))
    return sorted(results)


def suggest(ref: str, candidates: Iterable[str], n: int = 3, cutoff: float = 0.6) -> Optional[str]:
    """Return a human-readable suggestion string for *ref*, or None if no close match."""
    matches = difflib.get_close_matches(ref, list(dict.fromkeys(candidates)), n=n, cutoff=cutoff)
    return ", ".join(f"'{m}'" for m in matches) if matches else None
