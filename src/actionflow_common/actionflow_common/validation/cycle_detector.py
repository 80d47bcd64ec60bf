# Copyright (c) Microsoft Corporation.
# Licensed under the MIT License.

"""DAG cycle detection for job dependency graphs.

The graph is given as an adjacency mapping ``node -> [successors]``.  For a
workflow that is ``job -> [jobs it needs]``; nodes without an entry (or with
an empty list) are leaves.
"""

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Sequence, Tuple

_DONE = object()


def find_cycles(
    nodes: Iterable[str],
    graph: Mapping[str, Sequence[str]],
) -> List[Tuple[str, List[str]]]:
    """Return ``(root, path)`` for every DFS root whose search runs into a cycle.

    Parameters
    ----------
    nodes:
        Roots to search from, in the order they should be reported.
    graph:
        Adjacency mapping.  Successors missing from *graph* are leaves.

    The search shares one colour table across roots and stops a root's DFS
    at the first back-edge, leaving that DFS's stack grey.  A later root that
    reaches a grey node is therefore reported as well, so a single cycle can
    surface once per root that leads into it.  For such a root the path runs
    from the root into the cycle found earlier, e.g. ``c -> a -> b -> a``.

    The DFS keeps an explicit stack, so long dependency chains do not hit the
    interpreter's recursion limit.
    """
    WHITE, GRAY, BLACK = 0, 1, 2
    color: Dict[str, int] = {}
    # Grey nodes left behind by a finished root -> the path that closed its cycle
    trails: Dict[str, List[str]] = {}
    found: List[Tuple[str, List[str]]] = []

    def dfs(root: str) -> Optional[List[str]]:
        stack = [root]
        position = {root: 0}
        frames: List[Iterator[str]] = [iter(graph.get(root, ()))]
        color[root] = GRAY
        while frames:
            nbr = next(frames[-1], _DONE)
            if nbr is _DONE:
                node = stack.pop()
                del position[node]
                frames.pop()
                color[node] = BLACK
                continue
            state = color.get(nbr, WHITE)
            if state == GRAY:
                if nbr in position:
                    trail = stack + [nbr]
                    cycle = trail[position[nbr] :]
                else:
                    earlier = trails[nbr]
                    trail = stack + earlier[earlier.index(nbr) :]
                    cycle = trail
                for node in stack:
                    trails[node] = trail
                return cycle
            if state == WHITE:
                color[nbr] = GRAY
                position[nbr] = len(stack)
                stack.append(nbr)
                frames.append(iter(graph.get(nbr, ())))
        return None

    for node in nodes:
        if color.get(node, WHITE) == WHITE:
            cycle = dfs(node)
            if cycle is not None:
                found.append((node, cycle))
    return found
