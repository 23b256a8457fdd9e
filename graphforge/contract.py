"""Graph contraction: collapse vertex clusters into single vertices."""

from __future__ import annotations

import itertools
from collections.abc import MutableSequence, Sequence

from graphforge.graph import Graph

SMALL_CLUSTER_SIZE = 2048
M_UPPER_BOUND = SMALL_CLUSTER_SIZE * SMALL_CLUSTER_SIZE


def relabel_ids(ids: MutableSequence[int]) -> int:
    """Relabel ``ids`` in place to the dense range ``0 .. u-1``, keeping their order.

    Values must lie in ``[0, len(ids)]``. Returns ``u``, the number of
    distinct values.
    """
    n = len(ids)
    present = [0] * (n + 1)
    for value in ids:
        if not 0 <= value <= n:
            raise ValueError(f"id {value} is outside [0, {n}]")
        present[value] = 1
    inverse_map = list(itertools.accumulate(present, initial=0))
    for position, value in enumerate(ids):
        ids[position] = inverse_map[value]
    return inverse_map[n + 1]


def _check_clusters(graph: Graph, clusters: Sequence[int]) -> None:
    if len(clusters) != graph.n:
        raise ValueError(
            f"clusters has {len(clusters)} entries but the graph has {graph.n} vertices"
        )


def fetch_intercluster(graph: Graph, clusters: Sequence[int]) -> list[tuple[int, int]]:
    """Distinct cluster pairs ``(a, b)`` with ``a < b`` joined by an out-edge.

    An edge ``u -> v`` contributes ``(clusters[u], clusters[v])`` when the
    first cluster is smaller. The pairs are returned sorted.
    """
    _check_clusters(graph, clusters)
    pairs = {
        (clusters[u], clusters[v])
        for u, v, _ in graph.edges()
        if clusters[u] < clusters[v]
    }
    return sorted(pairs)


def contract(
    graph: Graph, clusters: Sequence[int], num_clusters: int
) -> tuple[Graph, list[int], list[int]]:
    """Contract every cluster of ``graph`` into one vertex.

    Self-loops and duplicate edges are dropped, and clusters that would
    become isolated vertices are removed. Returns:

    - the contracted symmetric, unweighted graph;
    - a list ``S`` of length ``num_clusters + 1``: a non-singleton cluster
      ``i`` is vertex ``S[i]`` of the contracted graph, and
      ``S[i] == S[i + 1]`` exactly when cluster ``i`` is a singleton;
    - the inverse list: vertex ``j`` of the contracted graph is cluster ``T[j]``.
    """
    if num_clusters < 0:
        raise ValueError("num_clusters must be non-negative")
    _check_clusters(graph, clusters)
    for cluster in clusters:
        if not 0 <= cluster < num_clusters:
            raise ValueError(f"cluster id {cluster} is outside [0, {num_clusters})")

    edges = fetch_intercluster(graph, clusters)

    present = [0] * num_clusters
    for u, v in edges:
        present[u] = 1
        present[v] = 1
    flags = list(itertools.accumulate(present, initial=0))

    mapping = [
        i for i, (lo, hi) in enumerate(itertools.pairwise(flags)) if lo != hi
    ]
    num_ns_clusters = flags[num_clusters]

    relabelled = [(flags[u], flags[v]) for u, v in edges]
    contracted = Graph.from_edges(num_ns_clusters, relabelled, symmetric=True)
    return contracted, flags, mapping