"""Adjacency graphs, edge-list output and random vertex relabelling."""

from __future__ import annotations

import itertools
import os
import random
from collections.abc import Iterable, Iterator, Sequence
from operator import itemgetter
from typing import Any, Optional, Union

from graphforge.text import sequence_to_string

Neighbor = tuple[int, Any]
PathLike = Union[str, "os.PathLike[str]"]

_HEADERS = ("AdjacencyGraph", "WeightedAdjacencyGraph")


class Graph:
    """A graph stored as per-vertex neighbour lists of ``(target, weight)``.

    A weight of ``None`` marks an unweighted edge. Symmetric graphs share one
    list for in- and out-neighbours; ``m`` counts directed (stored) edges.
    """

    def __init__(
        self,
        out_adjacency: Iterable[Iterable[Neighbor]],
        *,
        symmetric: bool,
        in_adjacency: Optional[Iterable[Iterable[Neighbor]]] = None,
    ) -> None:
        self._out: list[tuple[Neighbor, ...]] = [
            tuple((int(t), w) for t, w in nbrs) for nbrs in out_adjacency
        ]
        self.symmetric = symmetric
        for nbrs in self._out:
            for target, _ in nbrs:
                self._check(target)
        if symmetric:
            self._in = self._out
        elif in_adjacency is not None:
            self._in = [tuple((int(s), w) for s, w in nbrs) for nbrs in in_adjacency]
            if len(self._in) != len(self._out):
                raise ValueError("in- and out-adjacency differ in vertex count")
        else:
            incoming: list[list[Neighbor]] = [[] for _ in self._out]
            for source, nbrs in enumerate(self._out):
                for target, weight in nbrs:
                    incoming[target].append((source, weight))
            self._in = [tuple(nbrs) for nbrs in incoming]

    @property
    def n(self) -> int:
        return len(self._out)

    @property
    def m(self) -> int:
        return sum(len(nbrs) for nbrs in self._out)

    @property
    def weighted(self) -> bool:
        return any(w is not None for nbrs in self._out for _, w in nbrs)

    def _check(self, v: int) -> None:
        if not 0 <= v < len(self._out):
            raise IndexError(f"vertex {v} is out of range for {len(self._out)} vertices")

    @classmethod
    def from_edges(
        cls, n: int, edges: Iterable[Sequence[Any]], symmetric: bool = True
    ) -> "Graph":
        """Build a graph from ``(u, v)`` or ``(u, v, weight)`` edges.

        A symmetric graph receives every edge in both directions. Repeated
        ``(u, v)`` pairs are stored once, keeping the first weight seen.
        Neighbour lists are sorted by target.
        """
        if n < 0:
            raise ValueError("n must be non-negative")
        out: list[dict[int, Any]] = [{} for _ in range(n)]
        for edge in edges:
            if len(edge) not in (2, 3):
                raise ValueError(f"edge {edge!r} must have two or three fields")
            u, v = int(edge[0]), int(edge[1])
            weight = edge[2] if len(edge) == 3 else None
            if not (0 <= u < n and 0 <= v < n):
                raise ValueError(f"edge ({u}, {v}) has an endpoint outside [0, {n})")
            out[u].setdefault(v, weight)
            if symmetric:
                out[v].setdefault(u, weight)
        adjacency = [sorted(targets.items(), key=itemgetter(0)) for targets in out]
        return cls(adjacency, symmetric=symmetric)

    def out_neighbors(self, v: int) -> tuple[Neighbor, ...]:
        self._check(v)
        return self._out[v]

    def in_neighbors(self, v: int) -> tuple[Neighbor, ...]:
        self._check(v)
        return self._in[v]

    def out_degree(self, v: int) -> int:
        return len(self.out_neighbors(v))

    def in_degree(self, v: int) -> int:
        return len(self.in_neighbors(v))

    def edges(self) -> Iterator[tuple[int, int, Any]]:
        """Yield every stored edge as ``(source, target, weight)``."""
        for source, nbrs in enumerate(self._out):
            for target, weight in nbrs:
                yield source, target, weight

    def __repr__(self) -> str:
        return f"Graph(n={self.n}, m={self.m}, symmetric={self.symmetric})"


def edge_list(graph: Graph, direct_sym: bool = False) -> list[tuple[int, int]]:
    """Edges as ``(u, v)`` pairs in source order; with ``direct_sym`` only ``u < v``."""
    return [(u, v) for u, v, _ in graph.edges() if not direct_sym or u < v]


def _write_text(path: PathLike, text: str) -> None:
    with open(path, "w", encoding="ascii", newline="\n") as handle:
        handle.write(text)


def write_edge_list(
    graph: Graph,
    path: PathLike,
    direct_sym: bool = False,
    multistep_header: bool = False,
) -> int:
    """Write ``u v`` lines, optionally preceded by an ``n m`` header.

    Returns the number of edges written.
    """
    pairs = edge_list(graph, direct_sym)
    header = f"{graph.n} {len(pairs)}\n" if multistep_header else ""
    _write_text(path, header + sequence_to_string(pairs))
    return len(pairs)


def write_matrix_market(graph: Graph, path: PathLike) -> int:
    """Write an ``n m`` header followed by the edges with ``u < v``."""
    return write_edge_list(graph, path, direct_sym=True, multistep_header=True)


def random_reorder(
    graph: Graph, rng: Optional[random.Random] = None
) -> tuple[Graph, list[int]]:
    """Relabel vertices by a random permutation.

    Vertex ``v`` becomes ``perm[v]``; neighbour lists are re-sorted.
    Returns the relabelled graph and the permutation.
    """
    rng = rng or random.Random()
    perm = list(range(graph.n))
    rng.shuffle(perm)
    relabelled: list[tuple[Neighbor, ...]] = [()] * graph.n
    for v, nbrs in enumerate(graph._out):
        relabelled[perm[v]] = tuple(
            sorted(((perm[t], w) for t, w in nbrs), key=itemgetter(0))
        )
    return Graph(relabelled, symmetric=graph.symmetric), perm


def write_adjacency_graph(
    graph: Graph, path: PathLike, rng: Optional[random.Random] = None
) -> list[int]:
    """Randomly relabel ``graph`` and write it in ``AdjacencyGraph`` text form.

    Weights are not written. Returns the permutation that was applied.
    """
    reordered, perm = random_reorder(graph, rng)
    degrees = [len(nbrs) for nbrs in reordered._out]
    offsets = list(itertools.accumulate(degrees, initial=0))[:-1]
    targets = [t for nbrs in reordered._out for t, _ in nbrs]
    header = f"AdjacencyGraph\n{reordered.n}\n{reordered.m}\n"
    _write_text(path, header + sequence_to_string(offsets) + sequence_to_string(targets))
    return perm


def _parse_number(token: str) -> Union[int, float]:
    try:
        return int(token)
    except ValueError:
        return float(token)


def read_adjacency_graph(path: PathLike, symmetric: bool = True) -> Graph:
    """Read a graph in ``AdjacencyGraph`` or ``WeightedAdjacencyGraph`` text form."""
    with open(path, encoding="ascii") as handle:
        tokens = handle.read().split()
    if not tokens or tokens[0] not in _HEADERS:
        raise ValueError("missing AdjacencyGraph header")
    weighted = tokens[0] == _HEADERS[1]
    try:
        n, m = int(tokens[1]), int(tokens[2])
    except (IndexError, ValueError) as exc:
        raise ValueError("malformed vertex or edge count") from exc
    expected = 3 + n + m + (m if weighted else 0)
    if len(tokens) != expected:
        raise ValueError(f"expected {expected} tokens, found {len(tokens)}")
    offsets = [int(tok) for tok in tokens[3 : 3 + n]]
    targets = [int(tok) for tok in tokens[3 + n : 3 + n + m]]
    weights: list[Any] = (
        [_parse_number(tok) for tok in tokens[3 + n + m :]] if weighted else [None] * m
    )
    bounds = offsets + [m]
    if bounds and bounds[0] != 0:
        raise ValueError("first offset must be zero")
    if any(lo > hi for lo, hi in itertools.pairwise(bounds)):
        raise ValueError("offsets must be non-decreasing and at most m")
    adjacency = [
        list(zip(targets[lo:hi], weights[lo:hi])) for lo, hi in itertools.pairwise(bounds)
    ]
    try:
        return Graph(adjacency, symmetric=symmetric)
    except IndexError as exc:
        raise ValueError(str(exc)) from exc