# graphforge

A small library for working with graphs in plain Python: an adjacency-list
graph type, text graph formats, a bucketing structure for processing
vertices in priority order, graph contraction, and a handful of sequence
primitives.

The package has no runtime dependencies beyond the standard library.

## Installation

```
pip install graphforge
```

## Graphs

`graphforge.graph.Graph` stores, for every vertex, a tuple of
`(target, weight)` neighbours; a weight of `None` marks an unweighted edge.
Symmetric graphs share one list for in- and out-neighbours, and `m` counts
the stored (directed) edges.

```python
from graphforge.graph import Graph, edge_list, write_edge_list

g = Graph.from_edges(4, [(0, 1), (1, 2), (2, 3)], symmetric=True)
g.out_degree(1)            # 2
g.out_neighbors(1)         # ((0, None), (2, None))
g.m                        # 6
edge_list(g, direct_sym=True)   # [(0, 1), (1, 2), (2, 3)]
write_edge_list(g, "out.txt", direct_sym=True, multistep_header=True)
```

`Graph.from_edges` accepts `(u, v)` or `(u, v, weight)` edges, stores a
repeated pair once (keeping the first weight), and sorts neighbour lists by
target. `Graph.edges()` yields every stored edge as `(source, target, weight)`.

Text output:

- `write_edge_list(graph, path, direct_sym, multistep_header)` writes one
  `u v` line per edge, only edges with `u < v` when `direct_sym` is set, and
  an `n m` header line when `multistep_header` is set. It returns the number
  of edges written.
- `write_matrix_market(graph, path)` writes the `n m` header and the edges
  with `u < v`.
- `write_adjacency_graph(graph, path, rng)` relabels the vertices with a
  random permutation (see `random_reorder`) and writes the `AdjacencyGraph`
  text form: header, `n`, `m`, the offsets and the targets, one number per
  line. Weights are not written. It returns the permutation.
- `read_adjacency_graph(path, symmetric)` reads the `AdjacencyGraph` or
  `WeightedAdjacencyGraph` text form and raises `ValueError` on malformed
  input.

```python
import random
from graphforge.graph import read_adjacency_graph, write_adjacency_graph

perm = write_adjacency_graph(g, "g.adj", random.Random(7))
g2 = read_adjacency_graph("g.adj", symmetric=True)
```

## Contraction

`graphforge.contract.contract(graph, clusters, num_clusters)` collapses each
cluster into one vertex, dropping self-loops, duplicate edges and clusters
that would be left without edges. It returns the contracted symmetric graph,
a list `S` of length `num_clusters + 1` (cluster `i` is vertex `S[i]`, and
`S[i] == S[i + 1]` exactly for dropped clusters), and the inverse list.

```python
from graphforge.contract import contract, relabel_ids

contracted, cluster_to_vertex, vertex_to_cluster = contract(g, [0, 0, 1, 1], 2)
# contracted.n == 2, cluster_to_vertex == [0, 1, 2], vertex_to_cluster == [0, 1]

ids = [3, 0, 3, 1]
relabel_ids(ids)   # returns 3; ids becomes [2, 0, 2, 1]
```

`fetch_intercluster(graph, clusters)` returns the sorted distinct cluster
pairs `(a, b)`, `a < b`, joined by an edge.

## Bucketing

`graphforge.bucket.Buckets` maps identifiers `0 .. n-1` to integer buckets
read from a caller-owned list `d` (`NULL_BKT` means "in no bucket"), and hands
them out bucket by bucket in increasing or decreasing order. Stale entries are
dropped lazily, so keep `d` current when keys change.

```python
from graphforge.bucket import NULL_BKT, BucketOrder, make_buckets

d = [2, 0, 1, 0]
buckets = make_buckets(len(d), d, BucketOrder.INCREASING)
while (bucket := buckets.next_bucket()).id != NULL_BKT:
    print(bucket.id, bucket.identifiers)
# 0 [1, 3]
# 1 [2]
# 2 [0]
```

To move identifiers, update `d`, compute destinations with
`Buckets.get_bucket(prev, nxt)` or `Buckets.get_bucket_dest(nxt)`, and pass
`(identifier, destination)` pairs to `Buckets.update_buckets()`; `None`
entries and `NULL_BKT` destinations are skipped. `wrap(left, right)` builds
such a pair unless either value is `UINT_E_MAX`.

## Text and primitives

`graphforge.text` renders values one record per line: `format_value`,
`sequence_to_string`, `array_to_string`, and `write_array_to_stream`, which
writes in blocks to a text or binary stream. Integers are written in decimal,
floats as `%.11e`, and tuples as space-separated fields with `None` weights
left out.

`graphforge.primitives` holds hashing helpers (`hash32`, `hash64`,
`hash_combine`), reductions and filters (`reduce_max`, `reduce_min`,
`reduce_xor`, `map_with_index`, `filter_index`, `pack_index`,
`pack_index_and_data`, `filterf`), order statistics (`kth_smallest`,
`approximate_kth_smallest`), and lock-guarded list updates (`write_min`,
`write_max`, `fetch_and_add_threshold`).

## What the package does not do

graphforge is a library only: it installs no command-line tools. It does not
generate synthetic graphs, and it reads and writes only the text formats
above; it has no binary or compressed graph formats.

## Running the tests

```
pip install graphforge[test]
pytest
```