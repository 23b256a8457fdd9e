"""Adjacency graphs, text graph formats, bucketing, contraction and sequence primitives."""

__version__ = "0.1.0"

__all__ = [
    "bucket",
    "contract",
    "graph",
    "primitives",
    "text",
]