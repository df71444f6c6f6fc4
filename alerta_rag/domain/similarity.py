"""Pure similarity functions for semantic rule retrieval.

Why: Scores shown to the caller are recomputed here, never taken from the
vector store's internal distance metric.
"""

from collections.abc import Sequence
from math import sqrt

from .types import Score


def cosine(u: Sequence[float], v: Sequence[float]) -> Score:
    """Compute cosine similarity between two vectors.

    Args:
        u: First vector
        v: Second vector

    Returns:
        Cosine similarity between -1 and 1. Returns 0.0 when either vector
        has zero norm, is empty, or the dimensions differ.
    """
    if len(u) == 0 or len(u) != len(v):
        return 0.0
    dot = sum(a * b for a, b in zip(u, v))
    nu = sqrt(sum(a * a for a in u))
    nv = sqrt(sum(b * b for b in v))
    if nu == 0.0 or nv == 0.0:
        return 0.0
    return dot / (nu * nv)


def relevance(u: Sequence[float], v: Sequence[float]) -> Score:
    """Cosine similarity clamped to the [0, 1] relevance range."""
    return min(max(cosine(u, v), 0.0), 1.0)
