"""Cosine similarity and top-k ranking shared by the embedding stores."""

from typing import Iterable, List, Sequence, Tuple, TypeVar

T = TypeVar("T")


def cosine_similarity(vec1: Sequence[float], vec2: Sequence[float]) -> float:
    """
    Calculate cosine similarity between two vectors.

    Returns 0.0 when either vector has zero magnitude. Vectors are assumed to
    share one dimensionality; zip() stops at the shorter one otherwise.
    """
    dot_product = sum(a * b for a, b in zip(vec1, vec2))
    magnitude1 = sum(a * a for a in vec1) ** 0.5
    magnitude2 = sum(b * b for b in vec2) ** 0.5

    if magnitude1 == 0 or magnitude2 == 0:
        return 0.0

    return dot_product / (magnitude1 * magnitude2)


def top_k(
    query_vector: Sequence[float],
    candidates: Iterable[Tuple[T, Sequence[float]]],
    k: int,
) -> List[Tuple[T, float]]:
    """
    Score every candidate against the query and keep the best k.

    Args:
        query_vector: The query embedding
        candidates: (item, vector) pairs
        k: Number of results to keep

    Returns:
        (item, similarity) pairs sorted by similarity, highest first
    """
    if k <= 0:
        return []

    scored = [(item, cosine_similarity(query_vector, vector)) for item, vector in candidates]

    # Stable sort keeps insertion order between equal scores
    scored.sort(key=lambda x: x[1], reverse=True)
    return scored[:k]
