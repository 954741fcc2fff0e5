"""
K-means clustering of comment embeddings using cosine distance.

Sentence embeddings are compared by direction rather than magnitude, so
points are assigned to the centroid with the smallest cosine distance.
Initialisation takes the first k vectors, which keeps the partition a
deterministic function of the input order.
"""
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence

import numpy as np
from sklearn.metrics.pairwise import cosine_distances

from .config import AnalysisConfig

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITERATIONS = 100


@dataclass
class KMeansResult:
    groups: List[List[int]]
    centroids: np.ndarray
    iterations: int
    converged: bool


def cosine_distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Return ``1 - cos(a, b)``, or 1.0 when either vector has zero norm"""
    a = np.asarray(a, dtype=float)
    b = np.asarray(b, dtype=float)
    if a.shape != b.shape:
        raise ValueError(f"Vectors must have the same shape, got {a.shape} and {b.shape}")

    norm_a = np.linalg.norm(a)
    norm_b = np.linalg.norm(b)
    if norm_a == 0 or norm_b == 0:
        return 1.0

    similarity = float(np.dot(a, b) / (norm_a * norm_b))
    # Rounding can push |cos| slightly past 1
    similarity = max(-1.0, min(1.0, similarity))
    return 1.0 - similarity


def _as_matrix(embeddings) -> np.ndarray:
    if len(embeddings) == 0:
        return np.empty((0, 0))

    # Ragged input raises ValueError here
    points = np.asarray([np.asarray(e, dtype=float) for e in embeddings], dtype=float)
    if points.ndim != 2:
        raise ValueError(f"Expected a sequence of 1-D vectors, got an array of shape {points.shape}")
    if not np.all(np.isfinite(points)):
        raise ValueError("Embeddings contain NaN or infinite values")
    return points


def fit_kmeans_cosine(embeddings, k: int,
                      max_iterations: int = DEFAULT_MAX_ITERATIONS) -> KMeansResult:
    """
    Partition embeddings into k groups with cosine k-means.

    Args:
        embeddings: sequence of equal-length vectors
        k: number of groups to return
        max_iterations: safety cap on assignment rounds

    Returns:
        KMeansResult whose ``groups`` always has exactly k entries (some may be
        empty when there are fewer distinct points than groups). With no
        points ``groups`` is empty; with ``k == 0`` every index lands in a
        single group.

    Raises:
        ValueError: negative k, max_iterations below 1, mismatched vector
            lengths or non-finite values.
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    if max_iterations < 1:
        raise ValueError(f"max_iterations must be at least 1, got {max_iterations}")

    points = _as_matrix(embeddings)
    n = len(points)
    if n == 0:
        return KMeansResult(groups=[], centroids=np.empty((0, 0)), iterations=0, converged=True)
    if k == 0:
        centroid = points.mean(axis=0, keepdims=True)
        return KMeansResult(groups=[list(range(n))], centroids=centroid, iterations=0, converged=True)

    # With fewer points than groups only n centroids exist; the rest stay empty
    centroids = points[:k].copy()
    labels: Optional[np.ndarray] = None
    converged = False
    iterations = 0

    for iterations in range(1, max_iterations + 1):
        distances = cosine_distances(points, centroids)
        # argmin returns the first minimum, so ties go to the lowest centroid index
        new_labels = np.argmin(distances, axis=1)

        if labels is not None and np.array_equal(new_labels, labels):
            converged = True
            break
        labels = new_labels

        for j in range(len(centroids)):
            members = points[labels == j]
            if len(members) > 0:
                centroids[j] = members.mean(axis=0)

    if not converged:
        logger.warning(f"K-means stopped after {max_iterations} iterations without converging")

    groups: List[List[int]] = [[] for _ in range(k)]
    for index, label in enumerate(labels):
        groups[int(label)].append(index)

    logger.debug(f"K-means finished in {iterations} iterations, group sizes {[len(g) for g in groups]}")
    return KMeansResult(groups=groups, centroids=centroids, iterations=iterations, converged=converged)


def kmeans_cosine(embeddings, k: int, max_iterations: int = DEFAULT_MAX_ITERATIONS) -> List[List[int]]:
    """Return the partition of ``range(len(embeddings))`` into k groups"""
    return fit_kmeans_cosine(embeddings, k, max_iterations).groups


def cluster_with_fallback(embeddings, k: int,
                          max_iterations: int = DEFAULT_MAX_ITERATIONS) -> List[List[int]]:
    """Cluster, degrading to a single group of every index if clustering fails.

    Malformed embeddings must never abort the overall analysis.
    """
    n = len(embeddings)
    try:
        return kmeans_cosine(embeddings, k, max_iterations)
    except Exception as e:
        logger.warning(f"Clustering failed ({e}); falling back to a single cluster of {n} comments")
        return [list(range(n))] if n else []


def choose_cluster_count(n: int, config: Optional[AnalysisConfig] = None) -> int:
    """Pick k from the batch size: 3-5 clusters for large batches, 2-3 for small ones"""
    config = config or AnalysisConfig()

    if n >= config.large_batch_threshold:
        k = _clamp(n // config.large_batch_divisor,
                   config.large_batch_min_clusters, config.large_batch_max_clusters)
    else:
        k = _clamp(n // config.small_batch_divisor,
                   config.small_batch_min_clusters, config.small_batch_max_clusters)

    return _clamp(k, config.min_clusters, config.max_clusters)


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))
