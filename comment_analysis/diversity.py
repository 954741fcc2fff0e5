"""
Diversity scoring from the distribution of comments across clusters
"""
import math
from typing import Iterable, Optional, Sequence

from .config import AnalysisConfig
from .models import Cluster


def calculate_entropy(probabilities: Iterable[float]) -> float:
    """Shannon entropy (natural log) of a probability distribution"""
    entropy = 0.0
    for p in probabilities:
        if p > 0:  # Avoid log(0)
            entropy -= p * math.log(p)
    return entropy


def score_diversity(clusters: Sequence[Cluster]) -> float:
    """
    Entropy of the cluster-size distribution, times the cluster count, divided
    by the number of comments.

    Rewards an even spread and more clusters while staying comparable across
    videos with different comment counts. There is no fixed upper bound.
    Returns 0.0 when there are no comments.
    """
    total = sum(cluster.size for cluster in clusters)
    if total <= 0:
        return 0.0

    entropy = calculate_entropy(cluster.size / total for cluster in clusters)
    return (entropy * len(clusters)) / total


def diversity_tier(score: float, config: Optional[AnalysisConfig] = None) -> str:
    """Bucket a raw diversity score into 'high', 'moderate' or 'low' for display"""
    config = config or AnalysisConfig()
    if score > config.high_diversity_threshold:
        return "high"
    if score > config.moderate_diversity_threshold:
        return "moderate"
    return "low"
