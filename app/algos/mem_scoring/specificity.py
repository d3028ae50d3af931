"""
Specificity algorithm.

Maps a retrieval breadth (how many items a search returned) to a weight
in [0.1, 1.0]. The broader the retrieval, the less any single item stands
out, so the boost it earns shrinks with breadth.
"""

DEFAULT_K_MAX = 100

# Breadths at or below this are treated as "no meaningful prior retrieval"
SMALL_BREADTH_CUTOFF = 5

SPECIFICITY_FLOOR = 0.1


def _breadth_decay(k: float, k_max: int) -> float:
    return max(SPECIFICITY_FLOOR, 1.0 - (k / k_max))


def compute_initial_specificity(last_k: float, k_max: int = DEFAULT_K_MAX) -> float:
    """
    Compute the starting weighted_access_score for a newly ingested memory.

    Args:
        last_k: Raw result count of the most recent retrieval
        k_max: Breadth at which specificity bottoms out

    Returns:
        Specificity from 0.1 to 1.0

    Examples:
        - last_k = 3 → 1.0 (first memories, before any real retrieval)
        - last_k = 50, k_max = 100 → 0.5
        - last_k = 250, k_max = 100 → 0.1 (floored)
    """
    if last_k <= SMALL_BREADTH_CUTOFF:
        return 1.0
    return _breadth_decay(last_k, k_max)


def compute_access_specificity(k: float, k_max: int = DEFAULT_K_MAX) -> float:
    """
    Compute the score boost for each memory selected by a retrieval.

    An empty retrieval (k <= 0) counts as maximally specific.

    Examples:
        - k = 0 → 1.0
        - k = 6, k_max = 100 → 0.94
        - k = 100, k_max = 100 → 0.1
    """
    if k <= 0:
        return 1.0
    return _breadth_decay(k, k_max)
