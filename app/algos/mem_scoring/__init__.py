# Memory scoring algorithms
# Pure functions for computing specificity boosts and eviction priority

from app.algos.mem_scoring.specificity import (
    DEFAULT_K_MAX,
    compute_initial_specificity,
    compute_access_specificity,
)
from app.algos.mem_scoring.trim import (
    TrimWeights,
    as_finite_number,
    compute_trim_score,
)

__all__ = [
    "DEFAULT_K_MAX",
    "compute_initial_specificity",
    "compute_access_specificity",
    "TrimWeights",
    "as_finite_number",
    "compute_trim_score",
]
