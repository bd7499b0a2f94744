"""
ANF Core Module
"""
from .affinity import (
    DEFAULT_K,
    DEFAULT_MU,
    affinity_matrix,
    neighbor_graph,
    row_normalize,
    transition_matrix,
)
from .anf_algorithm import AffinityNetworkFusion
from .fusion import (
    DEFAULT_ALPHA,
    MODES,
    ONE_STEP,
    TWO_STEP,
    TWO_STEP_TERMS,
    FusionEngine,
    check_mode,
    fuse,
    normalize_alpha,
)
from .spectral import kmeans_partition, spectral_clustering, spectral_embedding
from .views import ViewSet, normalize_weights

__all__ = [
    'DEFAULT_K',
    'DEFAULT_MU',
    'DEFAULT_ALPHA',
    'MODES',
    'ONE_STEP',
    'TWO_STEP',
    'TWO_STEP_TERMS',
    'affinity_matrix',
    'neighbor_graph',
    'row_normalize',
    'transition_matrix',
    'AffinityNetworkFusion',
    'FusionEngine',
    'check_mode',
    'fuse',
    'normalize_alpha',
    'kmeans_partition',
    'spectral_clustering',
    'spectral_embedding',
    'ViewSet',
    'normalize_weights',
]
