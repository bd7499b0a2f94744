"""
ANF: Affinity Network Fusion

Fuses several affinity matrices over the same objects into one consensus
transition matrix with one-step or two-step random walks, and clusters it
spectrally.
"""

from .core import (
    AffinityNetworkFusion,
    FusionEngine,
    ViewSet,
    affinity_matrix,
    fuse,
    neighbor_graph,
    spectral_clustering,
    transition_matrix,
)
from .exceptions import (
    ANFError,
    InvalidParameterError,
    NumericInstabilityWarning,
    ShapeMismatchError,
)

__version__ = "1.0.0"

__all__ = [
    'AffinityNetworkFusion',
    'FusionEngine',
    'ViewSet',
    'affinity_matrix',
    'fuse',
    'neighbor_graph',
    'spectral_clustering',
    'transition_matrix',
    'ANFError',
    'InvalidParameterError',
    'NumericInstabilityWarning',
    'ShapeMismatchError',
]
