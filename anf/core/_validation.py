"""
Input validation shared by the affinity, fusion and spectral stages.

Every check returns a fresh float64 copy so that later stages can work in
place without touching caller-owned arrays.
"""

import numbers

import numpy as np
from scipy import sparse

from ..exceptions import InvalidParameterError, ShapeMismatchError


EPS = 1e-10


def check_square_matrix(matrix, name='matrix', nonnegative=True):
    """
    Validate a square 2-D matrix and return a dense float64 copy.

    Sparse inputs are densified. Raises ShapeMismatchError for anything
    that is not n x n with n >= 2, and InvalidParameterError for
    non-finite or (when ``nonnegative``) negative entries.
    """
    if sparse.issparse(matrix):
        M = matrix.toarray().astype(float)
    else:
        try:
            M = np.array(matrix, dtype=float)
        except (TypeError, ValueError) as e:
            raise ShapeMismatchError(
                f"{name} must be a square 2-D matrix of numbers: {e}"
            ) from e

    if M.ndim != 2 or M.shape[0] != M.shape[1]:
        raise ShapeMismatchError(
            f"{name} must be a square 2-D matrix, got shape {M.shape}"
        )
    if M.shape[0] < 2:
        raise ShapeMismatchError(
            f"{name} must describe at least 2 objects, got shape {M.shape}"
        )
    if not np.all(np.isfinite(M)):
        raise InvalidParameterError(f"{name} contains NaN or infinite entries")
    if nonnegative and np.any(M < 0):
        raise InvalidParameterError(f"{name} contains negative entries")
    return M


def check_k_neighbors(k, n_samples):
    """Neighbor count must satisfy 1 <= k < n."""
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise InvalidParameterError(f"k_neighbors must be an integer, got {k!r}")
    if not 1 <= k < n_samples:
        raise InvalidParameterError(
            f"k_neighbors must satisfy 1 <= k < n (n={n_samples}), got {k}"
        )
    return int(k)


def check_n_clusters(k, n_samples):
    """Cluster count must satisfy 1 < k <= n."""
    if isinstance(k, bool) or not isinstance(k, numbers.Integral):
        raise InvalidParameterError(f"n_clusters must be an integer, got {k!r}")
    if not 1 < k <= n_samples:
        raise InvalidParameterError(
            f"n_clusters must satisfy 1 < k <= n (n={n_samples}), got {k}"
        )
    return int(k)


def normalize_nonnegative(values, name, size=None):
    """
    Scale a non-negative vector to sum to 1.

    Pure and idempotent: the input is copied, never modified.
    """
    vec = np.array(values, dtype=float).ravel()

    if size is not None and vec.size != size:
        raise ShapeMismatchError(
            f"{name} must have {size} entries, got {vec.size}"
        )
    if vec.size == 0:
        raise ShapeMismatchError(f"{name} is empty")
    if not np.all(np.isfinite(vec)):
        raise InvalidParameterError(f"{name} contains NaN or infinite entries")
    if np.any(vec < 0):
        raise InvalidParameterError(f"{name} must be non-negative, got {vec}")

    total = vec.sum()
    if total <= 0:
        raise InvalidParameterError(f"{name} must not be all zero")
    return vec / total
