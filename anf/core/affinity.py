"""
Affinity and transition matrices for a single view.

- affinity_matrix: local-scaling Gaussian kernel over a distance matrix
- transition_matrix: full row-stochastic random-walk matrix P
- neighbor_graph: K-nearest-neighbor sparsified transition matrix S

Convention: affinity matrices carry a zero diagonal. An object is never
its own neighbor, so self-loops are excluded from every random walk built
on top of them.
"""

import warnings

import numpy as np

from ..exceptions import InvalidParameterError, NumericInstabilityWarning
from ._validation import EPS, check_k_neighbors, check_square_matrix


DEFAULT_K = 20
DEFAULT_MU = 0.5


def affinity_matrix(distance_matrix, k=DEFAULT_K, mu=DEFAULT_MU):
    """
    Convert a pairwise distance matrix into a local-scaling affinity matrix.

    For each object i, mu_i is the mean distance to its k nearest
    neighbors (i itself excluded). The pairwise bandwidth is

        eps_ij = (mu_i + mu_j + D_ij) / 3

    and the affinity is

        A_ij = exp(-D_ij^2 / (mu * eps_ij^2))

    Parameters
    ----------
    distance_matrix : array-like of shape (n, n)
        Non-negative pairwise distances. Need not be exactly symmetric.
    k : int, default=20
        Number of neighbors used for the local scale, 1 <= k < n.
    mu : float, default=0.5
        Bandwidth multiplier of the kernel. Conventionally in [0.3, 1].

    Returns
    -------
    A : ndarray of shape (n, n)
        Symmetric affinity matrix with zero diagonal.
    """
    D = check_square_matrix(distance_matrix, 'distance_matrix')
    n = D.shape[0]
    k = check_k_neighbors(k, n)
    if not np.isfinite(mu) or mu <= 0:
        raise InvalidParameterError(f"mu must be a positive number, got {mu!r}")

    # Mean distance to the k nearest neighbors, excluding self
    off_diag = D.copy()
    np.fill_diagonal(off_diag, np.inf)
    knn_mean = np.partition(off_diag, k - 1, axis=1)[:, :k].mean(axis=1)

    scale = (knn_mean[:, None] + knn_mean[None, :] + D) / 3

    clamped = scale < EPS
    np.fill_diagonal(clamped, False)
    if clamped.any():
        warnings.warn(
            f"{int(clamped.sum())} local-scaling denominators were below "
            f"{EPS:g} and have been clamped",
            NumericInstabilityWarning,
            stacklevel=2,
        )
    scale = np.maximum(scale, EPS)

    A = np.exp(-D ** 2 / (mu * scale ** 2))
    np.fill_diagonal(A, 0.0)

    # Exact symmetry, also for asymmetric input distances
    A = (A + A.T) / 2
    return A


def row_normalize(M, name='matrix'):
    """
    Scale every row of a non-negative matrix to sum to 1.

    Rows with zero mass are replaced by a uniform distribution over the
    off-diagonal entries and reported with a NumericInstabilityWarning.
    Works in place on ``M`` and returns it.
    """
    n = M.shape[0]
    sums = M.sum(axis=1)
    empty = sums <= EPS
    if empty.any():
        warnings.warn(
            f"{name}: {int(empty.sum())} row(s) with zero mass replaced by a "
            "uniform distribution",
            NumericInstabilityWarning,
            stacklevel=3,
        )
        uniform = np.full(n, 1.0 / (n - 1))
        for i in np.flatnonzero(empty):
            M[i] = uniform
            M[i, i] = 0.0
        sums = M.sum(axis=1)
    M /= sums[:, None]
    return M


def transition_matrix(affinity):
    """
    Full row-stochastic transition matrix P = D^{-1} A.

    No sparsification is applied. The input is copied.
    """
    A = check_square_matrix(affinity, 'affinity')
    return row_normalize(A, 'affinity')


def neighbor_graph(affinity, k=DEFAULT_K):
    """
    Sparsified K-nearest-neighbor transition matrix.

    Row i keeps the k largest off-diagonal affinities A_ij and zeroes
    everything else; the retained entries are then scaled to sum to 1.
    Ties are broken in favour of the lower column index. The result is
    generally asymmetric (i may select j without j selecting i) and is
    left that way.

    If all k retained affinities of a row are zero, the row falls back to
    uniform weight 1/k over the selected neighbors.

    Parameters
    ----------
    affinity : array-like of shape (n, n)
        Non-negative affinity matrix.
    k : int, default=20
        Number of neighbors kept per row, 1 <= k < n.

    Returns
    -------
    S : ndarray of shape (n, n)
        Row-stochastic matrix with at most k non-zero entries per row and
        a zero diagonal.
    """
    A = check_square_matrix(affinity, 'affinity')
    n = A.shape[0]
    k = check_k_neighbors(k, n)

    scores = A.copy()
    np.fill_diagonal(scores, -np.inf)
    # Stable sort keeps equal affinities in column order
    neighbors = np.argsort(-scores, axis=1, kind='stable')[:, :k]
    rows = np.arange(n)[:, None]

    S = np.zeros_like(A)
    S[rows, neighbors] = A[rows, neighbors]

    sums = S.sum(axis=1)
    empty = sums <= 0
    if empty.any():
        warnings.warn(
            f"{int(empty.sum())} row(s) have zero affinity to all {k} nearest "
            "neighbors; using uniform neighbor weights",
            NumericInstabilityWarning,
            stacklevel=2,
        )
        S[np.flatnonzero(empty)[:, None], neighbors[empty]] = 1.0
        sums = S.sum(axis=1)

    S /= sums[:, None]
    return S
