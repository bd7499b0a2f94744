"""
Spectral clustering of a (fused) similarity or transition matrix.

The matrix is symmetrized, turned into the normalized Laplacian

    L = I - D^{-1/2} W D^{-1/2}

and the eigenvectors of its k smallest eigenvalues form an n x k
embedding. Rows of the embedding are scaled to unit length and then
partitioned with k-means.

Results can differ slightly between LAPACK backends when eigenvalues are
degenerate; the k-means initialization is reproducible through ``seed``.
"""

import warnings

import numpy as np
from scipy.linalg import eigh
from sklearn.cluster import KMeans
from sklearn.preprocessing import normalize

from ..exceptions import NumericInstabilityWarning
from ._validation import EPS, check_n_clusters, check_square_matrix


EIGEN_GAP_TOL = 1e-8


def spectral_embedding(matrix, k):
    """
    Row-normalized spectral embedding of a similarity matrix.

    Parameters
    ----------
    matrix : array-like of shape (n, n)
        Non-negative similarity or transition matrix. Symmetrized as
        (W + W^T) / 2 before use.
    k : int
        Embedding dimension, 1 < k <= n.

    Returns
    -------
    Z : ndarray of shape (n, k)
        Eigenvectors of the k smallest Laplacian eigenvalues as columns,
        each row scaled to unit norm.
    """
    W = check_square_matrix(matrix, 'matrix')
    n = W.shape[0]
    k = check_n_clusters(k, n)

    W = (W + W.T) / 2

    d = W.sum(axis=1)
    isolated = d <= EPS
    if isolated.any():
        warnings.warn(
            f"{int(isolated.sum())} object(s) have zero degree",
            NumericInstabilityWarning,
            stacklevel=2,
        )
    d_inv_sqrt = 1.0 / np.sqrt(np.maximum(d, EPS))

    L = np.eye(n) - d_inv_sqrt[:, None] * W * d_inv_sqrt[None, :]
    L = (L + L.T) / 2

    # One extra eigenpair, when available, to inspect the eigen-gap
    upper = min(k, n - 1)
    eigenvalues, eigenvectors = eigh(L, subset_by_index=[0, upper])

    if upper == k and eigenvalues[k] - eigenvalues[k - 1] < EIGEN_GAP_TOL:
        warnings.warn(
            f"eigenvalues {k} and {k + 1} of the Laplacian are degenerate "
            f"({eigenvalues[k - 1]:.3e} vs {eigenvalues[k]:.3e}); the embedding "
            "subspace is not unique",
            NumericInstabilityWarning,
            stacklevel=2,
        )

    return normalize(eigenvectors[:, :k], norm='l2', axis=1)


def kmeans_partition(embedding, k, seed=None, n_init=10):
    """Partition embedded rows into k clusters with k-means++."""
    kmeans = KMeans(
        n_clusters=k,
        init='k-means++',
        n_init=n_init,
        max_iter=300,
        random_state=seed,
    )
    return kmeans.fit_predict(embedding)


def spectral_clustering(matrix, k, seed=None, n_init=10):
    """
    Cluster objects from a similarity or transition matrix.

    Parameters
    ----------
    matrix : array-like of shape (n, n)
        Typically the fused matrix returned by ``fuse``.
    k : int
        Number of clusters, 1 < k <= n.
    seed : int, optional
        Random seed of the k-means initialization.
    n_init : int, default=10
        Number of k-means restarts.

    Returns
    -------
    labels : ndarray of shape (n,)
        Cluster label in 0..k-1 for every object.
    """
    Z = spectral_embedding(matrix, k)
    return kmeans_partition(Z, k, seed=seed, n_init=n_init)
