"""
Synthetic multi-view data for demos and tests.
"""

import numpy as np
from sklearn.metrics import pairwise_distances


def make_multiview_blobs(n_samples=150, n_clusters=3, n_views=3, n_features=20,
                         noise_levels=None, metric='euclidean', random_state=42):
    """
    Generate per-view distance matrices over one shared set of objects.

    Every view observes the same cluster assignment through its own random
    cluster centers and its own noise level, so some views are more
    informative than others.

    Parameters
    ----------
    n_samples : int
        Number of objects.
    n_clusters : int
        Number of ground-truth clusters (balanced, remainder assigned
        randomly).
    n_views : int
        Number of views.
    n_features : int
        Feature dimension of every view.
    noise_levels : sequence of float, optional
        Per-view noise standard deviation. Defaults to values spread
        between 0.5 and 1.5.
    metric : str
        Any metric accepted by ``sklearn.metrics.pairwise_distances``.
    random_state : int
        Seed of the generator.

    Returns
    -------
    distances : list of ndarray of shape (n_samples, n_samples)
    labels : ndarray of shape (n_samples,)
    """
    rng = np.random.RandomState(random_state)

    labels = np.repeat(np.arange(n_clusters), n_samples // n_clusters)
    remaining = n_samples - len(labels)
    if remaining > 0:
        labels = np.concatenate([labels, rng.choice(n_clusters, remaining)])
    labels = labels[rng.permutation(n_samples)]

    if noise_levels is None:
        noise_levels = np.linspace(0.5, 1.5, n_views)
    if len(noise_levels) != n_views:
        raise ValueError(f"noise_levels must have {n_views} entries, got {len(noise_levels)}")

    distances = []
    for noise in noise_levels:
        centers = rng.randn(n_clusters, n_features) * 3.0
        X = centers[labels] + rng.randn(n_samples, n_features) * noise
        distances.append(pairwise_distances(X, metric=metric))

    return distances, labels
