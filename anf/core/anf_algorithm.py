"""
ANF: Affinity Network Fusion for multi-view clustering.

Pipeline:
- Step 1: Local-scaling affinity matrix per view (from distances)
- Step 2: One-step or two-step random-walk fusion of all views
- Step 3: Spectral clustering of the fused transition matrix
"""

from ._validation import check_n_clusters
from .affinity import DEFAULT_K, DEFAULT_MU
from .fusion import DEFAULT_ALPHA, TWO_STEP, FusionEngine
from .spectral import kmeans_partition, spectral_embedding
from .views import ViewSet, as_view_set


class AffinityNetworkFusion:
    """
    Affinity Network Fusion estimator.

    Parameters
    ----------
    n_clusters : int
        Number of clusters.
    k_neighbors : int, default=20
        Neighbors used for local scaling and for neighbor-graph
        sparsification.
    mu : float, default=0.5
        Bandwidth multiplier of the affinity kernel.
    mode : {'one-step', 'two-step'}, default='two-step'
        Fusion strategy.
    alpha : array-like of length 8, default=(1, 1, 0, 0, 0, 0, 0, 0)
        Two-step term weights.
    weights : array-like or Mapping, optional
        Per-view weights. Uniform if None.
    n_init : int, default=10
        k-means restarts.
    random_state : int, default=None
        Seed of the k-means initialization.
    verbose : bool, default=False
        Whether to print progress.

    Attributes
    ----------
    affinity_matrices_ : dict
        View key -> affinity matrix (only set by ``fit``).
    fused_matrix_ : ndarray of shape (n, n)
    view_weights_ : ndarray of shape (m,)
        Normalized view weights actually used.
    term_contributions_ : dict or None
        Per-term magnitude of the two-step combination.
    embedding_ : ndarray of shape (n, n_clusters)
    labels_ : ndarray of shape (n,)
    """

    def __init__(
        self,
        n_clusters,
        k_neighbors=DEFAULT_K,
        mu=DEFAULT_MU,
        mode=TWO_STEP,
        alpha=DEFAULT_ALPHA,
        weights=None,
        n_init=10,
        random_state=None,
        verbose=False
    ):
        self.n_clusters = n_clusters
        self.k_neighbors = k_neighbors
        self.mu = mu
        self.mode = mode
        self.alpha = alpha
        self.weights = weights
        self.n_init = n_init
        self.random_state = random_state
        self.verbose = verbose

        # Attributes set after fitting
        self.affinity_matrices_ = None
        self.fused_matrix_ = None
        self.view_weights_ = None
        self.term_contributions_ = None
        self.embedding_ = None
        self.labels_ = None

    def fit(self, distances):
        """
        Fit ANF to per-view distance matrices.

        Parameters
        ----------
        distances : Mapping or list
            Distance matrices of shape (n, n), one per view, all over the
            same ordered objects. Entries may be ``(distance, weight)``
            pairs; the ``weights`` parameter overrides them.

        Returns
        -------
        self : AffinityNetworkFusion
        """
        if self.verbose:
            print("Step 1: Affinity matrices...")

        view_set = ViewSet.from_distances(
            distances, self.k_neighbors, self.mu, self.weights
        )
        self.affinity_matrices_ = dict(zip(view_set.keys, view_set.affinities))
        return self._fit_views(view_set)

    def fit_affinities(self, affinities):
        """Fit ANF starting from precomputed affinity matrices (or a ViewSet)."""
        self.affinity_matrices_ = None
        return self._fit_views(as_view_set(affinities, self.weights))

    def fit_predict(self, distances):
        """Fit ANF and return cluster labels."""
        self.fit(distances)
        return self.labels_

    def _fit_views(self, view_set):
        check_n_clusters(self.n_clusters, view_set.n_samples)

        if self.verbose:
            print("Step 2: Random-walk fusion...")
        engine = FusionEngine(
            k_neighbors=self.k_neighbors,
            mode=self.mode,
            alpha=self.alpha,
            verbose=self.verbose,
        )
        self.fused_matrix_ = engine.fuse(view_set)
        self.view_weights_ = engine.view_weights_
        self.term_contributions_ = engine.term_contributions_

        if self.verbose:
            print("Step 3: Spectral clustering...")
        self.embedding_ = spectral_embedding(self.fused_matrix_, self.n_clusters)
        self.labels_ = kmeans_partition(
            self.embedding_, self.n_clusters,
            seed=self.random_state, n_init=self.n_init,
        )
        return self
