"""
Affinity Network Fusion: one-step and two-step random-walk fusion.

Each view v contributes two random walks built from its affinity matrix:

    P_v : full transition matrix (row-normalized affinity)
    S_v : K-nearest-neighbor transition matrix (sparsified, row-normalized)

One-step fusion averages the full walks:

    W = sum_v w_v P_v

Two-step fusion lets one view's neighbor structure act as a denoising
operator on another view's diffusion. Eight structurally distinct terms
T_1..T_8 are combined as

    W = sum_t alpha_t T_t

where every T_t is a weighted average of row-normalized products over
self pairs (v, v), weighted by w_v, or ordered cross pairs (u, v), u != v,
weighted by w_u * w_v. Pair weights are renormalized within each term, so
every T_t is itself row-stochastic before the alpha weighting.

    t  name                        kind   product
    1  self_diffusion              self   S_v P_v
    2  cross_symmetric             cross  S_u P_v S_u^T
    3  cross_diffusion             cross  S_u P_v
    4  cross_diffuse_then_sparsify cross  P_v S_u
    5  self_symmetric              self   S_v P_v S_v^T
    6  self_double_diffusion       self   S_v P_v P_v
    7  cross_double_diffusion      cross  S_u P_v P_u
    8  cross_double_sparsify       cross  S_u S_v P_v

The default alpha = (1, 1, 0, 0, 0, 0, 0, 0) keeps the self-diffusion and
the symmetric cross-view term.
"""

from collections import namedtuple
import warnings

import numpy as np

from ..exceptions import InvalidParameterError, NumericInstabilityWarning
from ._validation import check_k_neighbors, normalize_nonnegative
from .affinity import DEFAULT_K, neighbor_graph, row_normalize, transition_matrix
from .views import as_view_set


ONE_STEP = 'one-step'
TWO_STEP = 'two-step'
MODES = (ONE_STEP, TWO_STEP)

DEFAULT_ALPHA = (1, 1, 0, 0, 0, 0, 0, 0)

TwoStepTerm = namedtuple('TwoStepTerm', ['name', 'kind', 'product'])

TWO_STEP_TERMS = (
    TwoStepTerm('self_diffusion', 'self',
                lambda S_u, P_u, S_v, P_v: S_v @ P_v),
    TwoStepTerm('cross_symmetric', 'cross',
                lambda S_u, P_u, S_v, P_v: S_u @ P_v @ S_u.T),
    TwoStepTerm('cross_diffusion', 'cross',
                lambda S_u, P_u, S_v, P_v: S_u @ P_v),
    TwoStepTerm('cross_diffuse_then_sparsify', 'cross',
                lambda S_u, P_u, S_v, P_v: P_v @ S_u),
    TwoStepTerm('self_symmetric', 'self',
                lambda S_u, P_u, S_v, P_v: S_v @ P_v @ S_v.T),
    TwoStepTerm('self_double_diffusion', 'self',
                lambda S_u, P_u, S_v, P_v: S_v @ P_v @ P_v),
    TwoStepTerm('cross_double_diffusion', 'cross',
                lambda S_u, P_u, S_v, P_v: S_u @ P_v @ P_u),
    TwoStepTerm('cross_double_sparsify', 'cross',
                lambda S_u, P_u, S_v, P_v: S_u @ S_v @ P_v),
)


def normalize_alpha(alpha):
    """Normalize the eight two-step term weights to sum to 1 (pure)."""
    return normalize_nonnegative(alpha, 'alpha', size=len(TWO_STEP_TERMS))


def check_mode(mode):
    """Canonicalize a fusion mode string ('one-step' or 'two-step')."""
    if not isinstance(mode, str):
        raise InvalidParameterError(f"mode must be a string, got {mode!r}")
    canonical = mode.strip().lower().replace('_', '-')
    if canonical not in MODES:
        raise InvalidParameterError(
            f"Unknown fusion mode: {mode!r}. Available: {list(MODES)}"
        )
    return canonical


def _view_pairs(weights):
    """Self pairs (v, v, w_v) and ordered cross pairs (u, v, w_u * w_v)."""
    m = len(weights)
    self_pairs = [(v, v, weights[v]) for v in range(m) if weights[v] > 0]
    cross_pairs = [
        (u, v, weights[u] * weights[v])
        for u in range(m) for v in range(m)
        if u != v and weights[u] * weights[v] > 0
    ]
    return {'self': self_pairs, 'cross': cross_pairs}


class FusionEngine:
    """
    Fuse several weighted affinity matrices into one transition matrix.

    Parameters
    ----------
    k_neighbors : int, default=20
        Neighbors kept in every view's sparsified transition matrix.
    mode : {'one-step', 'two-step'}, default='two-step'
        Fusion strategy.
    alpha : array-like of length 8, default=(1, 1, 0, 0, 0, 0, 0, 0)
        Weights of the two-step terms (see TWO_STEP_TERMS). Ignored by
        one-step fusion apart from validation.
    verbose : bool, default=False
        Print per-view and per-term diagnostics. Never changes results.

    Notes
    -----
    Two-step fusion of a single view has no cross pairs. Cross-view terms
    are then dropped with a NumericInstabilityWarning and alpha is
    renormalized over the remaining self terms. If no self term has
    positive alpha, an InvalidParameterError is raised.

    After each call, ``view_weights_``, ``alpha_`` (effective, normalized)
    and ``term_contributions_`` (Frobenius norm of alpha_t * T_t) describe
    the last fusion. They are diagnostics only; no call reads them.
    """

    def __init__(self, k_neighbors=DEFAULT_K, mode=TWO_STEP, alpha=DEFAULT_ALPHA,
                 verbose=False):
        self.k_neighbors = k_neighbors
        self.mode = mode
        self.alpha = alpha
        self.verbose = verbose

        self.view_weights_ = None
        self.alpha_ = None
        self.term_contributions_ = None

    def fuse(self, views, weights=None):
        """
        Fuse ``views`` into a single row-stochastic matrix.

        Parameters
        ----------
        views : ViewSet, Mapping or sequence
            Affinity matrices with optional per-view weights; see ViewSet.
        weights : array-like or Mapping, optional
            Overrides the weights carried by ``views``.

        Returns
        -------
        W : ndarray of shape (n, n)
            Fused transition matrix.
        """
        # Validation first: nothing below runs on invalid input
        view_set = as_view_set(views, weights)
        n_samples = view_set.n_samples
        k = check_k_neighbors(self.k_neighbors, n_samples)
        mode = check_mode(self.mode)
        view_weights = view_set.normalized_weights()
        alpha = normalize_alpha(self.alpha)
        pairs = _view_pairs(view_weights)
        if mode == TWO_STEP:
            alpha = self._effective_alpha(alpha, pairs)

        if self.verbose:
            print(f"ANF: fusing {view_set.n_views} views with {n_samples} samples ({mode})")
            print(f"  View weights: {dict(zip(view_set.keys, np.round(view_weights, 4)))}")

        # Step 1: per-view random walks
        P = [transition_matrix(A) for A in view_set.affinities]

        if mode == ONE_STEP:
            fused = np.zeros((n_samples, n_samples))
            for w_v, P_v in zip(view_weights, P):
                fused += w_v * P_v
            contributions = None
        else:
            S = [neighbor_graph(A, k) for A in view_set.affinities]
            if self.verbose:
                for key, S_v in zip(view_set.keys, S):
                    mutual = np.count_nonzero((S_v > 0) & (S_v.T > 0))
                    print(f"  View {key!r}: {np.count_nonzero(S_v)} neighbor edges, "
                          f"{mutual} mutual")
                print(f"  Alpha: {np.round(alpha, 4)}")
            fused, contributions = self._two_step(P, S, pairs, alpha)

        fused = row_normalize(fused, 'fused matrix')

        self.view_weights_ = view_weights
        self.alpha_ = alpha if mode == TWO_STEP else None
        self.term_contributions_ = contributions
        return fused

    def _effective_alpha(self, alpha, pairs):
        dropped = [
            term.name for term, a in zip(TWO_STEP_TERMS, alpha)
            if a > 0 and not pairs[term.kind]
        ]
        if not dropped:
            return alpha

        effective = np.array([
            0.0 if not pairs[term.kind] else a
            for term, a in zip(TWO_STEP_TERMS, alpha)
        ])
        if effective.sum() <= 0:
            raise InvalidParameterError(
                "two-step fusion needs at least two views with positive weight "
                f"for the selected terms {dropped}; enable a self term in alpha "
                "or use mode='one-step'"
            )
        warnings.warn(
            f"cross-view terms {dropped} have no view pairs and were dropped; "
            "alpha renormalized over the remaining terms",
            NumericInstabilityWarning,
            stacklevel=3,
        )
        return effective / effective.sum()

    def _two_step(self, P, S, pairs, alpha):
        n_samples = P[0].shape[0]
        fused = np.zeros((n_samples, n_samples))
        contributions = {}
        n_pairs = {}

        for term, a in zip(TWO_STEP_TERMS, alpha):
            if a == 0:
                contributions[term.name] = 0.0
                continue

            term_pairs = pairs[term.kind]
            total = sum(pw for _, _, pw in term_pairs)
            T = np.zeros((n_samples, n_samples))
            for u, v, pw in term_pairs:
                product = term.product(S[u], P[u], S[v], P[v])
                T += (pw / total) * row_normalize(product, term.name)

            fused += a * T
            contributions[term.name] = float(np.linalg.norm(a * T, 'fro'))
            n_pairs[term.name] = len(term_pairs)

        if self.verbose:
            grand_total = sum(contributions.values())
            for term, a in zip(TWO_STEP_TERMS, alpha):
                if a == 0:
                    continue
                norm = contributions[term.name]
                print(f"  Term {term.name}: alpha={a:.4f}, "
                      f"|alpha*T|_F={norm:.4f}, share={norm / grand_total:.1%}, "
                      f"{n_pairs[term.name]} pair(s)")

        return fused, contributions


def fuse(views, k=DEFAULT_K, mode=TWO_STEP, alpha=DEFAULT_ALPHA, weights=None,
         verbose=False):
    """
    Fuse weighted affinity matrices into one transition matrix.

    Shortcut for ``FusionEngine(k, mode, alpha, verbose).fuse(views, weights)``.

    Examples
    --------
    >>> W = fuse([(A_gene, 1.0), (A_methyl, 1.0)], k=10, mode='one-step')
    >>> np.allclose(W.sum(axis=1), 1)
    True
    """
    engine = FusionEngine(k_neighbors=k, mode=mode, alpha=alpha, verbose=verbose)
    return engine.fuse(views, weights=weights)
