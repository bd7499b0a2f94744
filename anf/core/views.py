"""
Typed collection of views for fusion.

A ViewSet maps a view key (e.g. 'mRNA', ('BRCA', 'methylation')) to an
affinity matrix and its weight. Everything is validated once, at
construction: all matrices square with the same n, weights non-negative
and not all zero.
"""

from collections.abc import Mapping

import numpy as np

from ..exceptions import InvalidParameterError, ShapeMismatchError
from ._validation import check_square_matrix, normalize_nonnegative
from .affinity import DEFAULT_K, DEFAULT_MU, affinity_matrix


def normalize_weights(weights, size=None):
    """
    Normalize per-view weights to sum to 1.

    Parameters
    ----------
    weights : array-like
        Non-negative weights, not all zero.
    size : int, optional
        Expected number of weights.

    Returns
    -------
    w : ndarray
        New array summing to 1. ``weights`` is not modified.
    """
    return normalize_nonnegative(weights, 'weights', size=size)


def _split_entry(entry):
    if isinstance(entry, tuple):
        if len(entry) != 2:
            raise ShapeMismatchError(
                f"view entries must be (affinity, weight) pairs, got a {len(entry)}-tuple"
            )
        return entry[0], entry[1]
    return entry, 1.0


def _resolve_weights(weights, keys):
    if isinstance(weights, Mapping):
        missing = [key for key in keys if key not in weights]
        unknown = [key for key in weights if key not in keys]
        if missing or unknown:
            raise InvalidParameterError(
                f"weights do not match the views: missing {missing}, unknown {unknown}"
            )
        return [weights[key] for key in keys]
    return weights


class ViewSet:
    """
    Ordered views sharing the same n objects.

    Parameters
    ----------
    views : Mapping or sequence
        Either ``{key: affinity}``, ``{key: (affinity, weight)}``, or a
        sequence of affinities / ``(affinity, weight)`` pairs (keys are
        then the positions 0..m-1).
    weights : array-like or Mapping, optional
        Overrides the weights carried by ``views``. A mapping is looked up
        by view key.

    Examples
    --------
    >>> views = ViewSet({'mRNA': (A_gene, 2.0), 'miRNA': (A_mirna, 1.0)})
    >>> views.normalized_weights()
    array([0.66666667, 0.33333333])
    """

    def __init__(self, views, weights=None):
        if isinstance(views, Mapping):
            keys = list(views.keys())
            entries = list(views.values())
        else:
            entries = list(views)
            keys = list(range(len(entries)))

        if not entries:
            raise InvalidParameterError("at least one view is required")

        matrices = []
        raw_weights = []
        for key, entry in zip(keys, entries):
            matrix, weight = _split_entry(entry)
            matrices.append(check_square_matrix(matrix, f"affinity of view {key!r}"))
            raw_weights.append(weight)

        if weights is not None:
            raw_weights = _resolve_weights(weights, keys)

        shapes = {M.shape for M in matrices}
        if len(shapes) > 1:
            described = ', '.join(f"{key!r}: {M.shape}" for key, M in zip(keys, matrices))
            raise ShapeMismatchError(f"views have different dimensions ({described})")

        # Validates sign, finiteness and non-zero total
        normalize_weights(raw_weights, size=len(matrices))

        self._keys = keys
        self._matrices = matrices
        self._weights = np.array(raw_weights, dtype=float)

    @classmethod
    def from_distances(cls, distances, k=DEFAULT_K, mu=DEFAULT_MU, weights=None):
        """
        Build a ViewSet from per-view distance matrices.

        Each view's affinity is computed with ``affinity_matrix(D, k, mu)``.
        ``distances`` follows the same layout as ``views`` in the
        constructor, with distance matrices in place of affinities.
        """
        if isinstance(distances, Mapping):
            items = list(distances.items())
        else:
            items = list(enumerate(distances))

        views = {}
        for key, entry in items:
            D, weight = _split_entry(entry)
            views[key] = (affinity_matrix(D, k, mu), weight)

        if not isinstance(distances, Mapping):
            views = list(views.values())
        return cls(views, weights=weights)

    @property
    def keys(self):
        return list(self._keys)

    @property
    def affinities(self):
        return list(self._matrices)

    @property
    def weights(self):
        return self._weights.copy()

    @property
    def n_views(self):
        return len(self._matrices)

    @property
    def n_samples(self):
        return self._matrices[0].shape[0]

    def normalized_weights(self):
        return normalize_weights(self._weights)

    def __len__(self):
        return len(self._matrices)

    def __iter__(self):
        return iter(self._keys)

    def __getitem__(self, key):
        if key not in self._keys:
            raise KeyError(key)
        idx = self._keys.index(key)
        return self._matrices[idx], self._weights[idx]

    def __repr__(self):
        return (f"ViewSet(n_views={self.n_views}, n_samples={self.n_samples}, "
                f"keys={self._keys})")


def as_view_set(views, weights=None):
    """Coerce any supported view layout into a ViewSet."""
    if isinstance(views, ViewSet):
        if weights is None:
            return views
        return ViewSet(dict(zip(views.keys, views.affinities)), weights=weights)
    return ViewSet(views, weights=weights)
