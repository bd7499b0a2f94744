"""Unit tests for affinity, transition and neighbor-graph construction."""

import numpy as np
import pytest

from anf import InvalidParameterError, NumericInstabilityWarning, ShapeMismatchError
from anf.core import affinity_matrix, neighbor_graph, transition_matrix


def test_affinity_matrix_is_exactly_symmetric_for_asymmetric_input(rng):
    D = rng.rand(15, 15) * 5
    np.fill_diagonal(D, 0.0)
    assert not np.allclose(D, D.T)

    A = affinity_matrix(D, k=4)

    assert np.array_equal(A, A.T)


def test_affinity_matrix_range_and_diagonal(make_distances):
    A = affinity_matrix(make_distances(20), k=5, mu=0.5)

    assert A.shape == (20, 20)
    assert np.all(np.diag(A) == 0)
    off_diag = A[~np.eye(20, dtype=bool)]
    assert np.all(off_diag > 0)
    assert np.all(off_diag <= 1)


def test_zero_distance_maps_to_maximum_affinity(rng):
    X = rng.rand(8, 3)
    X[1] = X[0]
    D = np.sqrt(((X[:, None, :] - X[None, :, :]) ** 2).sum(axis=-1))

    A = affinity_matrix(D, k=3)

    assert A[0, 1] == 1.0
    assert A[0, 1] == A.max()


def test_affinity_decreases_with_distance():
    # Points on a line: local scales are equal for 1 and 2 seen from 0
    x = np.array([0.0, 1.0, 2.0, 3.0, 4.0])
    D = np.abs(x[:, None] - x[None, :])

    A = affinity_matrix(D, k=2)

    assert A[2, 1] > A[2, 0]
    assert A[2, 3] > A[2, 4]


def test_affinity_matrix_does_not_mutate_input(make_distances):
    D = make_distances(12)
    before = D.copy()

    affinity_matrix(D, k=3)

    assert np.array_equal(D, before)


def test_all_zero_distances_are_clamped_with_warning():
    D = np.zeros((6, 6))

    with pytest.warns(NumericInstabilityWarning):
        A = affinity_matrix(D, k=2)

    assert np.all(np.isfinite(A))
    assert np.allclose(A[~np.eye(6, dtype=bool)], 1.0)


@pytest.mark.parametrize('k', [0, 10, 11, -1])
def test_affinity_matrix_rejects_k_out_of_range(k):
    D = np.ones((10, 10)) - np.eye(10)

    with pytest.raises(InvalidParameterError):
        affinity_matrix(D, k=k)


def test_affinity_matrix_rejects_invalid_inputs():
    with pytest.raises(ShapeMismatchError):
        affinity_matrix(np.ones((4, 5)), k=2)
    with pytest.raises(InvalidParameterError):
        affinity_matrix(-np.ones((4, 4)), k=2)
    with pytest.raises(InvalidParameterError):
        affinity_matrix(np.ones((4, 4)), k=2, mu=0)


def test_transition_matrix_is_row_stochastic(make_distances):
    A = affinity_matrix(make_distances(20), k=5)

    P = transition_matrix(A)

    assert np.allclose(P.sum(axis=1), 1.0)
    assert np.allclose(P, A / A.sum(axis=1, keepdims=True))


def test_transition_matrix_replaces_empty_rows():
    A = np.array([
        [0.0, 1.0, 1.0],
        [1.0, 0.0, 1.0],
        [0.0, 0.0, 0.0],
    ])

    with pytest.warns(NumericInstabilityWarning):
        P = transition_matrix(A)

    assert np.allclose(P[2], [0.5, 0.5, 0.0])
    assert np.allclose(P.sum(axis=1), 1.0)


@pytest.mark.parametrize('k', [1, 3, 5, 19])
def test_neighbor_graph_rows_sum_to_one_with_at_most_k_neighbors(make_distances, k):
    A = affinity_matrix(make_distances(20), k=5)

    S = neighbor_graph(A, k)

    assert np.allclose(S.sum(axis=1), 1.0)
    assert np.all(np.diag(S) == 0)
    assert np.all(np.count_nonzero(S, axis=1) <= k)


def test_neighbor_graph_keeps_the_largest_affinities(make_distances):
    A = affinity_matrix(make_distances(20), k=5)

    S = neighbor_graph(A, 3)

    for i in range(20):
        kept = np.flatnonzero(S[i])
        dropped = np.setdiff1d(np.delete(np.arange(20), i), kept)
        assert A[i, kept].min() >= A[i, dropped].max()
        assert np.allclose(S[i, kept], A[i, kept] / A[i, kept].sum())


def test_neighbor_graph_breaks_ties_by_lower_index():
    A = np.ones((6, 6)) - np.eye(6)

    S = neighbor_graph(A, 2)

    assert np.allclose(S[0], [0, 0.5, 0.5, 0, 0, 0])
    assert np.allclose(S[3], [0.5, 0.5, 0, 0, 0, 0])


def test_neighbor_graph_is_not_symmetrized():
    A = np.array([
        [0.0, 0.9, 0.1, 0.1],
        [0.9, 0.0, 0.8, 0.1],
        [0.1, 0.8, 0.0, 0.1],
        [0.1, 0.1, 0.1, 0.0],
    ])

    S = neighbor_graph(A, 1)

    assert S[2, 1] == 1.0
    assert S[1, 2] == 0.0
    assert S[1, 0] == 1.0


def test_neighbor_graph_falls_back_to_uniform_weights():
    A = np.zeros((5, 5))

    with pytest.warns(NumericInstabilityWarning):
        S = neighbor_graph(A, 2)

    assert np.allclose(S[0], [0, 0.5, 0.5, 0, 0])
    assert np.allclose(S[4], [0.5, 0.5, 0, 0, 0])
    assert np.allclose(S.sum(axis=1), 1.0)


def test_neighbor_graph_rejects_k_equal_to_n():
    with pytest.raises(InvalidParameterError):
        neighbor_graph(np.ones((10, 10)), 10)
