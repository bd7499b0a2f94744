"""End-to-end tests of the AffinityNetworkFusion estimator."""

import numpy as np
import pytest
from sklearn.metrics import normalized_mutual_info_score

from anf import AffinityNetworkFusion, InvalidParameterError, ShapeMismatchError, ViewSet
from anf.core import affinity_matrix
from anf.datasets import make_multiview_blobs


@pytest.fixture(scope='module')
def blobs():
    return make_multiview_blobs(
        n_samples=120, n_clusters=3, n_views=3,
        noise_levels=[0.5, 0.8, 1.0], random_state=0
    )


@pytest.mark.parametrize('mode', ['one-step', 'two-step'])
def test_fit_predict_recovers_clusters(blobs, mode):
    distances, truth = blobs

    model = AffinityNetworkFusion(n_clusters=3, k_neighbors=10, mode=mode, random_state=0)
    labels = model.fit_predict(distances)

    assert normalized_mutual_info_score(truth, labels) > 0.95


def test_fitted_attributes(blobs):
    distances, _ = blobs

    model = AffinityNetworkFusion(n_clusters=3, k_neighbors=10, random_state=0)
    model.fit(distances)

    assert set(model.affinity_matrices_) == {0, 1, 2}
    assert model.fused_matrix_.shape == (120, 120)
    assert np.allclose(model.fused_matrix_.sum(axis=1), 1.0)
    assert np.allclose(model.view_weights_, 1 / 3)
    assert model.embedding_.shape == (120, 3)
    assert model.labels_.shape == (120,)
    assert model.term_contributions_['self_diffusion'] > 0


def test_fit_with_named_views_and_weights(blobs):
    distances, truth = blobs
    named = {'rna': distances[0], 'methylation': distances[1]}

    model = AffinityNetworkFusion(
        n_clusters=3, k_neighbors=10, weights={'rna': 3.0, 'methylation': 1.0},
        random_state=0
    )
    labels = model.fit_predict(named)

    assert list(model.affinity_matrices_) == ['rna', 'methylation']
    assert np.allclose(model.view_weights_, [0.75, 0.25])
    assert normalized_mutual_info_score(truth, labels) > 0.95


def test_fit_affinities_matches_fit(blobs):
    distances, _ = blobs
    views = ViewSet([affinity_matrix(D, k=10) for D in distances])

    from_distances = AffinityNetworkFusion(n_clusters=3, k_neighbors=10, random_state=0)
    from_affinities = AffinityNetworkFusion(n_clusters=3, k_neighbors=10, random_state=0)
    from_distances.fit(distances)
    from_affinities.fit_affinities(views)

    assert np.allclose(from_distances.fused_matrix_, from_affinities.fused_matrix_)
    assert np.array_equal(from_distances.labels_, from_affinities.labels_)


def test_same_random_state_is_reproducible(blobs):
    distances, _ = blobs

    first = AffinityNetworkFusion(n_clusters=3, k_neighbors=10, random_state=5).fit_predict(distances)
    second = AffinityNetworkFusion(n_clusters=3, k_neighbors=10, random_state=5).fit_predict(distances)

    assert np.array_equal(first, second)


@pytest.mark.parametrize('n_clusters', [1, 121])
def test_invalid_cluster_count_is_rejected(blobs, n_clusters):
    distances, _ = blobs

    with pytest.raises(InvalidParameterError):
        AffinityNetworkFusion(n_clusters=n_clusters, k_neighbors=10).fit(distances)


def test_k_not_smaller_than_n_is_rejected():
    D = np.ones((10, 10)) - np.eye(10)

    with pytest.raises(InvalidParameterError):
        AffinityNetworkFusion(n_clusters=2, k_neighbors=10).fit([D, D])


def test_synthetic_views_are_distance_matrices(blobs):
    distances, truth = blobs

    assert len(distances) == 3
    assert np.bincount(truth).tolist() == [40, 40, 40]
    for D in distances:
        assert D.shape == (120, 120)
        assert np.allclose(D, D.T)
        assert np.allclose(np.diag(D), 0)


def test_fit_with_weighted_distance_pairs(blobs):
    distances, truth = blobs

    model = AffinityNetworkFusion(n_clusters=3, k_neighbors=10, random_state=0)
    labels = model.fit_predict([(distances[0], 2.0), (distances[1], 1.0)])

    assert np.allclose(model.view_weights_, [2 / 3, 1 / 3])
    assert set(model.affinity_matrices_) == {0, 1}
    assert np.allclose(model.affinity_matrices_[0], affinity_matrix(distances[0], k=10))
    assert normalized_mutual_info_score(truth, labels) > 0.95


def test_fit_rejects_list_shaped_pairs(blobs):
    distances, _ = blobs

    with pytest.raises(ShapeMismatchError):
        AffinityNetworkFusion(n_clusters=3, k_neighbors=10).fit([[distances[0], 2.0]])
