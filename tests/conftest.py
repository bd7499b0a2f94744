"""Fixtures for pytest."""

import numpy as np
import pytest
from sklearn.metrics import pairwise_distances


@pytest.fixture(scope='session')
def rng_seed():
    """Fixed random seed for reproducible tests."""
    return 12345


@pytest.fixture
def rng(rng_seed):
    """numpy RandomState seeded with rng_seed."""
    return np.random.RandomState(rng_seed)


@pytest.fixture
def make_distances(rng):
    """Factory of symmetric Euclidean distance matrices with zero diagonal."""
    def _make(n=20, n_features=5):
        return pairwise_distances(rng.rand(n, n_features))
    return _make


@pytest.fixture
def block_diagonal():
    """Two perfectly separated 50-object blocks and their ground truth."""
    n_block = 50
    W = np.zeros((2 * n_block, 2 * n_block))
    W[:n_block, :n_block] = 1.0
    W[n_block:, n_block:] = 1.0
    np.fill_diagonal(W, 0.0)
    labels = np.repeat([0, 1], n_block)
    return W, labels
