import numpy as np
import pytest

from alignkit.core.alphabet import Alphabet
from alignkit.engines.scoring import Linear


@pytest.fixture
def rng():
    return np.random.default_rng(1729)


@pytest.fixture
def nw_matrix():
    # A, C, G, T, gap
    return Linear([
        [10, -3, -1, -4, -5],
        [-3, 9, -5, 0, -5],
        [-1, -5, 7, -3, -5],
        [-4, 0, -3, 8, -5],
        [-5, -5, -5, -5, 0],
    ])


@pytest.fixture
def sw_matrix():
    return Linear.build(Alphabet.DNA_GAPPED, match=2, mismatch=-1, gap=-1)


@pytest.fixture
def fitted_matrix():
    # gap, A, C, G, T
    return Linear([
        [0, -5, -5, -5, -5],
        [-5, 10, -3, -1, -4],
        [-5, -3, 9, -5, 0],
        [-5, -1, -5, 7, -3],
        [-5, -4, 0, -3, 8],
    ])


@pytest.fixture
def unit_matrix():
    return Linear.build(Alphabet.DNA_GAPPED, match=1, mismatch=-1, gap=-1)


@pytest.fixture
def dna_matrix():
    return Linear.build(Alphabet.DNA_GAPPED, match=2, mismatch=-1, gap=-2)
