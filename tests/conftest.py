import pytest

from harmonic_algorithm.filters import Filters
from harmonic_algorithm.markov import train
from tests.test_helpers import SMALL_CORPUS


@pytest.fixture(scope="session")
def small_corpus():
    return list(SMALL_CORPUS)


@pytest.fixture(scope="session")
def table(small_corpus):
    return train(small_corpus)


@pytest.fixture
def c_major_filters():
    return Filters.from_strings("*", "0#", "*")
