import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest

from summed_area import ArraySource

CUSTOM_GRID = [
    [5, 2, 3, 4, 1],
    [1, 5, 4, 2, 3],
    [2, 2, 1, 3, 4],
    [3, 5, 6, 4, 5],
    [4, 1, 3, 2, 6],
]

CUSTOM_TABLE = [
    [5, 7, 10, 14, 15],
    [6, 13, 20, 26, 30],
    [8, 17, 25, 34, 42],
    [11, 25, 39, 52, 65],
    [15, 30, 47, 62, 81],
]


@pytest.fixture
def custom_grid():
    return np.array(CUSTOM_GRID, dtype=np.int64)


@pytest.fixture
def custom_table():
    return np.array(CUSTOM_TABLE, dtype=np.int64)


@pytest.fixture
def ones_10():
    return ArraySource(np.ones((10, 10), dtype=np.int64))


@pytest.fixture
def random_grid():
    rng = np.random.default_rng(2024)
    return rng.integers(-50, 50, size=(7, 9))
