import numpy as np
import pytest

from summed_area import ArraySource, NestedListSource, build, window_means, window_sums
from summed_area.windows import window_counts


def brute_force_sums(grid, kernel_size):
    half = kernel_size // 2
    height, width = grid.shape
    out = np.zeros_like(grid)
    for y in range(height):
        for x in range(width):
            out[y, x] = grid[max(0, y - half):y + half + 1, max(0, x - half):x + half + 1].sum()
    return out


@pytest.mark.parametrize("kernel_size", [1, 3, 5, 11])
def test_window_sums_match_brute_force(random_grid, kernel_size):
    table = build(ArraySource(random_grid))
    np.testing.assert_array_equal(window_sums(table, kernel_size), brute_force_sums(random_grid, kernel_size))


def test_window_sums_clip_at_borders():
    table = build(ArraySource(np.ones((5, 5), dtype=np.int64)))
    sums = window_sums(table, 3)
    assert sums[0, 0] == 4
    assert sums[0, 2] == 6
    assert sums[2, 2] == 9
    assert sums.dtype == np.int64


def test_window_means_of_constant_grid():
    table = build(ArraySource(np.full((6, 4), 3, dtype=np.int64)))
    np.testing.assert_array_equal(window_means(table, 3), np.full((6, 4), 3))


def test_window_means_float(random_grid):
    grid = random_grid.astype(np.float64)
    table = build(ArraySource(grid))
    expected = brute_force_sums(grid, 3) / window_counts(grid.shape, 3)
    np.testing.assert_allclose(window_means(table, 3), expected)


def test_window_means_integer_truncates():
    table = build(NestedListSource([[-3, -4]]))
    np.testing.assert_array_equal(window_means(table, 3), [[-3, -3]])


def test_window_counts():
    counts = window_counts((3, 4), 3)
    np.testing.assert_array_equal(counts, [[4, 6, 6, 4], [6, 9, 9, 6], [4, 6, 6, 4]])


def test_unsigned_windows():
    table = build(ArraySource(np.ones((4, 4), dtype=np.uint16)))
    assert window_sums(table, 3)[1, 1] == 9
    assert window_means(table, 3)[3, 3] == 1


def test_empty_table():
    table = build(ArraySource(np.zeros((0, 3), dtype=np.int64)))
    assert window_sums(table, 3).shape == (0, 3)
    assert window_means(table, 3).shape == (0, 3)


@pytest.mark.parametrize("kernel_size", [0, 2, -3])
def test_invalid_kernel_size(kernel_size):
    table = build(ArraySource(np.ones((3, 3))))
    with pytest.raises(ValueError):
        window_sums(table, kernel_size)


def test_kernel_size_must_be_integer():
    table = build(ArraySource(np.ones((3, 3))))
    with pytest.raises(TypeError):
        window_means(table, 3.0)
