import numpy as np

from summed_area.sat import SummedAreaTable


def _validate_kernel_size(kernel_size: int) -> int:
    if isinstance(kernel_size, bool) or not isinstance(kernel_size, (int, np.integer)):
        raise TypeError(f"kernel_size must be an integer, got {type(kernel_size)}")
    if kernel_size < 1 or kernel_size % 2 == 0:
        raise ValueError(f"kernel_size must be a positive odd number, got {kernel_size}")
    return int(kernel_size)


def _window_bounds(length: int, half_kernel: int):
    centers = np.arange(length)
    start = np.clip(centers - half_kernel, 0, length)
    stop = np.clip(centers + half_kernel + 1, 0, length)
    return start, stop


def window_sums(table: SummedAreaTable, kernel_size: int) -> np.ndarray:
    """
    Sum of the kernel_size x kernel_size window centred on every cell.

    Windows are clipped at the grid borders. The result has the table's shape
    and dtype.
    """
    half_kernel = _validate_kernel_size(kernel_size) // 2
    height, width = table.shape
    if height == 0 or width == 0:
        return np.zeros(table.shape, dtype=table.dtype)

    # one row and column of zeros in front, so P[j, i] is the sum above and left of (i, j)
    padded = np.zeros((height + 1, width + 1), dtype=table.dtype)
    padded[1:, 1:] = table.table

    top, bottom = _window_bounds(height, half_kernel)
    left, right = _window_bounds(width, half_kernel)

    return (
        padded[np.ix_(bottom, right)]
        + padded[np.ix_(top, left)]
        - padded[np.ix_(top, right)]
        - padded[np.ix_(bottom, left)]
    )


def window_counts(shape, kernel_size: int) -> np.ndarray:
    """Number of cells in each clipped window."""
    half_kernel = _validate_kernel_size(kernel_size) // 2
    height, width = shape
    top, bottom = _window_bounds(height, half_kernel)
    left, right = _window_bounds(width, half_kernel)
    return np.outer(bottom - top, right - left)


def window_means(table: SummedAreaTable, kernel_size: int) -> np.ndarray:
    """
    Mean of the kernel_size x kernel_size window centred on every cell.

    Uses the same division as SummedAreaTable.get_average: integer tables
    truncate toward zero and keep their dtype.
    """
    sums = window_sums(table, kernel_size)
    counts = window_counts(table.shape, kernel_size)
    if sums.size == 0:
        return sums
    if table.dtype.kind in "iu":
        quotient = np.abs(sums) // counts
        return np.where(sums < 0, -quotient, quotient).astype(table.dtype)
    return sums / counts
