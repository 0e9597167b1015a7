"""
Summed-area tables (integral images).

`build(source)` reads every cell of a grid source once, row-major, and returns
a `SummedAreaTable` whose buffer holds S[y, x] = sum of all values in columns
0..x and rows 0..y. Rectangle sums and averages are then answered with four
lookups, whatever the size of the rectangle.

Accumulation happens in the value dtype itself. Integer dtypes wrap on
overflow without warning, so pick a dtype wide enough for width * height
values.
"""

import logging
from dataclasses import dataclass
from numbers import Integral
from typing import Any, Optional, Tuple

import numpy as np
from numba import njit

from summed_area.classes import InvalidRegionError, Point, Region
from summed_area.config import DEFAULT_FLOAT_DTYPE, LOG_LEVEL, USE_NUMBA
from summed_area.decor import log_action
from summed_area.source import ArraySource, check_dimensions, source_dtype, value_dtype

logger = logging.getLogger(__name__)

# dtypes the compiled kernel accepts; anything else runs the kernel as plain Python
JIT_DTYPES = frozenset(
    np.dtype(t) for t in (
        np.int8, np.int16, np.int32, np.int64,
        np.uint8, np.uint16, np.uint32, np.uint64,
        np.float32, np.float64, np.complex64, np.complex128,
    )
)


@njit
def _prefix_sums(values, table):
    height, width = values.shape
    for y in range(height):
        for x in range(width):
            total = values[y, x]
            if y > 0:
                total = total + table[y - 1, x]
            if x > 0:
                total = total + table[y, x - 1]
            # inclusion-exclusion: the upper-left block was added twice
            if y > 0 and x > 0:
                total = total - table[y - 1, x - 1]
            table[y, x] = total
    return table


def accumulate(values: np.ndarray) -> np.ndarray:
    """Return a new array holding the 2D prefix sums of `values`, in the same dtype."""
    table = np.zeros(values.shape, dtype=values.dtype)
    if values.size == 0:
        return table
    if USE_NUMBA and values.dtype in JIT_DTYPES:
        _prefix_sums(values, table)
    else:
        logger.debug(f"Accumulating {values.shape} {values.dtype} values without JIT")
        _prefix_sums.py_func(values, table)
    return table


def read_values(source: Any, dtype: Optional[np.dtype], region: Optional[Region]) -> np.ndarray:
    """Read the cells of `source` (or of `region` within it) into a 2-D array."""
    width, height = check_dimensions(source)
    if region is None:
        x1, y1, x2, y2 = 0, 0, width - 1, height - 1
    else:
        region.check_within(width, height)
        x1, y1, x2, y2 = region.x1, region.y1, region.x2, region.y2
    shape = (max(y2 - y1 + 1, 0), max(x2 - x1 + 1, 0))

    # subclasses that override `at` go through the per-cell loop
    if isinstance(source, ArraySource) and type(source).at is ArraySource.at:
        values = source.array[y1:y2 + 1, x1:x2 + 1]
        return values if dtype is None else values.astype(dtype, copy=False)

    cells = [source.at(x, y) for y in range(y1, y2 + 1) for x in range(x1, x2 + 1)]
    if not cells:
        return np.zeros(shape, dtype=DEFAULT_FLOAT_DTYPE if dtype is None else dtype)
    return np.array(cells, dtype=dtype).reshape(shape)


@log_action("build_summed_area_table", log_level=LOG_LEVEL)
def build(source: Any, dtype: Any = None, region: Any = None) -> "SummedAreaTable":
    """
    Build the summed-area table of a grid source.

    Args:
    - source: any object with width(), height() and at(x, y)
    - dtype: value type to accumulate in; defaults to the dtype the source
      declares, else the dtype numpy infers from the values read
    - region: optional ((x1, y1), (x2, y2)) inclusive sub-rectangle; the table
      then covers only that rectangle, with its origin at (x1, y1)

    Returns:
    - SummedAreaTable with the same width and height as the source (or region)
    """
    if dtype is not None:
        dtype = value_dtype(dtype)
    else:
        dtype = source_dtype(source)
    if region is not None and not isinstance(region, Region):
        region = Region.from_corners(*region)

    values = read_values(source, dtype, region)
    value_dtype(values.dtype)
    table = accumulate(values)
    table.flags.writeable = False
    return SummedAreaTable(table=table)


def _truncated_quotient(total: int, count: int) -> int:
    quotient = abs(total) // count
    return -quotient if total < 0 else quotient


@dataclass(frozen=True, eq=False)
class SummedAreaTable:
    """
    Running totals of a grid, S[y, x] = sum of the cells in columns 0..x and rows 0..y.

    Corners are (x, y) pairs; both are inclusive. The buffer is read-only.
    """
    table: np.ndarray

    def __post_init__(self):
        if self.table.ndim != 2:
            raise ValueError(f"Expected 2D table, got {self.table.ndim}D array")
        # never freeze a buffer the caller still owns
        if self.table.flags.writeable or self.table.base is not None:
            table = self.table.copy()
            table.flags.writeable = False
            object.__setattr__(self, "table", table)

    @property
    def width(self) -> int:
        return self.table.shape[1]

    @property
    def height(self) -> int:
        return self.table.shape[0]

    @property
    def shape(self) -> Tuple[int, int]:
        return self.table.shape

    @property
    def dtype(self) -> np.dtype:
        return self.table.dtype

    def to_array(self) -> np.ndarray:
        return self.table.copy()

    def region(self, top_left: Point, bottom_right: Point) -> Region:
        """Validate a pair of corners against the table bounds."""
        return Region.from_corners(top_left, bottom_right).check_within(self.width, self.height)

    def _whole(self) -> Region:
        if self.width == 0 or self.height == 0:
            raise InvalidRegionError("The table is empty")
        return Region(0, 0, self.width - 1, self.height - 1)

    def _sum(self, region: Region):
        s = self.table
        total = s[region.y2, region.x2]
        diagonal = s[region.y1 - 1, region.x1 - 1] if region.x1 > 0 and region.y1 > 0 else None
        # unsigned totals must never dip below zero, so they take the diagonal first
        if diagonal is not None and self.dtype.kind == "u":
            total = total + diagonal
        if region.x1 > 0:
            total = total - s[region.y2, region.x1 - 1]
        if region.y1 > 0:
            total = total - s[region.y1 - 1, region.x2]
        if diagonal is not None and self.dtype.kind != "u":
            total = total + diagonal
        return total

    def _average(self, region: Region):
        total = self._sum(region)
        count = region.data_count
        if self.dtype.kind in "iu":
            return self.dtype.type(_truncated_quotient(int(total), count))
        if isinstance(total, Integral):
            return _truncated_quotient(int(total), count)
        return total / count

    def get_sum(self, top_left: Point, bottom_right: Point):
        """Sum of the cells in the rectangle spanned by the two inclusive corners."""
        return self._sum(self.region(top_left, bottom_right))

    def get_average(self, top_left: Point, bottom_right: Point):
        """
        Mean of the cells in the rectangle, using the value type's division:
        integer tables (and Python ints held as objects) truncate toward zero,
        float tables divide exactly.
        """
        return self._average(self.region(top_left, bottom_right))

    def get_data_count(self, top_left: Point, bottom_right: Point) -> int:
        return self.region(top_left, bottom_right).data_count

    def get_overall_sum(self):
        return self._sum(self._whole())

    def get_overall_average(self):
        return self._average(self._whole())

    def get_overall_data_count(self) -> int:
        return self.width * self.height

    def __repr__(self):
        return f"SummedAreaTable(width={self.width}, height={self.height}, dtype={self.dtype})"
