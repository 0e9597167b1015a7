"""
Grid sources for summed-area tables.

A grid source is anything that can report its `width()` and `height()` and
return the value at column `x`, row `y` through `at(x, y)`. Subclassing
`GridSource` is optional: any object with those three methods is accepted.

Adapters:
- ArraySource: a 2-D numpy array (rows are y, columns are x)
- NestedListSource: a list of equal-length rows
- FunctionSource: values generated on demand by func(x, y)
- ImageSource: the pixel intensities of a PIL image
- vector_to_grid: a one-column source from a flat sequence
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional, Sequence

import numpy as np
from PIL import Image

from summed_area.classes import SourceShapeError, SourceValueError
from summed_area.config import (DEFAULT_FLOAT_DTYPE, DEFAULT_IMAGE_MODE,
                                SUPPORTED_DTYPE_KINDS)

logger = logging.getLogger(__name__)

_CONTRACT_METHODS = ("width", "height", "at")


def value_dtype(dtype: Any) -> np.dtype:
    """Normalise `dtype` and check that its values can be summed and averaged."""
    try:
        resolved = np.dtype(dtype)
    except TypeError as e:
        raise SourceValueError(f"Not a value type: {dtype!r}") from e
    if resolved.kind not in SUPPORTED_DTYPE_KINDS:
        hint = " (cast booleans to an integer type)" if resolved.kind == "b" else ""
        raise SourceValueError(f"Cannot sum values of dtype {resolved}{hint}")
    return resolved


def source_dtype(source: Any) -> Optional[np.dtype]:
    """The value dtype a source declares, or None if it leaves it to inference."""
    declared = getattr(source, "dtype", None)
    if declared is None or callable(declared):
        return None
    return value_dtype(declared)


def check_dimensions(source: Any) -> tuple:
    width, height = source.width(), source.height()
    if width < 0 or height < 0:
        raise SourceShapeError(f"Grid dimensions must be non-negative, got {width}x{height}")
    return int(width), int(height)


class GridSource(ABC):
    """A read-only rectangular grid of numeric values."""

    @abstractmethod
    def width(self) -> int:
        pass

    @abstractmethod
    def height(self) -> int:
        pass

    @abstractmethod
    def at(self, x: int, y: int) -> Any:
        pass

    @classmethod
    def __subclasshook__(cls, subclass):
        if cls is GridSource:
            if all(callable(getattr(subclass, name, None)) for name in _CONTRACT_METHODS):
                return True
        return NotImplemented

    def summed_area_table(self, dtype: Any = None, region: Optional[tuple] = None):
        """Build the summed-area table of this source. See `summed_area.sat.build`."""
        from summed_area.sat import build

        return build(self, dtype=dtype, region=region)


class ArraySource(GridSource):
    """Dense-matrix adapter over a 2-D numpy array indexed as array[y, x]."""

    def __init__(self, array: Any, dtype: Any = None):
        array = np.asarray(array) if dtype is None else np.asarray(array, dtype=dtype)
        if array.ndim != 2:
            raise SourceShapeError(f"Expected 2D array, got {array.ndim}D array")
        self.dtype = value_dtype(array.dtype)
        self.array = array

    def width(self) -> int:
        return self.array.shape[1]

    def height(self) -> int:
        return self.array.shape[0]

    def at(self, x: int, y: int) -> Any:
        return self.array[y, x]

    def __repr__(self):
        return f"ArraySource(width={self.width()}, height={self.height()}, dtype={self.dtype})"


class NestedListSource(GridSource):
    """A grid given as a sequence of rows, rows[y][x]."""

    def __init__(self, rows: Sequence[Sequence[Any]]):
        self.rows = [list(row) for row in rows]
        widths = {len(row) for row in self.rows}
        if len(widths) > 1:
            raise SourceShapeError(f"All rows must have the same length, got lengths {sorted(widths)}")
        self._width = widths.pop() if widths else 0

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        # A list of empty rows has no cells at all.
        return len(self.rows) if self._width else 0

    def at(self, x: int, y: int) -> Any:
        return self.rows[y][x]

    def __repr__(self):
        return f"NestedListSource(width={self.width()}, height={self.height()})"


class FunctionSource(GridSource):
    """
    A grid whose values are produced by `func(x, y)`.

    Construction of a table calls `at` once per cell, so expensive or
    generated data never has to be materialised twice.
    """

    def __init__(self, width: int, height: int, func: Callable[[int, int], Any], dtype: Any = None):
        if width < 0 or height < 0:
            raise SourceShapeError(f"Grid dimensions must be non-negative, got {width}x{height}")
        self._width = width
        self._height = height
        self.func = func
        self.dtype = None if dtype is None else value_dtype(dtype)

    def width(self) -> int:
        return self._width

    def height(self) -> int:
        return self._height

    def at(self, x: int, y: int) -> Any:
        return self.func(x, y)

    def __repr__(self):
        return f"FunctionSource(width={self._width}, height={self._height}, func={getattr(self.func, '__name__', self.func)})"


def image_value_dtype(pixel_dtype: np.dtype) -> np.dtype:
    """The accumulation dtype for pixels of `pixel_dtype`."""
    if pixel_dtype.kind == "f":
        return np.dtype(DEFAULT_FLOAT_DTYPE)
    if pixel_dtype.kind == "i":
        return np.dtype(np.int64)
    return np.dtype(np.uint64)


class ImageSource(ArraySource):
    """
    Pixel intensities of a PIL image, converted to a single band.

    Without an explicit dtype, 8-bit and 16-bit pixels are held as uint64 (they
    would overflow after a handful of cells), 32-bit integer pixels as int64
    and floating point pixels as float64.
    """

    def __init__(self, image: Image.Image, mode: Optional[str] = DEFAULT_IMAGE_MODE, dtype: Any = None):
        if not isinstance(image, Image.Image):
            raise TypeError(f"Expected PIL image, got {type(image)}")
        if mode is not None and image.mode != mode:
            logger.debug(f"Converting image from mode {image.mode} to {mode}")
            image = image.convert(mode)
        pixels = np.array(image)
        super().__init__(pixels, dtype=image_value_dtype(pixels.dtype) if dtype is None else dtype)
        self.mode = image.mode

    @classmethod
    def open(cls, path: str, **kwargs) -> "ImageSource":
        with Image.open(path) as image:
            image.load()
            return cls(image, **kwargs)


def vector_to_grid(values: Sequence[Any], dtype: Any = None) -> ArraySource:
    """A one-column grid (width 1, height len(values)) holding `values` top to bottom."""
    column = np.asarray(values) if dtype is None else np.asarray(values, dtype=dtype)
    if column.ndim != 1:
        raise SourceShapeError(f"Expected a flat sequence, got {column.ndim}D data")
    return ArraySource(column.reshape(-1, 1))
