from dataclasses import dataclass
from numbers import Integral
from typing import Tuple

Point = Tuple[int, int]


class SummedAreaTableError(Exception):
    """Base class for errors raised by summed_area."""
    pass


class InvalidRegionError(SummedAreaTableError, IndexError, ValueError):
    """Raised when a rectangle is reversed, out of bounds or not integral."""
    pass


class SourceShapeError(SummedAreaTableError, ValueError):
    """Raised when a grid source reports an unusable shape."""
    pass


class SourceValueError(SummedAreaTableError, TypeError):
    """Raised when grid values cannot be summed."""
    pass


@dataclass(frozen=True)
class Region:
    """
    An inclusive, axis-aligned rectangle of grid cells.

    Attributes:
    - x1, y1: column and row of the top-left cell
    - x2, y2: column and row of the bottom-right cell
    """
    x1: int
    y1: int
    x2: int
    y2: int

    def __post_init__(self):
        self._validate_coordinates()
        self._validate_order()

    def _validate_coordinates(self):
        for name in ("x1", "y1", "x2", "y2"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, Integral):
                raise InvalidRegionError(f"{name} must be an integer, got {value!r}")
            if value < 0:
                raise InvalidRegionError(f"{name} must be non-negative, got {value}")

    def _validate_order(self):
        if self.x1 > self.x2 or self.y1 > self.y2:
            raise InvalidRegionError(
                f"`top_left` ({self.x1}/{self.y1}) must not be right of or below "
                f"`bottom_right` ({self.x2}/{self.y2})"
            )

    @classmethod
    def from_corners(cls, top_left: Point, bottom_right: Point) -> "Region":
        try:
            (x1, y1), (x2, y2) = top_left, bottom_right
        except (TypeError, ValueError) as e:
            raise InvalidRegionError(f"Corners must be (x, y) pairs: {e}") from e
        return cls(x1=x1, y1=y1, x2=x2, y2=y2)

    @property
    def width(self) -> int:
        return self.x2 - self.x1 + 1

    @property
    def height(self) -> int:
        return self.y2 - self.y1 + 1

    @property
    def data_count(self) -> int:
        return self.width * self.height

    @property
    def corners(self) -> Tuple[Point, Point]:
        return (self.x1, self.y1), (self.x2, self.y2)

    def check_within(self, width: int, height: int) -> "Region":
        """Raise InvalidRegionError unless the region fits a width x height grid."""
        if self.x2 >= width or self.y2 >= height:
            raise InvalidRegionError(
                f"`top_left` ({self.x1}/{self.y1}) or `bottom_right` ({self.x2}/{self.y2}) "
                f"not within table bounds [(0/0)..({width - 1}/{height - 1})]"
            )
        return self
