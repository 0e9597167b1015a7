from summed_area.classes import (InvalidRegionError, Region, SourceShapeError,
                                 SourceValueError, SummedAreaTableError)
from summed_area.sat import SummedAreaTable, build
from summed_area.source import (ArraySource, FunctionSource, GridSource,
                                ImageSource, NestedListSource, value_dtype,
                                vector_to_grid)
from summed_area.windows import window_means, window_sums

__version__ = "0.2.0"

__all__ = [
    "ArraySource",
    "FunctionSource",
    "GridSource",
    "ImageSource",
    "InvalidRegionError",
    "NestedListSource",
    "Region",
    "SourceShapeError",
    "SourceValueError",
    "SummedAreaTable",
    "SummedAreaTableError",
    "build",
    "value_dtype",
    "vector_to_grid",
    "window_means",
    "window_sums",
]
