"""
plotting.py: matplotlib views of a summed-area table.

Usage:
    from summed_area.plotting import plot_table, add_region_overlay
"""

from typing import Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from summed_area.classes import Region
from summed_area.config import (DEFAULT_COLOR_MAP, DEFAULT_FIGURE_SIZE,
                                REGION_OUTLINE_COLOR, REGION_OUTLINE_WIDTH)
from summed_area.sat import SummedAreaTable


def _displayable(table: SummedAreaTable) -> np.ndarray:
    """A real-valued float copy of the buffer that imshow can draw."""
    if table.dtype.kind == "c":
        return np.abs(table.table)
    return table.table.astype(np.float64)


def add_region_overlay(subplot: plt.Axes, region: Region,
                       color: str = REGION_OUTLINE_COLOR,
                       linewidth: float = REGION_OUTLINE_WIDTH) -> None:
    """Outline the cells of `region` on the subplot."""
    subplot.add_patch(
        plt.Rectangle(
            (region.x1 - 0.5, region.y1 - 0.5),
            region.width,
            region.height,
            edgecolor=color,
            linewidth=linewidth,
            facecolor="none"
        )
    )


def plot_table(table: SummedAreaTable, cmap: str = DEFAULT_COLOR_MAP,
               region: Optional[Tuple[Tuple[int, int], Tuple[int, int]]] = None,
               ax: Optional[plt.Axes] = None,
               figsize: Tuple[int, int] = DEFAULT_FIGURE_SIZE) -> plt.Figure:
    """
    Draw the running totals of `table`.

    When `region` ((x1, y1), (x2, y2)) is given it is outlined and the title
    shows its sum and average.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    if table.width and table.height:
        ax.imshow(_displayable(table), cmap=cmap)
    ax.axis('off')

    if region is None:
        ax.set_title(f"Summed-area table {table.width}x{table.height}")
    else:
        checked = table.region(*region)
        add_region_overlay(ax, checked)
        ax.set_title(f"Sum: {table.get_sum(*checked.corners)}  "
                     f"Average: {table.get_average(*checked.corners)}")

    fig.tight_layout(pad=2)
    return fig
