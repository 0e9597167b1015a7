import logging
import os
from typing import Tuple

import numpy as np

# Value types
DEFAULT_FLOAT_DTYPE = np.float64
# integer, unsigned, float, complex, python objects
SUPPORTED_DTYPE_KINDS: Tuple[str, ...] = ("i", "u", "f", "c", "O")

# Image sources
DEFAULT_IMAGE_MODE = "L"

# Plotting
DEFAULT_COLOR_MAP = "viridis"
REGION_OUTLINE_COLOR = "red"
REGION_OUTLINE_WIDTH = 2.0
DEFAULT_FIGURE_SIZE = (6, 6)

# Logging
LOG_LEVEL = getattr(logging, os.environ.get("SUMMED_AREA_LOG_LEVEL", "DEBUG").upper(), logging.DEBUG)

# Set SUMMED_AREA_DISABLE_JIT=1 to run the construction kernel as plain Python
USE_NUMBA = os.environ.get("SUMMED_AREA_DISABLE_JIT", "0") not in ("1", "true", "yes")
