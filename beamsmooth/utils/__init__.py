# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Subpackage providing general-purpose utilities for the smoothing
tools, including the missing-data guard and floating-point error
monitor.
"""

from .exceptions import *  # noqa: F401, F403
from .fpe import *  # noqa: F401, F403
from .masking import *  # noqa: F401, F403
