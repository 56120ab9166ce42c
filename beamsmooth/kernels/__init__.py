# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Subpackage containing tools to resolve and synthesize the convolution
kernels used to smooth data to a new beam.
"""

from .core import *  # noqa: F401, F403
from .footprint import *  # noqa: F401, F403
