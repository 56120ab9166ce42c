# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Subpackage containing tools to smooth images and cubes to a coarser
beam and to rescale their brightness units.
"""

from .core import *  # noqa: F401, F403
from .units import *  # noqa: F401, F403
