# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
beamsmooth is an Astropy affiliated-style package to smooth
astronomical images and spectral-line data cubes from their native
resolution to a coarser elliptical Gaussian beam.

It provides tools to resolve and synthesize the residual convolution
kernel, to convolve each spatial plane with either direct or Fourier
methods, to smooth along the velocity axis, and to rescale the flux
units for the new beam area.
"""

try:
    from .version import version as __version__
except ImportError:
    __version__ = ''

from astropy import config as _config


class Conf(_config.ConfigNamespace):
    """
    Configuration parameters for `beamsmooth`.
    """

    n_threads = _config.ConfigItem(
        0,
        'The number of threads available to the convolution primitives. '
        'If 0, then the number of CPUs is used.',
        cfgtype='integer')
    thread_efficiency = _config.ConfigItem(
        0.8,
        'The assumed parallel efficiency per thread, used to decide '
        'between direct and Fourier convolution.',
        cfgtype='float')
    kernel_extent = _config.ConfigItem(
        6,
        'The size of the kernel footprint in units of the kernel FWHM, '
        'which is first rounded up to an integer number of pixels.',
        cfgtype='integer')


conf = Conf()

del _config
