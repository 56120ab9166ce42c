# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module provides tools to synthesize normalized Gaussian
convolution kernels.
"""

import numpy as np
from astropy.convolution import Gaussian1DKernel, Gaussian2DKernel
from astropy.stats import gaussian_fwhm_to_sigma

from .footprint import kernel_size

__all__ = ['make_beam_kernel', 'make_spectral_kernel']


def make_beam_kernel(major, minor, pa, size, order=3):
    """
    Make a normalized 2D elliptical Gaussian kernel.

    The Gaussian is first evaluated with its major axis along the
    y axis and is then rotated about the kernel center by the position
    angle using spline interpolation. Negative values introduced by the
    interpolation are set to zero and the kernel is normalized to sum
    to 1.

    Parameters
    ----------
    major, minor : float
        The major and minor FWHMs of the kernel, in pixels.

    pa : float
        The position angle of the major axis, in degrees, measured
        counterclockwise from the +y axis toward the -x axis (i.e., from
        north through east for a standard sky orientation).

    size : int
        The (odd) size of the square kernel, in pixels.

    order : int, optional
        The order of the spline interpolation (0-5) used for the
        rotation. The default is 3.

    Returns
    -------
    kernel : 2D `~numpy.ndarray`
        The normalized kernel.
    """
    from scipy.ndimage import rotate

    size = int(size)
    if size <= 0 or size % 2 != 1:
        raise ValueError('The kernel size must be a positive odd integer.')
    if major <= 0 or minor <= 0:
        raise ValueError('The kernel FWHMs must be > 0.')

    kernel = Gaussian2DKernel(x_stddev=minor * gaussian_fwhm_to_sigma,
                              y_stddev=major * gaussian_fwhm_to_sigma,
                              x_size=size, y_size=size).array

    if pa % 360.0 != 0:
        kernel = rotate(kernel, -pa, reshape=False, order=order,
                        mode='constant', cval=0.0)

    kernel = np.clip(kernel, 0.0, None)
    return kernel / kernel.sum()


def make_spectral_kernel(fwhm, nchan):
    """
    Make a normalized 1D Gaussian kernel for smoothing along the
    spectral axis.

    Parameters
    ----------
    fwhm : float
        The FWHM of the kernel, in channels.

    nchan : int
        The number of spectral channels. The kernel is limited to be
        shorter than the spectral axis.

    Returns
    -------
    kernel : 1D `~numpy.ndarray`
        The normalized kernel.
    """
    if fwhm <= 0:
        raise ValueError('The kernel FWHM must be > 0.')

    size = kernel_size(fwhm, nchan)
    kernel = Gaussian1DKernel(fwhm * gaussian_fwhm_to_sigma,
                              x_size=size).array
    return kernel / kernel.sum()
