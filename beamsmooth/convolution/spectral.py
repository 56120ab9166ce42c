# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module provides tools to smooth a cube along its spectral axis.
"""

import numpy as np
from astropy import log

from ..kernels import make_spectral_kernel
from ..utils.exceptions import DimensionalityError

__all__ = ['smooth_spectra']


def smooth_spectra(data, fwhm, channel_width=1.0):
    """
    Smooth each spectrum of a cube with a 1D Gaussian kernel.

    The spectra are reflected at the edges of the spectral axis. Spectra
    whose values are all zero are left unchanged.

    The input data must not contain non-finite values (see
    `~beamsmooth.utils.ExclusionMask`).

    Parameters
    ----------
    data : 3D `~numpy.ndarray`
        The cube, ordered as (spectral, y, x).

    fwhm : float
        The FWHM of the smoothing kernel along the spectral axis, in
        the same units as ``channel_width``.

    channel_width : float, optional
        The width of a spectral channel. Its sign is ignored.

    Returns
    -------
    result : 3D `~numpy.ndarray`
        The smoothed cube.
    """
    from scipy import ndimage

    data = np.asanyarray(data, dtype=float)
    if data.ndim != 3:
        raise DimensionalityError('Spectral smoothing requires a 3D cube.')
    if channel_width is None or channel_width == 0:
        raise ValueError('channel_width must be a non-zero value.')

    fwhm_channels = fwhm / abs(channel_width)
    kernel = make_spectral_kernel(fwhm_channels, data.shape[0])
    log.debug(f'Spectral kernel: fwhm={fwhm_channels:.3f} channels, '
              f'size={kernel.size}')

    result = data.copy()
    has_signal = np.any(data != 0, axis=0)
    if not np.any(has_signal):
        return result

    spectra = data[:, has_signal]
    result[:, has_signal] = ndimage.convolve1d(spectra, kernel, axis=0,
                                               mode='reflect')
    return result
