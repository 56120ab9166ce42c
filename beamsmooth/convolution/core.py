# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module provides tools to convolve each spatial plane of an image
or cube with a 2D kernel.
"""

import os

import numpy as np
from astropy import log
from astropy.convolution import convolve_fft

from .. import conf
from ..utils.exceptions import DimensionalityError

__all__ = ['select_method', 'convolve_planes']

METHODS = ('direct', 'fft')


def _get_n_threads(n_threads=None):
    if n_threads is None:
        n_threads = conf.n_threads
    if n_threads <= 0:
        n_threads = os.cpu_count() or 1
    return int(n_threads)


def select_method(kernel_shape, data_size, n_threads=None,
                  thread_efficiency=None):
    """
    Select the faster convolution method for a given kernel and data
    size.

    Fourier convolution is selected when::

        sqrt(kernel_area) / (n_threads * thread_efficiency)
            > sqrt(8 * ln(data_size) / ln(2))

    i.e., when the kernel is large enough that the cost of direct
    convolution exceeds the (roughly logarithmic) cost of the FFT.
    Both methods give the same result.

    Parameters
    ----------
    kernel_shape : tuple of int
        The shape of the kernel.

    data_size : int
        The total number of data values.

    n_threads : int, optional
        The number of available threads. If `None`, then
        ``beamsmooth.conf.n_threads`` is used. If 0, then the number of
        CPUs is used.

    thread_efficiency : float, optional
        The assumed parallel efficiency per thread. If `None`, then
        ``beamsmooth.conf.thread_efficiency`` is used.

    Returns
    -------
    method : {'direct', 'fft'}
        The selected convolution method.
    """
    n_threads = _get_n_threads(n_threads)
    if thread_efficiency is None:
        thread_efficiency = conf.thread_efficiency

    kernel_cost = (np.sqrt(np.prod(kernel_shape))
                   / (n_threads * thread_efficiency))
    data_cost = np.sqrt(8.0 * np.log(max(data_size, 2)) / np.log(2.0))

    if kernel_cost > data_cost:
        return 'fft'
    return 'direct'


def _convolve_direct(plane, kernel):
    from scipy import ndimage

    # ndimage.convolve flips the kernel, unlike ndimage.correlate
    return ndimage.convolve(plane, kernel, mode='constant', cval=0.0)


def _convolve_fft(plane, kernel, n_threads):
    import scipy.fft

    def fftn(array):
        return scipy.fft.fftn(array, workers=n_threads)

    def ifftn(array):
        return scipy.fft.ifftn(array, workers=n_threads)

    return convolve_fft(plane, kernel, boundary='fill', fill_value=0.0,
                        nan_treatment='fill', normalize_kernel=False,
                        allow_huge=True, fftn=fftn, ifftn=ifftn)


def convolve_planes(data, kernel, method='auto', n_threads=None):
    """
    Convolve each spatial plane of a 2D image or 3D cube with a 2D
    kernel.

    Values beyond the array borders are taken to be zero. For 3D data,
    the planes along the first (spectral) axis are convolved
    independently.

    The input data must not contain non-finite values (see
    `~beamsmooth.utils.ExclusionMask`).

    Parameters
    ----------
    data : 2D or 3D `~numpy.ndarray`
        The image or cube. 3D data must be ordered as (spectral, y, x).

    kernel : 2D `~numpy.ndarray`
        The convolution kernel. Each axis should have an odd length.

    method : {'auto', 'direct', 'fft'}, optional
        The convolution method. If ``'auto'``, then the method is chosen
        by `select_method`.

    n_threads : int, optional
        The number of threads for the Fourier method. If `None`, then
        ``beamsmooth.conf.n_threads`` is used.

    Returns
    -------
    result : `~numpy.ndarray`
        The convolved data.

    method : {'direct', 'fft'}
        The convolution method used.
    """
    data = np.asanyarray(data, dtype=float)
    kernel = np.asanyarray(kernel, dtype=float)

    if data.ndim not in (2, 3):
        raise DimensionalityError('data must be a 2D or 3D array.')
    if kernel.ndim != 2:
        raise ValueError('kernel must be a 2D array.')

    n_threads = _get_n_threads(n_threads)
    if method == 'auto':
        method = select_method(kernel.shape, data.size, n_threads=n_threads)
    elif method not in METHODS:
        raise ValueError(f'method must be "auto" or one of {METHODS}.')
    log.debug(f'Convolving {data.shape} data with a {kernel.shape} kernel '
              f'using the {method} method')

    if method == 'fft':
        def convolve_plane(plane):
            return _convolve_fft(plane, kernel, n_threads)
    else:
        def convolve_plane(plane):
            return _convolve_direct(plane, kernel)

    if data.ndim == 2:
        return convolve_plane(data), method

    result = np.empty_like(data)
    for i, plane in enumerate(data):
        result[i] = convolve_plane(plane)

    return result, method
