# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module provides tools to resolve the residual convolution kernel
between two beams in pixel units.
"""

import numpy as np
from astropy import log

from .. import conf
from ..beams import deconvolve_beam
from ..utils.exceptions import DimensionalityError

__all__ = ['KernelFootprint', 'kernel_size', 'resolve_kernel']


def kernel_size(fwhm, axis_lengths, extent=None):
    """
    Calculate the (odd) size of a kernel footprint.

    The size is ``ceil(fwhm) * extent + 1`` pixels, limited to the
    largest odd number smaller than every axis length.

    Parameters
    ----------
    fwhm : float
        The kernel FWHM, in pixels.

    axis_lengths : int or tuple of int
        The lengths of the data axes spanned by the kernel.

    extent : int, optional
        The footprint size in units of the FWHM. If `None`, then
        ``beamsmooth.conf.kernel_extent`` is used.

    Returns
    -------
    size : int
        The kernel size, in pixels.

    Raises
    ------
    DimensionalityError
        If the limited kernel size is not positive.

    Examples
    --------
    >>> from beamsmooth.kernels import kernel_size
    >>> kernel_size(2.5, (100, 100))
    19
    >>> kernel_size(20.0, (64, 51))
    49
    """
    if extent is None:
        extent = conf.kernel_extent

    size = 2 * ((int(np.ceil(fwhm)) * int(extent)) // 2) + 1
    max_size = min(int(length) // 2 * 2 - 1
                   for length in np.atleast_1d(axis_lengths))
    size = min(size, max_size)

    if size <= 0:
        raise DimensionalityError('The kernel footprint is degenerate for '
                                  f'data axes with lengths {axis_lengths}.')

    return size


class KernelFootprint:
    """
    Class to hold the residual convolution kernel in pixel units.

    Parameters
    ----------
    beam : `~beamsmooth.beams.Beam`
        The residual beam, in angular units.

    feasible : bool
        Whether the residual beam exists.

    major, minor : float
        The major and minor FWHMs of the kernel, in pixels.

    pa : float
        The position angle of the kernel major axis in the pixel grid,
        in degrees.

    size : int
        The size of the square kernel footprint, in pixels. It is zero
        if the kernel is not ``feasible``.
    """

    def __init__(self, beam, feasible, major=0.0, minor=0.0, pa=0.0,
                 size=0):
        self.beam = beam
        self.feasible = feasible
        self.major = major
        self.minor = minor
        self.pa = pa
        self.size = size

    def __repr__(self):
        params = ('feasible', 'major', 'minor', 'pa', 'size')
        cls_info = ', '.join(f'{param}={getattr(self, param)}'
                             for param in params)
        return f'<{self.__class__.__name__}({cls_info})>'

    @property
    def shape(self):
        """
        The shape of the kernel footprint.
        """
        return (self.size, self.size)


def resolve_kernel(target, original, pixel_scale, shape, rotation=0.0,
                   resolver=deconvolve_beam):
    """
    Resolve the residual kernel needed to smooth data with the
    ``original`` beam to the ``target`` beam.

    The position angle of the kernel in the pixel grid is the position
    angle of the residual beam plus the ``rotation`` angle of the grid.

    Parameters
    ----------
    target : `~beamsmooth.beams.Beam`
        The target beam.

    original : `~beamsmooth.beams.Beam`
        The original beam of the data.

    pixel_scale : float
        The pixel scale in arcsec per pixel.

    shape : tuple of int
        The (ny, nx) shape of a spatial plane of the data.

    rotation : float, optional
        The rotation angle of the pixel grid, in degrees.

    resolver : callable, optional
        A callable taking the ``target`` and ``original`` beams and
        returning the residual beam and a feasibility flag.

    Returns
    -------
    result : `KernelFootprint`
        The residual kernel in pixel units.
    """
    beam, feasible = resolver(target, original)
    if not feasible:
        log.debug(f'The target beam {target!r} cannot be reached from the '
                  f'original beam {original!r}.')
        return KernelFootprint(beam, False)

    major, minor = beam.to_pixels(pixel_scale)
    pa = beam.pa + rotation
    size = kernel_size(major, shape)
    log.debug(f'Residual kernel: major={major:.3f} pix, minor={minor:.3f} '
              f'pix, pa={pa:.2f} deg, size={size}')

    return KernelFootprint(beam, True, major=major, minor=minor, pa=pa,
                           size=size)
