# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module provides tools to smooth an image or cube to a coarser
Gaussian beam.
"""

import warnings

import numpy as np
from astropy import log

from ..beams import as_beam_spec, deconvolve_beam
from ..beams.core import UnspecifiedBeam
from ..convolution import convolve_planes, smooth_spectra
from ..kernels import make_beam_kernel, resolve_kernel
from ..utils.exceptions import DimensionalityError, InfeasibleBeamWarning
from ..utils.fpe import FloatingPointMonitor
from ..utils.masking import ExclusionMask
from .units import flux_scale_factor

__all__ = ['SmoothResult', 'smooth_cube']


class SmoothResult:
    """
    Class to hold the result of `smooth_cube`.

    Parameters
    ----------
    data : `~numpy.ndarray`
        The smoothed data, as single-precision floats.

    metadata : `~beamsmooth.metadata.ImageMetadata`
        A copy of the input metadata updated for the smoothed data.

    feasible : bool
        Whether the target beam could be reached. If `False`, ``data``
        is the input data with the missing and masked values set to NaN.

    residual_beam : `~beamsmooth.beams.Beam`
        The residual beam used as the spatial kernel.

    kernel : 2D `~numpy.ndarray` or `None`
        The spatial convolution kernel.

    method : {'direct', 'fft'} or `None`
        The spatial convolution method.

    flux_scale : float
        The factor applied to rescale the data values.
    """

    def __init__(self, data, metadata, feasible, residual_beam=None,
                 kernel=None, method=None, flux_scale=1.0):
        self.data = data
        self.metadata = metadata
        self.feasible = feasible
        self.residual_beam = residual_beam
        self.kernel = kernel
        self.method = method
        self.flux_scale = flux_scale

    def __repr__(self):
        return (f'<{self.__class__.__name__}(shape={self.data.shape}, '
                f'feasible={self.feasible}, method={self.method})>')


def _prepare_data(data):
    data = np.asanyarray(data)

    # drop leading degenerate axes (e.g., a Stokes axis)
    while data.ndim > 3 and data.shape[0] == 1:
        data = data[0]
    if data.ndim not in (2, 3):
        raise DimensionalityError('data must be a 2D image or a 3D cube '
                                  f'(got {data.ndim} dimensions).')
    return data


def _prepare_mask(mask, data_ndim):
    if mask is None:
        return None
    mask = np.asanyarray(mask)
    while mask.ndim > data_ndim and mask.shape[0] == 1:
        mask = mask[0]
    return mask


def smooth_cube(data, metadata, target_beam, *, original_beam=None,
                mask=None, velocity_fwhm=0.0, flux_scale=None,
                preserve_zeros=False, method='auto', beam_lookup=None,
                resolver=deconvolve_beam):
    """
    Smooth an image or cube to a coarser elliptical Gaussian beam.

    Each spatial plane is convolved with the residual Gaussian kernel
    that transforms the original beam into the target beam. For cubes,
    the spectra can also be smoothed with a 1D Gaussian kernel. The data
    values are then rescaled for the new beam area.

    Non-finite data values and masked values are replaced by zero before
    convolution and are set to NaN in the output.

    Parameters
    ----------
    data : 2D or 3D array_like
        The image or cube. 3D data must be ordered as (spectral, y,
        x). Leading axes of length 1 are removed. The input array is not
        modified.

    metadata : `~beamsmooth.metadata.ImageMetadata`
        The image metadata.

    target_beam : float, 3-tuple, or `~beamsmooth.beams.Beam`
        The target beam, either a circular FWHM in arcsec or a (major
        FWHM, minor FWHM, position angle) in (arcsec, arcsec, degrees).

    original_beam : `None`, float, 3-tuple, or `~beamsmooth.beams.Beam`, optional
        The original beam of the data. If `None` or negative, then the
        beam is determined from the metadata using ``beam_lookup``. See
        `~beamsmooth.beams.as_beam_spec`.

    mask : array_like (bool or int), optional
        A mask where a non-zero value indicates the corresponding data
        value is excluded from the convolution. It must have the same
        shape as ``data`` or as a spatial plane of ``data``.

    velocity_fwhm : float, optional
        The FWHM of the Gaussian used to smooth the spectra of a cube,
        in the units of ``metadata.channel_width``. If 0, then the
        spectra are not smoothed.

    flux_scale : float, optional
        An explicit factor to rescale the smoothed data. If `None`, then
        the factor is derived from the brightness unit (see
        `~beamsmooth.smoothing.flux_scale_factor`).

    preserve_zeros : bool, optional
        Whether to set the output to zero where the input data are
        exactly zero.

    method : {'auto', 'direct', 'fft'}, optional
        The spatial convolution method (see
        `~beamsmooth.convolution.select_method`).

    beam_lookup : callable, optional
        A callable taking ``metadata`` and returning the original
        `~beamsmooth.beams.Beam`. If `None`, then ``metadata.beam`` is
        used.

    resolver : callable, optional
        A callable taking the target and original beams and returning
        the residual beam and a feasibility flag. The default is
        `~beamsmooth.beams.deconvolve_beam`.

    Returns
    -------
    result : `SmoothResult`
        The smoothed data and the updated metadata.

    Raises
    ------
    DimensionalityError
        If ``data`` is not 2D or 3D or if a kernel footprint is
        degenerate.

    NumericalError
        If floating-point errors other than underflow occur.

    Warns
    -----
    InfeasibleBeamWarning
        If the target beam cannot be reached from the original beam.
    """
    data = _prepare_data(data)
    mask = _prepare_mask(mask, data.ndim)

    target_spec = as_beam_spec(target_beam)
    if isinstance(target_spec, UnspecifiedBeam):
        raise ValueError('The target beam must be given explicitly.')
    if velocity_fwhm < 0:
        raise ValueError('velocity_fwhm must be >= 0.')
    if velocity_fwhm > 0 and data.ndim != 3:
        raise DimensionalityError('velocity_fwhm requires a 3D cube.')

    with FloatingPointMonitor():
        target = target_spec.resolve(metadata)
        original = as_beam_spec(original_beam).resolve(
            metadata, beam_lookup=beam_lookup)
        log.info(f'Smoothing {data.shape} data from {original!r} to '
                 f'{target!r}')

        exclusion = ExclusionMask(data, mask=mask)
        if exclusion.n_excluded > 0:
            log.debug(f'{exclusion.n_excluded} data values are excluded '
                      'from the convolution')

        footprint = resolve_kernel(target, original, metadata.pixel_scale,
                                   data.shape[-2:],
                                   rotation=metadata.rotation,
                                   resolver=resolver)

        out_metadata = metadata.copy()
        if not footprint.feasible:
            warnings.warn(f'The target beam {target!r} is not larger than '
                          f'the original beam {original!r}; the data were '
                          'not smoothed.', InfeasibleBeamWarning)
            result = exclusion.restore(data.astype(float),
                                       preserve_zeros=preserve_zeros)
            result = result.astype(np.float32)
            out_metadata.update_extrema(result)
            return SmoothResult(result, out_metadata, False,
                                residual_beam=footprint.beam)

        kernel = make_beam_kernel(footprint.major, footprint.minor,
                                  footprint.pa, footprint.size)

        work = exclusion.fill(data)
        work, used_method = convolve_planes(work, kernel, method=method)

        if velocity_fwhm > 0:
            work = smooth_spectra(work, velocity_fwhm,
                                  channel_width=metadata.channel_width)

        factor, bunit = flux_scale_factor(metadata.bunit, target, original,
                                          metadata.pixel_scale,
                                          scale=flux_scale)
        log.debug(f'Rescaling the data by {factor:.6g}')
        work *= factor

        result = exclusion.restore(work, preserve_zeros=preserve_zeros)
        result = result.astype(np.float32)

        out_metadata.beam = target
        out_metadata.bunit = bunit
        out_metadata.update_extrema(result)

    return SmoothResult(result, out_metadata, True,
                        residual_beam=footprint.beam, kernel=kernel,
                        method=used_method, flux_scale=factor)
