# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module provides tools to rescale surface-brightness units when the
beam of the data changes.
"""

import re

import numpy as np
import astropy.units as u

__all__ = ['brightness_convention', 'flux_scale_factor']

_PIXEL_PATTERN = re.compile(r'pix(el)?s?', re.IGNORECASE)


def brightness_convention(bunit):
    """
    Return the surface-brightness convention of a unit.

    Parameters
    ----------
    bunit : str or `~astropy.units.UnitBase`
        The brightness unit (e.g., ``'Jy/beam'`` or ``'JY/PIXEL'``).

    Returns
    -------
    convention : {'beam', 'pixel'} or `None`
        ``'beam'`` for per-beam units, ``'pixel'`` for per-pixel units,
        or `None` for any other unit.

    Examples
    --------
    >>> from beamsmooth.smoothing import brightness_convention
    >>> brightness_convention('Jy/beam')
    'beam'
    >>> brightness_convention('JY/PIXEL')
    'pixel'
    >>> print(brightness_convention('K'))
    None
    """
    if bunit is None:
        return None

    unit = u.Unit(bunit, parse_strict='silent')
    if not isinstance(unit, u.UnrecognizedUnit):
        bases = dict(zip(unit.bases, unit.powers))
        if bases.get(u.beam, 0) < 0:
            return 'beam'
        if bases.get(u.pix, 0) < 0:
            return 'pixel'
        return None

    # FITS headers often spell units in upper case
    name = str(bunit).replace(' ', '').upper()
    if '/BEAM' in name:
        return 'beam'
    if re.search(r'/PIX(EL)?S?\b', name):
        return 'pixel'
    return None


def _per_beam_unit(bunit):
    def replace(match):
        return 'BEAM' if match.group(0).isupper() else 'beam'

    return _PIXEL_PATTERN.sub(replace, str(bunit))


def flux_scale_factor(bunit, target, original, pixel_scale, scale=None):
    """
    Calculate the factor to rescale the data values after smoothing to
    a new beam.

    * per-beam units: the ratio of the target and original beam
      areas, which conserves the integrated flux.
    * per-pixel units: the target beam area in pixels. The output unit
      becomes a per-beam unit.
    * any other unit: ``scale`` (default 1).

    If ``scale`` is given, it is always used.

    Parameters
    ----------
    bunit : str or `None`
        The brightness unit of the data.

    target : `~beamsmooth.beams.Beam`
        The target beam.

    original : `~beamsmooth.beams.Beam`
        The original beam.

    pixel_scale : float
        The pixel scale in arcsec per pixel.

    scale : float, optional
        An explicit scale factor.

    Returns
    -------
    factor : float
        The scale factor.

    bunit : str or `None`
        The brightness unit of the rescaled data.
    """
    if scale is not None:
        return float(scale), bunit

    convention = brightness_convention(bunit)
    if convention == 'beam':
        factor = ((target.major * target.minor)
                  / (original.major * original.minor))
        return factor, bunit

    if convention == 'pixel':
        factor = abs(target.major * target.minor / pixel_scale**2
                     * 2.0 * np.pi / (8.0 * np.log(2.0)))
        return factor, _per_beam_unit(bunit)

    return 1.0, bunit
