# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module provides tools to deconvolve one elliptical Gaussian beam
from another.
"""

import numpy as np

from .core import Beam

__all__ = ['deconvolve_beam']


def deconvolve_beam(target, original, rtol=1e-7):
    """
    Compute the residual Gaussian beam that, convolved with the
    ``original`` beam, gives the ``target`` beam.

    The quadratic forms of the two Gaussians are subtracted. The
    residual exists only if the difference is positive definite, i.e.,
    if the ``target`` beam is strictly larger than the ``original``
    beam in every direction.

    Parameters
    ----------
    target : `~beamsmooth.beams.Beam`
        The target (larger) beam.

    original : `~beamsmooth.beams.Beam`
        The original (smaller) beam.

    rtol : float, optional
        The relative tolerance, with respect to the target major axis,
        below which a residual FWHM is considered to be zero.

    Returns
    -------
    residual : `~beamsmooth.beams.Beam`
        The residual beam. A zero-size beam is returned if the
        deconvolution is not possible.

    feasible : bool
        Whether the deconvolution is possible.

    Examples
    --------
    >>> from beamsmooth.beams import Beam, deconvolve_beam
    >>> residual, feasible = deconvolve_beam(Beam(10.0), Beam(6.0))
    >>> feasible
    True
    >>> residual.major, residual.minor
    (8.0, 8.0)
    """
    maj1, min1 = target.major, target.minor
    maj2, min2 = original.major, original.minor
    pa1 = np.deg2rad(target.pa)
    pa2 = np.deg2rad(original.pa)

    cos1, sin1 = np.cos(pa1), np.sin(pa1)
    cos2, sin2 = np.cos(pa2), np.sin(pa2)

    alpha = ((maj1 * cos1)**2 + (min1 * sin1)**2
             - (maj2 * cos2)**2 - (min2 * sin2)**2)
    beta = ((maj1 * sin1)**2 + (min1 * cos1)**2
            - (maj2 * sin2)**2 - (min2 * cos2)**2)
    gamma = 2.0 * ((min1**2 - maj1**2) * sin1 * cos1
                   - (min2**2 - maj2**2) * sin2 * cos2)

    s = alpha + beta
    t = np.hypot(alpha - beta, gamma)
    atol = rtol * maj1

    null = Beam(0.0, 0.0, 0.0)
    if alpha < 0 or beta < 0 or s < t:
        return null, False

    new_major = np.sqrt(0.5 * (s + t))
    new_minor = np.sqrt(0.5 * (s - t))
    if new_minor <= atol:
        return null, False

    if np.sqrt(abs(gamma) + abs(alpha - beta)) <= atol:
        new_pa = 0.0
    else:
        new_pa = np.rad2deg(0.5 * np.arctan2(-gamma, alpha - beta))

    return Beam(new_major, new_minor, new_pa), True
