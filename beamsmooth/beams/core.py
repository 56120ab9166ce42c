# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module defines the elliptical Gaussian beam and the ways a beam
can be specified.
"""

import numpy as np
from astropy import log
from astropy.stats import gaussian_fwhm_to_sigma
import astropy.units as u

__all__ = ['Beam', 'UnspecifiedBeam', 'IsotropicBeam', 'EllipticalBeam',
           'MetadataBeam', 'as_beam_spec']


class Beam:
    """
    Class to define an elliptical Gaussian beam.

    Parameters
    ----------
    major : float
        The full width at half maximum (FWHM) of the major axis, in
        arcsec.

    minor : float, optional
        The FWHM of the minor axis, in arcsec. If `None`, then the beam
        is circular (``minor = major``). If ``minor`` is larger than
        ``major`` the two axes are swapped.

    pa : float, optional
        The position angle of the major axis, in degrees, measured from
        north through east.
    """

    def __init__(self, major, minor=None, pa=0.0):
        if minor is None:
            minor = major

        major = float(major)
        minor = float(minor)
        pa = float(pa)
        if not np.all(np.isfinite((major, minor, pa))):
            raise ValueError('The beam parameters must be finite values.')
        if major < 0 or minor < 0:
            raise ValueError('The beam FWHMs must be >= 0.')

        if minor > major:
            major, minor = minor, major
            pa += 90.0

        self.major = major
        self.minor = minor
        self.pa = pa

    def __repr__(self):
        return (f'<{self.__class__.__name__}(major={self.major}, '
                f'minor={self.minor}, pa={self.pa})>')

    def __eq__(self, other):
        if not isinstance(other, Beam):
            return NotImplemented
        return (self.major == other.major and self.minor == other.minor
                and self.pa == other.pa)

    def __iter__(self):
        yield from (self.major, self.minor, self.pa)

    @property
    def area(self):
        """
        The area of the beam, in arcsec**2.
        """
        return 2.0 * np.pi / (8.0 * np.log(2.0)) * self.major * self.minor

    @property
    def is_null(self):
        """
        Whether the beam has zero size.
        """
        return self.major == 0 or self.minor == 0

    def to_pixels(self, pixel_scale):
        """
        Return the major and minor FWHMs in units of pixels.

        Parameters
        ----------
        pixel_scale : float
            The pixel scale in arcsec per pixel.

        Returns
        -------
        major, minor : float
            The major and minor FWHMs in pixels.
        """
        pixel_scale = abs(pixel_scale)
        return self.major / pixel_scale, self.minor / pixel_scale

    def to_sigma(self):
        """
        Return the major and minor Gaussian standard deviations, in
        arcsec.
        """
        return (self.major * gaussian_fwhm_to_sigma,
                self.minor * gaussian_fwhm_to_sigma)

    @classmethod
    def from_header(cls, header):
        """
        Create a beam from the ``BMAJ``, ``BMIN``, and ``BPA`` keywords
        of a FITS header.

        ``BMAJ`` and ``BMIN`` are in degrees in the header.

        Parameters
        ----------
        header : `~astropy.io.fits.Header` or dict-like
            The FITS header.

        Returns
        -------
        result : `Beam` or `None`
            The beam, or `None` if ``BMAJ`` is not present or is not
            positive.
        """
        bmaj = header.get('BMAJ')
        if bmaj is None or bmaj <= 0:
            return None
        bmin = header.get('BMIN', bmaj)
        bpa = header.get('BPA', 0.0)
        return cls((bmaj * u.deg).to_value(u.arcsec),
                   (bmin * u.deg).to_value(u.arcsec), bpa)

    def to_header_keywords(self):
        """
        Return the beam as a dictionary of FITS header keywords.
        """
        return {'BMAJ': (self.major * u.arcsec).to_value(u.deg),
                'BMIN': (self.minor * u.arcsec).to_value(u.deg),
                'BPA': self.pa}


class _BeamSpec:
    """
    Base class for the ways a beam can be specified.
    """

    def __repr__(self):
        return f'<{self.__class__.__name__}>'

    def resolve(self, metadata=None, beam_lookup=None):
        """
        Return the specified `Beam`.

        Parameters
        ----------
        metadata : `~beamsmooth.metadata.ImageMetadata`, optional
            The image metadata.

        beam_lookup : callable, optional
            A callable taking ``metadata`` and returning a `Beam` (or
            `None` if it cannot determine one). If `None`, then the
            beam recorded in ``metadata`` is used.

        Returns
        -------
        beam : `Beam`
            The resolved beam.
        """
        raise NotImplementedError


class UnspecifiedBeam(_BeamSpec):
    """
    A beam that was not given by the caller and is determined from the
    image metadata.
    """

    def resolve(self, metadata=None, beam_lookup=None):
        if beam_lookup is None:
            beam = getattr(metadata, 'beam', None)
        else:
            beam = beam_lookup(metadata)

        if beam is None:
            raise ValueError('The beam could not be determined from the '
                             'image metadata.')
        log.debug(f'Beam resolved from the image metadata: {beam!r}')
        return beam


class MetadataBeam(UnspecifiedBeam):
    """
    A beam that is always determined from the image metadata, even if a
    beam size was given elsewhere.
    """


class IsotropicBeam(_BeamSpec):
    """
    A circular beam.

    Parameters
    ----------
    size : float
        The FWHM of the beam, in arcsec.
    """

    def __init__(self, size):
        if not np.isfinite(size) or size <= 0:
            raise ValueError('The beam size must be a positive finite '
                             'value.')
        self.size = float(size)

    def __repr__(self):
        return f'<{self.__class__.__name__}(size={self.size})>'

    def resolve(self, metadata=None, beam_lookup=None):
        return Beam(self.size, self.size, 0.0)


class EllipticalBeam(_BeamSpec):
    """
    A fully specified elliptical beam.

    Parameters
    ----------
    beam : `Beam`
        The beam.
    """

    def __init__(self, beam):
        if beam.is_null:
            raise ValueError('The beam FWHMs must be > 0.')
        self.beam = beam

    def __repr__(self):
        return f'<{self.__class__.__name__}(beam={self.beam!r})>'

    def resolve(self, metadata=None, beam_lookup=None):
        return self.beam


def as_beam_spec(value):
    """
    Convert an input beam value into a beam specification.

    Parameters
    ----------
    value : `None`, float, 3-tuple of float, `Beam`, or beam specification
        The input beam value:

        * `None`: the beam is unspecified and is determined from the
          image metadata (`UnspecifiedBeam`).
        * positive float: a circular beam with the given FWHM in arcsec
          (`IsotropicBeam`).
        * negative float: the beam is always determined from the image
          metadata (`MetadataBeam`).
        * 3-tuple or `Beam`: an elliptical beam given as (major FWHM,
          minor FWHM, position angle) in (arcsec, arcsec, degrees)
          (`EllipticalBeam`).

    Returns
    -------
    result : beam specification
        The beam specification.
    """
    if isinstance(value, _BeamSpec):
        return value
    if value is None:
        return UnspecifiedBeam()
    if isinstance(value, Beam):
        return EllipticalBeam(value)

    if np.isscalar(value):
        if value < 0:
            return MetadataBeam()
        return IsotropicBeam(value)

    value = tuple(value)
    if len(value) != 3:
        raise ValueError('An elliptical beam must be given as (major, '
                         'minor, pa).')
    return EllipticalBeam(Beam(*value))
