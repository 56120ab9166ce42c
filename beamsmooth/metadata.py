# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module provides a class to hold the image metadata used when
smoothing.
"""

import copy
import warnings

import numpy as np
import astropy.units as u
from astropy.wcs import WCS, FITSFixedWarning
from astropy.wcs.utils import proj_plane_pixel_scales

from .beams import Beam

__all__ = ['ImageMetadata']


class ImageMetadata:
    """
    Class to hold the metadata of an image or spectral cube.

    Parameters
    ----------
    pixel_scale : float
        The angular size of a pixel, in arcsec. Pixels are assumed to be
        square; the scale of the first (x) axis is used.

    rotation : float, optional
        The rotation angle of the pixel grid relative to the standard
        (north up, east left) orientation, in degrees.

    channel_width : float, optional
        The velocity width of a spectral channel (3D data only). Its
        units must match the velocity FWHM given when smoothing
        (typically km/s).

    bunit : str, optional
        The brightness unit of the data (e.g., ``'Jy/beam'``).

    beam : `~beamsmooth.beams.Beam`, optional
        The beam of the data.

    data_min, data_max : float, optional
        The minimum and maximum finite data values.
    """

    def __init__(self, pixel_scale, rotation=0.0, channel_width=None,
                 bunit=None, beam=None, data_min=None, data_max=None):
        pixel_scale = abs(float(pixel_scale))
        if not np.isfinite(pixel_scale) or pixel_scale == 0:
            raise ValueError('pixel_scale must be a non-zero finite value.')

        self.pixel_scale = pixel_scale
        self.rotation = float(rotation)
        self.channel_width = channel_width
        self.bunit = bunit
        self.beam = beam
        self.data_min = data_min
        self.data_max = data_max

    def __repr__(self):
        params = ('pixel_scale', 'rotation', 'channel_width', 'bunit',
                  'beam')
        cls_info = ', '.join(f'{param}={getattr(self, param)!r}'
                             for param in params)
        return f'<{self.__class__.__name__}({cls_info})>'

    def copy(self):
        """
        Return a deep copy of this object.
        """
        return copy.deepcopy(self)

    @classmethod
    def from_header(cls, header):
        """
        Create the image metadata from a FITS header.

        The pixel scale and grid rotation are taken from the celestial
        WCS. The spectral channel width is taken from the third WCS axis
        and is converted to km/s if its unit is a velocity.

        Parameters
        ----------
        header : `~astropy.io.fits.Header`
            The FITS header.

        Returns
        -------
        result : `ImageMetadata`
            The image metadata.
        """
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', FITSFixedWarning)
            wcs = WCS(header)

        celestial = wcs.celestial
        if celestial.naxis != 2:
            raise ValueError('The header does not contain a celestial WCS.')

        # celestial axes are in degrees; use the scale of the first axis
        pixel_scale = proj_plane_pixel_scales(celestial)[0] * 3600.0
        matrix = celestial.pixel_scale_matrix
        rotation = np.rad2deg(np.arctan2(-matrix[1, 0], matrix[1, 1]))

        channel_width = None
        if wcs.naxis >= 3:
            cdelt = wcs.pixel_scale_matrix[2, 2]
            cunit = u.Unit(wcs.wcs.cunit[2])
            channel_width = float(cdelt)
            if cunit.is_equivalent(u.km / u.s):
                channel_width = (cdelt * cunit).to_value(u.km / u.s)

        data_min = header.get('DATAMIN')
        data_max = header.get('DATAMAX')

        return cls(pixel_scale, rotation=rotation,
                   channel_width=channel_width, bunit=header.get('BUNIT'),
                   beam=Beam.from_header(header), data_min=data_min,
                   data_max=data_max)

    def update_header(self, header):
        """
        Update a FITS header with the beam, brightness unit, and data
        extrema.

        The header is modified in place.

        Parameters
        ----------
        header : `~astropy.io.fits.Header`
            The FITS header.

        Returns
        -------
        header : `~astropy.io.fits.Header`
            The updated header.
        """
        if self.beam is not None:
            header.update(self.beam.to_header_keywords())
        if self.bunit is not None:
            header['BUNIT'] = self.bunit
        if self.data_min is not None:
            header['DATAMIN'] = self.data_min
        if self.data_max is not None:
            header['DATAMAX'] = self.data_max
        return header

    def update_extrema(self, data):
        """
        Set the data extrema from the finite values of a data array.

        Parameters
        ----------
        data : array_like
            The data array.
        """
        data = np.asanyarray(data)
        values = data[np.isfinite(data)]
        if values.size == 0:
            self.data_min = None
            self.data_max = None
        else:
            self.data_min = float(values.min())
            self.data_max = float(values.max())
