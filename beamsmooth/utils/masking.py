# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module provides tools to exclude missing or masked data values
from convolution and to restore them afterward.
"""

import numpy as np

__all__ = ['ExclusionMask']


class ExclusionMask:
    """
    Class to record the data values that must not take part in a
    convolution.

    A value is excluded if it is non-finite (NaN or +/- inf, all of
    which are treated as "missing") or if the corresponding value
    of the optional input ``mask`` is non-zero. The exclusion mask is
    carried alongside the data; the input ``data`` array is never
    modified.

    Parameters
    ----------
    data : array_like
        The 2D or 3D data array.

    mask : array_like (bool or int), optional
        An array where a non-zero value indicates the corresponding
        element of ``data`` is masked. ``mask`` must have the same
        shape as ``data`` or, for 3D ``data``, the same shape as a
        single spatial plane, in which case it is applied to every
        plane.

    Examples
    --------
    >>> import numpy as np
    >>> from beamsmooth.utils import ExclusionMask
    >>> data = np.array([[1.0, np.nan], [0.0, 4.0]])
    >>> exclusion = ExclusionMask(data)
    >>> exclusion.fill(data)
    array([[1., 0.],
           [0., 4.]])
    """

    def __init__(self, data, mask=None):
        data = np.asanyarray(data)
        self.shape = data.shape

        excluded = ~np.isfinite(data)
        if mask is not None:
            mask = np.asanyarray(mask)
            if mask.shape != data.shape:
                if data.ndim < 3 or mask.shape != data.shape[-2:]:
                    raise ValueError('mask must have the same shape as '
                                     'the data or as a single spatial '
                                     'plane of the data.')
                mask = np.broadcast_to(mask, data.shape)
            excluded |= (mask != 0)

        self.excluded = excluded
        self.zeros = (data == 0)

    def __repr__(self):
        return (f'<{self.__class__.__name__}(shape={self.shape}, '
                f'n_excluded={self.n_excluded})>')

    @property
    def n_excluded(self):
        """
        The number of excluded values.
        """
        return int(np.count_nonzero(self.excluded))

    def fill(self, data, fill_value=0.0):
        """
        Return a float copy of the data where the excluded values have
        been replaced by ``fill_value``.

        Zero is the neutral fill value for convolution; filled values
        take part in the weighted sums like real data.

        Parameters
        ----------
        data : array_like
            The data array. It must have the same shape used to create
            the exclusion mask.

        fill_value : float, optional
            The replacement value for excluded data.

        Returns
        -------
        result : `~numpy.ndarray`
            The filled data array.
        """
        data = np.asanyarray(data)
        self._check_shape(data)
        return np.where(self.excluded, fill_value, data).astype(float)

    def restore(self, data, preserve_zeros=False):
        """
        Return a copy of the data where the excluded values are set to
        NaN.

        Parameters
        ----------
        data : array_like
            The processed data array. It must have the same shape used
            to create the exclusion mask.

        preserve_zeros : bool, optional
            If `True`, values that were exactly zero in the original
            data are also set to zero in the output. This is applied
            last, so it takes precedence over the NaN restoration.

        Returns
        -------
        result : `~numpy.ndarray`
            The restored data array.
        """
        data = np.asanyarray(data)
        self._check_shape(data)
        result = np.where(self.excluded, np.nan, data)
        if preserve_zeros:
            result = np.where(self.zeros, 0.0, result)
        return result

    def _check_shape(self, data):
        if data.shape != self.shape:
            raise ValueError(f'data shape {data.shape} does not match the '
                             f'exclusion mask shape {self.shape}.')
