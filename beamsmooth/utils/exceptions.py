# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module provides custom exceptions and warnings.
"""

from astropy.utils.exceptions import AstropyUserWarning

__all__ = ['DimensionalityError', 'NumericalError', 'InfeasibleBeamWarning']


class DimensionalityError(ValueError):
    """
    An exception class to indicate input data with an unsupported
    number of dimensions or a degenerate kernel footprint.
    """


class NumericalError(ArithmeticError):
    """
    An exception class to indicate that floating-point errors other
    than underflow occurred during smoothing.
    """


class InfeasibleBeamWarning(AstropyUserWarning):
    """
    A warning class to indicate that the target beam cannot be reached
    from the original beam and that the data were not smoothed.
    """
