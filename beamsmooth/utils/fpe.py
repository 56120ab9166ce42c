# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
This module provides a context manager to monitor floating-point
errors.
"""

import numpy as np
from astropy import log

from .exceptions import NumericalError

__all__ = ['FloatingPointMonitor']


class FloatingPointMonitor:
    """
    Context manager that records the floating-point errors raised by
    numpy operations within its block.

    On entry, the numpy error handling is set so that overflow,
    invalid-operation, and division-by-zero errors are recorded and
    underflow is ignored. Underflow is routine when evaluating the tails
    of a Gaussian. On exit, the previous error handling is restored
    and, if any error was recorded, a `NumericalError` is raised. An
    exception raised inside the block is propagated unchanged.

    Parameters
    ----------
    raise_errors : bool, optional
        Whether to raise a `NumericalError` on exit if any
        floating-point error was recorded.

    Examples
    --------
    >>> import numpy as np
    >>> from beamsmooth.utils import FloatingPointMonitor
    >>> with FloatingPointMonitor(raise_errors=False) as monitor:
    ...     _ = np.array([1.0]) / 0.0
    >>> monitor.errors
    {'divide by zero'}
    """

    def __init__(self, raise_errors=True):
        self.raise_errors = raise_errors
        self.errors = set()
        self._errstate = None

    def __repr__(self):
        return f'<{self.__class__.__name__}(errors={sorted(self.errors)})>'

    def __call__(self, error, flag):
        # numpy error callback
        log.debug(f'Floating-point error encountered: {error}')
        self.errors.add(error)

    def __enter__(self):
        self.errors.clear()
        self._errstate = np.errstate(over='call', divide='call',
                                     invalid='call', under='ignore',
                                     call=self)
        self._errstate.__enter__()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self._errstate.__exit__(exc_type, exc_value, traceback)
        self._errstate = None

        if exc_type is None and self.raise_errors and self.errors:
            errors = ', '.join(sorted(self.errors))
            raise NumericalError('Floating-point errors occurred during '
                                 f'smoothing: {errors}.')

        return False
