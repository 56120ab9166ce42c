# Licensed under a 3-clause BSD style license - see LICENSE.rst
"""
Tests for the core module.
"""

import numpy as np
import pytest
from astropy.modeling.models import Gaussian1D, Gaussian2D
from astropy.stats import gaussian_fwhm_to_sigma
from numpy.testing import assert_allclose

from beamsmooth.beams import Beam
from beamsmooth.metadata import ImageMetadata
from beamsmooth.smoothing.core import smooth_cube
from beamsmooth.utils.exceptions import (DimensionalityError,
                                         InfeasibleBeamWarning,
                                         NumericalError)


def _make_image(size=101, fwhm=5.0):
    """
    Make an image of a centered, unit-peak 2D Gaussian source.
    """
    cen = (size - 1) / 2.0
    yy, xx = np.mgrid[0:size, 0:size]
    sigma = fwhm * gaussian_fwhm_to_sigma
    return Gaussian2D(1.0, cen, cen, sigma, sigma)(xx, yy)


def _make_cube(nchan=30, size=61):
    """
    Make a cube of a Gaussian source with a Gaussian spectrum.
    """
    image = _make_image(size=size)
    spectrum = Gaussian1D(1.0, nchan // 2, 2.0)(np.arange(nchan))
    return spectrum[:, np.newaxis, np.newaxis] * image


def _sigma(image):
    """
    Return the x and y standard deviations of an image.
    """
    yy, xx = np.mgrid[0:image.shape[0], 0:image.shape[1]]
    total = image.sum()
    xcen = (image * xx).sum() / total
    ycen = (image * yy).sum() / total
    return (np.sqrt((image * (xx - xcen)**2).sum() / total),
            np.sqrt((image * (yy - ycen)**2).sum() / total))


@pytest.fixture(name='metadata')
def fixture_metadata():
    return ImageMetadata(1.0, beam=Beam(5.0, 5.0, 0.0), channel_width=1.0)


class TestSmoothImage:
    def test_smooth(self, metadata):
        data = _make_image()
        result = smooth_cube(data, metadata, (10.0, 10.0, 0.0))

        assert result.feasible
        assert result.data.dtype == np.float32
        assert result.data.shape == data.shape
        assert result.method in ('direct', 'fft')
        assert_allclose(result.residual_beam.major, np.sqrt(75.0))
        assert_allclose(result.residual_beam.minor, np.sqrt(75.0))
        assert result.kernel.shape == (55, 55)
        assert_allclose(result.kernel.sum(), 1.0, atol=1e-6)

        # lower peak, same total flux, and the new beam size
        assert result.data.max() < 0.5 * data.max()
        assert_allclose(result.data.sum(), data.sum(), rtol=1e-4)
        sigma = 10.0 * gaussian_fwhm_to_sigma
        assert_allclose(_sigma(result.data), (sigma, sigma), rtol=0.02)

    @pytest.mark.parametrize('method', ['direct', 'fft'])
    def test_methods(self, metadata, method):
        data = _make_image()
        result = smooth_cube(data, metadata, 10.0, method=method)
        expected = smooth_cube(data, metadata, 10.0, method='direct')
        assert result.method == method
        assert_allclose(result.data, expected.data, atol=1e-6)

    def test_per_beam_units(self, metadata):
        metadata.bunit = 'Jy/beam'
        data = _make_image()
        result = smooth_cube(data, metadata, 10.0)
        assert_allclose(result.flux_scale, 4.0)

        # a point source keeps its peak value in Jy/beam
        assert_allclose(result.data.max(), 1.0, rtol=0.01)
        assert result.metadata.bunit == 'Jy/beam'

    def test_per_pixel_units(self, metadata):
        metadata.bunit = 'Jy/pixel'
        result = smooth_cube(_make_image(), metadata, 10.0)
        assert_allclose(result.flux_scale, Beam(10.0).area)
        assert result.metadata.bunit == 'Jy/beam'

    def test_explicit_flux_scale(self, metadata):
        metadata.bunit = 'Jy/beam'
        data = _make_image()
        result1 = smooth_cube(data, metadata, 10.0, flux_scale=1.0)
        result2 = smooth_cube(data, metadata, 10.0, flux_scale=3.0)
        assert result2.flux_scale == 3.0
        assert_allclose(result2.data, 3.0 * result1.data, rtol=1e-6,
                        atol=1e-12)

    def test_infeasible(self, metadata):
        data = _make_image()
        data[10, 10] = np.nan
        match = 'not larger than the original beam'
        with pytest.warns(InfeasibleBeamWarning, match=match):
            result = smooth_cube(data, metadata, (4.0, 4.0, 0.0))

        assert not result.feasible
        assert result.kernel is None
        assert result.method is None
        assert result.data.dtype == np.float32
        assert_allclose(result.data, data.astype(np.float32), equal_nan=True)
        assert result.metadata.beam == metadata.beam

    def test_infeasible_identical(self, metadata):
        with pytest.warns(InfeasibleBeamWarning):
            result = smooth_cube(_make_image(), metadata, 5.0)
        assert not result.feasible

    def test_infeasible_masked(self, metadata):
        data = _make_image()
        mask = np.zeros(data.shape, dtype=bool)
        mask[50, 50] = True
        with pytest.warns(InfeasibleBeamWarning):
            result = smooth_cube(data, metadata, 4.0, mask=mask)
        assert np.isnan(result.data[50, 50])
        assert_allclose(result.data[~mask], data[~mask], rtol=1e-6,
                        atol=1e-12)

    @pytest.mark.parametrize('method', ['direct', 'fft'])
    def test_missing_data(self, metadata, method):
        data = _make_image()
        data[50, 52] = np.nan
        data[0, 0] = np.inf
        data[70, 30] = -np.inf
        mask = np.zeros(data.shape, dtype=int)
        mask[40:43, 60:65] = 1

        result = smooth_cube(data, metadata, 10.0, mask=mask, method=method)
        excluded = ~np.isfinite(data) | (mask != 0)
        assert np.all(np.isnan(result.data[excluded]))
        assert np.all(np.isfinite(result.data[~excluded]))

    def test_masked_values_ignored(self, metadata):
        data = _make_image()
        mask = np.zeros(data.shape, dtype=bool)
        mask[20, 20] = True
        bright = data.copy()
        bright[20, 20] = 1.0e6

        result1 = smooth_cube(data, metadata, 10.0, mask=mask)
        result2 = smooth_cube(bright, metadata, 10.0, mask=mask)
        assert_allclose(result1.data, result2.data, equal_nan=True)

    def test_preserve_zeros(self, metadata):
        data = _make_image() + 1.0
        data[:, :10] = 0.0
        result = smooth_cube(data, metadata, 10.0)
        assert np.all(result.data[:, :10] != 0)

        result = smooth_cube(data, metadata, 10.0, preserve_zeros=True)
        assert np.all(result.data[:, :10] == 0)
        assert np.all(result.data[:, 10:] != 0)

    def test_input_unchanged(self, metadata):
        data = _make_image()
        data[5, 5] = np.nan
        original = data.copy()
        smooth_cube(data, metadata, 10.0)
        assert np.array_equal(data, original, equal_nan=True)

    def test_metadata(self, metadata):
        metadata.bunit = 'Jy/beam'
        target = Beam(12.0, 8.0, 30.0)
        result = smooth_cube(_make_image(), metadata, target)

        assert result.metadata is not metadata
        assert result.metadata.beam == target
        assert metadata.beam == Beam(5.0, 5.0, 0.0)
        assert_allclose(result.metadata.data_max, np.max(result.data))
        assert_allclose(result.metadata.data_min, np.min(result.data))

    def test_rotation(self):
        data = _make_image()
        target = Beam(20.0, 8.0, 0.0)
        metadata = ImageMetadata(1.0, beam=Beam(5.0))
        result = smooth_cube(data, metadata, target)
        sigma_x, sigma_y = _sigma(result.data)
        assert sigma_y > sigma_x

        # a grid rotated by 90 degrees puts the major axis along x
        metadata = ImageMetadata(1.0, rotation=90.0, beam=Beam(5.0))
        result = smooth_cube(data, metadata, target)
        sigma_x, sigma_y = _sigma(result.data)
        assert sigma_x > sigma_y

    def test_original_beam(self):
        data = _make_image()
        metadata = ImageMetadata(1.0, beam=Beam(8.0))
        result1 = smooth_cube(data, metadata, 10.0, original_beam=5.0)
        assert_allclose(result1.residual_beam.major, np.sqrt(75.0))

        # negative values force the metadata beam
        result2 = smooth_cube(data, metadata, 10.0, original_beam=-1)
        assert_allclose(result2.residual_beam.major, 6.0)

    def test_beam_lookup(self):
        metadata = ImageMetadata(1.0)

        def lookup(meta):
            return Beam(6.0)

        result = smooth_cube(_make_image(), metadata, 10.0,
                             beam_lookup=lookup)
        assert_allclose(result.residual_beam.major, 8.0)

    def test_resolver(self, metadata):
        def resolver(target, original):
            return Beam(0.0, 0.0, 0.0), False

        with pytest.warns(InfeasibleBeamWarning):
            result = smooth_cube(_make_image(), metadata, 10.0,
                                 resolver=resolver)
        assert not result.feasible

    def test_numerical_error(self, metadata):
        data = _make_image() * 1.0e10
        match = 'overflow'
        with pytest.raises(NumericalError, match=match):
            smooth_cube(data, metadata, 10.0, flux_scale=1.0e300)

    def test_invalid_inputs(self, metadata):
        with pytest.raises(DimensionalityError):
            smooth_cube(np.ones(10), metadata, 10.0)

        with pytest.raises(DimensionalityError):
            smooth_cube(np.ones((2, 2, 10, 10)), metadata, 10.0)

        with pytest.raises(DimensionalityError):
            smooth_cube(np.ones((1, 100)), metadata, 10.0)

        match = 'target beam must be given explicitly'
        with pytest.raises(ValueError, match=match):
            smooth_cube(_make_image(), metadata, None)

        match = 'velocity_fwhm must be >= 0'
        with pytest.raises(ValueError, match=match):
            smooth_cube(_make_cube(), metadata, 10.0, velocity_fwhm=-1.0)

        with pytest.raises(DimensionalityError):
            smooth_cube(_make_image(), metadata, 10.0, velocity_fwhm=2.0)


class TestSmoothCube:
    def test_spatial_only(self, metadata):
        cube = _make_cube()
        result = smooth_cube(cube, metadata, 10.0, method='direct')
        assert result.data.shape == cube.shape

        for i in (0, 10, 15):
            expected = smooth_cube(cube[i], metadata, 10.0, method='direct')
            assert_allclose(result.data[i], expected.data, rtol=1e-6,
                            atol=1e-12)

        # no smoothing along the spectral axis
        spectrum = cube[:, 30, 30]
        smoothed = result.data[:, 30, 30]
        assert_allclose(smoothed / smoothed.max(), spectrum / spectrum.max(),
                        rtol=1e-5, atol=1e-7)

    def test_velocity_smoothing(self, metadata):
        cube = _make_cube()
        result0 = smooth_cube(cube, metadata, 10.0)
        result = smooth_cube(cube, metadata, 10.0, velocity_fwhm=4.0)

        spectrum0 = result0.data[:, 30, 30]
        spectrum = result.data[:, 30, 30]
        assert spectrum.max() < spectrum0.max()
        assert_allclose(spectrum.sum(), spectrum0.sum(), rtol=1e-4)
        assert np.argmax(spectrum) == 15

    def test_velocity_smoothing_missing_spectrum(self, metadata):
        cube = _make_cube()
        cube[:, 0, 0] = np.nan
        cube[:, 0, 1] = 0.0
        result = smooth_cube(cube, metadata, 10.0, velocity_fwhm=4.0,
                             preserve_zeros=True)
        assert np.all(np.isnan(result.data[:, 0, 0]))
        assert np.all(result.data[:, 0, 1] == 0)

    def test_velocity_smoothing_no_channel_width(self):
        metadata = ImageMetadata(1.0, beam=Beam(5.0))
        match = 'channel_width must be a non-zero value'
        with pytest.raises(ValueError, match=match):
            smooth_cube(_make_cube(), metadata, 10.0, velocity_fwhm=2.0)

    def test_spatial_mask(self, metadata):
        cube = _make_cube()
        mask = np.zeros(cube.shape[1:], dtype=bool)
        mask[10:12, 20:25] = True
        result = smooth_cube(cube, metadata, 10.0, mask=mask)
        assert np.all(np.isnan(result.data[:, mask]))
        assert np.all(np.isfinite(result.data[:, ~mask]))

    def test_invalid_mask(self, metadata):
        cube = _make_cube()
        match = 'mask must have the same shape'
        with pytest.raises(ValueError, match=match):
            smooth_cube(cube, metadata, 10.0, mask=np.zeros((5, 5)))

    def test_degenerate_axis(self, metadata):
        cube = _make_cube()
        result = smooth_cube(cube[np.newaxis], metadata, 10.0,
                             method='direct')
        expected = smooth_cube(cube, metadata, 10.0, method='direct')
        assert result.data.shape == cube.shape
        assert_allclose(result.data, expected.data)
