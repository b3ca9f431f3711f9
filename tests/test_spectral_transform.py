"""In-place real FFT with Hermitian packing, checked independently of the solver."""

import numpy as np
import pytest

from stable_smoke.core.errors import TransformSetupError
from stable_smoke.core.grid import SpectralBuffer
from stable_smoke.numerics.spectral_methods_2d import SpectralTransform2D


def _buffer_with(field: np.ndarray) -> SpectralBuffer:
    buf = SpectralBuffer(field.shape[0])
    buf.spatial[...] = field
    return buf


@pytest.mark.parametrize("n", [8, 16, 50, 7])
def test_round_trip_is_unnormalized(n, rng):
    field = rng.standard_normal((n, n))
    buf = _buffer_with(field)
    transform = SpectralTransform2D(n)

    transform.forward(buf)
    assert buf.representation == SpectralBuffer.FREQUENCY
    transform.inverse(buf)
    assert buf.representation == SpectralBuffer.SPATIAL

    np.testing.assert_allclose(buf.spatial, n * n * field, rtol=1e-10, atol=1e-10)


def test_forward_matches_direct_dft(rng):
    n = 12
    field = rng.standard_normal((n, n))
    buf = _buffer_with(field)

    SpectralTransform2D(n).forward(buf)

    expected = np.fft.fft2(field)[:, : n // 2 + 1]
    np.testing.assert_allclose(buf.spectrum, expected, rtol=1e-10, atol=1e-10)


def test_transform_works_in_place(rng):
    n = 10
    buf = _buffer_with(rng.standard_normal((n, n)))
    storage = buf.data
    transform = SpectralTransform2D(n)

    transform.forward(buf)
    transform.inverse(buf)

    assert buf.data is storage
    assert not np.any(buf.data[:, n:])


@pytest.mark.parametrize("n", [0, 1, -4, 2.5, "50", True])
def test_setup_rejects_bad_grid_size(n):
    with pytest.raises(TransformSetupError):
        SpectralTransform2D(n)


def test_folded_wavenumbers():
    transform = SpectralTransform2D(8)
    np.testing.assert_array_equal(transform.k_x, [0, 1, 2, 3, 4])
    np.testing.assert_array_equal(transform.k_y, [0, 1, 2, 3, 4, -3, -2, -1])
    assert transform.k_squared.shape == (8, 5)


def test_projection_removes_wavevector_component(rng):
    n = 16
    transform = SpectralTransform2D(n)
    u_hat = rng.standard_normal((n, n // 2 + 1)) + 1j * rng.standard_normal((n, n // 2 + 1))
    v_hat = rng.standard_normal((n, n // 2 + 1)) + 1j * rng.standard_normal((n, n // 2 + 1))
    mean = (u_hat[0, 0], v_hat[0, 0])

    transform.damp_and_project(u_hat, v_hat, dt=0.04, viscosity=0.0)

    k_dot_v = transform.k_x_grid * u_hat + transform.k_y_grid * v_hat
    np.testing.assert_allclose(k_dot_v, 0.0, atol=1e-12)
    assert (u_hat[0, 0], v_hat[0, 0]) == mean


def test_projection_keeps_solenoidal_mode_and_damps_it():
    n = 16
    dt, viscosity = 0.1, 0.01
    transform = SpectralTransform2D(n)
    u_hat = np.zeros((n, n // 2 + 1), dtype=complex)
    v_hat = np.zeros_like(u_hat)

    # Wavevector (0, 3): an x velocity is perpendicular to it
    u_hat[3, 0] = 2.0 + 1.0j
    transform.damp_and_project(u_hat, v_hat, dt, viscosity)

    assert u_hat[3, 0] == pytest.approx((2.0 + 1.0j) * np.exp(-9 * dt * viscosity))
    assert v_hat[3, 0] == 0


def test_projection_removes_gradient_mode():
    n = 16
    transform = SpectralTransform2D(n)
    u_hat = np.zeros((n, n // 2 + 1), dtype=complex)
    v_hat = np.zeros_like(u_hat)

    # Velocity parallel to the wavevector (2, 2) is pure compression
    u_hat[2, 2] = 1.0
    v_hat[2, 2] = 1.0
    transform.damp_and_project(u_hat, v_hat, 0.04, 0.001)

    assert abs(u_hat[2, 2]) < 1e-14
    assert abs(v_hat[2, 2]) < 1e-14


def test_spectral_divergence_of_gradient_field():
    n = 32
    transform = SpectralTransform2D(n)
    c = (np.arange(n) + 0.5) / n
    x, y = np.meshgrid(c, c)

    # v = grad(sin(2 pi x)) has divergence -(2 pi)^2 sin(2 pi x)
    vx = 2 * np.pi * np.cos(2 * np.pi * x)
    vy = np.zeros_like(vx)

    div = transform.spectral_divergence(vx, vy)
    np.testing.assert_allclose(div, -(2 * np.pi)**2 * np.sin(2 * np.pi * x), atol=1e-9)
