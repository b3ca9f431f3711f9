"""Seeded fields used by experiments and the runner."""

import numpy as np
import pytest

from stable_smoke.numerics.spectral_methods_2d import SpectralTransform2D
from stable_smoke.utils.initial_conditions import (
    gaussian_puff,
    random_turbulence,
    shear_flow,
    taylor_green_vortex,
    vortex_pair,
)


@pytest.mark.parametrize("make", [
    lambda n, rng: taylor_green_vortex(n),
    lambda n, rng: taylor_green_vortex(n, modes=3),
    lambda n, rng: random_turbulence(n, rng=rng),
])
def test_solenoidal_initial_conditions(make, rng):
    n = 32
    vx, vy = make(n, rng)
    assert vx.shape == vy.shape == (n, n)
    div = SpectralTransform2D(n).spectral_divergence(vx, vy)
    assert np.max(np.abs(div)) < 1e-8 * max(1.0, np.max(np.abs(vx)))


def test_random_turbulence_energy_and_reproducibility():
    a = random_turbulence(24, energy_level=2e-4, rng=np.random.default_rng(7))
    b = random_turbulence(24, energy_level=2e-4, rng=np.random.default_rng(7))
    np.testing.assert_array_equal(a[0], b[0])
    assert np.mean(a[0]**2 + a[1]**2) == pytest.approx(2e-4, rel=1e-6)


def test_shear_flow_profile(rng):
    vx, vy = shear_flow(16, shear_rate=1.0, perturbation=0.0, rng=rng)
    assert not np.any(vy)
    np.testing.assert_allclose(vx[:, 0], vx[:, 5])
    assert vx[4, 0] > 0 > vx[12, 0]


def test_vortex_pair_is_antisymmetric():
    vx, vy = vortex_pair(20)
    np.testing.assert_allclose(vx, -vx[:, ::-1], atol=1e-12)
    np.testing.assert_allclose(vy, vy[:, ::-1], atol=1e-12)


def test_gaussian_puff_peak_and_periodicity():
    rho = gaussian_puff(20, center=(0.0, 0.0), radius=0.1, amplitude=5.0)
    assert rho.max() <= 5.0
    # Centre sits on the corner, so the four corner cells are equal
    assert rho[0, 0] == pytest.approx(rho[-1, -1])
    assert rho[0, 0] == pytest.approx(rho.max())
