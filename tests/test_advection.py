"""Semi-Lagrangian back-trace and toroidal bilinear sampling."""

import numpy as np
import pytest

from stable_smoke.numerics.advection import advect, backtrace, cell_centers, sample_bilinear


def test_cell_centers_layout():
    x, y = cell_centers(4)
    np.testing.assert_allclose(x[0], [0.125, 0.375, 0.625, 0.875])
    np.testing.assert_allclose(y[:, 0], [0.125, 0.375, 0.625, 0.875])


def test_backtrace_without_velocity_returns_cell_indices():
    n = 10
    zeros = np.zeros((n, n))
    x0, y0 = backtrace(zeros, zeros, dt=0.04)
    i, j = np.meshgrid(np.arange(n), np.arange(n))
    np.testing.assert_allclose(x0, i, atol=1e-12)
    np.testing.assert_allclose(y0, j, atol=1e-12)


def test_zero_velocity_is_identity(rng):
    n = 12
    source = rng.standard_normal((n, n))
    zeros = np.zeros((n, n))
    np.testing.assert_allclose(advect(source, zeros, zeros, 0.04), source, atol=1e-12)


@pytest.mark.parametrize("shift", [1, 3, -2])
def test_uniform_flow_shifts_by_whole_cells(shift, rng):
    n = 16
    dt = 0.04
    source = rng.standard_normal((n, n))
    u = np.full((n, n), shift / (n * dt))
    v = np.zeros((n, n))

    result = advect(source, u, v, dt)

    # Value at i comes from i - shift, wrapping across the seam
    np.testing.assert_allclose(result, np.roll(source, shift, axis=1), atol=1e-9)


def test_vertical_flow_uses_rows():
    n = 8
    dt = 0.1
    source = np.zeros((n, n))
    source[0, 3] = 1.0
    u = np.zeros((n, n))
    v = np.full((n, n), 2 / (n * dt))

    result = advect(source, u, v, dt)
    assert result[2, 3] == pytest.approx(1.0)
    assert result.sum() == pytest.approx(1.0)


def test_half_cell_trace_across_negative_seam():
    n = 8
    dt = 0.1
    source = np.zeros((n, n))
    source[:, n - 1] = 4.0
    u = np.full((n, n), 0.5 / (n * dt))
    v = np.zeros((n, n))

    # Column 0 traces back to x0 = -0.5: halfway between columns N-1 and 0
    result = advect(source, u, v, dt)
    np.testing.assert_allclose(result[:, 0], 2.0, atol=1e-12)
    np.testing.assert_allclose(result[:, n - 1], 2.0, atol=1e-12)
    np.testing.assert_allclose(result[:, 1:n - 1], 0.0, atol=1e-12)


def test_bilinear_weights():
    field = np.array([[0.0, 1.0], [2.0, 3.0]])
    # field[j, i]: value = i + 2 j, which is linear, so interpolation is exact inside the cell
    assert sample_bilinear(field, np.array(0.25), np.array(0.5)) == pytest.approx(1.25)
    assert sample_bilinear(field, np.array(0.0), np.array(0.0)) == pytest.approx(0.0)
    # Past the last column the sample wraps back to column 0
    assert sample_bilinear(field, np.array(1.5), np.array(0.0)) == pytest.approx(0.5)


def test_bilinear_sampling_is_periodic(rng):
    n = 9
    field = rng.standard_normal((n, n))
    px = rng.uniform(0, n, size=20)
    py = rng.uniform(0, n, size=20)
    np.testing.assert_allclose(sample_bilinear(field, px + n, py - 2 * n),
                               sample_bilinear(field, px, py), atol=1e-12)


def test_advect_refuses_to_alias(rng):
    n = 6
    source = rng.standard_normal((n, n))
    zeros = np.zeros((n, n))
    with pytest.raises(ValueError):
        advect(source, zeros, zeros, 0.04, out=source)


def test_advect_writes_into_out(rng):
    n = 6
    source = rng.standard_normal((n, n))
    zeros = np.zeros((n, n))
    out = np.empty((n, n))
    result = advect(source, zeros, zeros, 0.04, out=out)
    assert result is out
    np.testing.assert_allclose(out, source, atol=1e-12)
