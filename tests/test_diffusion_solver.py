"""Unit tests for the explicit FTCS diffusion step"""

import logging

import numpy as np
import pytest

from diffusion_solver import STABILITY_LIMIT, DiffusionSolver
from heat_sources import HeatSourceRegistry
from mesh_state import MeshState

COOLING_RATE = 0.005


def make_solver(size=5, diffusivity=2.0):
    mesh = MeshState(size, ambient_temperature=20.0, base_speed=1.0)
    sources = HeatSourceRegistry(mesh)
    solver = DiffusionSolver(mesh, sources, thermal_diffusivity=diffusivity, cooling_rate=COOLING_RATE)
    return mesh, sources, solver


def test_center_source_heats_direct_neighbors():
    """5x5 mesh, source of 800 at the center, r = 0.2."""
    mesh, sources, solver = make_solver()
    sources.add(2, 2, 800.0)

    r = solver.step(0.1)

    assert r == pytest.approx(0.2)
    # 20 + 0.2 * (20 + 20 + 20 + 800 - 4 * 20)
    expected = 20.0 + 0.2 * 780.0
    T = mesh.temperature
    for row, col in [(1, 2), (3, 2), (2, 1), (2, 3)]:
        assert T[row, col] == pytest.approx(expected)
        assert T[row, col] > 20.0
    # Diagonal neighbors only see ambient neighbors on the first step
    assert T[1, 1] == pytest.approx(20.0)
    # The source is restored regardless of what the stencil computed
    assert T[2, 2] == 800.0


def test_boundary_cells_cool():
    mesh, sources, solver = make_solver()
    sources.add(2, 2, 800.0)
    solver.step(0.1)

    keep = 1.0 - COOLING_RATE
    assert mesh.temperature[0, 2] == pytest.approx(20.0 * keep)
    assert mesh.temperature[2, 4] == pytest.approx(20.0 * keep)


def test_corner_cells_take_the_last_boundary_write():
    mesh, _, solver = make_solver(size=6)
    rng = np.random.default_rng(7)
    mesh.temperature[:] = rng.uniform(0.0, 100.0, (6, 6))
    old = mesh.temperature.copy()

    solver.step(0.01)

    keep = 1.0 - COOLING_RATE
    new = mesh.temperature
    n = 6
    assert new[0, 0] == pytest.approx(old[0, 1] * keep)
    assert new[0, n - 1] == pytest.approx(old[1, n - 1] * keep)
    assert new[n - 1, 0] == pytest.approx(old[n - 1, 1] * keep)
    assert new[n - 1, n - 1] == pytest.approx(old[n - 1, n - 2] * keep)


def test_step_swaps_buffers():
    mesh, _, solver = make_solver()
    scratch = mesh.scratch
    solver.step(0.1)
    assert mesh.temperature is scratch


def test_discrete_maximum_principle():
    """With r <= 0.25 no interior cell leaves the range of its 5-point neighborhood."""
    size = 12
    mesh, _, solver = make_solver(size=size, diffusivity=2.4)
    rng = np.random.default_rng(1234)
    mesh.temperature[:] = rng.uniform(20.0, 1000.0, (size, size))

    for _ in range(5):
        old = mesh.temperature.copy()
        r = solver.step(0.1)
        assert r <= STABILITY_LIMIT
        new = mesh.temperature
        for i in range(1, size - 1):
            for j in range(1, size - 1):
                neighborhood = [old[i, j], old[i - 1, j], old[i + 1, j], old[i, j - 1], old[i, j + 1]]
                assert min(neighborhood) - 1e-9 <= new[i, j] <= max(neighborhood) + 1e-9


def test_sources_stay_pinned_over_many_steps():
    mesh, sources, solver = make_solver(size=8)
    sources.add(2, 3, 800.0)
    sources.add(6, 6, 300.0)

    for _ in range(20):
        solver.step(0.1)
        assert mesh.temperature[3, 2] == 800.0
        assert mesh.temperature[6, 6] == 300.0


def test_later_source_wins_on_shared_cell():
    mesh, sources, solver = make_solver()
    sources.add(1, 1, 100.0)
    sources.add(1, 1, 600.0)
    solver.step(0.1)
    assert mesh.temperature[1, 1] == 600.0


def test_unstable_time_step_warns_but_still_steps(caplog):
    caplog.set_level(logging.WARNING, logger="heat_sim")
    mesh, sources, solver = make_solver(diffusivity=3.0)
    sources.add(2, 2, 800.0)

    solver.step(0.1)

    assert not solver.is_stable
    assert solver.last_diffusion_number == pytest.approx(0.3)
    assert mesh.temperature[1, 2] > 20.0
    warnings = [rec for rec in caplog.records if rec.levelno == logging.WARNING]
    assert len(warnings) == 1
    assert "stability" in warnings[0].getMessage()

    # Same unstable time step: no repeated warning
    solver.step(0.1)
    warnings = [rec for rec in caplog.records if rec.levelno == logging.WARNING]
    assert len(warnings) == 1


def test_stable_time_step_does_not_warn(caplog):
    caplog.set_level(logging.WARNING, logger="heat_sim")
    _, _, solver = make_solver(diffusivity=2.0)
    solver.step(0.1)
    assert solver.is_stable
    assert not [rec for rec in caplog.records if rec.levelno == logging.WARNING]
