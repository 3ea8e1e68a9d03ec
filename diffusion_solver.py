# diffusion_solver.py

import logging
import numba

logger = logging.getLogger("heat_sim")

# Largest diffusion number for which 2D FTCS stays non-oscillatory.
STABILITY_LIMIT = 0.25

# --- JIT-Compiled Stencil ---
# Kept outside the class and operating only on arrays and scalars, as required
# by Numba's nopython mode.

@numba.jit(nopython=True)
def _ftcs_step_jit(current, new, r, cooling_rate):
    """
    Numba-accelerated forward-time centered-space update.
    Writes the interior 5-point Laplacian update and the cooled boundary into
    `new`, reading only from `current`.
    """
    n = current.shape[0]

    # Interior points
    for i in range(1, n - 1):
        for j in range(1, n - 1):
            laplacian = (current[i - 1, j] + current[i + 1, j] +
                         current[i, j - 1] + current[i, j + 1] -
                         4.0 * current[i, j])
            new[i, j] = current[i, j] + r * laplacian

    # Boundary: copy the interior neighbor, losing a fraction to the environment.
    # Row and column writes are interleaved per index, so each corner is written
    # twice and the later write wins.
    keep = 1.0 - cooling_rate
    for i in range(n):
        new[0, i] = current[1, i] * keep
        new[n - 1, i] = current[n - 2, i] * keep
        new[i, 0] = current[i, 1] * keep
        new[i, n - 1] = current[i, n - 2] * keep


class DiffusionSolver:
    """
    Advances the temperature field by one explicit FTCS time step.

    Data Contract:
    - Inputs:
        - mesh (MeshState): Provides the double-buffered temperature field.
        - sources (HeatSourceRegistry): Sources pinned after every step.
        - thermal_diffusivity (float): alpha in r = alpha * dt / dx^2.
        - cooling_rate (float): Fraction of heat boundary cells lose per step.
    - Outputs: step() returns the diffusion number r of the step.
    - Side Effects: Writes the scratch buffer, then swaps the mesh buffers.
    - Invariants: After step(), every source cell holds its fixed temperature.
      An r above STABILITY_LIMIT is logged as a warning but the step still runs.
    """
    GRID_SPACING = 1.0

    def __init__(self, mesh, sources, thermal_diffusivity: float, cooling_rate: float):
        self.mesh = mesh
        self.sources = sources
        self.thermal_diffusivity = thermal_diffusivity
        self.cooling_rate = cooling_rate
        self.last_diffusion_number = 0.0
        self._warned_time_step = None

    def diffusion_number(self, time_step: float) -> float:
        return self.thermal_diffusivity * time_step / (self.GRID_SPACING * self.GRID_SPACING)

    @property
    def is_stable(self) -> bool:
        return self.last_diffusion_number <= STABILITY_LIMIT

    def step(self, time_step: float) -> float:
        r = self.diffusion_number(time_step)
        self.last_diffusion_number = r
        self._check_stability(time_step, r)

        new = self.mesh.scratch
        _ftcs_step_jit(self.mesh.temperature, new, r, self.cooling_rate)

        # Maintain heat sources (registry order, last write wins)
        for source in self.sources:
            new[source.y, source.x] = source.temperature

        self.mesh.swap()
        return r

    def _check_stability(self, time_step: float, r: float):
        """Warns once per distinct unstable time step."""
        if r <= STABILITY_LIMIT:
            self._warned_time_step = None
            return
        if time_step != self._warned_time_step:
            logger.warning(
                f"Time step may be too large for numerical stability "
                f"(r = {r:.4f} > {STABILITY_LIMIT}, dt = {time_step})"
            )
            self._warned_time_step = time_step
