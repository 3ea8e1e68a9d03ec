# mesh_state.py

import logging
import numpy as np

logger = logging.getLogger("heat_sim")


class MeshState:
    """
    Owns every scalar field of the square simulation mesh.

    Data Contract:
    - Inputs:
        - size (int): Side length N of the mesh. Must be at least 3 so that
          an interior exists.
        - ambient_temperature (float): Initial temperature of every cell.
        - base_speed (float): Initial propagation speed of every cell.
    - Outputs: None. The solvers mutate the arrays in place.
    - Side Effects: Allocates all buffers once; nothing is reallocated later.
    - Invariants:
        - Two temperature buffers exist. `temperature` is always the active one
          and `scratch` the other; `swap()` flips them (ping-pong).
        - `eikonal` holds np.inf for cells no source has reached.
        - `propagation_speed` is strictly positive and may vary per cell.
    """
    def __init__(self, size: int, ambient_temperature: float, base_speed: float):
        if size < 3:
            raise ValueError(f"Mesh size must be at least 3, got {size}")

        self.size = size
        self.ambient_temperature = ambient_temperature
        self.base_speed = base_speed

        # --- Preallocated buffers (Structure of Arrays) ---
        self._temperature_buffers = (
            np.empty((size, size), dtype=np.float64),
            np.empty((size, size), dtype=np.float64),
        )
        self._active = 0
        self.eikonal = np.empty((size, size), dtype=np.float64)
        self.propagation_speed = np.empty((size, size), dtype=np.float64)

        self.initialize()
        logger.info(f"MeshState created: {size}x{size} cells, ambient={ambient_temperature}, speed={base_speed:.4f}")

    @property
    def temperature(self) -> np.ndarray:
        """The current temperature buffer."""
        return self._temperature_buffers[self._active]

    @property
    def scratch(self) -> np.ndarray:
        """The buffer the next diffusion step writes into."""
        return self._temperature_buffers[1 - self._active]

    def swap(self):
        self._active = 1 - self._active

    def initialize(self):
        """
        Resets every field to its initial value: ambient temperature in both
        buffers, unreached (infinite) distance and uniform base speed.
        """
        for buffer in self._temperature_buffers:
            buffer.fill(self.ambient_temperature)
        self._active = 0
        self.eikonal.fill(np.inf)
        self.propagation_speed.fill(self.base_speed)

    def contains(self, x: int, y: int) -> bool:
        """True if grid coordinate (x, y) lies on the mesh."""
        return 0 <= x < self.size and 0 <= y < self.size
