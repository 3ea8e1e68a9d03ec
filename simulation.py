# simulation.py

import logging
import math
from collections import namedtuple
from enum import Enum

import numpy as np

from diffusion_solver import DiffusionSolver
from eikonal_solver import EikonalSolver
from heat_sources import HeatSourceRegistry
from materials import IRON, get_material
from mesh_state import MeshState

logger = logging.getLogger("heat_sim")


class SimulationMode(Enum):
    DIFFUSION = "diffusion"
    EIKONAL = "eikonal"
    COMBINED = "combined"


SimulationStats = namedtuple('SimulationStats', [
    'elapsed_time', 'iteration_count', 'max_temperature', 'mode', 'time_step', 'running', 'is_stable'
])


def _read_only(array: np.ndarray) -> np.ndarray:
    view = array.view()
    view.flags.writeable = False
    return view


class SimulationController:
    """
    Drives the thermal-field simulation: owns the mesh, the heat sources, both
    solvers and the mode state machine.

    Data Contract:
    - Inputs:
        - mesh_size (int): Requested side length. Clamped into
          [min_mesh_size, max_mesh_size] from the config.
        - material (MaterialProperties): Source of the diffusivity used by the
          stencil and the propagation speed.
        - config (dict): The 'simulation' section of the config file. Every
          key is optional.
    - Outputs: step() reports whether the simulation advanced.
    - Side Effects: Mutates the mesh through the solvers.
    - Invariants:
        - Every public operation is total over its documented inputs.
          Out-of-range values are clamped or ignored, never raised.
        - Source cells hold their fixed temperature after every step in
          DIFFUSION and COMBINED mode, and distance 0 after every eikonal solve.
        - Mode changes take effect on the next step() and touch no field.
    """
    def __init__(self, mesh_size: int = 50, material=IRON, config: dict = None):
        config = config or {}
        self.config = config
        self.material = material

        # --- Mesh size (clamped, fixed for the lifetime of the controller) ---
        self.mesh_size = self.clamp_mesh_size(mesh_size, config)
        if self.mesh_size != mesh_size:
            logger.info(f"Mesh size {mesh_size} clamped to {self.mesh_size}.")

        # --- Physical and blending constants ---
        self.ambient_temperature = config.get('ambient_temperature', 20.0)
        self.max_display_temperature = config.get('max_display_temperature', 1000.0)
        self.default_source_temperature = config.get('default_source_temperature', 800.0)
        self.click_source_temperature = config.get('click_source_temperature', 900.0)
        self.eikonal_blend_weight = config.get('eikonal_blend_weight', 0.15)
        self.eikonal_decay = config.get('eikonal_decay', 0.08)
        self.status_log_interval = config.get('status_log_interval', 100)

        # --- Time step bounds ---
        self.min_time_step = config.get('min_time_step', 0.001)
        self.max_time_step = config.get('max_time_step', 0.1)
        self.time_step = self.min_time_step
        self.time_step = self._clamp_time_step(config.get('time_step', 0.01))

        # --- Mesh, sources and solvers ---
        base_speed = np.sqrt(material.thermal_diffusivity) * config.get('speed_scale', 1000.0)
        self.mesh = MeshState(self.mesh_size, self.ambient_temperature, base_speed)
        self.sources = HeatSourceRegistry(self.mesh)
        self.diffusion = DiffusionSolver(
            self.mesh,
            self.sources,
            material.thermal_diffusivity,
            config.get('cooling_rate', 0.005)
        )
        self.eikonal = EikonalSolver(self.mesh, self.sources)

        # --- State machine ---
        self.mode = SimulationMode.DIFFUSION
        self.elapsed_time = 0.0
        self.iteration_count = 0
        self.running = bool(config.get('start_running', False))

        self._add_default_source()
        logger.info(
            f"SimulationController created: {self.mesh_size}x{self.mesh_size} mesh, "
            f"material={material.name}, dt={self.time_step}, "
            f"r={self.diffusion.diffusion_number(self.time_step):.3e}"
        )

    @staticmethod
    def clamp_mesh_size(mesh_size, config: dict) -> int:
        """
        Clamps a requested mesh size into [min_mesh_size, max_mesh_size].
        A non-finite request falls back to the smallest size.
        """
        min_size = max(3, config.get('min_mesh_size', 20))
        max_size = max(min_size, config.get('max_mesh_size', 200))
        if not math.isfinite(mesh_size):
            logger.warning(f"Non-finite mesh size {mesh_size}, using {min_size}.")
            return min_size
        return int(min(max(mesh_size, min_size), max_size))

    @classmethod
    def from_config(cls, config: dict, mesh_size: int = None):
        """
        Builds a controller from a full config dictionary (as loaded from
        config.json). An explicit mesh_size overrides the configured one.
        """
        sim_config = config.get('simulation', {})
        material = get_material(sim_config.get('material', IRON.name))
        if mesh_size is None:
            mesh_size = sim_config.get('mesh_size', 50)
        return cls(mesh_size=mesh_size, material=material, config=sim_config)

    # --- Presentation-facing API ---

    def add_heat_source(self, x: int, y: int, temperature: float = None) -> bool:
        """
        Pins a heat source at grid coordinate (x, y). Off-mesh coordinates are
        ignored. Defaults to the click source temperature.
        """
        if temperature is None:
            temperature = self.click_source_temperature
        added = self.sources.add(x, y, temperature)
        if added:
            logger.info(f"Heat source added at ({x}, {y}) with T={temperature}")
        return added

    def set_mode(self, mode):
        self.mode = SimulationMode(mode)
        logger.info(f"Mode: {self.mode.name}")

    def set_time_step(self, value: float):
        self.time_step = self._clamp_time_step(value)
        logger.info(f"Time step: {self.time_step:.5f}")

    def scale_time_step(self, factor: float):
        """Multiplies the time step by factor, then clamps it."""
        self.set_time_step(self.time_step * factor)

    def toggle_running(self):
        self.running = not self.running
        logger.info("Simulation started" if self.running else "Simulation paused")

    def reset(self):
        """
        Returns the simulation to its initial state: paused, no sources except
        the default center one, ambient temperature, unreached distances and
        zero elapsed time and iterations.
        """
        self.running = False
        self.elapsed_time = 0.0
        self.iteration_count = 0
        self.sources.clear()
        self.mesh.initialize()
        self._add_default_source()
        logger.info("Simulation reset")

    def step(self) -> bool:
        """
        Advances the simulation by one time step in the current mode.
        Returns False (and changes nothing) while the simulation is paused.
        """
        if not self.running:
            return False

        if self.mode is SimulationMode.DIFFUSION:
            self.diffusion.step(self.time_step)
        elif self.mode is SimulationMode.EIKONAL:
            self.eikonal.solve()
        elif self.mode is SimulationMode.COMBINED:
            self._step_combined()

        self.elapsed_time += self.time_step
        self.iteration_count += 1

        if self.status_log_interval and self.iteration_count % self.status_log_interval == 0:
            stats = self.stats()
            logger.info(
                f"Time: {stats.elapsed_time:.2f}s, "
                f"Max Temp: {stats.max_temperature:.2f}°C, "
                f"Iterations: {stats.iteration_count}"
            )
        return True

    def temperature_field(self) -> np.ndarray:
        return _read_only(self.mesh.temperature)

    def eikonal_field(self) -> np.ndarray:
        return _read_only(self.mesh.eikonal)

    def heat_sources(self) -> tuple:
        return self.sources.all()

    def stats(self) -> SimulationStats:
        max_temperature = max(self.ambient_temperature, float(self.mesh.temperature.max()))
        return SimulationStats(
            elapsed_time=self.elapsed_time,
            iteration_count=self.iteration_count,
            max_temperature=max_temperature,
            mode=self.mode,
            time_step=self.time_step,
            running=self.running,
            is_stable=self.diffusion.is_stable
        )

    # --- Internals ---

    def _step_combined(self):
        """
        Eikonal solve, then diffusion, then blend a radiant temperature derived
        from the arrival time into every reached cell.
        T_e = max(ambient, T_max * exp(-d * decay)); T = (1 - w) T + w T_e
        """
        self.eikonal.solve()
        self.diffusion.step(self.time_step)

        temperature = self.mesh.temperature
        distance = self.mesh.eikonal
        reached = np.isfinite(distance)

        radiant = np.maximum(
            self.ambient_temperature,
            self.max_display_temperature * np.exp(-distance[reached] * self.eikonal_decay)
        )
        w = self.eikonal_blend_weight
        temperature[reached] = (1.0 - w) * temperature[reached] + w * radiant

        # The blend must not move pinned cells.
        for source in self.sources:
            temperature[source.y, source.x] = source.temperature

    def _add_default_source(self):
        center = self.mesh_size // 2
        self.sources.add(center, center, self.default_source_temperature)

    def _clamp_time_step(self, value: float) -> float:
        """Clamps into [min_time_step, max_time_step]. NaN keeps the current step."""
        if math.isnan(value):
            logger.warning(f"Ignoring NaN time step, keeping {self.time_step}")
            return self.time_step
        return float(min(max(value, self.min_time_step), self.max_time_step))
