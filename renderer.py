# renderer.py

import math
import numpy as np
import pygame
import constants
from simulation import SimulationMode


def temperature_to_rgb(field: np.ndarray, ambient: float, max_display: float) -> np.ndarray:
    """
    Maps a temperature field to an (N, N, 3) uint8 RGB image.

    The temperature is normalized between ambient and max_display, then split
    into five bands: dark-to-bright blue, blue to cyan, cyan to green,
    green to yellow and yellow to red.
    """
    # Sanitize first so an unstable run cannot break the color math.
    sane = np.nan_to_num(field, nan=ambient, posinf=max_display, neginf=ambient)
    norm = np.clip((sane - ambient) / (max_display - ambient), 0.0, 1.0)

    e1, e2, e3, e4 = constants.COLOR_BAND_EDGES
    r = np.zeros_like(norm)
    g = np.zeros_like(norm)
    b = np.zeros_like(norm)

    band = norm < e1
    b[band] = 128 + 127 * (norm[band] / e1)

    band = (norm >= e1) & (norm < e2)
    g[band] = 255 * ((norm[band] - e1) / (e2 - e1))
    b[band] = 255

    band = (norm >= e2) & (norm < e3)
    g[band] = 255
    b[band] = 255 * (1.0 - (norm[band] - e2) / (e3 - e2))

    band = (norm >= e3) & (norm < e4)
    r[band] = 255 * ((norm[band] - e3) / (e4 - e3))
    g[band] = 255

    band = norm >= e4
    r[band] = 255
    g[band] = 255 * (1.0 - (norm[band] - e4) / (1.0 - e4))

    return np.stack((r, g, b), axis=-1).astype(np.uint8)


def eikonal_to_display_temperature(distance: np.ndarray, ambient: float, max_display: float) -> np.ndarray:
    """Turns arrival times into pseudo temperatures; unreached cells show as ambient."""
    reached = np.isfinite(distance)
    display = np.full(distance.shape, ambient, dtype=np.float64)
    display[reached] = np.maximum(
        ambient,
        max_display * np.exp(-distance[reached] * constants.EIKONAL_DISPLAY_DECAY)
    )
    return display


class FieldRenderer:
    """
    Draws the simulation onto a pygame surface.

    Data Contract:
    - Inputs: mesh_size (int) - Side length of the simulated mesh.
    - Outputs: None. Drawing happens on the surface passed to draw().
    - Invariants: Only reads from the controller; never mutates it.
    """
    def __init__(self, mesh_size: int):
        self.mesh_size = mesh_size
        self.cell_size = min(constants.WIDTH, constants.HEIGHT - constants.STATUS_PANEL_HEIGHT) / mesh_size
        self.field_pixels = int(mesh_size * self.cell_size)
        self.font = pygame.font.Font(None, constants.FONT_SIZE)

    def screen_to_grid(self, px: int, py: int) -> tuple:
        """Converts a pixel position to (x, y) grid indices. May be off-mesh."""
        x = math.floor((px - constants.FIELD_OFFSET) / self.cell_size)
        y = math.floor((py - constants.FIELD_OFFSET) / self.cell_size)
        return x, y

    def draw(self, screen: pygame.Surface, controller):
        screen.fill(constants.BACKGROUND)

        # --- Step 1: Pick the scalar field to show ---
        ambient = controller.ambient_temperature
        max_display = controller.max_display_temperature
        if controller.mode is SimulationMode.EIKONAL:
            display = eikonal_to_display_temperature(controller.eikonal_field(), ambient, max_display)
        else:
            display = controller.temperature_field()

        # --- Step 2: Color-map and scale it up ---
        rgb = temperature_to_rgb(display, ambient, max_display)
        # surfarray is indexed (x, y); the field is indexed (row, col).
        field_surface = pygame.surfarray.make_surface(rgb.swapaxes(0, 1))
        field_surface = pygame.transform.scale(field_surface, (self.field_pixels, self.field_pixels))
        screen.blit(field_surface, (constants.FIELD_OFFSET, constants.FIELD_OFFSET))

        # --- Step 3: Outline heat sources ---
        inset = 2
        outline = max(1, int(self.cell_size) - 2 * inset)
        for source in controller.heat_sources():
            rect = pygame.Rect(
                constants.FIELD_OFFSET + int(source.x * self.cell_size + inset),
                constants.FIELD_OFFSET + int(source.y * self.cell_size + inset),
                outline,
                outline
            )
            pygame.draw.rect(screen, constants.WHITE, rect, 1)

        self._draw_status(screen, controller)

    def _draw_status(self, screen: pygame.Surface, controller):
        panel = pygame.Rect(10, constants.HEIGHT - 80, constants.WIDTH - 20, 70)
        pygame.draw.rect(screen, constants.PANEL_COLOR, panel)

        stats = controller.stats()
        lines = [
            f"Mode: {stats.mode.name}   {'RUNNING' if stats.running else 'PAUSED'}   dt: {stats.time_step:.4f}"
            f"{'' if stats.is_stable else '   UNSTABLE'}",
            f"Time: {stats.elapsed_time:.2f}s   Max Temp: {stats.max_temperature:.2f} C   Iterations: {stats.iteration_count}",
        ]
        for i, line in enumerate(lines):
            text = self.font.render(line, True, constants.TEXT_COLOR)
            screen.blit(text, (panel.x + 10, panel.y + 10 + i * (constants.FONT_SIZE + 4)))
