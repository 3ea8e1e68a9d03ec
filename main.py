# main.py

import json
import logging
import sys

import pygame

import constants
import logger_setup
from renderer import FieldRenderer
from simulation import SimulationController, SimulationMode

# Get the application's dedicated logger
logger = logging.getLogger("heat_sim")

MODE_KEYS = {
    pygame.K_1: SimulationMode.DIFFUSION,
    pygame.K_2: SimulationMode.EIKONAL,
    pygame.K_3: SimulationMode.COMBINED,
}


def parse_mesh_size(args, default: int) -> tuple:
    """
    Reads the mesh size from the first command-line argument.
    Returns (size, error message or None); unparsable input falls back to default.
    """
    if not args:
        return default, None
    try:
        return int(args[0]), None
    except ValueError:
        return default, f"Invalid mesh size '{args[0]}', using {default}."


def log_instructions(controller):
    material = controller.material
    logger.info(
        "Controls: SPACE start/pause, R reset, 1 diffusion, 2 eikonal, 3 combined, "
        "+/- time step, left click add heat source, ESC exit"
    )
    logger.info(
        f"Material: {material.name}, "
        f"conductivity={material.thermal_conductivity} W/m·K, "
        f"diffusivity={material.thermal_diffusivity} m²/s, "
        f"density={material.density} kg/m³, "
        f"melting point={material.melting_point}°C"
    )


def handle_events(controller, renderer, sim_config) -> bool:
    """
    Translates pygame events into controller calls.
    Returns False once the user asked to quit.
    """
    for event in pygame.event.get():
        if event.type == pygame.QUIT:
            return False

        if event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            elif event.key == pygame.K_SPACE:
                controller.toggle_running()
            elif event.key == pygame.K_r:
                controller.reset()
            elif event.key in MODE_KEYS:
                controller.set_mode(MODE_KEYS[event.key])
            elif event.key in (pygame.K_PLUS, pygame.K_EQUALS, pygame.K_KP_PLUS):
                controller.scale_time_step(sim_config.get('time_step_increase_factor', 1.1))
            elif event.key in (pygame.K_MINUS, pygame.K_KP_MINUS):
                controller.scale_time_step(sim_config.get('time_step_decrease_factor', 0.9))

        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            x, y = renderer.screen_to_grid(*event.pos)
            controller.add_heat_source(x, y)

    return True


def run_simulation_loop(controller, renderer, screen, clock, sim_config):
    running = True
    while running:
        running = handle_events(controller, renderer, sim_config)
        controller.step()
        renderer.draw(screen, controller)
        pygame.display.flip()
        clock.tick(constants.FPS)


def main():
    """
    Main function to initialize and run the heat simulation.
    The first command-line argument, if given, overrides the mesh size.
    """
    # --- Setup ---
    with open('config.json', 'r') as f:
        config = json.load(f)
    sim_config = config['simulation']

    requested_size, size_error = parse_mesh_size(sys.argv[1:], sim_config.get('mesh_size', 50))
    mesh_size = SimulationController.clamp_mesh_size(requested_size, sim_config)
    logger_setup.setup_logging(config, mesh_size=mesh_size)

    logger.info("Application starting...")
    logger.info(f"Loaded configuration: {config}")
    if size_error:
        logger.warning(size_error)

    controller = SimulationController.from_config(config, mesh_size=mesh_size)
    log_instructions(controller)

    # --- Initialization ---
    try:
        pygame.init()
        screen = pygame.display.set_mode((constants.WIDTH, constants.HEIGHT))
        pygame.display.set_caption(constants.TITLE)
        clock = pygame.time.Clock()
        renderer = FieldRenderer(controller.mesh_size)

        run_simulation_loop(controller, renderer, screen, clock, sim_config)
    except pygame.error:
        logger.exception("Display initialization or rendering failed.")
        return 1
    finally:
        logger.info("Application shutting down.")
        pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
