# logger_setup.py

import logging
import os

LOGGER_NAME = "heat_sim"
DEFAULT_LOG_DIRECTORY = "runs"


def run_log_directory(config: dict, mesh_size: int = None) -> str:
    """
    Builds the directory a run logs into: <directory>/<run_id>/<material>_<N>x<N>.
    Runs of the same id on different materials or mesh sizes get separate logs.
    """
    log_config = config['logging']
    sim_config = config.get('simulation', {})
    if mesh_size is None:
        mesh_size = sim_config.get('mesh_size', 50)
    material = str(sim_config.get('material', 'iron')).lower()

    return os.path.join(
        log_config.get('directory', DEFAULT_LOG_DIRECTORY),
        config['run_id'],
        f"{material}_{mesh_size}x{mesh_size}"
    )


def setup_logging(config: dict, mesh_size: int = None) -> logging.Logger:
    """
    Configures the application's dedicated logger (not the root logger) to
    write to the console and to a per-run log file.

    Data Contract:
    - Inputs:
        - config (dict): The full configuration loaded from config.json.
        - mesh_size (int): Mesh size of this run, if overridden on the command line.
    - Outputs: The configured logging.Logger.
    - Side Effects:
        - Configures the "heat_sim" logger every module writes to.
        - Creates the run's log directory.
        - Raises Numba's own logger to WARNING so JIT compilation chatter
          stays out of the simulation log.
    - Invariants: The config contains 'run_id' and a 'logging' dictionary
      with 'level' and 'format'.
    """
    log_config = config['logging']

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_config['level'])
    logger.propagate = False

    log_dir = run_log_directory(config, mesh_size)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'simulation.log')

    formatter = logging.Formatter(log_config['format'])
    file_handler = logging.FileHandler(log_file)
    file_handler.setFormatter(formatter)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)

    # Calling this twice must not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.addHandler(file_handler)
    logger.addHandler(stream_handler)

    logging.getLogger("numba").setLevel(logging.WARNING)

    logger.info(f"Logging initialized. Run ID: {config['run_id']}. Log file: {log_file}")
    return logger
