# logger_setup.py

import logging
import os
import json

LOGGER_NAME = "lantern_scene"


def setup_logging(config_path='config.json', console=True):
    """
    Configures the "lantern_scene" logger for one run of the scene.

    The run directory lives next to the config file under runs/<run_id>/ and
    also receives exported wish CSVs. Only the application logger is touched;
    the root logger (and with it SDL and Numba output) is left alone.

    Data Contract:
    - Inputs:
        - config_path (str): Path to the JSON config with 'run_id' and a
          'logging' dictionary holding 'level' and 'format'.
        - console (bool): Also echo records to stderr.
    - Outputs: log_dir (str) - The run directory.
    - Side Effects: Creates the run directory; replaces the logger's handlers.
    """
    with open(config_path, 'r') as f:
        config = json.load(f)

    run_id = config['run_id']
    log_config = config['logging']

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_config['level'])
    logger.propagate = False

    log_dir = os.path.join(os.path.dirname(os.path.abspath(config_path)), 'runs', run_id)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'scene.log')

    formatter = logging.Formatter(log_config['format'])
    handlers = [logging.FileHandler(log_file, encoding='utf-8')]
    if console:
        handlers.append(logging.StreamHandler())

    # Re-entry replaces handlers instead of stacking duplicates.
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info(f"Logging initialized. Run ID: {run_id}. Log file: {log_file}")
    return log_dir
