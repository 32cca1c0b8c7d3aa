# utils.py
"""
Entry-point helpers: logging, config.json and asset paths.

None of this is needed by the engine itself, which only sees injected
services and a PixelizerOptions value.
"""
import logging
import logging.handlers
import json
import os
from typing import Any, Dict, Optional

# --- Data Contracts ---
#
# setup_logging(config) -> None:
#   - Reads config["logging"]: level, format, log_file (null = console only).
#   - Replaces every handler on the root logger.
#
# load_config(path) -> Dict[str, Any]:
#   - Raises: FileNotFoundError, json.JSONDecodeError, ValueError for a
#     non-object document. Each is logged before it propagates.
#
# resolve_source(config_path, src) -> Optional[str]:
#   - Relative image sources are taken relative to the config file.

DEFAULT_LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
DEFAULT_LOG_FILE = 'logs/pixelizer.log'
LOG_FILE_MAX_BYTES = 1024 * 1024
LOG_FILE_BACKUPS = 5


def setup_logging(config: Dict[str, Any]) -> None:
    """
    Configures the logging system from a configuration dictionary.

    Logs go to the console and, unless disabled, to a rotating file.
    """
    log_config = config.get('logging', {})
    log_level = str(log_config.get('level', 'INFO')).upper()
    log_format = log_config.get('format', DEFAULT_LOG_FORMAT)
    log_file_path = log_config.get('log_file', DEFAULT_LOG_FILE)

    handlers = [logging.StreamHandler()]
    if log_file_path:
        log_dir = os.path.dirname(log_file_path)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        handlers.append(logging.handlers.RotatingFileHandler(
            log_file_path, maxBytes=LOG_FILE_MAX_BYTES, backupCount=LOG_FILE_BACKUPS
        ))

    formatter = logging.Formatter(log_format)
    logger = logging.getLogger()
    logger.setLevel(log_level)
    logger.handlers.clear()
    for handler in handlers:
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logging.info("Logging system initialized.")
    logging.debug(f"Log level {log_level}, log file {log_file_path or 'disabled'}.")


def load_config(path: str) -> Dict[str, Any]:
    """Loads the JSON configuration file of the application."""
    logging.info(f"Loading configuration from {path}...")
    try:
        with open(path, 'r') as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Configuration file not found at {path}.")
        raise
    except json.JSONDecodeError as e:
        logging.error(f"Error decoding JSON from {path}: {e}")
        raise
    if not isinstance(config, dict):
        msg = f"Configuration in {path} must be a JSON object, got {type(config).__name__}."
        logging.error(msg)
        raise ValueError(msg)
    logging.info("Configuration loaded successfully.")
    return config


def resolve_source(config_path: str, src: Optional[str]) -> Optional[str]:
    """Resolves an image source from config.json against the config's directory."""
    if src is None or os.path.isabs(src):
        return src
    return os.path.join(os.path.dirname(os.path.abspath(config_path)), src)
