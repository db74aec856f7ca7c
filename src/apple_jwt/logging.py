#!/usr/bin/env python3
"""
Centralized logging configuration.

bootstrap_logging() configures logging from a logging.ini in the current directory,
falling back to the default logging.ini shipped with the package, using Python's
native INI format. LOG_LEVEL overrides the configured levels.
"""

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Optional

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

PACKAGE_LOGGING_CONFIG = Path(__file__).parent / 'logging.ini'


def _find_logging_config() -> Optional[Path]:
    """
    Find the logging configuration file.

    Looks for logging.ini in the current working directory, then the package default.

    Returns:
        Path to logging configuration file, or None if not found.
    """
    current_dir_config = Path('logging.ini')
    if current_dir_config.exists():
        return current_dir_config

    if PACKAGE_LOGGING_CONFIG.exists():
        return PACKAGE_LOGGING_CONFIG

    return None


def _setup_environment_variables():
    """
    Set LOG_LEVEL to INFO if it is unset or invalid.
    """
    if 'LOG_LEVEL' not in os.environ:
        os.environ['LOG_LEVEL'] = 'INFO'

    log_level = os.environ['LOG_LEVEL'].strip().upper()
    if log_level not in LOG_LEVELS:
        print(f"Warning: Invalid LOG_LEVEL '{log_level}', using INFO", file=sys.stderr)
        os.environ['LOG_LEVEL'] = 'INFO'


def _basic_config():
    logging.basicConfig(
        level=logging.INFO,
        format='%(levelname)s: %(name)s: %(message)s',
        stream=sys.stderr
    )


def bootstrap_logging(name: Optional[str] = None) -> None:
    """
    Bootstrap logging configuration using Python's native INI format.

    This function:
    1. Validates the LOG_LEVEL environment variable
    2. Loads logging.ini with logging.config.fileConfig()
    3. Applies LOG_LEVEL to the root logger, its stream handlers and the package logger

    Args:
        name: Optional logger name to report the configuration on
    """
    _setup_environment_variables()

    config_path = _find_logging_config()

    if config_path is None:
        print("Warning: No logging.ini file found, using basic logging configuration", file=sys.stderr)
        _basic_config()
        return

    try:
        logging.config.fileConfig(
            str(config_path),
            disable_existing_loggers=False
        )

        env_level = os.environ['LOG_LEVEL'].strip().upper()
        level = getattr(logging, env_level)
        root_logger = logging.getLogger()
        root_logger.setLevel(level)
        for handler in root_logger.handlers:
            if isinstance(handler, logging.StreamHandler):
                handler.setLevel(level)
        logging.getLogger('apple_jwt').setLevel(level)

        if name:
            logging.getLogger(name).debug(f"Logging configured for {name} from {config_path}")
        else:
            logging.debug(f"Logging configured for root logger from {config_path}")

    except Exception as e:
        print(f"Warning: Failed to load logging config from {config_path}: {e}", file=sys.stderr)
        print("Using basic logging configuration", file=sys.stderr)
        _basic_config()
