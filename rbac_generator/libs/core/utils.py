"""
Core Utilities

Common utility functions used across the RBAC Generator tool.
"""

import logging
import os
from typing import Dict, Iterable, Optional

from .constants import ErrorMessages
from .exceptions import ConfigurationError


def setup_logging(debug: bool = False) -> None:
    """
    Set up logging configuration for the application.

    Args:
        debug: Enable debug logging level
    """
    level = logging.DEBUG if debug else logging.INFO

    # Configure root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(level)

    formatter = logging.Formatter(
        '%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    console_handler.setFormatter(formatter)

    root_logger.addHandler(console_handler)

    if debug:
        logger = logging.getLogger(__name__)
        logger.debug("Debug mode enabled")


def parse_label_args(label_args: Optional[Iterable[str]]) -> Dict[str, str]:
    """
    Parse repeated KEY=VALUE command-line arguments into a label mapping.

    Args:
        label_args: Raw label arguments, may be None

    Returns:
        Dict of label keys to values; later duplicates win

    Raises:
        ConfigurationError: If an argument is not KEY=VALUE or has an empty key
    """
    labels: Dict[str, str] = {}
    for label in label_args or []:
        key, sep, value = label.partition('=')
        key = key.strip()
        if not sep or not key:
            raise ConfigurationError(ErrorMessages.ConfigError.INVALID_LABEL.format(label=label))
        labels[key] = value.strip()
    return labels


def check_directory(path: str, mode: int) -> Optional[str]:
    """
    Check that a path is an accessible directory.

    Args:
        path: Directory path to check
        mode: os.R_OK, os.W_OK or a combination

    Returns:
        None when the directory is usable, otherwise the reason it is not
    """
    if not os.path.exists(path):
        return "no such file or directory"
    if not os.path.isdir(path):
        return "not a directory"
    if not os.access(path, mode):
        return "permission denied"
    return None
