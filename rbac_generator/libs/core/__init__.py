"""
Core Libraries

Shared functionality and utilities for the RBAC Generator tool.
"""

from .config import ConfigManager, GenerationOptions, get_env_defaults, resolve_options
from .exceptions import (
    RBACGeneratorError,
    ConfigurationError,
    ScanError,
    InvalidRuleError,
    SerializationError,
    ManifestWriteError
)
from .utils import setup_logging, parse_label_args

__all__ = [
    'ConfigManager',
    'GenerationOptions',
    'get_env_defaults',
    'resolve_options',
    'RBACGeneratorError',
    'ConfigurationError',
    'ScanError',
    'InvalidRuleError',
    'SerializationError',
    'ManifestWriteError',
    'setup_logging',
    'parse_label_args'
]
