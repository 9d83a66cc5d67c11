"""
Configuration Management

Handles generation options, the optional YAML configuration file and
environment defaults for the RBAC Generator tool.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from decouple import config as env_config

from .constants import ErrorMessages, GeneratorConstants
from .exceptions import ConfigurationError
from .utils import check_directory

logger = logging.getLogger(__name__)


@dataclass
class GenerationOptions:
    """
    Options for one generation run.

    Attributes:
        name: Identity name used as prefix for every generated name
        input_dir: Directory holding the annotated source tree
        output_dir: Directory the manifests are written to
        labels: Labels copied onto both manifests
    """
    name: str = GeneratorConstants.DEFAULT_NAME
    input_dir: str = GeneratorConstants.DEFAULT_INPUT_DIR
    output_dir: str = GeneratorConstants.DEFAULT_OUTPUT_DIR
    labels: Dict[str, str] = field(default_factory=dict)

    def validate(self) -> None:
        """
        Validate the options once, before generation starts.

        Raises:
            ConfigurationError: If the name is empty, a directory is unusable
                or a label is not a string pair
        """
        if not self.name or not self.name.strip():
            raise ConfigurationError(ErrorMessages.ConfigError.EMPTY_NAME)

        reason = check_directory(self.input_dir, os.R_OK)
        if reason:
            raise ConfigurationError(
                ErrorMessages.ConfigError.INVALID_INPUT_DIR.format(path=self.input_dir, reason=reason)
            )

        reason = check_directory(self.output_dir, os.W_OK)
        if reason:
            raise ConfigurationError(
                ErrorMessages.ConfigError.INVALID_OUTPUT_DIR.format(path=self.output_dir, reason=reason)
            )

        for key, value in self.labels.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise ConfigurationError(
                    ErrorMessages.ConfigError.INVALID_LABEL_TYPE.format(label=f"{key}={value}")
                )


class ConfigManager:
    """Manages configuration loading and validation"""

    # Configuration schema - defines expected structure and types
    CONFIG_SCHEMA = {
        'generate': {
            'type': dict,
            'required': False,
            'fields': {
                'name': {'type': str, 'required': False},
                'inputDir': {'type': str, 'required': False},
                'outputDir': {'type': str, 'required': False},
                'labels': {'type': dict, 'required': False, 'values': str}
            }
        },
        'global': {
            'type': dict,
            'required': False,
            'fields': {
                'debug': {'type': bool, 'required': False}
            }
        },
    }

    def __init__(self):
        """Initialize configuration manager"""
        self.config_data: Dict[str, Any] = {}
        self.config_file_path: Optional[str] = None

    def load_config(self, config_path: str) -> Dict[str, Any]:
        """
        Load configuration from YAML file

        Args:
            config_path: Path to configuration file

        Returns:
            Dict containing configuration data

        Raises:
            ConfigurationError: If configuration file cannot be loaded or is invalid
        """
        config_file = Path(config_path)

        if not config_file.is_file():
            raise ConfigurationError(
                ErrorMessages.ConfigError.CONFIG_FILE_NOT_FOUND.format(config_path=config_path)
            )

        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in configuration file {config_path}: {e}") from e
        except OSError as e:
            raise ConfigurationError(f"Failed to load configuration from {config_path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationError("Configuration must be a dictionary")

        self._validate_against_schema(data, self.CONFIG_SCHEMA, "")

        self.config_data = data
        self.config_file_path = config_path
        logger.info(f"Loaded configuration from {config_path}")
        return self.config_data

    def _validate_against_schema(self, data: Dict[str, Any], schema: Dict[str, Any], path: str = "") -> None:
        """
        Validate data against schema definition

        Args:
            data: Data to validate
            schema: Schema definition
            path: Current path for error reporting

        Raises:
            ConfigurationError: If data doesn't match schema
        """
        for key, field_schema in schema.items():
            current_path = f"{path}.{key}" if path else key

            if key in data:
                value = data[key]

                # Skip None values for optional fields
                if value is None and not field_schema.get('required', False):
                    continue

                expected_type = field_schema['type']
                if not isinstance(value, expected_type):
                    raise ConfigurationError(f"{current_path} must be a {expected_type.__name__}")

                if 'values' in field_schema:
                    value_type = field_schema['values']
                    for item_key, item_value in value.items():
                        if not isinstance(item_key, str) or not isinstance(item_value, value_type):
                            raise ConfigurationError(
                                f"{current_path}.{item_key} must be a {value_type.__name__}"
                            )

                # Recursively validate nested dictionaries
                if expected_type == dict and 'fields' in field_schema:
                    self._validate_against_schema(value, field_schema['fields'], current_path)

            elif field_schema.get('required', False):
                raise ConfigurationError(f"Required field {current_path} is missing")

    def get_section(self, section: str) -> Dict[str, Any]:
        """
        Get specific configuration section

        Args:
            section: Section name (e.g., 'generate', 'global')

        Returns:
            Dict containing section data, empty dict if section doesn't exist
        """
        return self.config_data.get(section) or {}

    def get_value(self, key: str, default: Any = None) -> Any:
        """
        Get configuration value by key

        Args:
            key: Configuration key (supports dot notation like 'generate.name')
            default: Default value if key not found

        Returns:
            Configuration value or default
        """
        value = self.config_data

        try:
            for k in key.split('.'):
                value = value[k]
        except (KeyError, TypeError):
            return default
        return default if value is None else value


def get_env_defaults() -> Dict[str, Any]:
    """
    Read generation defaults from the environment (or a .env / settings.ini file).

    Returns:
        Dict with name, input_dir, output_dir and debug
    """
    return {
        'name': env_config(GeneratorConstants.ENV_NAME, default=GeneratorConstants.DEFAULT_NAME),
        'input_dir': env_config(GeneratorConstants.ENV_INPUT_DIR, default=GeneratorConstants.DEFAULT_INPUT_DIR),
        'output_dir': env_config(GeneratorConstants.ENV_OUTPUT_DIR, default=GeneratorConstants.DEFAULT_OUTPUT_DIR),
        'debug': env_config(GeneratorConstants.ENV_DEBUG, default=False, cast=bool),
    }


def resolve_options(name: Optional[str] = None, input_dir: Optional[str] = None,
                    output_dir: Optional[str] = None, labels: Optional[Dict[str, str]] = None,
                    config_manager: Optional[ConfigManager] = None) -> GenerationOptions:
    """
    Merge command-line values, configuration file and environment into options.

    Precedence is command line, then configuration file, then environment,
    then built-in defaults. Labels from the file and the command line are
    merged, command line winning per key.

    Args:
        name: Identity name from the command line
        input_dir: Input directory from the command line
        output_dir: Output directory from the command line
        labels: Labels from the command line
        config_manager: Loaded configuration file, if any

    Returns:
        GenerationOptions (not yet validated)
    """
    env = get_env_defaults()
    section = config_manager.get_section('generate') if config_manager else {}

    def pick(cli_value, file_key, env_key):
        if cli_value is not None:
            return cli_value
        if section.get(file_key) is not None:
            return section[file_key]
        return env[env_key]

    merged_labels = dict(section.get('labels') or {})
    merged_labels.update(labels or {})

    return GenerationOptions(
        name=pick(name, 'name', 'name'),
        input_dir=pick(input_dir, 'inputDir', 'input_dir'),
        output_dir=pick(output_dir, 'outputDir', 'output_dir'),
        labels=merged_labels
    )
