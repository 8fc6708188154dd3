"""
Configuration loader for YAML files.

Handles loading, environment overrides and validation of the
productflow configuration file.
"""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml
from pydantic import ValidationError

from .models import ProductFlowConfig

DEFAULT_CONFIG_DIR = Path.home() / ".productflow"
DEFAULT_CONFIG_FILE = DEFAULT_CONFIG_DIR / "config.yaml"

# Environment variable -> (section, key)
ENV_OVERRIDES = {
    "PRODUCTFLOW_URL": ("backend", "url"),
    "PRODUCTFLOW_API_KEY": ("backend", "api_key"),
    "PRODUCTFLOW_FLOW": ("wizard", "flow"),
    "PRODUCTFLOW_STATE_DIR": ("wizard", "state_dir"),
    "PRODUCTFLOW_LOG_LEVEL": ("logging", "level"),
    "PRODUCTFLOW_LOG_FILE": ("logging", "file"),
}


class ConfigError(Exception):
    """Configuration loading or validation error."""
    pass


class ConfigLoader:
    """
    Loads and validates configuration from a YAML file.

    Values from the environment take precedence over the file, so a
    checked-in config can leave the API key out.
    """

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the config loader.

        Args:
            config_path: Path to the config file. Defaults to
                ~/.productflow/config.yaml, which may be absent.
        """
        self._explicit = config_path is not None
        self.config_path = Path(config_path).expanduser() if config_path else DEFAULT_CONFIG_FILE
        self._config: Optional[ProductFlowConfig] = None

    def load(self, environ: Optional[Dict[str, str]] = None) -> "ConfigLoader":
        """
        Load the configuration file and apply environment overrides.

        Args:
            environ: Environment mapping (defaults to os.environ)

        Returns:
            Self for method chaining
        """
        data: Dict[str, Any] = {}

        if self.config_path.is_file():
            data = self._read_yaml(self.config_path)
        elif self._explicit:
            raise ConfigError(f"Configuration file does not exist: {self.config_path}")

        self._apply_env(data, os.environ if environ is None else environ)
        self._config = self._parse(data)
        return self

    def _read_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse a YAML file."""
        try:
            with open(file_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {file_path}: {e}")
        except IOError as e:
            raise ConfigError(f"Cannot read {file_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at the top of {file_path}")
        return data

    def _apply_env(self, data: Dict[str, Any], environ: Dict[str, str]) -> None:
        """Overlay environment variables onto the raw config data."""
        for var, (section, key) in ENV_OVERRIDES.items():
            value = environ.get(var)
            if value:
                section_data = data.get(section) or {}
                section_data[key] = value
                data[section] = section_data

    def _parse(self, data: Dict[str, Any]) -> ProductFlowConfig:
        """Validate raw data against the config model."""
        try:
            return ProductFlowConfig(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}")
        except TypeError as e:
            raise ConfigError(f"Invalid configuration structure: {e}")

    @property
    def config(self) -> ProductFlowConfig:
        """Get the loaded configuration (loading it on first access)."""
        if self._config is None:
            self.load()
        return self._config

    def save(self, output_path: Optional[Union[str, Path]] = None) -> Path:
        """
        Save the current configuration to a YAML file.

        Args:
            output_path: Target file (defaults to the loader's path)

        Returns:
            Path written
        """
        path = Path(output_path).expanduser() if output_path else self.config_path
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            yaml.dump(
                self.config.model_dump(mode="json", exclude_none=True),
                f,
                default_flow_style=False,
                sort_keys=False,
            )
        return path

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConfigLoader":
        """
        Create a ConfigLoader from a dictionary.

        Useful for programmatic configuration and tests.
        """
        loader = cls()
        loader._config = loader._parse(data)
        return loader
