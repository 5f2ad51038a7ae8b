"""
Configuration management module for pegrid.

This module provides functionality for loading, validating, and managing
configuration settings for energy grid runs.
"""
import copy
import yaml
from pathlib import Path
import logging
from typing import Dict, Any, Optional, Union
import json

from .helpers import update_dict_recursively

logger = logging.getLogger(__name__)

DEFAULT_CONFIG: Dict[str, Any] = {
    'framework': {'file': None, 'format': 'auto', 'name': None},
    'forcefield': {'file': None, 'adsorbate': None},
    # cutoff None defers to the force field table (12.5 A if the table has none)
    'grid': {'spacing': 0.1, 'cutoff': None, 'n_workers': 1},
    'output': {'directory': 'pegrid_output', 'filename': None},
}

class ConfigManager:
    """Class for managing pegrid configuration settings."""

    def __init__(self, config_file: Optional[Union[str, Path]] = None):
        """
        Initialize the configuration manager with defaults.

        Args:
            config_file: Path to a YAML file whose settings override the defaults (optional)
        """
        self.config: Dict[str, Any] = copy.deepcopy(DEFAULT_CONFIG)
        if config_file is not None:
            self.load_config(config_file)

    def load_config(self, config_file: Union[str, Path]) -> None:
        """
        Load configuration from a YAML file and merge it over the current settings.

        Args:
            config_file: Path to the configuration file
        """
        config_path = Path(config_file)
        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")

        logger.info(f"Loading configuration from {config_path}")
        with open(config_path, 'r') as f:
            user_cfg = yaml.safe_load(f)
        if user_cfg:
            if not isinstance(user_cfg, dict):
                raise ValueError(f"Configuration file {config_path} must contain a mapping.")
            update_dict_recursively(self.config, user_cfg)

        self._validate_config()

    def _validate_config(self) -> None:
        """Validate the current configuration."""
        for key in DEFAULT_CONFIG:
            if not isinstance(self.config.get(key), dict):
                raise ValueError(f"Missing required configuration section: {key}")

        grid = self.config['grid']
        for key in ['spacing', 'n_workers']:
            if grid.get(key) is None:
                raise ValueError(f"Missing required grid setting: {key}")
        if grid['spacing'] <= 0:
            raise ValueError(f"Grid spacing must be positive, got {grid['spacing']}.")
        if grid.get('cutoff') is not None and grid['cutoff'] <= 0:
            raise ValueError(f"Cutoff must be positive, got {grid['cutoff']}.")
        if int(grid['n_workers']) < 1:
            raise ValueError(f"n_workers must be >= 1, got {grid['n_workers']}.")

        if not self.config['output'].get('directory'):
            raise ValueError("Missing required output setting: directory")

    def validate_inputs(self) -> None:
        """Check that everything needed to run a calculation has been provided."""
        self._validate_config()
        if not self.config['framework'].get('file'):
            raise ValueError("Missing required framework setting: file")
        for key in ['file', 'adsorbate']:
            if not self.config['forcefield'].get(key):
                raise ValueError(f"Missing required forcefield setting: {key}")

    def get_framework_config(self) -> Dict[str, Any]:
        return self.config.get('framework', {})

    def get_forcefield_config(self) -> Dict[str, Any]:
        return self.config.get('forcefield', {})

    def get_grid_config(self) -> Dict[str, Any]:
        return self.config.get('grid', {})

    def get_output_config(self) -> Dict[str, Any]:
        return self.config.get('output', {})

    def update_config(self, updates: Dict[str, Any]) -> None:
        """
        Update configuration settings. Entries set to None are ignored, so parsed
        command-line options can be passed through unchanged.

        Args:
            updates: Nested dictionary of configuration updates
        """
        def _drop_none(d: Dict[str, Any]) -> Dict[str, Any]:
            return {k: _drop_none(v) if isinstance(v, dict) else v
                    for k, v in d.items() if v is not None}

        update_dict_recursively(self.config, _drop_none(updates))
        self._validate_config()

    def save_config(self, output_file: Union[str, Path]) -> None:
        """
        Save current configuration to a file.

        Args:
            output_file: Path to save the configuration to
        """
        output_path = Path(output_file)
        logger.info(f"Saving configuration to {output_path}")

        with open(output_path, 'w') as f:
            yaml.dump(self.config, f, default_flow_style=False)

    def to_dict(self) -> Dict[str, Any]:
        return copy.deepcopy(self.config)

    def to_json(self) -> str:
        return json.dumps(self.config, indent=4)

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'ConfigManager':
        """
        Create a ConfigManager from a (possibly partial) dictionary merged over the defaults.

        Args:
            config_dict: Dictionary of configuration settings

        Returns:
            ConfigManager instance
        """
        instance = cls()
        update_dict_recursively(instance.config, copy.deepcopy(config_dict))
        instance._validate_config()
        return instance
