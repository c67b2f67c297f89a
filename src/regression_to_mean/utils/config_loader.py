"""Configuration loader utility for YAML files."""

from pathlib import Path
from typing import Any, Dict, Union
import yaml

from ..simulator.core.errors import InvalidConfiguration


DEFAULT_CONFIG_PATH = Path(__file__).resolve().parent.parent / 'config' / 'simulation.yml'

REQUIRED_SECTIONS = {
    'population': ['size', 'propensity'],
    'outcomes': ['baseline_period', 'followup_period', 'luck'],
    'selection': ['proportion'],
    'trial': ['allocation_prob', 'effect'],
    'seeds': ['propensity', 'luck', 'assignment', 'effect'],
}


def load_config(config_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load configuration from YAML file.

    Parameters
    ----------
    config_path : str or Path
        Path to the YAML configuration file. Defaults to the packaged
        `config/simulation.yml`.

    Returns
    -------
    Dict[str, Any]
        Dictionary containing configuration parameters.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist.
    yaml.YAMLError
        If the YAML file is malformed.
    InvalidConfiguration
        If a required section or key is missing.
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r') as f:
        try:
            config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Error parsing YAML file {config_path}: {e}")

    validate_config(config)
    return config


def validate_config(config: Dict[str, Any]) -> None:
    """
    Check that every section the pipeline reads is present.

    Value ranges are checked by the pipeline stages themselves when they
    receive the parameters.

    Parameters
    ----------
    config : Dict[str, Any]
        Parsed configuration.
    """
    if not isinstance(config, dict):
        raise InvalidConfiguration("Configuration must be a mapping")

    for section, keys in REQUIRED_SECTIONS.items():
        if section not in config:
            raise InvalidConfiguration(f"Configuration missing section: {section}")
        missing = [key for key in keys if key not in config[section]]
        if missing:
            raise InvalidConfiguration(f"Section '{section}' missing keys: {missing}")

    luck_seeds = config['seeds']['luck']
    for period_key in ('baseline_period', 'followup_period'):
        period_id = config['outcomes'][period_key]
        if period_id not in luck_seeds:
            raise InvalidConfiguration(f"No luck seed configured for period {period_id}")


def save_config(config: Dict[str, Any], config_path: Union[str, Path]) -> None:
    """
    Save configuration to YAML file.

    Parameters
    ----------
    config : Dict[str, Any]
        Dictionary containing configuration parameters.
    config_path : str or Path
        Path where to save the YAML configuration file.
    """
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, 'w') as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)
