"""YAML parsing and validation for configuration files.

A configuration file maps config names to config values, usually
mappings of source groups:

    paths:
      src: assets
      des: public

    scripts:
      app:
        src: ["js/*.js", "#bower:js"]
        des: "js/app-$VERSION$.js@concat"
"""

from pathlib import Path
from typing import Any, Dict, Union

import yaml


class ConfigLoadError(Exception):
    """Error loading a configuration or task file."""
    pass


class ConfigParseError(ConfigLoadError):
    """Error parsing or validating a YAML configuration."""
    pass


def parse_config_file(path: Union[str, Path]) -> Dict[str, Any]:
    """Parse and validate a YAML configuration file.

    Args:
        path: Path to the YAML file

    Returns:
        Mapping of config name to config value

    Raises:
        ConfigParseError: If the file is invalid
        FileNotFoundError: If the file doesn't exist
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        return parse_config_string(f.read())


def parse_config_string(content: str) -> Dict[str, Any]:
    """Parse a YAML configuration from a string."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigParseError(f"Invalid YAML syntax: {e}")

    if data is None:
        data = {}

    return validate_configs(data)


def validate_configs(data: Any) -> Dict[str, Any]:
    """Validate a configuration mapping.

    Raises:
        ConfigParseError: If the root is not a mapping, a source group
                          has an invalid `src`/`des`, or `paths` is not
                          a mapping.
    """
    if not isinstance(data, dict):
        raise ConfigParseError("Config root must be a mapping")

    paths = data.get('paths')
    if paths is not None and not isinstance(paths, dict):
        raise ConfigParseError("'paths' must be a mapping")

    for name, config in data.items():
        if not isinstance(config, dict):
            continue
        for group, cfg in config.items():
            if isinstance(cfg, dict) and 'src' in cfg:
                _validate_group(cfg, f'{name}:{group}')

    return data


def _validate_group(cfg: Dict[str, Any], label: str) -> None:
    src = cfg['src']
    if isinstance(src, list):
        if not all(isinstance(p, str) for p in src):
            raise ConfigParseError(f"Group '{label}': 'src' entries must be strings")
    elif not isinstance(src, str):
        raise ConfigParseError(
            f"Group '{label}': 'src' must be a string or list of strings"
        )

    if 'des' in cfg and cfg['des'] is not None and not isinstance(cfg['des'], str):
        raise ConfigParseError(f"Group '{label}': 'des' must be a string")
