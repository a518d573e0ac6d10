"""Configuration and task file loading.

Example config.yaml:
    paths:
      src: assets
      des: public

    scripts:
      app:
        src: ["js/*.js"]
        des: "js/app.js@concat"

Usage:
    from doittea import Tea
    tea = Tea('config/*.yaml').load('tasks/*.py')
"""

from .parser import (
    ConfigLoadError, ConfigParseError,
    parse_config_file, parse_config_string, validate_configs,
)
from .loader import import_path, load_config_file, load_task_module, module_exports

__all__ = [
    'ConfigLoadError',
    'ConfigParseError',
    'parse_config_file',
    'parse_config_string',
    'validate_configs',
    'import_path',
    'load_config_file',
    'load_task_module',
    'module_exports',
]
