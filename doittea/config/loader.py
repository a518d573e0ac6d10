"""Loading configuration and task files from disk.

Configuration files:
- .yaml / .yml: a mapping of config names (see parser.py)
- .py: a module defining `configure(tea)` returning a mapping, or a
       module-level `CONFIG` mapping

Task files are Python modules. Their exported names come from `__all__`
when defined, otherwise every public function defined in the module and
every public mapping.
"""

import importlib.util
import inspect
from pathlib import Path
from types import ModuleType
from typing import TYPE_CHECKING, Any, Dict, Union

from .parser import ConfigLoadError, parse_config_file, validate_configs

if TYPE_CHECKING:
    from doittea.engine import Tea


YAML_SUFFIXES = ('.yaml', '.yml')


def import_path(path: Union[str, Path]) -> ModuleType:
    """Import a Python file as a module, without adding it to sys.modules."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Module file not found: {path}")

    spec = importlib.util.spec_from_file_location(
        f'doittea_{path.stem}', path
    )
    if spec is None or spec.loader is None:
        raise ConfigLoadError(f"Cannot import {path}")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def load_config_file(path: Union[str, Path], tea: 'Tea') -> Dict[str, Any]:
    """Load a configuration file into a mapping of config names.

    Raises:
        ConfigLoadError: If the file type is unsupported or the module
                         provides no mapping
    """
    path = Path(path)

    if path.suffix in YAML_SUFFIXES:
        return parse_config_file(path)

    if path.suffix != '.py':
        raise ConfigLoadError(f"Unsupported config file type: {path}")

    module = import_path(path)
    factory = getattr(module, 'configure', None)
    if callable(factory):
        configs = factory(tea)
    else:
        configs = getattr(module, 'CONFIG', None)

    if configs is None:
        return {}
    if not isinstance(configs, dict):
        raise ConfigLoadError(
            f"{path}: configure() or CONFIG must provide a mapping"
        )
    return validate_configs(configs)


def module_exports(module: ModuleType) -> Dict[str, Any]:
    """Return the task bundle exported by a task module."""
    names = getattr(module, '__all__', None)
    if names is not None:
        return {name: getattr(module, name) for name in names}

    exports = {}
    for name, value in vars(module).items():
        if name.startswith('_'):
            continue
        if inspect.isfunction(value) and value.__module__ == module.__name__:
            exports[name] = value
        elif isinstance(value, dict):
            exports[name] = value
    return exports


def load_task_module(path: Union[str, Path]) -> Dict[str, Any]:
    """Import a task file and return its exported bundle."""
    return module_exports(import_path(path))
