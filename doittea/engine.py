"""Tea - the configuration and task registration layer over doit.

A Tea owns the task, initializer, plugin and configuration registries and
is passed to every resolver. It loads configuration and task files,
resolves the source groups they declare and dispatches tasks, falling
back to the host build tool for names it does not know.

Example:
    tea = Tea('config/*.yaml')
    tea.load_plugins()
    tea.load('tasks/*.py')
    tea.init()

    tea.run_task('build', [tea.configs['scripts']['app']])
"""

import asyncio
import glob as _glob
import logging
import os
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from .config import load_config_file, load_task_module
from .context import call_in_context
from .events import EventTask, WatchEvent, event_task
from .groups import SourceGroup, collect_groups, parse_sources
from .host import DoitRunner
from .iterate import Step, iterate
from .patterns import Destination, default_glob, resolve_destination, resolve_sources
from .registry import CallableRef, NamedRef, Registry, task_ref


logger = logging.getLogger(__name__)

PLUGIN_GROUP = 'doittea.plugins'


class Tea:
    """Registry owner and task dispatcher.

    Attributes:
        registry: Task, initializer, plugin and config mappings
        cwd: Working directory stripped from provider file paths
        glob: Glob primitive, `glob(pattern) -> list of paths`
        runner: Host task runner, `runner(name, args, callback)`
        groups: Source groups resolved by the last `collect_sources`
    """

    env_var = 'DOITTEA_ENV'
    default_env = 'development'

    def __init__(self, config: Union[str, Dict[str, Any], None] = None, *,
                 cwd: Optional[str] = None,
                 glob: Optional[Callable[[str], List[str]]] = None,
                 runner: Optional[Callable[..., Any]] = None):
        self.registry = Registry()
        self.cwd = cwd if cwd is not None else os.getcwd()
        self.glob = glob or partial(default_glob, root=self.cwd)
        self.runner = runner or DoitRunner()
        self.groups: List[SourceGroup] = []

        if config is not None:
            self.configure(config)

    @property
    def tasks(self) -> Dict[str, Callable[..., Any]]:
        return self.registry.tasks

    @property
    def inits(self) -> Dict[str, Callable[..., Any]]:
        return self.registry.inits

    @property
    def plugins(self) -> Dict[str, Any]:
        return self.registry.plugins

    @property
    def configs(self) -> Dict[str, Any]:
        return self.registry.configs

    @property
    def paths(self) -> Dict[str, str]:
        """The 'paths' config holding the 'src' and 'des' roots."""
        paths = self.configs.get('paths')
        return paths if isinstance(paths, dict) else {}

    def register(self, kind: str, name: str, value: Any) -> 'Tea':
        """Register a task, init, plugin or config under `name`."""
        self.registry.register(kind, name, value)
        return self

    def _files(self, pattern: str) -> List[str]:
        return sorted(_glob.glob(os.path.join(self.cwd, pattern), recursive=True))

    def configure(self, config: Union[str, Dict[str, Any]]) -> 'Tea':
        """Merge configurations from a mapping or a glob of config files.

        A file that fails to load is logged and skipped.
        """
        if isinstance(config, dict):
            for name, value in config.items():
                self.register('config', name, value)
                logger.info("Configuration %s successfully imported.", name)
            return self

        for path in self._files(config):
            logger.info("Importing configuration: %s...", path)
            try:
                configs = load_config_file(path, self)
            except Exception:
                logger.exception("Failed to import configuration %s", path)
                continue

            for name, value in configs.items():
                logger.debug(" -  Registering configuration: %s", name)
                self.register('config', name, value)
            logger.info("Configuration %s successfully imported.", path)
        return self

    def load(self, tasks: Union[str, Dict[str, Any]],
             done: Optional[Callable[[Any], None]] = None) -> 'Tea':
        """Register tasks from a bundle or a glob of task files, then
        resolve every source group in the configurations.

        A file that fails to import is logged and skipped.
        """
        if isinstance(tasks, dict):
            logger.info("Importing task...")
            self.registry.register_bundle(tasks)
            logger.info("Task successfully imported.")
        else:
            for path in self._files(tasks):
                logger.info("Importing task: %s...", path)
                try:
                    bundle = load_task_module(path)
                except Exception:
                    logger.exception("Failed to import task %s", path)
                    continue
                self.registry.register_bundle(bundle, os.path.relpath(path, self.cwd))
                logger.info("Task %s successfully imported.", path)

        self.collect_sources(done)
        return self

    def load_plugins(self, plugins: Optional[Dict[str, Any]] = None,
                     group: str = PLUGIN_GROUP) -> 'Tea':
        """Register plugins from a mapping, or from installed entry points.

        An entry point that fails to load is logged and skipped.
        """
        if plugins is None:
            plugins = {}
            from importlib.metadata import entry_points
            for ep in entry_points(group=group):
                try:
                    plugins[ep.name] = ep.load()
                except Exception:
                    logger.exception("Failed to load plugin %s", ep.name)

        logger.info("Registering plugins...")
        for name, plugin in plugins.items():
            logger.debug(" -  Plugin %s registered.", name)
            self.register('plugin', name, plugin)
        logger.info("Registering plugins completed.")
        return self

    def init(self, names: Union[str, Sequence[str], None] = None) -> 'Tea':
        """Run initializers: one by name, a list in order, or all of them."""
        if isinstance(names, str):
            task = self.inits.get(names)
            if callable(task):
                call_in_context(self, task, [self])
                logger.debug(" -  Task initializer %s initialized.", names)
            return self

        if names is None:
            names = list(self.inits)

        logger.info("Initializing tasks...")
        for name in names:
            self.init(name)
        logger.info("Tasks initialized.")
        return self

    def run_task(self, task: Any, args: Optional[Sequence[Any]] = None,
                 callback: Optional[Callable[..., Any]] = None) -> Any:
        """Run a task given by name or callable.

        Unknown names are run by the host build tool. Callables are called
        with `args` and this Tea as the execution context; their result is
        returned as-is, which may be a coroutine for the caller to await.
        Anything else returns this Tea.
        """
        ref = task_ref(task)

        if isinstance(ref, NamedRef):
            handler = self.registry.resolve(ref)
            if callable(handler):
                return self.run_task(handler, args)
            return self.runner(ref.name, args, callback)

        if isinstance(ref, CallableRef):
            return call_in_context(self, ref.func, list(args or []))

        return self

    def collect_sources(self, done: Optional[Callable[[Any], None]] = None
                        ) -> List[SourceGroup]:
        """Resolve every source group declared in the configurations."""
        self.groups = collect_groups(self, done)
        return self.groups

    @property
    def pending(self) -> List['asyncio.Future']:
        """Futures of asynchronous mappers still owned by `groups`."""
        return [g.pending for g in self.groups if g.pending is not None]

    def parse_sources(self, group: Union[SourceGroup, Dict[str, Any]],
                      done: Optional[Callable[[Any], None]] = None) -> SourceGroup:
        """Resolve a single source group (or its config mapping)."""
        if isinstance(group, dict):
            group = SourceGroup.from_config('', group)
        return parse_sources(self, group, done)

    def get_source_files(self, pattern: str) -> List[str]:
        return resolve_sources(self, pattern)

    def parse_destination(self, pattern: str) -> Union[Destination, str]:
        return resolve_destination(self, pattern)

    def iterate(self, items: Sequence[Any], step: Step):
        return iterate(items, step)

    def event_task(self, pattern: str, event: WatchEvent) -> EventTask:
        return event_task(self, pattern, event)

    def byenv(self, options: Any) -> Any:
        """Select the entry of `options` for the current environment.

        The environment is read once from DOITTEA_ENV (default
        'development') and stored as the 'environment' config.
        """
        if not self.configs.get('environment'):
            self.configs['environment'] = os.environ.get(self.env_var, self.default_env)

        if isinstance(options, dict):
            return options.get(self.configs['environment'], {})
        return {}
