"""Registries for tasks, initializers, plugins and configurations.

A task reference is one of:
- NamedRef: a name looked up in the task registry on every use
- CallableRef: a callable invoked directly
- NoRef: nothing to run

Registration is last-write-wins: registering a name twice silently
replaces the earlier entry. Looking up a missing name returns None.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional


logger = logging.getLogger(__name__)

INIT_KEY = 'init'

KINDS = ('task', 'init', 'plugin', 'config')


class TaskRef:
    """Base class for task references."""


@dataclass(frozen=True)
class NamedRef(TaskRef):
    name: str


@dataclass(frozen=True)
class CallableRef(TaskRef):
    func: Callable[..., Any]


@dataclass(frozen=True)
class NoRef(TaskRef):
    pass


NO_TASK = NoRef()


def task_ref(value: Any) -> TaskRef:
    """Classify a raw task value into a TaskRef."""
    if isinstance(value, TaskRef):
        return value
    if isinstance(value, str):
        return NamedRef(value)
    if callable(value):
        return CallableRef(value)
    return NO_TASK


@dataclass
class Registry:
    """Name -> entity mappings owned by a single Tea.

    Attributes:
        tasks: Task name -> callable
        inits: Initializer name -> callable
        plugins: Plugin name -> zero-argument file-list provider
        configs: Config name -> mapping of groups
    """
    tasks: Dict[str, Callable[..., Any]] = field(default_factory=dict)
    inits: Dict[str, Callable[..., Any]] = field(default_factory=dict)
    plugins: Dict[str, Any] = field(default_factory=dict)
    configs: Dict[str, Any] = field(default_factory=dict)

    def _mapping(self, kind: str) -> Dict[str, Any]:
        if kind not in KINDS:
            raise ValueError(
                f"Unknown registry kind: {kind!r}. Valid kinds: {KINDS}"
            )
        return getattr(self, kind + 's')

    def register(self, kind: str, name: str, value: Any) -> None:
        """Store `value` under `name` in the mapping for `kind`."""
        mapping = self._mapping(kind)
        if name in mapping:
            logger.debug("Replacing %s %s", kind, name)
        mapping[name] = value

    def get(self, kind: str, name: str) -> Optional[Any]:
        """Return the entity registered under `name`, or None."""
        return self._mapping(kind).get(name)

    def register_bundle(self, bundle: Dict[str, Any],
                        source: Optional[str] = None) -> None:
        """Register every entry of a task bundle.

        The entry named `init` is an initializer, registered under its
        `name` attribute or else the bundle's source path. Callables are
        tasks; anything else is a configuration.
        """
        for name, value in bundle.items():
            if name == INIT_KEY:
                init_name = getattr(value, 'name', None) or source or INIT_KEY
                logger.debug(" -  Registering initializer: %s", init_name)
                self.register('init', init_name, value)
            elif callable(value):
                logger.debug(" -  Registering shared task: %s", name)
                self.register('task', name, value)
            else:
                logger.debug(" -  Registering configuration: %s", name)
                self.register('config', name, value)

    def resolve(self, ref: TaskRef) -> Optional[Callable[..., Any]]:
        """Resolve a reference to a registered callable.

        Returns None for NoRef and for names missing from the registry.
        """
        if isinstance(ref, CallableRef):
            return ref.func
        if isinstance(ref, NamedRef):
            return self.tasks.get(ref.name)
        return None
