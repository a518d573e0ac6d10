"""Source groups: configuration entries resolved into files and destinations.

A source group is any second-level configuration mapping with a `src`
entry:

    configs = {
        'scripts': {
            'app': {'src': ['js/*.js', '#bower:js'], 'des': 'js/app.js@concat'},
        },
    }

Resolving a group fills `files` from every `src` pattern, resolves `des`
and, when the destination names a mapper task, runs it with the group.
The resolved `files` and `des` are written back into the configuration
mapping so other readers of the config see them.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, Generator, List, Optional, Union

from .patterns import Destination, resolve_destination, resolve_sources

if TYPE_CHECKING:
    from .engine import Tea


logger = logging.getLogger(__name__)


@dataclass
class SourceGroup:
    """A declared set of input files and their destination.

    Attributes:
        name: 'config:group' identifier, for messages
        src: Source patterns, in declaration order
        des: Destination pattern, or the resolved Destination
        data: The configuration mapping this group was read from
        files: Resolved file paths
        pending: Future of an asynchronous mapper, if one was started
    """
    name: str
    src: List[str]
    des: Union[str, Destination, None] = None
    data: Dict[str, Any] = field(default_factory=dict, repr=False)
    files: List[str] = field(default_factory=list)
    pending: Optional['asyncio.Future'] = field(default=None, repr=False)

    @classmethod
    def from_config(cls, name: str, data: Dict[str, Any]) -> 'SourceGroup':
        """Build a group from a config mapping.

        A single pattern string is treated as a one-pattern list.
        """
        src = data['src']
        if isinstance(src, str):
            patterns = [src]
        else:
            patterns = list(src)
        return cls(name=name, src=patterns, des=data.get('des'), data=data)

    def __getitem__(self, key: str) -> Any:
        if key in ('files', 'des', 'src'):
            return getattr(self, key)
        return self.data[key]

    def get(self, key: str, default: Any = None) -> Any:
        try:
            return self[key]
        except KeyError:
            return default


def iter_source_groups(
    configs: Dict[str, Any]
) -> Generator[SourceGroup, None, None]:
    """Yield a SourceGroup for every config group carrying `src`."""
    for name, config in configs.items():
        if not isinstance(config, dict):
            continue
        for group, data in config.items():
            if isinstance(data, dict) and data.get('src'):
                yield SourceGroup.from_config(f'{name}:{group}', data)


def parse_sources(
    tea: 'Tea',
    group: SourceGroup,
    done: Optional[Callable[[Any], None]] = None,
) -> SourceGroup:
    """Resolve a group's files and destination, then run its mapper.

    An awaitable mapper result is scheduled, not awaited; its value is
    passed to `done` once available and the future is kept on
    `group.pending`. A plain result is passed to `done` immediately.
    Outside a running event loop an awaitable result is run to completion
    before returning, so callers that must not block should call this
    from inside a running loop. A failing asynchronous mapper is logged
    and left on `group.pending` for the caller to await.
    """
    files: List[str] = []
    for pattern in group.src:
        files.extend(resolve_sources(tea, pattern))
    group.files = files
    group.data['files'] = files

    if isinstance(group.des, str):
        group.des = resolve_destination(tea, group.des)
        group.data['des'] = group.des

    if isinstance(group.des, Destination) and callable(group.des.map):
        result = tea.run_task(group.des.map, [group])
        if inspect.isawaitable(result):
            group.pending = _schedule(group, result, done)
        elif done is not None:
            done(result)

    return group


async def _await(awaitable):
    return await awaitable


def _schedule(group: SourceGroup, awaitable,
              done: Optional[Callable[[Any], None]]):
    """Run an awaitable in the background and forward its value to `done`.

    Without a running event loop the awaitable is run to completion and
    None is returned.
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        value = asyncio.run(_await(awaitable))
        if done is not None:
            done(value)
        return None

    future = asyncio.ensure_future(awaitable)

    def forward(fut):
        if fut.cancelled():
            return
        error = fut.exception()
        if error is not None:
            logger.error("Mapper of %s failed", group.name, exc_info=error)
            return
        if done is not None:
            done(fut.result())

    future.add_done_callback(forward)
    return future


def collect_groups(
    tea: 'Tea',
    done: Optional[Callable[[Any], None]] = None,
) -> List[SourceGroup]:
    """Resolve every source group found in the Tea's configurations."""
    groups = []
    for group in iter_source_groups(tea.configs):
        logger.info("Getting the source files of: %s", group.name)
        groups.append(parse_sources(tea, group, done))
        logger.info("Source files of %s successfully collected.", group.name)
    return groups
