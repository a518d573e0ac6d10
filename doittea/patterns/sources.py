"""Source classes for resolving source patterns into file lists.

Each source pattern is parsed into a SourcePattern and handed to the
matching Source subclass:

- PluginSource: '#name[:ext]', files listed by a registered plugin
- TaskSource: '@name[:ext]', files listed by a registered task
- RawGlobSource: '!pattern', passed verbatim to the glob primitive
- RootGlobSource: 'pattern', globbed under the configured source root

Example:
    files = resolve_sources(tea, "js/**/*.js")
    files = resolve_sources(tea, "#bower:js")
"""

import glob as _glob
import logging
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from .grammar import SourceKind, SourcePattern, parse_source_pattern

if TYPE_CHECKING:
    from doittea.engine import Tea


logger = logging.getLogger(__name__)


def default_glob(pattern: str, root: Optional[str] = None) -> List[str]:
    """Glob primitive used when a Tea is not given one.

    A leading '!' marks a verbatim pattern and is removed before globbing.
    Relative patterns are matched under `root` and returned relative to it.
    """
    if pattern.startswith('!'):
        pattern = pattern[1:]
    if not root or os.path.isabs(pattern):
        return sorted(_glob.glob(pattern, recursive=True))

    files = []
    for match in _glob.glob(os.path.join(root, pattern), recursive=True):
        path = os.path.relpath(match, root)
        if match.endswith(os.sep):
            path += os.sep
        files.append(path)
    return sorted(files)


def strip_cwd(path: str, cwd: str) -> str:
    """Make `path` relative to `cwd` by removing the prefix and one separator."""
    root = cwd.rstrip('/' + os.sep)
    if root and (path == root or path.startswith((root + '/', root + os.sep))):
        path = path[len(root):]
    if path.startswith(('/', os.sep)):
        path = path[1:]
    return path


@dataclass
class Source(ABC):
    """Base class for source resolution strategies.

    Attributes:
        tea: The Tea owning the registries and paths
        pattern: The parsed source pattern
    """
    tea: 'Tea'
    pattern: SourcePattern

    @abstractmethod
    def list_files(self) -> List[str]:
        """Return the files matched by the pattern."""
        pass


@dataclass
class ProviderSource(Source):
    """Source whose files come from a registered provider.

    Provider output is made relative to the working directory and, when
    the pattern has an ':ext' suffix, filtered by extension.
    """

    @abstractmethod
    def provide(self) -> Optional[List[str]]:
        """Return the raw provider output, or None if no provider exists."""
        pass

    def list_files(self) -> List[str]:
        paths = self.provide()
        if paths is None:
            return []

        files = [strip_cwd(p, self.tea.cwd) for p in paths]
        if self.pattern.ext:
            suffix = '.' + self.pattern.ext
            files = [f for f in files if f.endswith(suffix)]
        return files


@dataclass
class PluginSource(ProviderSource):
    """Files listed by calling a registered plugin with no arguments."""

    def provide(self) -> Optional[List[str]]:
        plugin = self.tea.plugins.get(self.pattern.target)
        if plugin is None:
            return None
        return plugin()


@dataclass
class TaskSource(ProviderSource):
    """Files listed by running a registered task."""

    def provide(self) -> Optional[List[str]]:
        task = self.tea.tasks.get(self.pattern.target)
        if task is None:
            return None
        return self.tea.run_task(task)


@dataclass
class RawGlobSource(Source):
    """Pattern handed unchanged to the glob primitive."""

    def list_files(self) -> List[str]:
        return list(self.tea.glob(self.pattern.target))


@dataclass
class RootGlobSource(Source):
    """Pattern joined onto the configured source root and globbed.

    A trailing separator is kept so directory-only patterns still match
    directories alone.
    """

    def list_files(self) -> List[str]:
        root = self.tea.paths.get('src') or ''
        joined = os.path.normpath(os.path.join(root, self.pattern.target))
        if self.pattern.target.endswith(('/', os.sep)):
            joined += os.sep
        return list(self.tea.glob(joined))


_STRATEGIES = {
    SourceKind.PLUGIN: PluginSource,
    SourceKind.TASK: TaskSource,
    SourceKind.RAW: RawGlobSource,
    SourceKind.GLOB: RootGlobSource,
}


def make_source(tea: 'Tea', pattern: str) -> Source:
    """Create the Source strategy for a pattern string."""
    parsed = parse_source_pattern(pattern)
    return _STRATEGIES[parsed.kind](tea, parsed)


def resolve_sources(tea: 'Tea', pattern: str) -> List[str]:
    """Resolve a source pattern into a list of file paths.

    Missing plugins or tasks and empty globs all yield an empty list.
    """
    files = make_source(tea, pattern).list_files()
    logger.debug(" -  Collected %d files from %s", len(files), pattern)
    return files
