"""Pattern grammar for source, destination and event-task strings.

Source patterns:
- #name[:ext] - files listed by a registered plugin
- @name[:ext] - files listed by a registered task
- !pattern    - raw glob, not prefixed with the source root
- pattern     - glob relative to the source root

Destination patterns:
- out/path@mapper - output path plus a mapper task name
- out/path        - plain output path

Event-task patterns:
- name{change|add}:sub - task name, event filter and sub-filter
- %FILE% is replaced with the event path before parsing

Example:
    spec = parse_event_pattern("build{change|add}:js")
    spec.base          # 'build'
    spec.event_filter  # ('change', 'add')
    spec.sub_filter    # 'js'
"""

import re
from dataclasses import dataclass
from enum import Enum, auto
from typing import Generator, Optional, Tuple


FILE_PLACEHOLDER = '%FILE%'
VERSION_PLACEHOLDER = '$VERSION$'

_FILTER_RE = re.compile(r'\{[a-zA-Z\d|\s]+\}')


class SourceKind(Enum):
    """How a source pattern is turned into a list of files."""
    PLUGIN = auto()     # '#name[:ext]'
    TASK = auto()       # '@name[:ext]'
    RAW = auto()        # '!pattern'
    GLOB = auto()       # pattern joined onto the source root


_SOURCE_PREFIXES = (
    ('#', SourceKind.PLUGIN),
    ('@', SourceKind.TASK),
    ('!', SourceKind.RAW),
)


@dataclass(frozen=True)
class SourcePattern:
    """Parsed source pattern.

    Attributes:
        kind: Resolution strategy
        target: Plugin/task name, or the glob pattern for RAW and GLOB
        ext: Extension filter (without the dot) for PLUGIN and TASK
    """
    kind: SourceKind
    target: str
    ext: Optional[str] = None


@dataclass(frozen=True)
class DestinationPattern:
    """Parsed destination pattern. `mapper` is None for plain paths."""
    out: str
    mapper: Optional[str] = None


@dataclass(frozen=True)
class PatternSpec:
    """Parsed event-task pattern.

    Attributes:
        base: Task name with every event filter removed
        event_filter: Declared event types, or None when undeclared
        sub_filter: Trailing ':segment', passed through to consumers
    """
    base: str
    event_filter: Optional[Tuple[str, ...]] = None
    sub_filter: Optional[str] = None

    @property
    def when(self) -> str:
        """Human readable filter description."""
        if self.event_filter is None:
            return 'all'
        return ', '.join(self.event_filter)

    def accepts(self, event_type: str) -> bool:
        """Return True if an event of this type should trigger the task."""
        if self.event_filter is None:
            return True
        return event_type in self.event_filter


def parse_source_pattern(text: str) -> SourcePattern:
    """Parse a source pattern string."""
    for prefix, kind in _SOURCE_PREFIXES:
        if not text.startswith(prefix):
            continue
        if kind is SourceKind.RAW:
            return SourcePattern(kind, text)
        parts = text[1:].split(':')
        ext = parts[1] if len(parts) > 1 and parts[1] else None
        return SourcePattern(kind, parts[0], ext)
    return SourcePattern(SourceKind.GLOB, text)


def parse_destination_pattern(text: str) -> DestinationPattern:
    """Parse a destination pattern string."""
    if '@' not in text:
        return DestinationPattern(text)
    parts = text.split('@')
    return DestinationPattern(parts[0], parts[1])


class TokenType(Enum):
    TEXT = auto()
    FILTER = auto()


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str


def tokenize_event_pattern(text: str) -> Generator[Token, None, None]:
    """Split a task name into literal text and `{a|b}` filter tokens.

    FILTER token values hold the braces' content with whitespace removed.
    """
    last_end = 0
    for match in _FILTER_RE.finditer(text):
        if match.start() > last_end:
            yield Token(TokenType.TEXT, text[last_end:match.start()])
        content = re.sub(r'\s+', '', match.group(0)[1:-1])
        yield Token(TokenType.FILTER, content)
        last_end = match.end()
    if last_end < len(text):
        yield Token(TokenType.TEXT, text[last_end:])


def substitute_file(text: str, path: str) -> str:
    """Replace every %FILE% placeholder with `path`."""
    return text.replace(FILE_PLACEHOLDER, path)


def parse_event_pattern(text: str) -> PatternSpec:
    """Parse an event-task pattern (after %FILE% substitution).

    Only the first filter group declares the accepted event types; any
    further groups are stripped from the name and otherwise ignored.
    """
    parts = text.split(':')
    sub_filter = parts[1] if len(parts) > 1 and parts[1] else None

    base_parts = []
    event_filter = None
    for token in tokenize_event_pattern(parts[0]):
        if token.type is TokenType.TEXT:
            base_parts.append(token.value)
        elif event_filter is None:
            event_filter = tuple(v for v in token.value.split('|') if v)

    return PatternSpec(
        base=''.join(base_parts),
        event_filter=event_filter,
        sub_filter=sub_filter,
    )
