"""Destination resolution for source groups.

Pattern syntax:
- out/path@mapper - output joined onto the destination root, plus the
                    registered task `mapper` for post-processing
- out/path        - returned unchanged
- $VERSION$       - replaced with the current Unix time in milliseconds

Example:
    des = resolve_destination(tea, "js/app-$VERSION$.js@concat")
    # Destination(out='dist/js/app-1700000000000.js', map=<function concat>)
"""

import os
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional, Union

from .grammar import VERSION_PLACEHOLDER, parse_destination_pattern

if TYPE_CHECKING:
    from doittea.engine import Tea


@dataclass(frozen=True)
class Destination:
    """Resolved output path and optional mapper task.

    Attributes:
        out: Output path under the destination root
        map: Registered mapper callable, or None for no post-processing
    """
    out: str
    map: Optional[Callable[..., Any]] = None


def version_stamp() -> str:
    """Current Unix time in milliseconds, as a string."""
    return str(int(time.time() * 1000))


def resolve_destination(tea: 'Tea', pattern: str) -> Union[Destination, str]:
    """Resolve a destination pattern.

    Returns a Destination when the pattern names a mapper, else the
    pattern itself.
    """
    parsed = parse_destination_pattern(pattern)
    if parsed.mapper is None:
        return pattern

    out = parsed.out.replace(VERSION_PLACEHOLDER, version_stamp())
    root = tea.paths.get('des') or ''
    return Destination(
        out=os.path.join(root, out),
        map=tea.tasks.get(parsed.mapper),
    )
