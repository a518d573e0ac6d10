"""Matching filesystem-change events to registered tasks.

A watch entry names the task to run for each event, with an optional
event-type filter and sub-filter:

    "build"                 run 'build' on every event
    "build{change|add}"     run 'build' only on 'change' and 'add' events
    "lint:%FILE%"           run 'lint', passing the event path as `file`

Example:
    et = event_task(tea, "build{change|add}:js", WatchEvent('change', 'a.js'))
    if et.task is not None:
        et.task()
"""

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Optional

from .patterns.grammar import parse_event_pattern, substitute_file

if TYPE_CHECKING:
    from .engine import Tea


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WatchEvent:
    """A filesystem-change event, e.g. WatchEvent('change', 'js/app.js')."""
    type: str
    path: str


@dataclass
class EventTask:
    """Task resolved for a single watch event.

    Attributes:
        when: Accepted event types joined with ', ', or 'all'
        name: Task name with filters removed
        task: Callable to run, or None when the event is filtered out
        file: Sub-filter from a trailing ':segment'
    """
    when: str = 'all'
    name: str = ''
    task: Optional[Callable[..., Any]] = None
    file: Optional[str] = None


def event_task(tea: 'Tea', pattern: str, event: WatchEvent) -> EventTask:
    """Resolve the task a watch pattern should run for `event`.

    Unknown task names resolve to a callable running the host tool's task
    of that name. The descriptor is returned even when the event type is
    filtered out, with `task` set to None.
    """
    spec = parse_event_pattern(substitute_file(pattern, event.path))

    task = tea.tasks.get(spec.base)
    if not callable(task):
        task = _host_task(tea, spec.base)

    if not spec.accepts(event.type):
        logger.debug("Event %s on %s skipped for %s (when: %s)",
                     event.type, event.path, spec.base, spec.when)
        task = None

    return EventTask(
        when=spec.when,
        name=spec.base,
        task=task,
        file=spec.sub_filter,
    )


def _host_task(tea: 'Tea', name: str) -> Callable[..., Any]:
    def run_host_task(callback=None):
        return tea.runner(name, None, callback)
    return run_host_task
