"""Configuration and task registration layer over doit.

doittea resolves declared source groups into files and destinations,
dispatches named tasks (falling back to doit for unknown names) and maps
filesystem-change events to the tasks they should trigger.

Example:
    from doittea import Tea, WatchEvent

    tea = Tea({'paths': {'src': 'assets', 'des': 'public'}})
    tea.load({
        'concat': concat_files,
        'scripts': {'app': {'src': ['js/*.js'], 'des': 'js/app.js@concat'}},
    })

    et = tea.event_task('concat{change}', WatchEvent('change', 'assets/js/a.js'))

Classes:
    Tea: Registry owner, resolver entry point and task dispatcher
    SourceGroup: A resolved source group
    Destination: Resolved output path and mapper
    EventTask, WatchEvent: Event-to-task matching
    DoitRunner: Runs unknown task names with doit

Functions:
    iterate: Sequential asynchronous iteration over a list
    current_tea: The Tea running the current task
"""

from .engine import Tea
from .context import current_tea
from .events import EventTask, WatchEvent
from .groups import SourceGroup
from .host import DoitRunner
from .iterate import IterationAborted, iterate
from .patterns import Destination
from .registry import Registry, NamedRef, CallableRef, NoRef, task_ref

__all__ = [
    'Tea',
    'current_tea',
    'EventTask',
    'WatchEvent',
    'SourceGroup',
    'DoitRunner',
    'IterationAborted',
    'iterate',
    'Destination',
    'Registry',
    'NamedRef',
    'CallableRef',
    'NoRef',
    'task_ref',
]
