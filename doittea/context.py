"""Execution context for running tasks.

While a task runs through `Tea.run_task`, `current_tea()` returns the Tea
that dispatched it. For coroutine tasks the context covers the whole
coroutine, up to the moment it finishes.

Example:
    def build(group):
        tea = current_tea()
        tea.run_task('lint', [group])
"""

import inspect
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Optional, Sequence

if TYPE_CHECKING:
    from .engine import Tea


_current_tea: ContextVar[Optional['Tea']] = ContextVar('current_tea', default=None)


def current_tea() -> Optional['Tea']:
    """Return the Tea running the current task, or None outside a task."""
    return _current_tea.get()


@contextmanager
def tea_scope(tea: 'Tea'):
    """Bind `tea` as the execution context for the duration of the block."""
    token = _current_tea.set(tea)
    try:
        yield tea
    finally:
        _current_tea.reset(token)


async def _bound(tea: 'Tea', awaitable: Awaitable[Any]) -> Any:
    with tea_scope(tea):
        return await awaitable


def call_in_context(tea: 'Tea', func: Callable[..., Any],
                    args: Sequence[Any] = ()) -> Any:
    """Call `func(*args)` with `tea` bound as the execution context.

    A coroutine result is wrapped so the binding also holds while it is
    awaited later.
    """
    with tea_scope(tea):
        result = func(*args)
    if inspect.iscoroutine(result):
        return _bound(tea, result)
    return result
