"""Sequential asynchronous iteration.

`iterate` walks a list one item at a time. The step callable decides when to
move on by calling `advance()`, or stops the walk with `abort(error)`. The
next item is never handed out before the current step advances, so steps
never overlap.

Example:
    async def main():
        def step(item, index, advance, abort):
            print(index, item)
            advance()

        items = await iterate(['a', 'b', 'c'], step)
"""

import asyncio
from typing import Any, Callable, Sequence


Step = Callable[[Any, int, Callable[[], None], Callable[[Any], None]], None]


class IterationAborted(Exception):
    """Raised when a step aborts the iteration without an exception."""

    def __init__(self, reason: Any = None):
        super().__init__(reason)
        self.reason = reason


def iterate(items: Sequence[Any], step: Step) -> 'asyncio.Future':
    """Process `items` sequentially, one `step` call at a time.

    Args:
        items: List or tuple to walk
        step: Callable receiving (item, index, advance, abort)

    Returns:
        Future resolving with `items` itself once every step advanced,
        or failing with the error passed to `abort`.
    """
    loop = asyncio.get_running_loop()
    future = loop.create_future()

    if not isinstance(items, (list, tuple)):
        future.set_exception(
            TypeError("This iterator only can iterate a list or tuple.")
        )
        return future

    def run(index: int) -> None:
        if future.done():
            return
        if index >= len(items):
            future.set_result(items)
            return

        used = False

        def advance() -> None:
            nonlocal used
            if used:
                return
            used = True
            loop.call_soon(run, index + 1)

        def abort(error: Any = None) -> None:
            nonlocal used
            if used:
                return
            used = True
            if future.done():
                return
            if not isinstance(error, BaseException):
                error = IterationAborted(error)
            future.set_exception(error)

        try:
            step(items[index], index, advance, abort)
        except Exception as e:
            if not future.done():
                future.set_exception(e)

    run(0)
    return future
