import asyncio
import inspect
from typing import Awaitable
from typing import Optional
from typing import TypeVar

T = TypeVar("T")


async def run_cancellable(
    aw: Awaitable[T], cancel_event: Optional[asyncio.Event] = None
) -> T:
    """
    Await ``aw`` unless ``cancel_event`` is set first.

    If the event is already set, ``aw`` never starts. If it becomes set
    while ``aw`` is running, the inner work is cancelled. Either way
    asyncio.CancelledError is raised instead of a result.
    """
    if cancel_event is None:
        return await aw

    if cancel_event.is_set():
        if inspect.iscoroutine(aw):
            aw.close()
        raise asyncio.CancelledError("cancelled before start")

    work = asyncio.ensure_future(aw)
    waiter = asyncio.ensure_future(cancel_event.wait())
    try:
        done, _ = await asyncio.wait(
            {work, waiter}, return_when=asyncio.FIRST_COMPLETED
        )
    except asyncio.CancelledError:
        work.cancel()
        waiter.cancel()
        raise

    if work in done:
        waiter.cancel()
        return work.result()

    work.cancel()
    # wait for the inner work to unwind before reporting
    await asyncio.wait({work})
    raise asyncio.CancelledError("cancelled by cancel_event")
