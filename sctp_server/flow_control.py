"""
Flow control for the server loops: a cancellation token and a bounded readiness wait.
Every loop waits on its socket for at most one poll interval, then looks at the token again.
This keeps the delay between a stop request and the loop exiting below one interval, without
having to abort a system call that is already running.
"""

import asyncio
import errno
import socket

from ._types import PollOutcome, PollResult


class CancellationToken:
    """
    Set from signal handlers, so cancel() must stay a plain attribute write.
    """

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


async def wait_readable(sock: socket.socket, timeout: float) -> PollOutcome:
    loop = asyncio.get_running_loop()
    waiter: asyncio.Future[None] = loop.create_future()

    def wakeup() -> None:
        if not waiter.done():
            waiter.set_result(None)

    try:
        loop.add_reader(sock, wakeup)
    except InterruptedError:
        return PollOutcome(PollResult.INTERRUPTED)
    except ValueError as exc:
        # closed socket, fileno() is -1
        return PollOutcome(PollResult.ERROR, OSError(errno.EBADF, str(exc)))
    except OSError as exc:
        return PollOutcome(PollResult.ERROR, exc)

    try:
        await asyncio.wait_for(waiter, timeout)
    except asyncio.TimeoutError:
        return PollOutcome(PollResult.TIMED_OUT)
    except InterruptedError:
        return PollOutcome(PollResult.INTERRUPTED)
    finally:
        loop.remove_reader(sock)
    return PollOutcome(PollResult.READY)
