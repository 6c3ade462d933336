"""
Background task runner.

Network work (explanations, leaderboard requests) runs as coroutines on an
asyncio event loop in a daemon thread. Finished work is posted to a
thread-safe queue as TaskResult values. The game thread drains the queue
once per frame, so game state is only touched from the frame loop.
"""

import asyncio
import queue
import threading
from dataclasses import dataclass
from typing import Any, Awaitable, List, Optional

from deepfake_defense.logging import get_logger

log = get_logger('tasks')


@dataclass(frozen=True)
class TaskResult:
    """Outcome of one background task.

    Attributes:
        kind: Routing key, e.g. 'explanation' or 'leaderboard'
        value: Coroutine result when it succeeded
        error: Exception raised by the coroutine, if any
        request_id: Caller-assigned id to match responses to requests
        generation: Session generation the request belonged to
    """
    kind: str
    value: Any = None
    error: Optional[BaseException] = None
    request_id: int = 0
    generation: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None


class BackgroundRunner:
    """Runs coroutines on a private event loop thread.

    Examples:
        >>> runner = BackgroundRunner()
        >>> runner.start()
        >>> runner.submit('leaderboard', client.fetch())
        >>> for result in runner.drain():
        ...     handle(result)
    """

    def __init__(self):
        self._results: "queue.Queue[TaskResult]" = queue.Queue()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._ready = threading.Event()

    def start(self) -> None:
        """Start the loop thread. Safe to call twice."""
        if self._thread and self._thread.is_alive():
            log.warning("Background runner already running")
            return

        def run_loop():
            self._loop = asyncio.new_event_loop()
            asyncio.set_event_loop(self._loop)
            self._ready.set()
            self._loop.run_forever()
            self._loop.close()

        self._thread = threading.Thread(target=run_loop, name='dfd-background', daemon=True)
        self._thread.start()
        self._ready.wait(timeout=2.0)
        log.debug("Background runner started")

    def stop(self) -> None:
        """Stop the loop. Pending tasks are abandoned."""
        if self._loop is not None:
            self._loop.call_soon_threadsafe(self._loop.stop)
        if self._thread is not None:
            self._thread.join(timeout=2.0)
        self._thread = None
        self._loop = None
        self._ready.clear()
        log.debug("Background runner stopped")

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    async def _run(self, kind: str, coro: Awaitable, request_id: int, generation: int) -> None:
        try:
            value = await coro
        except Exception as e:  # reported to the game thread as a result
            log.warning("Background task %s failed: %s", kind, e)
            self._results.put(TaskResult(kind, error=e, request_id=request_id, generation=generation))
            return
        self._results.put(TaskResult(kind, value=value, request_id=request_id, generation=generation))

    def submit(self, kind: str, coro: Awaitable, request_id: int = 0, generation: int = 0) -> None:
        """Schedule a coroutine. Its outcome appears in a later ``drain``."""
        if self._loop is None:
            self.start()
        asyncio.run_coroutine_threadsafe(self._run(kind, coro, request_id, generation), self._loop)

    def drain(self) -> List[TaskResult]:
        """All results completed since the previous call, oldest first."""
        results = []
        while True:
            try:
                results.append(self._results.get_nowait())
            except queue.Empty:
                return results
