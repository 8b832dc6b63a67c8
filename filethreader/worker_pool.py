from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor
import logging
import threading
from typing import TypeVar

from filethreader.errors import PoolClosed, PoolSaturated


logger = logging.getLogger(__name__)
T = TypeVar("T")


class BoundedWorkerPool:
    """
    Fixed-size thread pool with a bounded admission queue.

    At most ``max_workers`` tasks run at once and at most ``queue_capacity``
    more wait for a free worker. When both are used up, ``submit`` blocks the
    caller until a task finishes; pass ``timeout`` to reject with
    ``PoolSaturated`` instead. Completion order between tasks is not defined.
    """

    def __init__(
        self,
        *,
        max_workers: int = 10,
        queue_capacity: int = 100,
        thread_name_prefix: str = "ingest-worker",
    ) -> None:
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if queue_capacity < 0:
            raise ValueError("queue_capacity must not be negative")

        self.max_workers = max_workers
        self.queue_capacity = queue_capacity
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix=thread_name_prefix)
        self._slots = threading.BoundedSemaphore(max_workers + queue_capacity)
        self._lock = threading.Lock()
        self._pending = 0
        self._closed = False

    @property
    def capacity(self) -> int:
        return self.max_workers + self.queue_capacity

    @property
    def pending(self) -> int:
        with self._lock:
            return self._pending

    @property
    def closed(self) -> bool:
        return self._closed

    def submit(self, fn: Callable[[], T], *, timeout: float | None = None) -> Future[T]:
        if self._closed:
            raise PoolClosed("worker pool is shut down")

        if not self._slots.acquire(timeout=timeout):
            logger.warning("worker pool saturated", extra={"capacity": self.capacity})
            raise PoolSaturated(f"worker pool is full ({self.capacity} tasks outstanding)")

        with self._lock:
            if self._closed:
                self._slots.release()
                raise PoolClosed("worker pool is shut down")
            self._pending += 1

        try:
            future = self._executor.submit(fn)
        except RuntimeError as exc:
            self._release()
            raise PoolClosed(str(exc)) from exc

        future.add_done_callback(lambda _: self._release())
        return future

    def shutdown(self, wait: bool = True) -> None:
        """Refuse new work and, with ``wait``, drain queued and running tasks."""
        with self._lock:
            self._closed = True
        logger.info("worker pool shutting down", extra={"pending": self.pending, "wait": wait})
        self._executor.shutdown(wait=wait)

    def _release(self) -> None:
        with self._lock:
            self._pending -= 1
        self._slots.release()

    def __enter__(self) -> "BoundedWorkerPool":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown(wait=True)
