"""
Bounded-concurrency task scheduling with central error collection.

`TaskScheduler` runs one task per item on a thread pool. A counting semaphore
holds one permit per allowed concurrent task: the dispatch loop takes a permit
before submitting each task, and the task returns it when it finishes, however
it finishes. Task failures are wrapped in `TaskError` records and sent to an
`ErrorSink`, whose collector thread logs them as they arrive.
"""
import concurrent.futures
import queue
import threading
from typing import Any, Callable, Iterable, List, Optional, Tuple, TypeVar

from loguru import logger

from ..domain.exceptions import AVMergerException, TaskError

T = TypeVar("T")


class ErrorSink:
    """
    Thread-safe collector for `TaskError` records.

    Any number of worker threads may call `report`. A single collector thread
    drains the queue, logging and storing each error. `close` must only be
    called once every producer has finished; it stops the collector and
    returns everything that was reported.
    """

    _CLOSED = object()

    def __init__(self):
        self._queue: "queue.Queue[Any]" = queue.Queue()
        self._errors: List[TaskError] = []
        self._closed = False
        self._collector = threading.Thread(
            target=self._drain, name="error-collector", daemon=True
        )

    def start(self):
        self._collector.start()

    def report(self, error: TaskError):
        if self._closed:
            raise RuntimeError("report() called on a closed ErrorSink")
        self._queue.put(error)

    def _drain(self):
        while True:
            item = self._queue.get()
            if item is self._CLOSED:
                return
            self._errors.append(item)
            if isinstance(item.cause, AVMergerException):
                logger.error(str(item))
            else:
                logger.opt(exception=item.cause).error(f"Unexpected error: {item}")

    def close(self) -> List[TaskError]:
        if not self._closed:
            self._closed = True
            self._queue.put(self._CLOSED)
            self._collector.join()
        return list(self._errors)

    @property
    def errors(self) -> List[TaskError]:
        return list(self._errors)

    def __enter__(self) -> "ErrorSink":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class Permit:
    """
    One acquired slot of a semaphore.

    Both the dispatch loop and the worker may try to give a slot back when a
    submission is interrupted; only the first `release` returns it.
    """

    def __init__(self, slots: threading.BoundedSemaphore):
        self._slots = slots
        self._lock = threading.Lock()
        self._held = True

    def release(self):
        with self._lock:
            if not self._held:
                return
            self._held = False
        self._slots.release()


class TaskScheduler:
    """
    Runs tasks with at most `max_workers` of them in flight.

    Attributes:
        max_workers (int): The concurrency limit, at least 1.
        cancel_event (threading.Event): Shared cancellation token. Once set,
            tasks that have not started yet are skipped, and tasks that pass the
            token to `run_cmd` terminate their external process.
        slots (threading.BoundedSemaphore): One permit per concurrent task.
    """

    def __init__(self, max_workers: int, cancel_event: Optional[threading.Event] = None):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.max_workers = max_workers
        self.cancel_event = cancel_event or threading.Event()
        self.slots = threading.BoundedSemaphore(max_workers)
        self.completed = 0
        self.skipped = 0
        self._count_lock = threading.Lock()

    def _mark_done(self, ran: bool):
        with self._count_lock:
            if ran:
                self.completed += 1
            else:
                self.skipped += 1

    def _run_one(
        self,
        item: T,
        task: Callable[[T], Any],
        paths_of: Callable[[T], Tuple],
        sink: ErrorSink,
        permit: Permit,
    ):
        ran = False
        try:
            if self.cancel_event.is_set():
                return
            ran = True
            task(item)
        except Exception as e:
            sink.report(TaskError(paths=tuple(paths_of(item)), cause=e))
        finally:
            permit.release()
            self._mark_done(ran)

    def run(
        self,
        items: Iterable[T],
        task: Callable[[T], Any],
        paths_of: Callable[[T], Tuple] = lambda item: (),
    ) -> List[TaskError]:
        """
        Runs `task(item)` for every item and waits until all of them are done.

        Dispatch happens in iteration order on the calling thread, which blocks
        while all permits are taken. A KeyboardInterrupt while dispatching or
        waiting sets the cancellation token, waits for the in-flight tasks and
        is re-raised.

        Args:
            items: The work items.
            task: Called once per item on a worker thread. Raising marks the
                  item as failed; it never affects other items.
            paths_of: Returns the file paths to attach to an item's TaskError.

        Returns:
            The errors reported by failed tasks, in arrival order.
        """
        self.completed = 0
        self.skipped = 0
        futures: List[concurrent.futures.Future] = []

        with ErrorSink() as sink:
            executor = concurrent.futures.ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="merge-worker"
            )
            try:
                for item in items:
                    self.slots.acquire()
                    permit = Permit(self.slots)
                    try:
                        futures.append(
                            executor.submit(self._run_one, item, task, paths_of, sink, permit)
                        )
                    except BaseException:
                        permit.release()
                        raise
                concurrent.futures.wait(futures)
            except KeyboardInterrupt:
                logger.warning("Interrupted, cancelling running tasks...")
                self.cancel_event.set()
                raise
            finally:
                # Every dispatched task must finish before the sink is closed.
                executor.shutdown(wait=True)

        errors = sink.errors
        logger.debug(
            f"Scheduler finished: {len(futures)} dispatched, {self.completed} ran, "
            f"{self.skipped} skipped, {len(errors)} failed"
        )
        return errors
