"""
=============================================================================
WORKER THREAD POOL
=============================================================================

Connections are served by a fixed set of worker threads fed from a
bounded queue. The accept loop never blocks on a slow client.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                                                                      │
    │   accept loop ──submit()──► [ queue (bounded) ] ──get()──► Worker-0  │
    │                                    │                  ──► Worker-1  │
    │                                    │                  ──► ...       │
    │                             full → submit() False                    │
    │                                    (server answers 503)              │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

    min_workers   started up front, always running
    max_workers   ceiling for scale-up when every worker is busy
    queue_size    connections waiting for a worker

Shutdown puts one poison pill (None) per worker on the queue.

=============================================================================
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Optional
import logging
import queue
import threading
import time


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    IDLE = "idle"
    BUSY = "busy"
    STOPPED = "stopped"


@dataclass
class Task:
    """A deferred call: func(*args, **kwargs)."""
    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    submitted_at: float = field(default_factory=time.time)


class Worker(threading.Thread):
    """
    Pulls tasks off the shared queue until it gets a poison pill.

    A task that raises is logged and counted; the worker carries on.
    """

    def __init__(self, task_queue: queue.Queue, worker_id: int, idle_timeout: float = 60.0):
        super().__init__(name=f"Worker-{worker_id}", daemon=True)
        self.task_queue = task_queue
        self.worker_id = worker_id
        self.idle_timeout = idle_timeout
        self.state = WorkerState.IDLE
        self.tasks_completed = 0
        self.tasks_failed = 0
        self._shutdown = threading.Event()

    def run(self):
        logger.debug(f"Worker {self.worker_id} started")

        while not self._shutdown.is_set():
            try:
                task = self.task_queue.get(timeout=self.idle_timeout)
            except queue.Empty:
                continue

            try:
                if task is None:
                    break
                self._execute(task)
            finally:
                self.task_queue.task_done()

        self.state = WorkerState.STOPPED
        logger.debug(f"Worker {self.worker_id} stopped")

    def _execute(self, task: Task) -> None:
        self.state = WorkerState.BUSY
        start = time.time()
        try:
            task.func(*task.args, **task.kwargs)
            self.tasks_completed += 1
            logger.debug(f"Worker {self.worker_id} completed task in {time.time() - start:.3f}s")
        except Exception as e:
            self.tasks_failed += 1
            logger.exception(f"Worker {self.worker_id} task failed after {time.time() - start:.3f}s: {e}")
        finally:
            self.state = WorkerState.IDLE

    def shutdown(self) -> None:
        self._shutdown.set()


class ThreadPool:
    """
    Bounded-queue thread pool.

        pool = ThreadPool(min_workers=4, max_workers=8)
        pool.start()
        if not pool.submit(handle, args=(conn,)):
            ...  # queue full
        pool.shutdown()
    """

    def __init__(
        self,
        min_workers: int = 4,
        max_workers: int = 8,
        queue_size: int = 100,
        idle_timeout: float = 60.0,
    ):
        if min_workers < 1 or max_workers < min_workers:
            raise ValueError(f"Invalid worker bounds: min={min_workers}, max={max_workers}")

        self.min_workers = min_workers
        self.max_workers = max_workers
        self.max_queue_size = queue_size
        self.idle_timeout = idle_timeout

        self._task_queue: queue.Queue = queue.Queue(maxsize=queue_size)
        self._workers: list[Worker] = []
        # Guards _workers and _next_worker_id
        self._lock = threading.Lock()
        self._started = False
        self._shutting_down = False
        self._next_worker_id = 0

    def start(self) -> None:
        if self._started:
            return

        logger.info(f"Starting thread pool with {self.min_workers} workers")
        with self._lock:
            for _ in range(self.min_workers):
                self._spawn_worker()
        self._started = True
        self._shutting_down = False

    def _spawn_worker(self) -> Worker:
        # Caller holds self._lock
        worker = Worker(self._task_queue, self._next_worker_id, self.idle_timeout)
        self._next_worker_id += 1
        self._workers.append(worker)
        worker.start()
        return worker

    def submit(self, func: Callable[..., Any], args: tuple = (), kwargs: Optional[dict] = None) -> bool:
        """
        Queue func(*args, **kwargs) without blocking.

        Returns:
            True if queued, False if the queue is full.

        Raises:
            RuntimeError: The pool is not running.
        """
        if not self._started or self._shutting_down:
            raise RuntimeError("Thread pool is not running")

        try:
            self._task_queue.put_nowait(Task(func, args, kwargs or {}))
        except queue.Full:
            return False

        self._maybe_scale_up()
        return True

    def _maybe_scale_up(self) -> None:
        """Add a worker when every worker is busy and tasks are waiting."""
        with self._lock:
            if len(self._workers) >= self.max_workers:
                return
            if any(w.state != WorkerState.BUSY for w in self._workers):
                return
            if self._task_queue.qsize() == 0:
                return
            logger.debug(f"Scaling up: {len(self._workers)} -> {len(self._workers) + 1} workers")
            self._spawn_worker()

    def shutdown(self, wait: bool = True, timeout: float = 5.0) -> None:
        """
        Stop all workers.

        Args:
            wait: Let queued tasks finish first (up to timeout seconds).
            timeout: Seconds to wait for the queue to drain.
        """
        if not self._started:
            return

        logger.info("Shutting down thread pool...")
        self._shutting_down = True

        if wait:
            deadline = time.time() + timeout
            while self._task_queue.unfinished_tasks and time.time() < deadline:
                time.sleep(0.05)
            if self._task_queue.unfinished_tasks:
                logger.warning("Shutdown timeout, abandoning queued connections")

        with self._lock:
            workers = list(self._workers)
            self._workers.clear()

        for worker in workers:
            worker.shutdown()
            try:
                self._task_queue.put_nowait(None)
            except queue.Full:
                pass

        for worker in workers:
            worker.join(timeout=2.0)

        self._started = False
        logger.info("Thread pool shutdown complete")

    @property
    def worker_count(self) -> int:
        return len(self._workers)

    @property
    def busy_workers(self) -> int:
        return sum(1 for w in self._workers if w.state == WorkerState.BUSY)

    @property
    def queued(self) -> int:
        return self._task_queue.qsize()

    @property
    def stats(self) -> dict:
        return {
            "workers": {"total": self.worker_count, "busy": self.busy_workers},
            "tasks": {
                "queued": self.queued,
                "completed": sum(w.tasks_completed for w in self._workers),
                "failed": sum(w.tasks_failed for w in self._workers),
            },
        }
