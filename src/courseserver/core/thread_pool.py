"""
=============================================================================
WORKER POOL
=============================================================================

A bounded set of worker threads that serve accepted connections.

=============================================================================
WHY BOUNDED?
=============================================================================

    One thread per connection:
    ──────────────────────────
    for conn in accepted():
        threading.Thread(target=serve, args=(conn,)).start()

    → a burst of slow clients means a burst of threads, with no ceiling.

    Bounded pool:
    ─────────────
    pool = ThreadPool(min_workers=4, max_workers=16, queue_size=100)
    for conn in accepted():
        if not pool.submit(serve, args=(conn,)):
            refuse(conn)            ← 503, straight from the accept thread

    → at most max_workers connections are being served and at most
      queue_size are waiting. The rest are told to come back later.

=============================================================================
LAYOUT
=============================================================================

    accept thread                      workers
    ─────────────                      ───────
    submit(serve, conn) ──► ┌─────────────────────────┐ ──► Worker-0 (busy)
                            │ queue.Queue(maxsize=N)  │ ──► Worker-1 (idle)
      full? → False         │ [Task] [Task] [Task]    │ ──► ...
                            └─────────────────────────┘
                                  ▲
                 shutdown(): one None per worker ("stop" marker)

Workers start at min_workers. When a task is queued while every worker is
busy, one more is added, up to max_workers. Workers are never retired
early; they all stop together at shutdown.

=============================================================================
INTERVIEW QUESTIONS ABOUT WORKER POOLS
=============================================================================

Q: "Why put None on the queue at shutdown instead of just setting a flag?"
A: "A worker blocked in queue.get() won't look at a flag until it wakes.
   A None wakes it immediately and tells it to exit. The flag still
   exists as a backstop, checked every idle_timeout seconds."

Q: "What stops one bad request from killing a worker?"
A: "The worker catches Exception around each task, logs it with the
   traceback and moves on to the next one."

=============================================================================
"""

import logging
import queue
import threading
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional


logger = logging.getLogger(__name__)


class WorkerState(Enum):
    IDLE = "idle"          # Blocked on the queue
    BUSY = "busy"          # Running a task
    STOPPED = "stopped"    # run() has returned


@dataclass
class Task:
    """One queued call: func(*args, **kwargs)."""

    func: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    queued_at: float = field(default_factory=time.monotonic)

    def __call__(self) -> Any:
        return self.func(*self.args, **self.kwargs)


class Worker(threading.Thread):
    """
    Pulls tasks off the shared queue until it gets None or is told to stop.

    Counts what it has done so the pool can report it.
    """

    def __init__(self, tasks: "queue.Queue[Optional[Task]]", index: int, idle_timeout: float = 1.0):
        # Daemon, so a handler stuck in recv() can't hold the process open
        super().__init__(name=f"courseserver-worker-{index}", daemon=True)
        self.tasks = tasks
        self.index = index
        self.idle_timeout = idle_timeout

        self.state = WorkerState.IDLE
        self.handled = 0
        self.errors = 0
        self._stop_requested = threading.Event()

    def stop(self) -> None:
        self._stop_requested.set()

    def run(self):
        logger.debug(f"{self.name} ready")
        try:
            while not self._stop_requested.is_set():
                try:
                    task = self.tasks.get(timeout=self.idle_timeout)
                except queue.Empty:
                    continue

                try:
                    if task is None:
                        return
                    self._run(task)
                finally:
                    self.tasks.task_done()
        finally:
            self.state = WorkerState.STOPPED
            logger.debug(f"{self.name} exited after {self.handled} tasks")

    def _run(self, task: Task):
        self.state = WorkerState.BUSY
        waited = time.monotonic() - task.queued_at
        if waited > 1.0:
            logger.debug(f"{self.name}: task waited {waited:.2f}s in the queue")

        started = time.perf_counter()
        try:
            task()
            self.handled += 1
        except Exception as e:
            self.errors += 1
            logger.exception(f"{self.name}: task raised {type(e).__name__}: {e}")
        finally:
            self.state = WorkerState.IDLE
            logger.debug(f"{self.name}: task took {(time.perf_counter() - started) * 1000:.1f}ms")


class ThreadPool:
    """
    Bounded, growable worker pool.

        pool = ThreadPool(min_workers=4, max_workers=16, queue_size=100)
        pool.start()
        if not pool.submit(serve, args=(conn,)):
            ...                       # queue full
        pool.shutdown(wait=True)      # drain, then stop the workers
    """

    def __init__(
        self,
        min_workers: int = 4,
        max_workers: int = 16,
        queue_size: int = 100,
        idle_timeout: float = 1.0,
    ):
        """
        Args:
            min_workers: Workers started by start().
            max_workers: Ceiling for on-demand growth.
            queue_size: Tasks allowed to wait for a free worker.
            idle_timeout: How often an idle worker rechecks its stop flag.
        """
        self.min_workers = min_workers
        self.max_workers = max_workers
        self.max_queue = queue_size
        self.idle_timeout = idle_timeout

        self._tasks: "queue.Queue[Optional[Task]]" = queue.Queue(maxsize=queue_size)
        self._workers: List[Worker] = []
        self._workers_lock = threading.Lock()
        self._spawned = 0
        self._running = False
        self._closing = False

    # =========================================================================
    # LIFECYCLE
    # =========================================================================

    def start(self):
        """Spawn min_workers workers. A second call does nothing."""
        if self._running:
            return

        with self._workers_lock:
            while len(self._workers) < self.min_workers:
                self._spawn()

        self._closing = False
        self._running = True
        logger.info(
            f"Worker pool started: {self.min_workers}-{self.max_workers} workers, "
            f"queue of {self.max_queue}"
        )

    def _spawn(self) -> Worker:
        """Start one more worker. Hold _workers_lock when calling."""
        worker = Worker(self._tasks, self._spawned, self.idle_timeout)
        self._spawned += 1
        self._workers.append(worker)
        worker.start()
        return worker

    def shutdown(self, wait: bool = True, timeout: Optional[float] = None):
        """
        Stop the pool.

        With wait=True, queued tasks are allowed to finish first (for at
        most `timeout` seconds if one is given). A task that is already
        running is never interrupted.
        """
        if not self._running:
            return

        self._closing = True
        logger.info(f"Stopping worker pool ({self.pending} queued, {self.busy_workers} busy)")

        if wait:
            self._drain(timeout)

        with self._workers_lock:
            workers, self._workers = self._workers, []

        for worker in workers:
            worker.stop()
            try:
                self._tasks.put_nowait(None)
            except queue.Full:
                pass  # The stop flag reaches it within idle_timeout
        for worker in workers:
            worker.join(timeout=2.0)

        self._running = False
        logger.info("Worker pool stopped")

    def _drain(self, timeout: Optional[float]):
        if timeout is None:
            self._tasks.join()
            return

        deadline = time.monotonic() + timeout
        while self._tasks.unfinished_tasks:
            if time.monotonic() >= deadline:
                logger.warning(
                    f"Gave up waiting after {timeout}s with "
                    f"{self._tasks.unfinished_tasks} tasks unfinished"
                )
                return
            time.sleep(0.05)

    # =========================================================================
    # SUBMITTING WORK
    # =========================================================================

    def submit(
        self,
        func: Callable[..., Any],
        args: tuple = (),
        kwargs: Optional[dict] = None,
        block: bool = False,
        queue_timeout: Optional[float] = None,
    ) -> bool:
        """
        Queue func(*args, **kwargs) for a worker.

        Returns:
            False if the queue is full (immediately with block=False, or
            after queue_timeout), True otherwise.

        Raises:
            RuntimeError: Before start() or once shutdown() has begun.
        """
        if not self._running:
            raise RuntimeError("Worker pool is not running")
        if self._closing:
            raise RuntimeError("Worker pool is shutting down")

        try:
            self._tasks.put(Task(func, args, kwargs or {}), block=block, timeout=queue_timeout)
        except queue.Full:
            return False

        self._grow_if_saturated()
        return True

    def _grow_if_saturated(self):
        """Add a worker when work is waiting and nobody is free to take it."""
        with self._workers_lock:
            if len(self._workers) >= self.max_workers or self._tasks.empty():
                return
            if any(worker.state != WorkerState.BUSY for worker in self._workers):
                return
            self._spawn()
            logger.debug(f"All workers busy, grew pool to {len(self._workers)}")

    # =========================================================================
    # MONITORING
    # =========================================================================

    @property
    def worker_count(self) -> int:
        return len(self._workers)

    @property
    def busy_workers(self) -> int:
        return sum(1 for worker in self._workers if worker.state == WorkerState.BUSY)

    @property
    def pending(self) -> int:
        """Tasks waiting for a worker."""
        return self._tasks.qsize()

    @property
    def stats(self) -> dict:
        workers = list(self._workers)
        return {
            "workers": {
                "total": len(workers),
                "busy": sum(1 for w in workers if w.state == WorkerState.BUSY),
                "max": self.max_workers,
            },
            "tasks": {
                "queued": self.pending,
                "max_queued": self.max_queue,
                "handled": sum(w.handled for w in workers),
                "errors": sum(w.errors for w in workers),
            },
        }
