"""Fixed-size thread pool that joins its workers when closed."""

from __future__ import annotations

import queue
import threading
from typing import Callable


class ThreadPool:
    """Runs submitted jobs on a fixed set of worker threads."""

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError("thread pool size must be positive")
        self._jobs: queue.SimpleQueue[Callable[[], object] | None] = queue.SimpleQueue()
        self._cond = threading.Condition()
        self._pending = 0
        self._closed = False
        self._errors: list[BaseException] = []
        self._workers = [
            threading.Thread(target=self._work, name=f"pool-worker-{i}", daemon=True)
            for i in range(size)
        ]
        for worker in self._workers:
            worker.start()

    def _work(self) -> None:
        while True:
            job = self._jobs.get()
            if job is None:
                return
            try:
                job()
            except Exception as exc:
                with self._cond:
                    self._errors.append(exc)
            finally:
                with self._cond:
                    self._pending -= 1
                    if self._pending == 0:
                        self._cond.notify_all()

    def execute(self, f: Callable[[], object]) -> None:
        """Queue ``f`` to run on a worker thread."""
        with self._cond:
            if self._closed:
                raise RuntimeError("thread pool is closed")
            self._pending += 1
        self._jobs.put(f)

    def join(self) -> None:
        """Block until every queued and running job has finished."""
        with self._cond:
            self._cond.wait_for(lambda: self._pending == 0)

    def close(self) -> None:
        """Finish all jobs, stop the workers and re-raise the first job failure."""
        with self._cond:
            if self._closed:
                return
        self.join()
        with self._cond:
            self._closed = True
        for _ in self._workers:
            self._jobs.put(None)
        for worker in self._workers:
            worker.join()
        if self._errors:
            raise self._errors[0]

    def __enter__(self) -> ThreadPool:
        return self

    def __exit__(self, *args) -> None:
        self.close()