"""
Background Dispatch

Facilities that run a report's delivery job off the caller's thread.
A dispatcher is any callable that accepts a zero-argument job.
"""

import threading
from concurrent.futures import Executor
from typing import Callable

Job = Callable[[], None]
Dispatcher = Callable[[Job], None]


def spawn_thread(job: Job) -> None:
    """Run the job on a new daemon thread."""
    thread = threading.Thread(target=job, name="bugsnag-reporter", daemon=True)
    thread.start()


def run_inline(job: Job) -> None:
    """Run the job on the caller's thread (tests and scripts)."""
    job()


class ExecutorDispatcher:
    """
    Submits jobs to an executor owned by the host application.

    Usage:
        executor = ThreadPoolExecutor(max_workers=2)
        reporter = Reporter(config, dispatcher=ExecutorDispatcher(executor))
    """

    def __init__(self, executor: Executor):
        self.executor = executor

    def __call__(self, job: Job) -> None:
        self.executor.submit(job)
