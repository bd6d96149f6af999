"""Fixed-size pool of worker threads consuming accounts from a queue."""

import logging
import queue
import threading
from typing import Callable, List, Optional

from rich.console import Console
from rich.markup import escape

from ..utils.errors import OrgRolesError, ResolutionError
from ..utils.models import Account

logger = logging.getLogger(__name__)

# Diagnostic stream for worker failures
error_console = Console(stderr=True)

# Queue marker telling a worker to exit
_SENTINEL = object()


class WorkerPool:
    """
    Runs a handler for every submitted account on W worker threads.

    All workers share one FIFO queue. Accounts are processed one at a time per
    worker, with no ordering between workers. ``close()`` enqueues one sentinel
    per worker and waits for all of them, so the pool always terminates once
    the queued work has drained.

    A handler failure is fatal by default: the error is reported on stderr,
    every worker stops processing, remaining queued accounts are discarded and
    the error is raised again from ``submit()`` and ``close()``. With
    ``fail_fast=False`` the failing account is skipped and the error is kept in
    ``errors``.
    """

    def __init__(
        self,
        workers: int,
        handler: Callable[[Account], None],
        queue_size: int = 0,
        fail_fast: bool = True,
        diagnostics: Optional[Console] = None,
    ):
        """
        Initialize the pool.

        Args:
            workers: Number of worker threads (at least 1)
            handler: Called with each account on a worker thread
            queue_size: Maximum queued accounts, 0 for unbounded
            fail_fast: Abort the whole pool on the first handler failure
            diagnostics: Console receiving failure messages, stderr by default
        """
        if workers < 1:
            raise ValueError(f"Worker count must be at least 1, got {workers}")
        self.workers = workers
        self.handler = handler
        self.fail_fast = fail_fast
        self.diagnostics = diagnostics or error_console
        self.errors: List[OrgRolesError] = []
        self.fatal_error: Optional[OrgRolesError] = None
        self.processed = 0

        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=queue_size)
        self._abort = threading.Event()
        self._lock = threading.Lock()
        self._threads: List[threading.Thread] = []
        self._closed = False

    def __enter__(self) -> "WorkerPool":
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        if exc_type is not None:
            # Pagination failed, stop the workers and let the error through
            self.abort()
            self.close(raise_errors=False)
        else:
            self.close()

    @property
    def aborted(self) -> bool:
        return self._abort.is_set()

    def start(self) -> None:
        """Start the worker threads."""
        if self._threads:
            raise RuntimeError("Worker pool already started")
        for number in range(1, self.workers + 1):
            thread = threading.Thread(target=self._run, name=f"worker-{number}", daemon=True)
            thread.start()
            self._threads.append(thread)
        logger.debug(f"Started {self.workers} workers")

    def submit(self, account: Account) -> None:
        """
        Queue an account for processing.

        Raises:
            OrgRolesError: The fatal error that aborted the pool
            RuntimeError: If the pool is already closed
        """
        if self.fatal_error is not None:
            raise self.fatal_error
        if self._closed:
            raise RuntimeError("Cannot submit to a closed worker pool")
        self._queue.put(account)

    def abort(self) -> None:
        """Stop processing; queued accounts are discarded."""
        self._abort.set()

    def close(self, raise_errors: bool = True) -> None:
        """
        Signal the end of work and wait for every worker to finish.

        Args:
            raise_errors: Re-raise the fatal error, if any, once workers exit
        """
        if not self._closed:
            self._closed = True
            for _ in self._threads:
                self._queue.put(_SENTINEL)
            for thread in self._threads:
                thread.join()
            logger.debug(f"Workers finished after processing {self.processed} accounts")

        if raise_errors and self.fatal_error is not None:
            raise self.fatal_error

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            try:
                if item is _SENTINEL:
                    return
                # Keep draining after an abort so a bounded queue never blocks
                if not self._abort.is_set():
                    self._process(item)  # type: ignore[arg-type]
            finally:
                self._queue.task_done()

    def _process(self, account: Account) -> None:
        try:
            self.handler(account)
        except ResolutionError as e:
            self._fail(e)
        except Exception as e:
            logger.exception(f"Unexpected error processing account {account.id}")
            self._fail(
                ResolutionError(
                    f"Unexpected error processing user '{account.username}': {e}",
                    account_id=account.id,
                    cause=e,
                )
            )
        else:
            with self._lock:
                self.processed += 1

    def _fail(self, error: OrgRolesError) -> None:
        logger.debug(f"Worker failure: {error}")
        self.diagnostics.print(f"[red]Error: {escape(str(error))}[/red]", highlight=False)
        with self._lock:
            self.errors.append(error)
            if self.fail_fast and self.fatal_error is None:
                self.fatal_error = error
                self._abort.set()
