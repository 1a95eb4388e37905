"""Background tasks run on worker threads, with their logs captured per task."""

from __future__ import annotations

import contextvars
import logging
import threading
from concurrent.futures import CancelledError, Executor, Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Callable

log = logging.getLogger(__name__)

LogLine = tuple[int, str]


@dataclass(frozen=True, order=True)
class TaskId:
    value: int


_CURRENT_TASK: contextvars.ContextVar[TaskId | None] = contextvars.ContextVar(
    "background_task", default=None
)


class BackgroundTaskLogs:
    """Log lines recorded while background tasks ran, keyed by task."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._logs: dict[TaskId, list[LogLine]] = {}

    def _record(self, task_id: TaskId, level: int, message: str) -> None:
        with self._lock:
            self._logs.setdefault(task_id, []).append((level, message))

    def extract_logs(self, task_id: TaskId) -> list[LogLine]:
        """Remove and return the lines recorded for ``task_id``."""
        with self._lock:
            return self._logs.pop(task_id, [])


class BackgroundTaskLogHandler(logging.Handler):
    """Records INFO and more severe messages emitted inside a background task."""

    def __init__(self, logs: BackgroundTaskLogs | None = None, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        self.logs = logs if logs is not None else BackgroundTaskLogs()

    def emit(self, record: logging.LogRecord) -> None:
        if record.levelno < logging.INFO:
            return
        task_id = _CURRENT_TASK.get()
        if task_id is None:
            return
        try:
            message = record.getMessage()
        except Exception:
            self.handleError(record)
            return
        self.logs._record(task_id, record.levelno, message)


@dataclass
class FinishedTask:
    """A displayed task that has completed."""

    name: str
    logs: list[LogLine] = field(default_factory=list)
    error: BaseException | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass
class _RunningTask:
    id: TaskId
    name: str
    display: bool
    future: Future


def _run_in_task(task_id: TaskId, func: Callable[[], object]) -> None:
    token = _CURRENT_TASK.set(task_id)
    try:
        func()
    finally:
        _CURRENT_TASK.reset(token)


def _outcome(future: Future) -> BaseException | None:
    try:
        return future.exception()
    except CancelledError as exc:
        return RuntimeError(f"waiting for task to complete failed: {exc!r}")


class BackgroundTaskManager:
    """Starts tasks on an executor and collects them once they finish."""

    def __init__(self, task_logs: BackgroundTaskLogs, executor: Executor | None = None) -> None:
        self._executor = executor or ThreadPoolExecutor(thread_name_prefix="background-task")
        self.task_logs = task_logs
        self.running_tasks: dict[TaskId, _RunningTask] = {}
        self.finished_tasks: list[FinishedTask] = []
        self._next_id = 0

    def spawn(self, name: str, display: bool, func: Callable[[], object]) -> TaskId:
        """Run ``func`` in the background; an exception it raises marks failure."""
        log.info("Starting Background task '%s'", name)
        task_id = TaskId(self._next_id)
        self._next_id += 1
        future = self._executor.submit(_run_in_task, task_id, func)
        self.running_tasks[task_id] = _RunningTask(task_id, name, display, future)
        return task_id

    def update(self) -> None:
        """Move every completed task out of the running set."""
        done = [task for task in self.running_tasks.values() if task.future.done()]
        for task in done:
            del self.running_tasks[task.id]
            error = _outcome(task.future)
            if error is None:
                log.info("Background task '%s' finished sucessfully", task.name)
            else:
                log.info("Background task '%s' failed with error: %r", task.name, error)
            if task.display:
                self.finished_tasks.append(
                    FinishedTask(
                        name=task.name,
                        logs=self.task_logs.extract_logs(task.id),
                        error=error,
                    )
                )

    def close(self) -> None:
        """Wait for all tasks, collect them and stop the executor."""
        self._executor.shutdown(wait=True)
        self.update()

    def __enter__(self) -> BackgroundTaskManager:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()