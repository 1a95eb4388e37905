import logging
import threading

import pytest

from hogehoge.background import (
    BackgroundTaskLogHandler,
    BackgroundTaskLogs,
    BackgroundTaskManager,
    TaskId,
)


@pytest.fixture
def capture():
    logger = logging.getLogger("hogehoge.tests.background")
    handler = BackgroundTaskLogHandler()
    old_level = logger.level
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    yield logger, handler
    logger.removeHandler(handler)
    logger.setLevel(old_level)


def test_extract_logs_for_unknown_task_is_empty():
    assert BackgroundTaskLogs().extract_logs(TaskId(5)) == []


def test_displayed_task_collects_its_logs(capture):
    logger, handler = capture
    manager = BackgroundTaskManager(handler.logs)

    def work():
        logger.info("hello %s", "world")
        logger.debug("hidden")
        logger.warning("careful")

    manager.spawn("job", True, work)
    manager.close()

    assert len(manager.finished_tasks) == 1
    task = manager.finished_tasks[0]
    assert task.name == "job"
    assert task.succeeded
    assert task.logs == [(logging.INFO, "hello world"), (logging.WARNING, "careful")]
    assert manager.running_tasks == {}
    assert handler.logs.extract_logs(TaskId(0)) == []


def test_failing_task_keeps_its_error(capture):
    _, handler = capture
    manager = BackgroundTaskManager(handler.logs)

    def work():
        raise ValueError("boom")

    manager.spawn("bad", True, work)
    manager.close()

    task = manager.finished_tasks[0]
    assert isinstance(task.error, ValueError)
    assert str(task.error) == "boom"
    assert not task.succeeded


def test_hidden_task_leaves_logs_in_store(capture):
    logger, handler = capture
    manager = BackgroundTaskManager(handler.logs)
    task_id = manager.spawn("quiet", False, lambda: logger.info("kept"))
    manager.close()

    assert manager.finished_tasks == []
    assert handler.logs.extract_logs(task_id) == [(logging.INFO, "kept")]


def test_logs_outside_tasks_are_ignored(capture):
    logger, handler = capture
    logger.error("outside")
    assert handler.logs.extract_logs(TaskId(0)) == []


def test_task_ids_count_up_from_zero(capture):
    _, handler = capture
    with BackgroundTaskManager(handler.logs) as manager:
        ids = [manager.spawn("a", False, lambda: None), manager.spawn("b", False, lambda: None)]
    assert ids == [TaskId(0), TaskId(1)]


def test_update_leaves_unfinished_tasks_running(capture):
    _, handler = capture
    manager = BackgroundTaskManager(handler.logs)
    release = threading.Event()
    task_id = manager.spawn("slow", True, lambda: release.wait(5))

    manager.update()
    assert task_id in manager.running_tasks
    assert manager.finished_tasks == []

    release.set()
    manager.close()
    assert [t.name for t in manager.finished_tasks] == ["slow"]
    assert manager.running_tasks == {}