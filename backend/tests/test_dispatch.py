import asyncio
import threading
import time
import uuid

from smartrec.services import recommendation_service, signal_service
from smartrec.tasks import recommendation_tasks
from smartrec.tasks.celery_app import celery_app
from smartrec.tasks.dispatch import dispatch

UNREACHABLE_REDIS = "redis://127.0.0.1:1/0"


class BlockingTask:
    """Stands in for a Celery task whose publish hangs until released."""

    name = "blocking"

    def __init__(self):
        self.release = threading.Event()
        self.sent = []

    def delay(self, *args):
        self.release.wait(timeout=5)
        self.sent.append(args)


async def test_dispatch_returns_before_publish_completes():
    task = BlockingTask()

    started = time.monotonic()
    future = dispatch(task, "user", [1])
    assert time.monotonic() - started < 0.5
    assert not future.done()

    task.release.set()
    await asyncio.wait_for(future, timeout=5)
    assert task.sent == [("user", [1])]


async def test_dispatch_swallows_publish_errors(caplog):
    class BrokenTask:
        name = "broken"

        def delay(self, *args):
            raise ConnectionError("broker down")

    await asyncio.wait_for(dispatch(BrokenTask(), description="broken thing"), timeout=5)
    assert "Could not queue broken thing: broker down" in caplog.text


def test_best_effort_tasks_skip_result_backend():
    assert recommendation_tasks.record_recommendation_history.ignore_result is True
    assert recommendation_tasks.reinforce_learned_preferences.ignore_result is True


async def test_dispatch_with_broker_down_does_not_stall(monkeypatch):
    monkeypatch.setitem(celery_app.conf, "broker_url", UNREACHABLE_REDIS)
    monkeypatch.setitem(celery_app.conf, "result_backend", UNREACHABLE_REDIS)

    started = time.monotonic()
    recommendation_service._dispatch_history(uuid.uuid4(), [])
    signal_service._dispatch_reinforcement(uuid.uuid4(), {"property_type": "villa"}, "save")
    assert time.monotonic() - started < 1
