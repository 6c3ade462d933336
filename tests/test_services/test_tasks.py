"""
Tests for the background task runner.
"""

import asyncio
import time

import pytest

from deepfake_defense.services.tasks import BackgroundRunner, TaskResult


def wait_for(runner, count, timeout=5.0):
    """Drain until ``count`` results arrived or the timeout passes."""
    results = []
    deadline = time.monotonic() + timeout
    while len(results) < count and time.monotonic() < deadline:
        results.extend(runner.drain())
        time.sleep(0.01)
    return results


async def value(v, delay=0.0):
    await asyncio.sleep(delay)
    return v


async def failing():
    raise RuntimeError("boom")


@pytest.fixture
def runner():
    runner = BackgroundRunner()
    runner.start()
    yield runner
    runner.stop()


class TestTaskResult:
    """Test the result value type."""

    def test_ok(self):
        assert TaskResult('explanation', value='x').ok
        assert not TaskResult('explanation', error=ValueError()).ok


class TestBackgroundRunner:
    """Test scheduling and draining."""

    def test_start_stop(self):
        runner = BackgroundRunner()
        runner.start()
        assert runner.running
        runner.stop()
        assert not runner.running

    def test_result_delivered(self, runner):
        runner.submit('explanation', value('done'), request_id=3, generation=2)
        results = wait_for(runner, 1)
        assert results == [TaskResult('explanation', value='done', request_id=3, generation=2)]

    def test_error_delivered_as_result(self, runner):
        runner.submit('leaderboard', failing())
        result = wait_for(runner, 1)[0]
        assert not result.ok
        assert isinstance(result.error, RuntimeError)

    def test_drain_empty(self, runner):
        assert runner.drain() == []

    def test_drain_consumes(self, runner):
        runner.submit('a', value(1))
        assert len(wait_for(runner, 1)) == 1
        assert runner.drain() == []

    def test_completion_order(self, runner):
        runner.submit('slow', value('slow', delay=0.2))
        runner.submit('fast', value('fast'))
        assert [r.kind for r in wait_for(runner, 2)] == ['fast', 'slow']

    def test_submit_starts_runner(self):
        runner = BackgroundRunner()
        try:
            runner.submit('lazy', value(7))
            assert wait_for(runner, 1)[0].value == 7
        finally:
            runner.stop()
