import pytest

from seatbook.services.side_effects import RetryPolicy


class Flaky:
    def __init__(self, failures, error=ConnectionError):
        self.failures = failures
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.calls <= self.failures:
            raise self.error(f"failure {self.calls}")
        return "done"


def test_succeeds_after_retries_with_growing_backoff():
    sleeps = []
    fn = Flaky(failures=2)
    policy = RetryPolicy(max_attempts=3, backoff_seconds=2.0, sleep=sleeps.append)

    result = policy.run("flaky", fn)

    assert result.ok is True
    assert result.value == "done"
    assert result.attempts == 3
    assert sleeps == [2.0, 4.0]


def test_gives_up_without_raising():
    fn = Flaky(failures=5)
    result = RetryPolicy(max_attempts=3, sleep=lambda s: None).run("flaky", fn)

    assert result.ok is False
    assert isinstance(result.error, ConnectionError)
    assert result.attempts == 3
    assert fn.calls == 3


def test_fatal_reraises_last_error():
    fn = Flaky(failures=5)
    policy = RetryPolicy(max_attempts=2, fatal=True, sleep=lambda s: None)

    with pytest.raises(ConnectionError, match="failure 2"):
        policy.run("flaky", fn)


def test_non_retriable_error_stops_immediately():
    fn = Flaky(failures=5, error=ValueError)
    policy = RetryPolicy(max_attempts=3, retry_on=(ConnectionError,), sleep=lambda s: None)

    result = policy.run("flaky", fn)

    assert result.ok is False
    assert fn.calls == 1
    assert isinstance(result.error, ValueError)


def test_passes_arguments_through():
    result = RetryPolicy().run("add", lambda a, b=0: a + b, 2, b=3)
    assert result.value == 5
    assert result.attempts == 1
