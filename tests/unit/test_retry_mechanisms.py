#!/usr/bin/env python3

import pytest
from unittest.mock import Mock
from metastore_harness.utils.error_handler import (
    RetryPolicy, RetryManager, retry_with_policy, probe_policy
)

class TestRetryPolicy:

    def test_default_policy(self):
        policy = RetryPolicy()
        assert policy.max_attempts == 3
        assert policy.delay == 1.0
        assert policy.deadline is None
        assert policy.retryable_exceptions == [Exception]

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    def test_probe_policy(self):
        policy = probe_policy(timeout=10.0, interval=0.5)
        assert policy.max_attempts == 21
        assert policy.delay == 0.5
        assert policy.deadline == 10.0
        assert OSError in policy.retryable_exceptions

class TestRetryManager:

    def test_fixed_delay(self):
        manager = RetryManager(RetryPolicy(delay=2.0))

        assert manager.calculate_delay(0.0) == 2.0
        assert manager.calculate_delay(30.0) == 2.0

    def test_delay_is_cut_short_by_deadline(self):
        manager = RetryManager(RetryPolicy(delay=2.0, deadline=5.0))

        assert manager.calculate_delay(1.0) == 2.0
        assert manager.calculate_delay(4.5) == 0.5

    def test_should_retry(self):
        manager = RetryManager(RetryPolicy(
            max_attempts=3,
            deadline=10.0,
            retryable_exceptions=[ConnectionError]
        ))

        assert manager.should_retry(ConnectionResetError(), 1) is True
        assert manager.should_retry(ValueError(), 1) is False
        assert manager.should_retry(ConnectionResetError(), 3) is False
        assert manager.should_retry(ConnectionResetError(), 1, elapsed=10.0) is False

class TestRetryDecorator:

    def test_succeeds_after_failures(self):
        sleeps = []
        func = Mock(side_effect=[ConnectionError("down"), ConnectionError("down"), "ok"])
        func.__name__ = "probe"
        policy = RetryPolicy(max_attempts=3, delay=0.1)

        result = retry_with_policy(policy, sleep=sleeps.append)(func)()

        assert result == "ok"
        assert func.call_count == 3
        assert sleeps == [0.1, 0.1]

    def test_reraises_last_exception(self):
        func = Mock(side_effect=ConnectionError("still down"))
        func.__name__ = "probe"
        policy = RetryPolicy(max_attempts=2, delay=0.1)

        with pytest.raises(ConnectionError):
            retry_with_policy(policy, sleep=lambda _: None)(func)()
        assert func.call_count == 2

    def test_non_retryable_fails_immediately(self):
        func = Mock(side_effect=TypeError("bad"))
        func.__name__ = "probe"
        policy = RetryPolicy(max_attempts=5, retryable_exceptions=[OSError])

        with pytest.raises(TypeError):
            retry_with_policy(policy, sleep=lambda _: None)(func)()
        assert func.call_count == 1

    def test_stops_at_deadline_even_with_attempts_left(self):
        sleeps = []
        func = Mock(side_effect=ConnectionError("down"))
        func.__name__ = "probe"
        clock = Mock(side_effect=[0.0, 1.5, 2.5])
        policy = RetryPolicy(max_attempts=10, delay=1.0, deadline=2.0)

        with pytest.raises(ConnectionError):
            retry_with_policy(policy, sleep=sleeps.append, clock=clock)(func)()

        assert func.call_count == 2
        assert sleeps == [0.5]
