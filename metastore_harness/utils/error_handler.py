import functools
import time
from typing import Callable, Optional, List, Type
from dataclasses import dataclass
from loguru import logger

@dataclass
class RetryPolicy:
    """Retry policy configuration"""
    max_attempts: int = 3
    delay: float = 1.0
    # Total time budget in seconds, measured from the first attempt
    deadline: Optional[float] = None
    retryable_exceptions: List[Type[Exception]] = None

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.retryable_exceptions is None:
            self.retryable_exceptions = [Exception]

class RetryManager:

    def __init__(self, policy: RetryPolicy):
        self.policy = policy

    def calculate_delay(self, elapsed: float) -> float:
        """Wait before the next attempt, never past the deadline"""
        if self.policy.deadline is None:
            return self.policy.delay
        return max(0.0, min(self.policy.delay, self.policy.deadline - elapsed))

    def should_retry(self, exception: Exception, attempt: int, elapsed: float = 0.0) -> bool:
        if attempt >= self.policy.max_attempts:
            return False

        if self.policy.deadline is not None and elapsed >= self.policy.deadline:
            return False

        for exc_type in self.policy.retryable_exceptions:
            if isinstance(exception, exc_type):
                return True

        return False

def retry_with_policy(policy: RetryPolicy, sleep: Optional[Callable[[float], None]] = None,
                      clock: Optional[Callable[[], float]] = None):
    """Policy driven retry decorator.

    The last exception is re-raised once the policy gives up.
    """
    retry_manager = RetryManager(policy)
    sleep = sleep or time.sleep
    clock = clock or time.monotonic

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            start = clock()
            for attempt in range(1, policy.max_attempts + 1):
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    logger.debug(f"Attempt {attempt} failed for {func.__name__}: {str(e)}")

                    elapsed = clock() - start
                    if not retry_manager.should_retry(e, attempt, elapsed):
                        raise

                    delay = retry_manager.calculate_delay(elapsed)
                    logger.debug(f"Retrying {func.__name__} in {delay:.2f}s (attempt {attempt + 1}/{policy.max_attempts})")
                    sleep(delay)

        return wrapper

    return decorator

def probe_policy(timeout: float, interval: float = 0.5) -> RetryPolicy:
    """Fixed-interval policy that stops polling once ``timeout`` seconds have passed."""
    attempts = max(1, int(timeout / interval) + 1) if interval > 0 else 1
    return RetryPolicy(
        max_attempts=attempts,
        delay=interval,
        deadline=timeout,
        retryable_exceptions=[ConnectionError, TimeoutError, OSError],
    )
