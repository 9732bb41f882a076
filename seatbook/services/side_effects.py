"""
Best-effort side effects.

Receipt uploads and confirmation emails must never decide the outcome of the
operation that triggers them. Call sites describe *how* to attempt the side
effect with a RetryPolicy and receive a SideEffectResult instead of catching
exceptions themselves:

    policy = RetryPolicy(max_attempts=3, backoff_seconds=2.0)
    result = policy.run("confirmation email", send, job)
    if not result.ok:
        ...  # already logged

With ``fatal=True`` the last error is re-raised after the final attempt, for
the few callers (e.g. replacing a receipt) where the side effect *is* the
operation.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Tuple, Type

logger = logging.getLogger(__name__)


@dataclass
class SideEffectResult:
    ok: bool
    value: Any = None
    error: Optional[BaseException] = None
    attempts: int = 0


@dataclass
class RetryPolicy:
    max_attempts: int = 1
    backoff_seconds: float = 0.0
    backoff_factor: float = 2.0
    fatal: bool = False
    retry_on: Tuple[Type[BaseException], ...] = (Exception,)
    sleep: Callable[[float], None] = field(default=time.sleep, repr=False)

    def delay_before(self, attempt: int) -> float:
        """Seconds to wait before `attempt` (2-based); grows geometrically."""
        return self.backoff_seconds * (self.backoff_factor ** (attempt - 2))

    def run(self, label: str, fn: Callable[..., Any], *args, **kwargs) -> SideEffectResult:
        attempts = max(1, self.max_attempts)
        last_error: Optional[BaseException] = None

        for attempt in range(1, attempts + 1):
            if attempt > 1:
                delay = self.delay_before(attempt)
                if delay > 0:
                    self.sleep(delay)
            try:
                value = fn(*args, **kwargs)
            except self.retry_on as exc:
                last_error = exc
                logger.warning(
                    "%s failed (attempt %d/%d): %s", label, attempt, attempts, exc
                )
                continue
            except Exception as exc:
                # Not retriable: stop at once
                last_error = exc
                logger.warning("%s failed and will not be retried: %s", label, exc)
                return self._give_up(label, last_error, attempt)
            if attempt > 1:
                logger.info("%s succeeded on attempt %d", label, attempt)
            return SideEffectResult(ok=True, value=value, attempts=attempt)

        return self._give_up(label, last_error, attempts)

    def _give_up(self, label: str, error: Optional[BaseException], attempts: int) -> SideEffectResult:
        if self.fatal and error is not None:
            raise error
        logger.warning("Giving up on %s after %d attempt(s)", label, attempts)
        return SideEffectResult(ok=False, error=error, attempts=attempts)
