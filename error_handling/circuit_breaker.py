"""Circuit breaker guarding the preload data fetch."""
import time
import functools
import structlog

logger = structlog.get_logger()


class CircuitBreakerError(Exception):
    """Raised when a call is refused because the circuit is open."""
    pass


class CircuitBreaker:
    """
    Stops calling a failing fetcher once it exceeds a failure threshold.

    Circuit states:
    - CLOSED: calls pass through
    - OPEN: calls are refused until the recovery timeout elapses
    - HALF-OPEN: calls are let through to probe whether the fetcher recovered

    Everything runs on a single event loop, so state changes need no lock.
    """

    STATE_CLOSED = 'closed'
    STATE_OPEN = 'open'
    STATE_HALF_OPEN = 'half-open'

    CircuitBreakerError = CircuitBreakerError

    def __init__(self, failure_threshold=5, recovery_timeout=60,
                 half_open_success_threshold=1, name="default", clock=time.monotonic):
        """
        Args:
            failure_threshold: Number of failures before opening the circuit
            recovery_timeout: Seconds to wait before probing again
            half_open_success_threshold: Successful probes needed to close the circuit
            name: Label used in log events
            clock: Monotonic time source
        """
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.half_open_success_threshold = half_open_success_threshold
        self.name = name
        self._clock = clock

        self.state = self.STATE_CLOSED
        self.failure_count = 0
        self.success_count = 0
        self.last_failure_time = 0.0

    def __call__(self, func):
        """Use as a decorator on coroutine functions that might fail."""
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            return await self.call_async(func, *args, **kwargs)
        return wrapper

    def _before_call(self):
        if self.state != self.STATE_OPEN:
            return
        elapsed = self._clock() - self.last_failure_time
        if elapsed >= self.recovery_timeout:
            logger.info("circuit_breaker_half_open",
                        breaker=self.name,
                        recovery_timeout=self.recovery_timeout)
            self.state = self.STATE_HALF_OPEN
            self.success_count = 0
            return
        logger.warning("circuit_breaker_open",
                       breaker=self.name,
                       seconds_remaining=self.recovery_timeout - elapsed)
        raise CircuitBreakerError(
            f"Circuit is open for {self.name}, too many failures."
        )

    def _record_success(self):
        if self.state == self.STATE_HALF_OPEN:
            self.success_count += 1
            if self.success_count >= self.half_open_success_threshold:
                logger.info("circuit_breaker_closed",
                            breaker=self.name,
                            success_count=self.success_count)
                self.state = self.STATE_CLOSED
                self.failure_count = 0
        elif self.state == self.STATE_CLOSED:
            self.failure_count = 0

    def _record_failure(self, error):
        self.failure_count += 1
        self.last_failure_time = self._clock()

        if self.state == self.STATE_CLOSED and self.failure_count >= self.failure_threshold:
            logger.warning("circuit_breaker_tripped",
                           breaker=self.name,
                           failure_count=self.failure_count,
                           exception=str(error))
            self.state = self.STATE_OPEN
        elif self.state == self.STATE_HALF_OPEN:
            logger.warning("circuit_breaker_recovery_failed",
                           breaker=self.name,
                           exception=str(error))
            self.state = self.STATE_OPEN

    async def call_async(self, func, *args, **kwargs):
        """
        Await the protected coroutine function with circuit breaker protection.

        Raises:
            CircuitBreakerError: If the circuit is open
            Exception: Any exception raised by the function
        """
        self._before_call()
        try:
            result = await func(*args, **kwargs)
        except Exception as e:
            self._record_failure(e)
            raise
        self._record_success()
        return result

    def reset(self):
        """Reset the circuit breaker to closed state."""
        self.state = self.STATE_CLOSED
        self.failure_count = 0
        self.success_count = 0
        self.last_failure_time = 0.0
        logger.info("circuit_breaker_reset", breaker=self.name)

    def force_open(self):
        """Manually force the circuit into open state."""
        self.state = self.STATE_OPEN
        self.last_failure_time = self._clock()
        logger.warning("circuit_breaker_forced_open", breaker=self.name)

    def get_state(self):
        """Get the current state of the circuit breaker."""
        return {
            'state': self.state,
            'failure_count': self.failure_count,
            'success_count': self.success_count,
            'last_failure_time': self.last_failure_time
        }
