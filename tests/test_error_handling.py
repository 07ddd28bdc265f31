"""Test suite for error handling and recovery in stakeview."""
import asyncio

import pytest
from unittest.mock import Mock

from config.logging import log_error
from error_handling.circuit_breaker import CircuitBreaker, CircuitBreakerError
from staking.exceptions import MissingResourceError, PreloadFetchError, StakingError
from cache.exceptions import InvalidPreloadDataError, PreloadError


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def circuit_breaker(clock):
    """Create a circuit breaker for testing."""
    return CircuitBreaker(
        failure_threshold=3,
        recovery_timeout=1,
        half_open_success_threshold=2,
        name="test",
        clock=clock
    )


def make_service():
    """Coroutine function failing while service.failing is set."""
    service = Mock()
    service.failing = True

    async def call():
        service.calls += 1
        if service.failing:
            raise ConnectionError("service failed")
        return "ok"

    service.calls = 0
    service.call = call
    return service


def test_circuit_breaker_opens_after_threshold(circuit_breaker):
    service = make_service()

    for _ in range(3):
        with pytest.raises(ConnectionError):
            asyncio.run(circuit_breaker.call_async(service.call))

    assert circuit_breaker.state == CircuitBreaker.STATE_OPEN

    with pytest.raises(CircuitBreakerError):
        asyncio.run(circuit_breaker.call_async(service.call))
    # Refused calls never reach the service
    assert service.calls == 3


def test_circuit_breaker_recovers(circuit_breaker, clock):
    service = make_service()
    for _ in range(3):
        with pytest.raises(ConnectionError):
            asyncio.run(circuit_breaker.call_async(service.call))

    clock.now += 1.5
    service.failing = False

    assert asyncio.run(circuit_breaker.call_async(service.call)) == "ok"
    assert circuit_breaker.state == CircuitBreaker.STATE_HALF_OPEN

    assert asyncio.run(circuit_breaker.call_async(service.call)) == "ok"
    assert circuit_breaker.state == CircuitBreaker.STATE_CLOSED
    assert circuit_breaker.get_state()["failure_count"] == 0


def test_circuit_breaker_reopens_on_failed_probe(circuit_breaker, clock):
    service = make_service()
    for _ in range(3):
        with pytest.raises(ConnectionError):
            asyncio.run(circuit_breaker.call_async(service.call))

    clock.now += 1.5
    with pytest.raises(ConnectionError):
        asyncio.run(circuit_breaker.call_async(service.call))

    assert circuit_breaker.state == CircuitBreaker.STATE_OPEN


def test_circuit_breaker_success_resets_failures(circuit_breaker):
    service = make_service()
    for _ in range(2):
        with pytest.raises(ConnectionError):
            asyncio.run(circuit_breaker.call_async(service.call))

    service.failing = False
    asyncio.run(circuit_breaker.call_async(service.call))

    assert circuit_breaker.state == CircuitBreaker.STATE_CLOSED
    assert circuit_breaker.failure_count == 0


def test_circuit_breaker_decorator_and_manual_controls(circuit_breaker):
    @circuit_breaker
    async def fetch(value):
        return value * 2

    assert asyncio.run(fetch(21)) == 42

    circuit_breaker.force_open()
    with pytest.raises(CircuitBreaker.CircuitBreakerError):
        asyncio.run(fetch(1))

    circuit_breaker.reset()
    assert circuit_breaker.get_state() == {
        'state': CircuitBreaker.STATE_CLOSED,
        'failure_count': 0,
        'success_count': 0,
        'last_failure_time': 0.0
    }
    assert asyncio.run(fetch(2)) == 4


def test_error_hierarchy():
    """Fetch errors stay catchable as PreloadFetchError, resource errors as StakingError."""
    invalid = InvalidPreloadDataError("cosmos", "bad blob")
    assert isinstance(invalid, PreloadFetchError)
    assert isinstance(invalid, PreloadError)
    assert str(invalid) == "cosmos: bad blob"

    missing = MissingResourceError("acc-1", "cosmos_resources")
    assert isinstance(missing, StakingError)
    assert missing.account_id == "acc-1"
    assert "cosmos_resources is required" in str(missing)


def test_log_error():
    logger = Mock()
    log_error(logger, ValueError("boom"), {"network": "cosmos"})

    logger.error.assert_called_once_with(
        "error_occurred",
        error_type="ValueError",
        error_message="boom",
        network="cosmos"
    )
