from .circuit_breaker import CircuitBreaker, CircuitBreakerError

__all__ = ['CircuitBreaker', 'CircuitBreakerError']
