"""
Circuit breaker for the payment gateway.

After `fail_max` consecutive Stripe failures the breaker opens and calls fail
fast with CircuitBreakerError for `reset_timeout` seconds; then one trial call
is let through (half-open) to decide whether to close it again.
"""

import logging

from pybreaker import CircuitBreaker, CircuitBreakerError, CircuitBreakerListener

logger = logging.getLogger(__name__)


class StateChangeLogger(CircuitBreakerListener):
    """Logs breaker transitions so an open circuit shows up in the service logs."""

    def __init__(self, name: str):
        self.name = name

    def state_change(self, cb, old_state, new_state):
        logger.warning(
            "Circuit breaker state changed",
            extra={
                "breaker_name": self.name,
                "old_state": old_state.name if old_state else None,
                "new_state": new_state.name,
            },
        )


stripe_breaker = CircuitBreaker(
    fail_max=5,
    reset_timeout=60,
    name="stripe_circuit_breaker",
    listeners=[StateChangeLogger("stripe")],
)


__all__ = [
    "stripe_breaker",
    "StateChangeLogger",
    "CircuitBreakerError",
]
