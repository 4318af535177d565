from .rate_limits import (
    DEFAULT_WINDOW,
    MAX_RATE_LIMIT,
    THIRTY_DAYS_IN_SECONDS,
    RateLimit,
    RateLimitConfig,
    RateLimitMismatch,
    ReconciliationResult,
    reconcile_rate_limits,
    resolve_rate_limits,
)

__all__ = [
    'DEFAULT_WINDOW',
    'MAX_RATE_LIMIT',
    'THIRTY_DAYS_IN_SECONDS',
    'RateLimit',
    'RateLimitConfig',
    'RateLimitMismatch',
    'ReconciliationResult',
    'reconcile_rate_limits',
    'resolve_rate_limits',
]
