"""
Outbound rate limit resolution and reconciliation.

The resolver turns the sparse, hand-authored rate limits into a complete set with one
entry per other network in the topology. The reconciler compares that set with what an
OFT adapter currently holds on-chain and decides whether a single batched update is due.
Neither function performs I/O.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..exceptions import ConfigurationError, RateLimitLookupError

# `type(uint192).max`, the storage width of the adapter's limit field.
MAX_RATE_LIMIT = 2 ** 192 - 1

THIRTY_DAYS_IN_SECONDS = 30 * 24 * 60 * 60  # 2,592,000 seconds.
DEFAULT_WINDOW = THIRTY_DAYS_IN_SECONDS


@dataclass(frozen=True)
class RateLimitConfig:
    """Desired outbound rate limit towards one destination endpoint"""
    dst_eid: int
    limit: int
    window: int

    def as_tuple(self) -> Tuple[int, int, int]:
        """Struct layout expected by `setRateLimits` and the adapter constructors."""
        return (self.dst_eid, self.limit, self.window)


@dataclass(frozen=True)
class RateLimit:
    """Rate limit state as stored by the adapter"""
    amount_in_flight: int
    last_updated: int
    limit: int
    window: int

    @classmethod
    def from_raw(cls, raw: Sequence[int]) -> "RateLimit":
        """Parse the `(amountInFlight, lastUpdated, limit, window)` tuple returned by `rateLimits`."""
        amount_in_flight, last_updated, limit, window = raw
        return cls(
            amount_in_flight=int(amount_in_flight),
            last_updated=int(last_updated),
            limit=int(limit),
            window=int(window),
        )


@dataclass(frozen=True)
class RateLimitMismatch:
    dst_eid: int
    current: RateLimit
    desired: RateLimitConfig

    def describe(self) -> str:
        return (
            f"({{ limit: {self.current.limit}, window: {self.current.window} }}) "
            f"mismatches desired rate limit "
            f"({{ limit: {self.desired.limit}, window: {self.desired.window} }})"
        )


@dataclass
class ReconciliationResult:
    mismatches: List[RateLimitMismatch] = field(default_factory=list)
    desired: List[RateLimitConfig] = field(default_factory=list)

    @property
    def needs_update(self) -> bool:
        return len(self.mismatches) > 0


def default_rate_limit(dst_eid: int) -> RateLimitConfig:
    """Fresh default entry for a destination without an explicit limit."""
    return RateLimitConfig(dst_eid=dst_eid, limit=MAX_RATE_LIMIT, window=DEFAULT_WINDOW)


def validate_rate_limit(rate_limit: RateLimitConfig) -> None:
    """
    Check a single entry against the adapter's storage bounds

    Raises:
        ConfigurationError: limit above `MAX_RATE_LIMIT` or a negative limit/window
    """
    if rate_limit.limit > MAX_RATE_LIMIT:
        raise ConfigurationError(f"Rate limit for {rate_limit.dst_eid} is too high")
    if rate_limit.limit < 0 or rate_limit.window < 0:
        raise ConfigurationError(f"Rate limit for {rate_limit.dst_eid} must not be negative")


def resolve_rate_limits(
    eid: int,
    networks: Sequence[int],
    explicit_limits: Optional[Mapping[int, Sequence[RateLimitConfig]]] = None,
) -> List[RateLimitConfig]:
    """
    Build the complete outbound rate limit set for one network

    Explicit entries for `eid` come first in authored order, followed by a default entry
    for every other network in `networks` (in topology order) that has no explicit entry.

    Args:
        eid: Source endpoint id, must be part of `networks`
        networks: Ordered endpoint ids of the whole topology
        explicit_limits: Authored limits keyed by source endpoint id

    Returns:
        One `RateLimitConfig` per destination

    Raises:
        ConfigurationError: The source is not in the topology, an entry targets the source
            itself, a destination is listed twice, or a limit is out of bounds
    """
    if eid not in networks:
        raise ConfigurationError(f"Endpoint {eid} is not part of the network topology")

    explicit = list((explicit_limits or {}).get(eid, ()))

    seen: Dict[int, RateLimitConfig] = {}
    for rate_limit in explicit:
        if rate_limit.dst_eid == eid:
            raise ConfigurationError(f"Rate limit for {eid} targets its own endpoint")
        if rate_limit.dst_eid in seen:
            raise ConfigurationError(f"Rate limit for {rate_limit.dst_eid} is configured more than once for {eid}")
        seen[rate_limit.dst_eid] = rate_limit

    defaults = [
        default_rate_limit(network)
        for network in dict.fromkeys(networks)
        if network != eid and network not in seen
    ]
    rate_limits = explicit + defaults

    for rate_limit in rate_limits:
        validate_rate_limit(rate_limit)

    return rate_limits


def reconcile_rate_limits(
    desired: Sequence[RateLimitConfig],
    current: Mapping[int, RateLimit],
) -> ReconciliationResult:
    """
    Compare desired limits with on-chain state

    Only `limit` and `window` are compared; in-flight amount and update time are ignored.

    Raises:
        RateLimitLookupError: `current` has no state for a desired destination
    """
    result = ReconciliationResult(desired=list(desired))
    for rate_limit_desired in desired:
        try:
            rate_limit_set = current[rate_limit_desired.dst_eid]
        except KeyError:
            raise RateLimitLookupError(
                f"No on-chain rate limit fetched for destination {rate_limit_desired.dst_eid}"
            ) from None

        if rate_limit_set.limit == rate_limit_desired.limit and rate_limit_set.window == rate_limit_desired.window:
            continue

        result.mismatches.append(
            RateLimitMismatch(dst_eid=rate_limit_desired.dst_eid, current=rate_limit_set, desired=rate_limit_desired)
        )
    return result
