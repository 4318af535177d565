#!/usr/bin/env python3
"""
Tests for rate limit resolution and reconciliation
"""

import pytest

from omnichain.exceptions import ConfigurationError, RateLimitLookupError
from omnichain.processing.rate_limits import (
    DEFAULT_WINDOW,
    MAX_RATE_LIMIT,
    THIRTY_DAYS_IN_SECONDS,
    RateLimit,
    RateLimitConfig,
    default_rate_limit,
    reconcile_rate_limits,
    resolve_rate_limits,
)

A, B, C, D = 1, 2, 3, 4
E18 = 10 ** 18


class TestResolveRateLimits:
    """Test class for resolve_rate_limits"""

    def test_constants(self):
        """Test the ceiling and default window values"""
        assert MAX_RATE_LIMIT == 2 ** 192 - 1
        assert THIRTY_DAYS_IN_SECONDS == 2_592_000
        assert DEFAULT_WINDOW == THIRTY_DAYS_IN_SECONDS

    @pytest.mark.parametrize("topology", [[A, B], [A, B, C], [A, B, C, D]])
    def test_one_entry_per_other_network(self, topology):
        """Every source gets exactly N-1 distinct destinations"""
        for source in topology:
            rate_limits = resolve_rate_limits(source, topology, {})
            destinations = [rate_limit.dst_eid for rate_limit in rate_limits]
            assert len(rate_limits) == len(topology) - 1
            assert len(set(destinations)) == len(destinations)
            assert set(destinations) == set(topology) - {source}

    def test_explicit_first_then_defaults(self):
        """Explicit limits keep their order and defaults are appended in topology order"""
        explicit = {A: [RateLimitConfig(dst_eid=B, limit=250_000 * E18, window=2_592_000)]}

        rate_limits = resolve_rate_limits(A, [A, B, C], explicit)

        assert rate_limits == [
            RateLimitConfig(dst_eid=B, limit=250_000 * E18, window=2_592_000),
            RateLimitConfig(dst_eid=C, limit=MAX_RATE_LIMIT, window=2_592_000),
        ]

    def test_explicit_order_preserved(self):
        """Authored order wins over topology order"""
        explicit = {A: [
            RateLimitConfig(dst_eid=D, limit=4, window=40),
            RateLimitConfig(dst_eid=B, limit=2, window=20),
        ]}

        rate_limits = resolve_rate_limits(A, [A, B, C, D], explicit)

        assert [rate_limit.dst_eid for rate_limit in rate_limits] == [D, B, C]

    def test_full_coverage_returns_input(self):
        """No defaults are synthesized when every destination is covered"""
        explicit_a = [
            RateLimitConfig(dst_eid=C, limit=10, window=100),
            RateLimitConfig(dst_eid=B, limit=20, window=200),
        ]

        rate_limits = resolve_rate_limits(A, [A, B, C], {A: explicit_a})

        assert rate_limits == explicit_a

    def test_missing_source_uses_defaults(self):
        """A source without explicit limits gets defaults for everything"""
        rate_limits = resolve_rate_limits(B, [A, B, C], {A: [RateLimitConfig(dst_eid=B, limit=1, window=1)]})

        assert rate_limits == [default_rate_limit(A), default_rate_limit(C)]

    def test_none_explicit_limits(self):
        """explicit_limits may be omitted"""
        assert resolve_rate_limits(A, [A, B]) == [default_rate_limit(B)]

    def test_single_network_topology(self):
        """A lone network has no destinations"""
        assert resolve_rate_limits(A, [A], {}) == []

    def test_destination_outside_topology_preserved(self):
        """Cross-topology references are kept as authored"""
        explicit = {A: [RateLimitConfig(dst_eid=99, limit=5, window=50)]}

        rate_limits = resolve_rate_limits(A, [A, B], explicit)

        assert rate_limits == [RateLimitConfig(dst_eid=99, limit=5, window=50), default_rate_limit(B)]

    def test_deterministic(self):
        """Same inputs give identical output"""
        explicit = {A: [RateLimitConfig(dst_eid=C, limit=7, window=70)]}
        first = resolve_rate_limits(A, [A, B, C, D], explicit)
        second = resolve_rate_limits(A, [A, B, C, D], explicit)
        assert first == second

    def test_does_not_mutate_explicit_limits(self):
        """The authored mapping is left untouched"""
        explicit_a = [RateLimitConfig(dst_eid=B, limit=1, window=1)]
        explicit = {A: explicit_a}

        resolve_rate_limits(A, [A, B, C], explicit)
        resolve_rate_limits(A, [A, B, C], explicit)

        assert explicit == {A: [RateLimitConfig(dst_eid=B, limit=1, window=1)]}
        assert len(explicit_a) == 1

    def test_defaults_are_independent_values(self):
        """Synthesized defaults are distinct immutable values"""
        rate_limits = resolve_rate_limits(A, [A, B, C], {})

        assert rate_limits[0] is not rate_limits[1]
        with pytest.raises(AttributeError):
            rate_limits[0].limit = 1  # type: ignore[misc]

    def test_limit_at_ceiling_accepted(self):
        """MAX_RATE_LIMIT itself is valid"""
        explicit = {A: [RateLimitConfig(dst_eid=B, limit=MAX_RATE_LIMIT, window=1)]}
        assert resolve_rate_limits(A, [A, B], explicit)[0].limit == MAX_RATE_LIMIT

    def test_limit_above_ceiling_rejected(self):
        """One above the ceiling raises and names the destination"""
        explicit = {A: [RateLimitConfig(dst_eid=B, limit=2 ** 192, window=2_592_000)]}

        with pytest.raises(ConfigurationError, match="Rate limit for 2 is too high"):
            resolve_rate_limits(A, [A, B, C], explicit)

    def test_negative_values_rejected(self):
        """Limits and windows are unsigned"""
        with pytest.raises(ConfigurationError):
            resolve_rate_limits(A, [A, B], {A: [RateLimitConfig(dst_eid=B, limit=-1, window=1)]})
        with pytest.raises(ConfigurationError):
            resolve_rate_limits(A, [A, B], {A: [RateLimitConfig(dst_eid=B, limit=1, window=-1)]})

    def test_self_loop_rejected(self):
        """An entry towards the source itself is a configuration error"""
        with pytest.raises(ConfigurationError, match="own endpoint"):
            resolve_rate_limits(A, [A, B], {A: [RateLimitConfig(dst_eid=A, limit=1, window=1)]})

    def test_duplicate_destination_rejected(self):
        """A destination may only be configured once"""
        explicit = {A: [
            RateLimitConfig(dst_eid=B, limit=1, window=1),
            RateLimitConfig(dst_eid=B, limit=2, window=2),
        ]}
        with pytest.raises(ConfigurationError, match="more than once"):
            resolve_rate_limits(A, [A, B], explicit)

    def test_source_outside_topology_rejected(self):
        """The source must be part of the topology"""
        with pytest.raises(ConfigurationError, match="not part of the network topology"):
            resolve_rate_limits(D, [A, B, C], {})


class TestReconcileRateLimits:
    """Test class for reconcile_rate_limits"""

    def test_matching_state_needs_no_update(self):
        """Equal limit and window means nothing to do, telemetry ignored"""
        desired = [RateLimitConfig(dst_eid=B, limit=100, window=50)]
        current = {B: RateLimit(amount_in_flight=5, last_updated=123, limit=100, window=50)}

        result = reconcile_rate_limits(desired, current)

        assert result.needs_update is False
        assert result.mismatches == []
        assert result.desired == desired

    def test_reports_only_differing_destinations(self):
        """Only mismatching entries are listed"""
        desired = [
            RateLimitConfig(dst_eid=B, limit=100, window=50),
            RateLimitConfig(dst_eid=C, limit=200, window=100),
        ]
        current = {
            B: RateLimit(amount_in_flight=0, last_updated=0, limit=100, window=50),
            C: RateLimit(amount_in_flight=0, last_updated=0, limit=150, window=100),
        }

        result = reconcile_rate_limits(desired, current)

        assert result.needs_update is True
        assert len(result.mismatches) == 1
        mismatch = result.mismatches[0]
        assert mismatch.dst_eid == C
        assert (mismatch.current.limit, mismatch.current.window) == (150, 100)
        assert (mismatch.desired.limit, mismatch.desired.window) == (200, 100)

    def test_window_difference_detected(self):
        """A differing window alone is a mismatch"""
        desired = [RateLimitConfig(dst_eid=B, limit=100, window=60)]
        current = {B: RateLimit(amount_in_flight=0, last_updated=0, limit=100, window=50)}

        assert reconcile_rate_limits(desired, current).needs_update

    def test_exact_comparison_of_large_values(self):
        """No tolerance on 192-bit values"""
        desired = [RateLimitConfig(dst_eid=B, limit=MAX_RATE_LIMIT, window=DEFAULT_WINDOW)]
        current = {B: RateLimit(amount_in_flight=0, last_updated=0, limit=MAX_RATE_LIMIT - 1, window=DEFAULT_WINDOW)}

        assert reconcile_rate_limits(desired, current).needs_update

    def test_missing_state_raises(self):
        """Missing on-chain state is a lookup failure, not a skip"""
        desired = [RateLimitConfig(dst_eid=B, limit=100, window=50)]

        with pytest.raises(RateLimitLookupError):
            reconcile_rate_limits(desired, {})

    def test_extra_state_ignored(self):
        """State for destinations that are not desired is not compared"""
        desired = [RateLimitConfig(dst_eid=B, limit=1, window=1)]
        current = {
            B: RateLimit(amount_in_flight=0, last_updated=0, limit=1, window=1),
            C: RateLimit(amount_in_flight=0, last_updated=0, limit=9, window=9),
        }

        assert not reconcile_rate_limits(desired, current).needs_update

    def test_empty_desired(self):
        """Nothing desired means nothing to update"""
        assert not reconcile_rate_limits([], {}).needs_update


class TestRateLimitTypes:
    """Test class for the rate limit value types"""

    def test_from_raw(self):
        """Contract tuple order is amountInFlight, lastUpdated, limit, window"""
        rate_limit = RateLimit.from_raw((1, 2, 3, 4))
        assert rate_limit == RateLimit(amount_in_flight=1, last_updated=2, limit=3, window=4)

    def test_as_tuple(self):
        """Struct order is dstEid, limit, window"""
        assert RateLimitConfig(dst_eid=B, limit=10, window=20).as_tuple() == (B, 10, 20)

    def test_mismatch_description(self):
        """Both observed and desired values are part of the description"""
        desired = [RateLimitConfig(dst_eid=B, limit=200, window=100)]
        current = {B: RateLimit(amount_in_flight=0, last_updated=0, limit=150, window=90)}

        description = reconcile_rate_limits(desired, current).mismatches[0].describe()

        assert "limit: 150, window: 90" in description
        assert "limit: 200, window: 100" in description


if __name__ == "__main__":
    pytest.main([__file__])
