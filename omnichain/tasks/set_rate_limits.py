"""
Bring an OFT adapter's outbound rate limits in line with the configured ones
"""

import logging
from typing import Any, Dict, Optional

from ..consts import get_oft_contract_name, get_rate_limits
from ..processing.rate_limits import RateLimit, ReconciliationResult, reconcile_rate_limits
from ..transactions import send_transaction

logger = logging.getLogger(__name__)


def check_rate_limits(ctx, oft: Optional[Any] = None) -> ReconciliationResult:
    """Read the adapter's rate limits for every configured destination and compare."""
    rate_limit_configs = get_rate_limits(ctx.eid)

    if oft is None:
        oft = ctx.contract(get_oft_contract_name(ctx.eid))

    rate_limits_set: Dict[int, RateLimit] = {}
    for rate_limit_config in rate_limit_configs:
        raw = oft.functions.rateLimits(rate_limit_config.dst_eid).call()
        rate_limits_set[rate_limit_config.dst_eid] = RateLimit.from_raw(raw)

    result = reconcile_rate_limits(rate_limit_configs, rate_limits_set)
    for mismatch in result.mismatches:
        logger.warning(f"Rate limit set in {ctx.name} for {mismatch.dst_eid} {mismatch.describe()}")
    return result


def set_rate_limits(ctx, dry_run: bool = False) -> ReconciliationResult:
    """
    Submit the full rate limit set in one transaction when anything differs on-chain

    The whole compared set is sent, not only the mismatching entries.
    """
    oft = ctx.contract(get_oft_contract_name(ctx.eid))
    result = check_rate_limits(ctx, oft)

    if not result.needs_update:
        logger.info(f"No rate limits need to be updated for {ctx.name}")
        return result

    if dry_run:
        logger.info(f"Dry run, {len(result.mismatches)} rate limit(s) would be updated for {ctx.name}")
        return result

    send_transaction(
        ctx,
        oft.functions.setRateLimits([rate_limit.as_tuple() for rate_limit in result.desired]),
        "Set rate limits",
    )
    logger.info(f"Rate limits set for {ctx.name}")
    return result
