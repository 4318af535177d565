"""
Scheduled rate limit drift watcher.

Periodically compares every network's on-chain rate limits with the configured ones
without sending transactions, and alerts the operators on drift or on failures.
"""

import logging
import os
import time
from datetime import datetime
from typing import Callable, Dict, List, Optional

import schedule

from .alerts import AlertNotifier
from .network import NetworkContext
from .tasks.set_rate_limits import check_rate_limits

logger = logging.getLogger(__name__)


class RateLimitWatcher:
    def __init__(self, network_names: List[str], notifier: Optional[AlertNotifier] = None,
                 connect: Callable[[str], NetworkContext] = NetworkContext.connect):
        self.network_names = network_names
        self.notifier = notifier or AlertNotifier()
        self.connect = connect
        self.interval_minutes = int(os.getenv("WATCH_INTERVAL_MINUTES", "60"))
        self._contexts: Dict[str, NetworkContext] = {}

        # Statistics
        self.checks = 0
        self.drifts_detected = 0
        self.failed_checks = 0
        self.last_check_time: Optional[datetime] = None

    def _context(self, network_name: str) -> NetworkContext:
        if network_name not in self._contexts:
            self._contexts[network_name] = self.connect(network_name)
        return self._contexts[network_name]

    def check_network(self, network_name: str) -> bool:
        """Returns True when the network's rate limits match the configuration."""
        try:
            result = check_rate_limits(self._context(network_name))
        except Exception as e:
            logger.error(f"Rate limit check failed for {network_name}: {e}")
            self.failed_checks += 1
            self._contexts.pop(network_name, None)
            self.notifier.send_alert(f"Rate limit check failed for {network_name}: {e}")
            return False

        if result.needs_update:
            self.drifts_detected += 1
            details = '; '.join(f"{m.dst_eid} {m.describe()}" for m in result.mismatches)
            self.notifier.send_alert(f"Rate limits on {network_name} drifted from configuration: {details}")
            return False

        logger.info(f"Rate limits on {network_name} match configuration")
        return True

    def run_scheduled_check(self) -> Dict[str, bool]:
        logger.info("Starting scheduled rate limit check...")
        results = {network_name: self.check_network(network_name) for network_name in self.network_names}
        self.checks += 1
        self.last_check_time = datetime.now()
        logger.info(f"Statistics - Checks: {self.checks}, Drifts: {self.drifts_detected}, "
                    f"Failed: {self.failed_checks}")
        return results

    def run_forever(self) -> None:
        schedule.every(self.interval_minutes).minutes.do(self.run_scheduled_check)

        logger.info("Running initial check...")
        self.run_scheduled_check()

        logger.info(f"Starting scheduled watcher (every {self.interval_minutes} minutes)...")
        try:
            while True:
                schedule.run_pending()
                time.sleep(60)
        except KeyboardInterrupt:
            logger.info("Watcher stopped by user")
        finally:
            schedule.clear()
