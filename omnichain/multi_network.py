"""
Run a per-network task on several networks
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, Dict, List, Optional

from .network import NetworkContext, get_network_config

logger = logging.getLogger(__name__)


def parse_network_names(networks: Optional[str], default: Optional[str] = None) -> List[str]:
    """Split a comma-separated `--networks` value, falling back to a single default network."""
    if networks:
        return [network_name.strip() for network_name in networks.split(',') if network_name.strip()]
    return [default] if default else []


def execute_multi_network_task(
    task: Callable[[NetworkContext], Any],
    network_names: List[str],
    connect: Callable[[str], NetworkContext] = NetworkContext.connect,
    sequential: bool = False,
) -> Dict[str, bool]:
    """
    Run `task` once per network, one thread per network

    A failure on one network is logged and does not stop the others. Nothing runs when
    any of the network names is unknown.

    With `sequential`, networks run one after another in the given order. Tasks that ask
    the operator for confirmation need this: a refusal exits before the next network starts.

    Returns:
        Network name to success flag
    """
    missing_network_names = [name for name in network_names if get_network_config(name) is None]
    if missing_network_names:
        logger.error(f"Missing networks: {', '.join(missing_network_names)}")
        return {}

    def run(network_name: str) -> bool:
        try:
            ctx = connect(network_name)
            task(ctx)
            return True
        except Exception as e:
            logger.error(f"Error executing for {network_name}: {e}")
            return False

    if not network_names:
        return {}

    if sequential:
        return {network_name: run(network_name) for network_name in network_names}

    with ThreadPoolExecutor(max_workers=len(network_names)) as executor:
        results = list(executor.map(run, network_names))
    return dict(zip(network_names, results))
