"""
Per-network execution context: web3 connection, signer and deployment records
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, Optional

from dotenv import load_dotenv
from eth_account import Account
from web3 import Web3
from web3.middleware import ExtraDataToPOAMiddleware

from .consts import ARBITRUM_V2_MAINNET, ETHEREUM_V2_MAINNET, HYPERLIQUID_V2_MAINNET
from .deployments import DeploymentStore, get_contract_abi
from .exceptions import ConfigurationError

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NetworkConfig:
    name: str
    eid: int
    rpc_url_env: str
    default_rpc_url: str

    @property
    def rpc_url(self) -> str:
        return os.getenv(self.rpc_url_env, self.default_rpc_url)


NETWORK_CONFIGS: Dict[str, NetworkConfig] = {
    'ethereum-mainnet': NetworkConfig(
        name='ethereum-mainnet',
        eid=ETHEREUM_V2_MAINNET,
        rpc_url_env='RPC_URL_ETHEREUM_MAINNET',
        default_rpc_url='https://ethereum-rpc.publicnode.com',
    ),
    'arbitrum-mainnet': NetworkConfig(
        name='arbitrum-mainnet',
        eid=ARBITRUM_V2_MAINNET,
        rpc_url_env='RPC_URL_ARBITRUM_MAINNET',
        default_rpc_url='https://arb1.arbitrum.io/rpc',
    ),
    'hyperliquid-mainnet': NetworkConfig(
        name='hyperliquid-mainnet',
        eid=HYPERLIQUID_V2_MAINNET,
        rpc_url_env='RPC_URL_HYPERLIQUID_MAINNET',
        default_rpc_url='https://rpc.hyperliquid.xyz/evm',
    ),
}


def get_network_config(network_name: str) -> Optional[NetworkConfig]:
    return NETWORK_CONFIGS.get(network_name)


def load_signer() -> Any:
    """
    Load the deployer account from `PRIVATE_KEY`, or from `MNEMONIC` and `ACCOUNT_INDEX`

    Raises:
        ConfigurationError: Neither variable is set
    """
    private_key = os.getenv("PRIVATE_KEY")
    if private_key:
        return Account.from_key(private_key)

    mnemonic = os.getenv("MNEMONIC")
    if mnemonic:
        index = int(os.getenv("ACCOUNT_INDEX", "0"))
        Account.enable_unaudited_hdwallet_features()
        return Account.from_mnemonic(mnemonic, account_path=f"m/44'/60'/0'/0/{index}")

    raise ConfigurationError("Accounts are not defined: set PRIVATE_KEY or MNEMONIC")


class NetworkContext:
    """Everything a task needs to act on one network"""

    def __init__(self, config: NetworkConfig, w3: Web3, account: Any,
                 deployments: Optional[DeploymentStore] = None):
        self.config = config
        self.w3 = w3
        self.account = account
        self.deployments = deployments or DeploymentStore(config.name)
        self.tx_timeout = int(os.getenv("TX_TIMEOUT", "300"))

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def eid(self) -> int:
        return self.config.eid

    @property
    def deployer(self) -> str:
        return self.account.address

    @classmethod
    def connect(cls, network_name: str, account: Any = None) -> "NetworkContext":
        """
        Connect to a configured network

        Raises:
            ConfigurationError: Unknown network or missing signer
            ConnectionError: The RPC endpoint is unreachable
        """
        config = get_network_config(network_name)
        if config is None:
            raise ConfigurationError(f"Network {network_name} is not configured")

        w3 = Web3(Web3.HTTPProvider(config.rpc_url))
        w3.middleware_onion.inject(ExtraDataToPOAMiddleware, layer=0)
        if not w3.is_connected():
            raise ConnectionError(f"Could not connect to RPC URL: {config.rpc_url}")

        ctx = cls(config, w3, account or load_signer())
        ctx.validate()
        logger.info(f"Connected to {network_name} (EID {ctx.eid}) as {ctx.deployer}")
        return ctx

    def validate(self) -> None:
        if not self.eid:
            raise ConfigurationError(f"EID not set on network config for {self.name}")
        if not self.deployer:
            raise ConfigurationError("Missing named deployer account")

    def contract(self, contract_name: str) -> Any:
        """Attach to a deployed contract using its deployment record."""
        deployment = self.deployments.get(contract_name)
        abi = deployment.get('abi') or get_contract_abi(contract_name)
        return self.w3.eth.contract(address=self.w3.to_checksum_address(deployment['address']), abi=abi)
