"""
Mainnet topology and per-network configuration for the token and its OFT adapters
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Dict, List, Union

from .exceptions import ConfigurationError
from .processing.rate_limits import (
    MAX_RATE_LIMIT,
    THIRTY_DAYS_IN_SECONDS,
    RateLimitConfig,
    resolve_rate_limits,
)

# LayerZero V2 mainnet endpoint ids.
ETHEREUM_V2_MAINNET = 30101
ARBITRUM_V2_MAINNET = 30110
HYPERLIQUID_V2_MAINNET = 30367

# Executor option type for `lzReceive` gas.
LZ_RECEIVE_OPTION_TYPE = 1

ZERO_ADDRESS = '0x0000000000000000000000000000000000000000'


@dataclass(frozen=True)
class Contract:
    """OFT contract deployed on one endpoint"""
    eid: int
    contract_name: str


@dataclass(frozen=True)
class EnforcedOption:
    msg_type: int
    option_type: int
    gas: int
    value: int = 0

    def to_dict(self) -> Dict[str, int]:
        return {
            'msgType': self.msg_type,
            'optionType': self.option_type,
            'gas': self.gas,
            'value': self.value,
        }


CONTRACTS: List[Contract] = [
    Contract(eid=ETHEREUM_V2_MAINNET, contract_name='MorphoOFTAdapter'),
    Contract(eid=ARBITRUM_V2_MAINNET, contract_name='MorphoMintBurnOFTAdapter'),
    Contract(eid=HYPERLIQUID_V2_MAINNET, contract_name='MorphoMintBurnOFTAdapter'),
]

NETWORKS: List[int] = [contract.eid for contract in CONTRACTS]

# Chain default confirmations.
CONFIRMATIONS: Dict[int, int] = {
    ETHEREUM_V2_MAINNET: 15,
    ARBITRUM_V2_MAINNET: 20,
    HYPERLIQUID_V2_MAINNET: 1,
}

DEFAULT_ENFORCED_OPTIONS: List[EnforcedOption] = [
    EnforcedOption(msg_type=1, option_type=LZ_RECEIVE_OPTION_TYPE, gas=100_000),
    # Compose sends carry a variable size compose message and need extra gas.
    EnforcedOption(msg_type=2, option_type=LZ_RECEIVE_OPTION_TYPE, gas=130_000),
]

ENFORCED_OPTIONS: Dict[int, List[EnforcedOption]] = {
    ETHEREUM_V2_MAINNET: [
        EnforcedOption(msg_type=1, option_type=LZ_RECEIVE_OPTION_TYPE, gas=70_000),
        EnforcedOption(msg_type=2, option_type=LZ_RECEIVE_OPTION_TYPE, gas=97_000),
    ],
    ARBITRUM_V2_MAINNET: DEFAULT_ENFORCED_OPTIONS,
    HYPERLIQUID_V2_MAINNET: DEFAULT_ENFORCED_OPTIONS,
}

OWNERS: Dict[int, str] = {
    ETHEREUM_V2_MAINNET: '0xcBa28b38103307Ec8dA98377ffF9816C164f9AFa',
    ARBITRUM_V2_MAINNET: '0xFd358f49678bd408FBCe0cF6bb9DFA5857d5d9b2',
    HYPERLIQUID_V2_MAINNET: '0x34EdAe4f1Fd1b5947f6bE560ca371a56042daCbA',
}

# MORPHO token on Ethereum mainnet, locked by the OFT adapter.
# https://etherscan.io/address/0x58D97B57BB95320F9a05dC918Aef65434969c2B2
ETHEREUM_MORPHO_TOKEN_ADDRESS = '0x58D97B57BB95320F9a05dC918Aef65434969c2B2'

TOKEN_DECIMALS = 18


def to_unit(amount: Union[int, str, Decimal]) -> int:
    """Convert a whole token amount to its 18 decimal base unit."""
    return int(Decimal(str(amount)) * 10 ** TOKEN_DECIMALS)


# One-way outbound rate limits. Unlisted pairs fall back to the default in
# `resolve_rate_limits`.
RATE_LIMITS: Dict[int, List[RateLimitConfig]] = {
    ETHEREUM_V2_MAINNET: [
        RateLimitConfig(dst_eid=ARBITRUM_V2_MAINNET, limit=to_unit(250_000), window=THIRTY_DAYS_IN_SECONDS),
        RateLimitConfig(dst_eid=HYPERLIQUID_V2_MAINNET, limit=to_unit(500_000), window=THIRTY_DAYS_IN_SECONDS),
    ],
    ARBITRUM_V2_MAINNET: [
        RateLimitConfig(dst_eid=ETHEREUM_V2_MAINNET, limit=to_unit(100_000), window=THIRTY_DAYS_IN_SECONDS),
    ],
    HYPERLIQUID_V2_MAINNET: [
        RateLimitConfig(dst_eid=ETHEREUM_V2_MAINNET, limit=to_unit(500_000), window=THIRTY_DAYS_IN_SECONDS),
    ],
}


def get_confirmations(eid: int) -> int:
    return CONFIRMATIONS.get(eid, 0)


def get_enforced_options(eid: int) -> List[EnforcedOption]:
    return ENFORCED_OPTIONS.get(eid, DEFAULT_ENFORCED_OPTIONS)


def get_owner_address(eid: int) -> str:
    address = OWNERS.get(eid)
    if not address or address == 'TODO' or address == ZERO_ADDRESS:
        raise ConfigurationError(f"Owner address not configured for endpoint {eid}")
    return address


def get_rate_limits(eid: int) -> List[RateLimitConfig]:
    """Complete outbound rate limits for `eid` within the mainnet topology."""
    return resolve_rate_limits(eid, NETWORKS, RATE_LIMITS)


def get_oft_contract_name(eid: int) -> str:
    for contract in CONTRACTS:
        if contract.eid == eid:
            return contract.contract_name
    raise ConfigurationError(f"Contract name not configured for EID {eid}")


__all__ = [
    'ARBITRUM_V2_MAINNET',
    'CONTRACTS',
    'Contract',
    'ETHEREUM_MORPHO_TOKEN_ADDRESS',
    'ETHEREUM_V2_MAINNET',
    'EnforcedOption',
    'HYPERLIQUID_V2_MAINNET',
    'MAX_RATE_LIMIT',
    'NETWORKS',
    'get_confirmations',
    'get_enforced_options',
    'get_oft_contract_name',
    'get_owner_address',
    'get_rate_limits',
    'to_unit',
]
