"""
Deployment steps for the token and its OFT adapters, selected by tag
"""

import logging
from typing import Callable, Dict, List, Sequence

from ..consts import (
    ETHEREUM_MORPHO_TOKEN_ADDRESS,
    ETHEREUM_V2_MAINNET,
    HYPERLIQUID_V2_MAINNET,
    get_rate_limits,
)
from ..exceptions import ConfigurationError
from ..tasks.erc20_roles import (
    ARBITRUM_TOKEN_CONTRACT_NAME,
    MINT_BURN_ADAPTER_CONTRACT_NAME,
    TOKEN_CONTRACT_NAME,
    get_token_contract_name,
    grant_roles,
    renounce_roles,
)
from .base import deploy, deploy_uups_proxy

logger = logging.getLogger(__name__)

OFT_ADAPTER_CONTRACT_NAME = 'MorphoOFTAdapter'
ENDPOINT_V2_CONTRACT_NAME = 'EndpointV2'

TOKEN_NAME = 'Morpho Token'
TOKEN_SYMBOL = 'MORPHO'


def _rate_limit_args(eid: int) -> List[tuple]:
    return [rate_limit.as_tuple() for rate_limit in get_rate_limits(eid)]


def deploy_token(ctx) -> str:
    """UUPS token proxy, followed by renouncing the deployer's operational roles."""
    contract_name = get_token_contract_name(ctx.eid)
    logger.info(f"Deploying {contract_name}, network: {ctx.name} with {ctx.deployer}")

    address = deploy_uups_proxy(ctx, contract_name, 'initialize', [TOKEN_NAME, TOKEN_SYMBOL, ctx.deployer])
    logger.info(f"Deployed contract: {contract_name}, network: {ctx.name}, address: {address}")

    logger.info(f"Renouncing ERC20 roles for {contract_name} on {ctx.name}...")
    renounce_roles(ctx)
    return address


def deploy_oft_adapter(ctx) -> str:
    """Lockbox adapter for the existing token, Ethereum only."""
    if ctx.eid != ETHEREUM_V2_MAINNET:
        raise ConfigurationError(f"{OFT_ADAPTER_CONTRACT_NAME} is only supported on Ethereum mainnet")

    logger.info(f"Deploying {OFT_ADAPTER_CONTRACT_NAME}, network: {ctx.name} with {ctx.deployer}")
    endpoint_v2 = ctx.deployments.get(ENDPOINT_V2_CONTRACT_NAME)

    address = deploy(ctx, OFT_ADAPTER_CONTRACT_NAME, [
        ETHEREUM_MORPHO_TOKEN_ADDRESS,  # token address
        endpoint_v2['address'],  # LayerZero's EndpointV2 address
        ctx.deployer,  # owner
        _rate_limit_args(ctx.eid),
    ])
    logger.info(f"Deployed contract: {OFT_ADAPTER_CONTRACT_NAME}, network: {ctx.name}, address: {address}")
    return address


def deploy_mint_burn_oft_adapter(ctx) -> str:
    """Mint-burn adapter over the local token, followed by granting it minter/burner roles."""
    logger.info(f"Deploying {MINT_BURN_ADAPTER_CONTRACT_NAME}, network: {ctx.name} with {ctx.deployer}")

    if ctx.eid == HYPERLIQUID_V2_MAINNET and ctx.deployments.get_or_none(MINT_BURN_ADAPTER_CONTRACT_NAME) is None:
        # TODO: switch the deployer to HyperEVM big blocks once a Hyperliquid action signer is available
        logger.warning("HyperEVM deployment needs big blocks enabled for the deployer")

    endpoint_v2 = ctx.deployments.get(ENDPOINT_V2_CONTRACT_NAME)
    token = ctx.deployments.get(get_token_contract_name(ctx.eid))

    address = deploy(ctx, MINT_BURN_ADAPTER_CONTRACT_NAME, [
        token['address'],  # token address
        token['address'],  # token address implementing IMintableBurnable
        endpoint_v2['address'],  # LayerZero's EndpointV2 address
        ctx.deployer,  # owner
        _rate_limit_args(ctx.eid),
    ])
    logger.info(f"Deployed contract: {MINT_BURN_ADAPTER_CONTRACT_NAME}, network: {ctx.name}, address: {address}")

    logger.info(f"Granting ERC20 roles for {MINT_BURN_ADAPTER_CONTRACT_NAME} on {ctx.name}...")
    grant_roles(ctx)
    return address


DEPLOY_STEPS: Dict[str, Callable] = {
    TOKEN_CONTRACT_NAME: deploy_token,
    ARBITRUM_TOKEN_CONTRACT_NAME: deploy_token,
    OFT_ADAPTER_CONTRACT_NAME: deploy_oft_adapter,
    MINT_BURN_ADAPTER_CONTRACT_NAME: deploy_mint_burn_oft_adapter,
}


def run_deploy(ctx, tags: Sequence[str]) -> Dict[str, str]:
    """
    Run the deploy steps for `tags` in the order given

    Raises:
        ConfigurationError: Unknown tag
    """
    unknown = [tag for tag in tags if tag not in DEPLOY_STEPS]
    if unknown:
        raise ConfigurationError(f"Unknown deploy tags: {', '.join(unknown)}")

    addresses = {}
    done = set()
    for tag in tags:
        step = DEPLOY_STEPS[tag]
        if step in done:
            continue
        addresses[tag] = step(ctx)
        done.add(step)
    return addresses
