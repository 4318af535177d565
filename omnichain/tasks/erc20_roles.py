"""
Access control administration of the token contract.

Each role change runs the same sequence: check the current state, ask the operator
where the change is irreversible, send the transaction, then read the role back. A
later step only starts once the previous one has been verified on-chain.
"""

import logging
from typing import Any

from web3 import Web3
from web3.exceptions import ABIFunctionNotFound, BadFunctionCallOutput, ContractLogicError

from ..consts import ARBITRUM_V2_MAINNET, get_owner_address
from ..exceptions import RoleStateError
from ..prompts import prompt_for_confirmation_or_exit
from ..transactions import send_transaction

logger = logging.getLogger(__name__)

TOKEN_CONTRACT_NAME = 'MorphoToken'
ARBITRUM_TOKEN_CONTRACT_NAME = 'MorphoTokenArbitrum'
MINT_BURN_ADAPTER_CONTRACT_NAME = 'MorphoMintBurnOFTAdapter'

ROLES_TO_RENOUNCE = ('MINTER_ROLE', 'BURNER_ROLE', 'UPGRADER_ROLE')

ZERO_ROLE = b'\x00' * 32


def get_token_contract_name(eid: int) -> str:
    return ARBITRUM_TOKEN_CONTRACT_NAME if eid == ARBITRUM_V2_MAINNET else TOKEN_CONTRACT_NAME


def has_role(token: Any, role_hash: bytes, account: str) -> bool:
    return bool(token.functions.hasRole(role_hash, account).call())


def fetch_role_hash(token: Any, role_name: str) -> bytes:
    """Role id from the contract getter, or `keccak256(role_name)` when the getter is unavailable."""
    try:
        return bytes(getattr(token.functions, role_name)().call())
    except (ABIFunctionNotFound, BadFunctionCallOutput, ContractLogicError):
        logger.info(f"{role_name} role could not be fetched, using `keccak256(\"{role_name}\")`")
        return bytes(Web3.keccak(text=role_name))


def grant_role_if_required(ctx, token: Any, role_name: str, role_hash: bytes, account: str) -> bool:
    """
    Grant `role_hash` to `account` unless it already holds it

    Returns:
        True when a grant transaction was sent

    Raises:
        RoleStateError: The role is still missing after the grant was mined
    """
    if has_role(token, role_hash, account):
        logger.info(f"{account} on {ctx.name} already has role {role_name}")
        return False

    logger.info(f"Granting role {role_name} to {account} on {ctx.name}...")
    send_transaction(ctx, token.functions.grantRole(role_hash, account), f"Grant {role_name} role")

    if not has_role(token, role_hash, account):
        raise RoleStateError(f"{account} does not have role {role_name} on {ctx.name} after grant")
    return True


def renounce_role_if_required(ctx, token: Any, role_name: str) -> bool:
    """
    Renounce `role_name` held by the deployer, after operator confirmation

    Returns:
        True when a renounce transaction was sent
    """
    role_hash = fetch_role_hash(token, role_name)

    if role_hash == ZERO_ROLE:
        logger.info(f"{role_name} role is not intended to be renounced in this task")
        return False

    if not has_role(token, role_hash, ctx.deployer):
        logger.info(f"Signer at {ctx.deployer} does not have {role_name} role, nothing to renounce")
        return False

    logger.info(f"Signer at {ctx.deployer} has {role_name} role, renouncing role")
    prompt_for_confirmation_or_exit(f"Renounce {role_name} role of {ctx.deployer} on {ctx.name}?")

    send_transaction(ctx, token.functions.renounceRole(role_hash, ctx.deployer), f"{role_name} role renounce")

    if has_role(token, role_hash, ctx.deployer):
        raise RoleStateError(f"Signer at {ctx.deployer} still has {role_name} role after renounce")
    return True


def grant_roles(ctx) -> None:
    """Grant minter and burner roles on the token to the mint-burn OFT adapter."""
    if ctx.eid == ARBITRUM_V2_MAINNET:
        logger.info(f"Skipping role grant for {ctx.name}")
        return

    adapter_address = ctx.deployments.get(MINT_BURN_ADAPTER_CONTRACT_NAME)['address']
    token = ctx.contract(TOKEN_CONTRACT_NAME)

    minter_role = bytes(token.functions.MINTER_ROLE().call())
    burner_role = bytes(token.functions.BURNER_ROLE().call())

    grant_role_if_required(ctx, token, 'minter', minter_role, adapter_address)
    grant_role_if_required(ctx, token, 'burner', burner_role, adapter_address)


def renounce_roles(ctx) -> None:
    """Renounce the deployer's minter, burner and upgrader roles on the token."""
    if ctx.eid == ARBITRUM_V2_MAINNET:
        logger.info(f"Skipping role renounce for {ctx.name}")
        return

    token = ctx.contract(get_token_contract_name(ctx.eid))
    for role_name in ROLES_TO_RENOUNCE:
        renounce_role_if_required(ctx, token, role_name)


def transfer_admin_role(ctx) -> None:
    """
    Hand the default admin role over to the configured owner

    The owner is granted the role first. The deployer renounces its own admin role only
    once the owner's role has been confirmed on-chain.

    Raises:
        ConfigurationError: No owner configured for this network
        RoleStateError: Owner is the signer, or the signer cannot grant/renounce
    """
    if ctx.eid == ARBITRUM_V2_MAINNET:
        logger.info(f"Skipping role transfer for {ctx.name}")
        return

    token = ctx.contract(get_token_contract_name(ctx.eid))
    default_admin_role = bytes(token.functions.DEFAULT_ADMIN_ROLE().call())

    intended_owner = get_owner_address(ctx.eid)
    if intended_owner.lower() == ctx.deployer.lower():
        raise RoleStateError("Intended owner is signer, cannot transfer roles")

    # Grant
    if has_role(token, default_admin_role, intended_owner):
        logger.info(f"Intended owner at {intended_owner} is already default admin")
    else:
        logger.info(f"Intended owner at {intended_owner} is not default admin, granting role from {ctx.deployer}")
        if not has_role(token, default_admin_role, ctx.deployer):
            raise RoleStateError(f"Signer {ctx.deployer} is not default admin")

        prompt_for_confirmation_or_exit(f"Grant default admin role to {intended_owner} on {ctx.name}?")
        grant_role_if_required(ctx, token, 'default admin', default_admin_role, intended_owner)

    # Renounce
    if not has_role(token, default_admin_role, ctx.deployer):
        logger.info(f"Signer at {ctx.deployer} is not default admin, nothing to renounce")
        return

    if not has_role(token, default_admin_role, intended_owner):
        raise RoleStateError(f"Intended owner at {intended_owner} is not default admin, cannot renounce role")

    logger.info(
        f"Both signer at {ctx.deployer} and intended owner at {intended_owner} are default admins, "
        f"renouncing signer role"
    )
    prompt_for_confirmation_or_exit(f"Renounce default admin role of {ctx.deployer} on {ctx.name}?")

    send_transaction(ctx, token.functions.renounceRole(default_admin_role, ctx.deployer), "Signer default admin renounce")

    if has_role(token, default_admin_role, ctx.deployer):
        raise RoleStateError(f"Signer at {ctx.deployer} is still default admin after renounce")
