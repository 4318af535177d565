"""
Build, sign and send transactions from the network's deployer account
"""

import logging
from typing import Any, Dict

from web3 import Web3

from .exceptions import TransactionFailedError

logger = logging.getLogger(__name__)


def _tx_params(ctx) -> Dict[str, Any]:
    return {
        'from': ctx.deployer,
        'nonce': ctx.w3.eth.get_transaction_count(ctx.deployer),
        'gasPrice': ctx.w3.eth.gas_price,
    }


def sign_and_send(ctx, tx: Dict[str, Any]) -> Any:
    """Sign a built transaction and return its hash without waiting."""
    signed_tx = ctx.account.sign_transaction(tx)
    return ctx.w3.eth.send_raw_transaction(signed_tx.raw_transaction)


def wait_for_receipt(ctx, tx_hash: Any) -> Any:
    receipt = ctx.w3.eth.wait_for_transaction_receipt(tx_hash, timeout=ctx.tx_timeout)
    if receipt['status'] != 1:
        raise TransactionFailedError(f"Transaction {Web3.to_hex(tx_hash)} reverted on {ctx.name}")
    logger.info(f"Transaction {Web3.to_hex(tx_hash)} confirmed in block {receipt['blockNumber']}")
    return receipt


def send_transaction(ctx, contract_function: Any, description: str) -> Any:
    """
    Send a contract call and wait for it to be mined

    Args:
        ctx: NetworkContext of the target network
        contract_function: Bound web3 contract function, e.g. `oft.functions.setRateLimits(...)`
        description: Human readable label used in logs

    Returns:
        Transaction receipt

    Raises:
        TransactionFailedError: The receipt status is not 1
    """
    tx = contract_function.build_transaction(_tx_params(ctx))
    tx_hash = sign_and_send(ctx, tx)
    logger.info(f"{description} TX sent {Web3.to_hex(tx_hash)}")
    return wait_for_receipt(ctx, tx_hash)


def deploy_contract(ctx, abi: Any, bytecode: str, args: list, description: str) -> Any:
    """Deploy a contract from its abi and bytecode and return the receipt."""
    factory = ctx.w3.eth.contract(abi=abi, bytecode=bytecode)
    tx = factory.constructor(*args).build_transaction(_tx_params(ctx))
    tx_hash = sign_and_send(ctx, tx)
    logger.info(f"{description} deployment TX sent {Web3.to_hex(tx_hash)}")
    return wait_for_receipt(ctx, tx_hash)
