"""
Skip-if-already-deployed contract deployment with hardhat-deploy style records
"""

import logging
from typing import Any, Dict, List, Optional

from web3 import Web3

from ..deployments import get_contract_artifact
from ..transactions import deploy_contract

logger = logging.getLogger(__name__)


def _record(receipt: Any, abi: Any, args: List[Any]) -> Dict[str, Any]:
    return {
        'address': receipt['contractAddress'],
        'abi': abi,
        'transactionHash': Web3.to_hex(receipt['transactionHash']),
        'blockNumber': receipt['blockNumber'],
        'args': [Web3.to_hex(arg) if isinstance(arg, bytes) else arg for arg in args],
    }


def deploy(ctx, contract_name: str, args: List[Any], artifact_name: Optional[str] = None) -> str:
    """
    Deploy `contract_name` unless a deployment record already exists

    Returns:
        Address of the existing or new deployment
    """
    existing = ctx.deployments.get_or_none(contract_name)
    if existing is not None:
        logger.info(f"Reusing {contract_name} on {ctx.name} at {existing['address']}")
        return existing['address']

    artifact = get_contract_artifact(artifact_name or contract_name)
    receipt = deploy_contract(ctx, artifact['abi'], artifact['bytecode'], args, contract_name)
    ctx.deployments.save(contract_name, _record(receipt, artifact['abi'], args))
    return receipt['contractAddress']


def deploy_uups_proxy(ctx, contract_name: str, init_method: str, init_args: List[Any],
                      proxy_artifact_name: str = 'ERC1967Proxy') -> str:
    """
    Deploy an implementation behind an ERC1967 proxy and initialize it in the proxy constructor

    Records `<name>_Implementation`, `<name>_Proxy` and `<name>`; the latter points at the
    proxy with the implementation's abi.
    """
    existing = ctx.deployments.get_or_none(contract_name)
    if existing is not None:
        logger.info(f"Reusing {contract_name} on {ctx.name} at {existing['address']}")
        return existing['address']

    artifact = get_contract_artifact(contract_name)
    implementation_address = deploy(ctx, f'{contract_name}_Implementation', [], artifact_name=contract_name)

    implementation = ctx.w3.eth.contract(abi=artifact['abi'])
    init_data = implementation.encode_abi(init_method, args=init_args)

    proxy_args = [implementation_address, init_data]
    proxy_address = deploy(ctx, f'{contract_name}_Proxy', proxy_args, artifact_name=proxy_artifact_name)

    proxy_record = ctx.deployments.get(f'{contract_name}_Proxy')
    ctx.deployments.save(contract_name, {
        **proxy_record,
        'abi': artifact['abi'],
        'implementation': implementation_address,
    })
    return proxy_address
