"""
Messaging pathway configuration for the OFT mesh.

Every pair of contracts in the topology is wired in both directions with the same DVN
set. Confirmations are taken from the sending chain and enforced options from the
receiving chain. DVNs are referenced by provider name; resolving them to addresses is
left to the wiring tooling that consumes this config.
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, List, Sequence, Tuple

from ..consts import (
    CONTRACTS,
    Contract,
    EnforcedOption,
    get_confirmations,
    get_enforced_options,
    get_owner_address,
)

REQUIRED_DVNS: Tuple[str, ...] = ('LayerZero Labs', 'Canary')
OPTIONAL_DVNS: Tuple[str, ...] = ('Deutsche Telekom', 'P2P')
OPTIONAL_DVN_THRESHOLD = 1


@dataclass(frozen=True)
class Pathway:
    """Two-way pathway between chain A and chain B"""
    contract_a: Contract
    contract_b: Contract
    required_dvns: Tuple[str, ...]
    optional_dvns: Tuple[str, ...]
    optional_dvn_threshold: int
    # [A to B confirmations, B to A confirmations]
    confirmations: Tuple[int, int]
    # [chain B enforced options, chain A enforced options]
    enforced_options: Tuple[List[EnforcedOption], List[EnforcedOption]]


def build_pathways(contracts: Sequence[Contract] = CONTRACTS) -> List[Pathway]:
    """One pathway for every unordered pair of contracts, in topology order."""
    pathways = []
    for i in range(len(contracts)):
        for j in range(i + 1, len(contracts)):
            contract_from, contract_to = contracts[i], contracts[j]
            pathways.append(Pathway(
                contract_a=contract_from,
                contract_b=contract_to,
                required_dvns=REQUIRED_DVNS,
                optional_dvns=OPTIONAL_DVNS,
                optional_dvn_threshold=OPTIONAL_DVN_THRESHOLD,
                confirmations=(get_confirmations(contract_from.eid), get_confirmations(contract_to.eid)),
                enforced_options=(get_enforced_options(contract_to.eid), get_enforced_options(contract_from.eid)),
            ))
    return pathways


def _contract_to_dict(contract: Contract) -> Dict[str, Any]:
    return {'eid': contract.eid, 'contractName': contract.contract_name}


def _connection(pathway: Pathway, contract_from: Contract, contract_to: Contract,
                confirmations: int, enforced_options: List[EnforcedOption]) -> Dict[str, Any]:
    uln_config = {
        'confirmations': confirmations,
        'requiredDVNs': list(pathway.required_dvns),
        'optionalDVNs': list(pathway.optional_dvns),
        'optionalDVNThreshold': pathway.optional_dvn_threshold,
    }
    return {
        'from': _contract_to_dict(contract_from),
        'to': _contract_to_dict(contract_to),
        'config': {
            'sendConfig': {'ulnConfig': uln_config},
            'receiveConfig': {'ulnConfig': uln_config},
            'enforcedOptions': [option.to_dict() for option in enforced_options],
        },
    }


def pathways_to_connections(pathways: Sequence[Pathway]) -> List[Dict[str, Any]]:
    """Expand two-way pathways into directed connections (A to B, then B to A)."""
    connections = []
    for pathway in pathways:
        connections.append(_connection(
            pathway, pathway.contract_a, pathway.contract_b,
            pathway.confirmations[0], pathway.enforced_options[0],
        ))
        connections.append(_connection(
            pathway, pathway.contract_b, pathway.contract_a,
            pathway.confirmations[1], pathway.enforced_options[1],
        ))
    return connections


def build_oapp_config(contracts: Sequence[Contract] = CONTRACTS) -> Dict[str, Any]:
    """
    Full wiring config: contracts with owner/delegate, plus directed connections

    Raises:
        ConfigurationError: An owner address is missing for one of the contracts
    """
    return {
        'contracts': [
            {
                'contract': _contract_to_dict(contract),
                'config': {
                    'owner': get_owner_address(contract.eid),
                    'delegate': get_owner_address(contract.eid),
                },
            }
            for contract in contracts
        ],
        'connections': pathways_to_connections(build_pathways(contracts)),
    }


def write_oapp_config(path: str, contracts: Sequence[Contract] = CONTRACTS) -> Dict[str, Any]:
    config = build_oapp_config(contracts)
    with open(path, 'w') as f:
        json.dump(config, f, indent=2)
    return config
