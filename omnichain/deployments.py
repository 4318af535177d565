"""
Deployment records and compiled contract artifacts.

Records use the hardhat-deploy layout, `<deployments_dir>/<network>/<ContractName>.json`
holding at least `address` and `abi`, so they can be shared with existing tooling.
"""

import json
import logging
import os
from typing import Any, Dict, List, Optional

from .exceptions import ConfigurationError, DeploymentNotFoundError

logger = logging.getLogger(__name__)


def get_contract_artifact(contract_name: str, artifacts_dir: Optional[str] = None) -> Dict[str, Any]:
    """Loads a compiled contract artifact (abi and bytecode)."""
    artifacts_dir = artifacts_dir or os.getenv("ARTIFACTS_DIR", "artifacts")
    artifact_path = os.path.join(artifacts_dir, 'contracts', f'{contract_name}.sol', f'{contract_name}.json')
    try:
        with open(artifact_path, 'r') as f:
            return json.load(f)
    except FileNotFoundError:
        raise ConfigurationError(f"Artifact for {contract_name} not found at {artifact_path}") from None


def get_contract_abi(contract_name: str, artifacts_dir: Optional[str] = None) -> List[Dict[str, Any]]:
    return get_contract_artifact(contract_name, artifacts_dir)['abi']


class DeploymentStore:
    """Deployment records of a single network"""

    def __init__(self, network_name: str, deployments_dir: Optional[str] = None):
        self.network_name = network_name
        self.deployments_dir = deployments_dir or os.getenv("DEPLOYMENTS_DIR", "deployments")

    @property
    def network_dir(self) -> str:
        return os.path.join(self.deployments_dir, self.network_name)

    def _path(self, contract_name: str) -> str:
        return os.path.join(self.network_dir, f'{contract_name}.json')

    def get_or_none(self, contract_name: str) -> Optional[Dict[str, Any]]:
        path = self._path(contract_name)
        if not os.path.exists(path):
            return None
        with open(path, 'r') as f:
            return json.load(f)

    def get(self, contract_name: str) -> Dict[str, Any]:
        deployment = self.get_or_none(contract_name)
        if deployment is None:
            raise DeploymentNotFoundError(
                f"No deployment found for {contract_name} on {self.network_name}"
            )
        return deployment

    def save(self, contract_name: str, deployment: Dict[str, Any]) -> None:
        os.makedirs(self.network_dir, exist_ok=True)
        with open(self._path(contract_name), 'w') as f:
            json.dump(deployment, f, indent=2)
        logger.info(f"Saved deployment {contract_name} on {self.network_name} at {deployment['address']}")
