from typing import Any
import logging

from proxies.chain_proxy import ChainProxy
from utils.artifact_store import ArtifactStore
from models.contracts import DeployedContract

logger = logging.getLogger(__name__)


class DeployClient:
    """Deploys compiled contracts by name on the proxy's network"""

    def __init__(self, store: ArtifactStore, chain: ChainProxy):
        self._store = store
        self._chain = chain

    @property
    def network_name(self) -> str:
        return self._chain.network_name

    def get_gas_price(self) -> int:
        return self._chain.get_gas_price()

    def deploy_contract(self, contract_name: str, *constructor_args: Any) -> DeployedContract:
        artifact = self._store.get_artifact(contract_name)
        logger.info(f"Deploying {artifact.fully_qualified_name} on {self.network_name} with args {list(constructor_args)}")
        return self._chain.deploy(artifact, constructor_args)
