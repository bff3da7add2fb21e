from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional
import logging
import time

from clients.deploy_client import DeployClient
from clients.verify_client import VerifyClient
from models.constants import TOKEN_CONTRACT_NAME, MARKETPLACE_CONTRACT_NAME, VERIFY_DELAY
from models.contracts import DeployedContract
from models.errors import ConfigurationError
from utils.gas_reporter import GasReporter

logger = logging.getLogger(__name__)


class VerifyTarget(str, Enum):
    TOKEN = "token"
    MARKETPLACE = "marketplace"
    NONE = "none"


@dataclass(frozen=True)
class DeploymentSummary:
    network: str
    gas_price: int
    token: DeployedContract
    marketplace: DeployedContract
    verified_address: Optional[str]


class MarketplaceDeployment:
    """
    Deploys the ERC20 token, then the marketplace bound to it, then requests verification.

    Steps run strictly in order and nothing is retried: any exception stops the
    run, so verification is never requested unless both deployments confirmed.
    Each run deploys fresh contracts.
    """

    def __init__(
        self,
        deploy_client: DeployClient,
        verify_client: Optional[VerifyClient],
        network_name: str,
        verify_target: VerifyTarget,
        gas_reporter: Optional[GasReporter] = None,
        sleep: Callable[[float], None] = time.sleep,
        verify_delay: float = VERIFY_DELAY,
        custom_logger: Optional[logging.Logger] = None
    ):
        self._logger = custom_logger or logger

        self._deploy_client = deploy_client
        self._verify_client = verify_client
        self._network_name = network_name
        self._verify_target = VerifyTarget(verify_target)
        self._gas_reporter = gas_reporter
        self._sleep = sleep
        self._verify_delay = verify_delay

    def _read_gas_price(self) -> int:
        gas_price = self._deploy_client.get_gas_price()
        self._logger.info(f"Current gas price on {self._network_name}: {gas_price} wei")
        if self._gas_reporter is not None:
            self._gas_reporter.gas_price_wei = gas_price
        return gas_price

    def _deploy(self, contract_name: str, *constructor_args) -> DeployedContract:
        deployed = self._deploy_client.deploy_contract(contract_name, *constructor_args)
        if self._gas_reporter is not None:
            self._gas_reporter.record(deployed)
        return deployed

    def _deploy_token(self) -> DeployedContract:
        token = self._deploy(TOKEN_CONTRACT_NAME)
        print(f"TestERC20 deployed at {token.address} in network: {self._network_name}.")
        return token

    def _deploy_marketplace(self, token: DeployedContract) -> DeployedContract:
        marketplace = self._deploy(MARKETPLACE_CONTRACT_NAME, token.address)
        print(f"Marketplace deployed at {marketplace.address} in network: {self._network_name}.")
        return marketplace

    def _verify(self, token: DeployedContract, marketplace: DeployedContract) -> Optional[str]:
        if self._verify_target == VerifyTarget.NONE:
            self._logger.warning("Verification target is 'none', skipping source verification")
            return None

        if self._verify_client is None:
            raise ConfigurationError(f"No verification client available to verify the {self._verify_target.value}")

        target = token if self._verify_target == VerifyTarget.TOKEN else marketplace
        self._verify_client.verify(
            target.address,
            constructor_args=target.constructor_args,
            contract_name=target.contract_name
        )
        return target.address

    def run(self) -> DeploymentSummary:
        gas_price = self._read_gas_price()
        token = self._deploy_token()
        marketplace = self._deploy_marketplace(token)

        # Give the explorer's index time to pick up the new contracts
        self._sleep(self._verify_delay)

        verified_address = self._verify(token, marketplace)

        return DeploymentSummary(
            network=self._network_name,
            gas_price=gas_price,
            token=token,
            marketplace=marketplace,
            verified_address=verified_address
        )
