from typing import Any, List, Optional, Sequence
from web3 import Web3
from web3.exceptions import TimeExhausted, Web3Exception
from eth_account import Account
from eth_account.signers.local import LocalAccount
import logging

from config.network_config import NetworkConfig
from models.constants import GAS_ESTIMATE_MULTIPLIER, TX_RECEIPT_TIMEOUT
from models.contracts import ContractArtifact, DeployedContract
from models.errors import ConfigurationError, TransactionError


logger = logging.getLogger(__name__)

class ChainProxy:
    """JSON-RPC access for one configured network: gas price, deployments, code lookups"""

    def __init__(self, network: NetworkConfig, w3: Optional[Web3] = None):
        self._logger = logger.getChild(__class__.__name__)

        if not network.url and w3 is None:
            raise ConfigurationError(f"No RPC url configured for network {network.name}")

        self._network = network
        self._w3 = w3 if w3 is not None else Web3(Web3.HTTPProvider(network.url))
        self._chain_id: Optional[int] = None

        # Local signers are created lazily so a missing key only fails when signing
        self._signer: Optional[LocalAccount] = None

    def __repr__(self):
        return f"ChainProxy(network={self._network.name!r})"

    @property
    def network_name(self) -> str:
        return self._network.name

    @property
    def chain_id(self) -> int:
        if self._chain_id is None:
            try:
                self._chain_id = int(self._w3.eth.chain_id)
            except (Web3Exception, OSError) as e:
                raise TransactionError(f"Failed to read chain id from {self._network.name}: {e}") from e
        return self._chain_id

    def _account_from_key(self, key: str) -> LocalAccount:
        try:
            return Account.from_key(key if key.startswith("0x") else "0x" + key)
        except (ValueError, TypeError) as e:
            raise ConfigurationError(f"Invalid private key for network {self._network.name}") from e

    def _local_signer(self) -> Optional[LocalAccount]:
        if not self._network.accounts:
            return None
        if self._signer is None:
            self._signer = self._account_from_key(self._network.accounts[0])
        return self._signer

    def accounts(self) -> List[str]:
        if self._network.accounts:
            return [self._account_from_key(k).address for k in self._network.accounts]
        try:
            return [Web3.to_checksum_address(a) for a in self._w3.eth.accounts]
        except (Web3Exception, OSError) as e:
            raise TransactionError(f"Failed to list accounts on {self._network.name}: {e}") from e

    def _sender(self) -> str:
        signer = self._local_signer()
        if signer is not None:
            return signer.address

        # No configured key: fall back to the node's unlocked accounts (local dev node)
        node_accounts = self.accounts()
        if not node_accounts:
            raise ConfigurationError(f"No signing account configured for network {self._network.name}")
        return node_accounts[0]

    def get_gas_price(self) -> int:
        try:
            gas_price = int(self._w3.eth.gas_price)
        except (Web3Exception, OSError) as e:
            raise TransactionError(f"Failed to read gas price from {self._network.name}: {e}") from e
        self._logger.debug(f"Gas price on {self._network.name}: {gas_price} wei")
        return gas_price

    def get_code(self, address: str) -> bytes:
        try:
            return bytes(self._w3.eth.get_code(Web3.to_checksum_address(address)))
        except (Web3Exception, OSError) as e:
            raise TransactionError(f"Failed to read code at {address}: {e}") from e

    def deploy(self, artifact: ContractArtifact, constructor_args: Sequence[Any] = ()) -> DeployedContract:
        if not artifact.bytecode or artifact.bytecode == "0x":
            raise TransactionError(f"{artifact.contract_name} has no bytecode (abstract contract or interface?)")

        sender = self._sender()
        factory = self._w3.eth.contract(abi=artifact.abi, bytecode=artifact.bytecode)

        try:
            constructor = factory.constructor(*constructor_args)
            gas_est = constructor.estimate_gas({"from": sender})
            self._logger.debug(f"Deployment gas estimate for {artifact.contract_name}: {gas_est}")

            signer = self._local_signer()
            if signer is None:
                # Node-managed account: the node signs
                tx_hash = constructor.transact({"from": sender, "gas": int(gas_est * GAS_ESTIMATE_MULTIPLIER)})
            else:
                tx = constructor.build_transaction({
                    "from": sender,
                    "nonce": self._w3.eth.get_transaction_count(sender),
                    "gas": int(gas_est * GAS_ESTIMATE_MULTIPLIER),
                    "chainId": self.chain_id,
                })
                signed = signer.sign_transaction(tx)
                tx_hash = self._w3.eth.send_raw_transaction(signed.raw_transaction)
            self._logger.debug(f"Sent deployment transaction for {artifact.contract_name}: {Web3.to_hex(tx_hash)}")

            rcpt = self._w3.eth.wait_for_transaction_receipt(tx_hash, timeout=TX_RECEIPT_TIMEOUT)
        except TimeExhausted as e:
            raise TransactionError(f"Timed out waiting for {artifact.contract_name} deployment: {e}") from e
        except (Web3Exception, OSError, ValueError, TypeError) as e:
            raise TransactionError(f"Deployment of {artifact.contract_name} failed: {e}") from e

        if rcpt["status"] != 1:
            raise TransactionError(f"Deployment of {artifact.contract_name} reverted on-chain (tx {Web3.to_hex(tx_hash)})")
        if not rcpt.get("contractAddress"):
            raise TransactionError(f"Receipt for {artifact.contract_name} carries no contract address")

        deployed = DeployedContract(
            contract_name=artifact.contract_name,
            address=Web3.to_checksum_address(rcpt["contractAddress"]),
            tx_hash=Web3.to_hex(tx_hash),
            gas_used=int(rcpt["gasUsed"]),
            effective_gas_price=rcpt.get("effectiveGasPrice"),
            constructor_args=tuple(constructor_args)
        )
        self._logger.info(f"{artifact.contract_name} confirmed at {deployed.address}")
        return deployed
