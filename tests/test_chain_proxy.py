from unittest.mock import MagicMock, PropertyMock

import pytest
from web3.exceptions import TimeExhausted, Web3ValidationError

from config.network_config import NetworkConfig, SolidityConfig
from models.errors import ConfigurationError, TransactionError
from proxies.chain_proxy import ChainProxy
from utils.artifact_store import ArtifactStore
from tests.conftest import TEST_PRIVATE_KEY, TOKEN_ADDRESS

NODE_ACCOUNT = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
TX_HASH = b"\x12" * 32


def _receipt(status=1, address=TOKEN_ADDRESS):
    return {"status": status, "contractAddress": address, "gasUsed": 1_234_567, "effectiveGasPrice": 30_000_000_000}


@pytest.fixture
def artifact(artifacts_dir):
    store = ArtifactStore(artifacts_dir, SolidityConfig("0.8.18", True, 200))
    return store.get_artifact("TrikonToken")


@pytest.fixture
def w3():
    w3 = MagicMock()
    w3.eth.accounts = [NODE_ACCOUNT]
    w3.eth.chain_id = 31337
    w3.eth.gas_price = 21
    constructor = w3.eth.contract.return_value.constructor.return_value
    constructor.estimate_gas.return_value = 100_000
    constructor.transact.return_value = TX_HASH
    w3.eth.wait_for_transaction_receipt.return_value = _receipt()
    return w3


class TestChainProxy:

    def test_requires_url(self):
        with pytest.raises(ConfigurationError, match="polygonTestnet"):
            ChainProxy(NetworkConfig(name="polygonTestnet", url=None))

    def test_gas_price(self, w3):
        proxy = ChainProxy(NetworkConfig(name="hardhat", url="http://127.0.0.1:8545"), w3=w3)
        assert proxy.get_gas_price() == 21

    def test_gas_price_failure(self, w3):
        type(w3.eth).gas_price = PropertyMock(side_effect=ConnectionError("refused"))
        proxy = ChainProxy(NetworkConfig(name="hardhat", url="http://127.0.0.1:8545"), w3=w3)
        with pytest.raises(TransactionError, match="gas price"):
            proxy.get_gas_price()

    def test_deploy_with_node_account(self, w3, artifact):
        proxy = ChainProxy(NetworkConfig(name="hardhat", url="http://127.0.0.1:8545"), w3=w3)

        deployed = proxy.deploy(artifact)

        assert deployed.address == TOKEN_ADDRESS
        assert deployed.gas_used == 1_234_567
        assert deployed.effective_gas_price == 30_000_000_000
        assert deployed.tx_hash == "0x" + "12" * 32
        constructor = w3.eth.contract.return_value.constructor.return_value
        constructor.transact.assert_called_once_with({"from": NODE_ACCOUNT, "gas": 120_000})

    def test_deploy_with_local_signer(self, w3, artifact):
        constructor = w3.eth.contract.return_value.constructor.return_value
        constructor.build_transaction.return_value = {
            "nonce": 0,
            "gas": 120_000,
            "gasPrice": 1_000_000_000,
            "chainId": 31337,
            "data": artifact.bytecode,
            "value": 0,
        }
        w3.eth.send_raw_transaction.return_value = TX_HASH
        proxy = ChainProxy(NetworkConfig(name="polygonTestnet", url="https://rpc", accounts=(TEST_PRIVATE_KEY,)), w3=w3)

        deployed = proxy.deploy(artifact)

        assert deployed.address == TOKEN_ADDRESS
        w3.eth.send_raw_transaction.assert_called_once()
        constructor.transact.assert_not_called()

    def test_invalid_private_key(self, w3, artifact):
        proxy = ChainProxy(NetworkConfig(name="polygonTestnet", url="https://rpc", accounts=("not-a-key",)), w3=w3)
        with pytest.raises(ConfigurationError, match="private key"):
            proxy.deploy(artifact)

    def test_no_signer_available(self, w3, artifact):
        w3.eth.accounts = []
        proxy = ChainProxy(NetworkConfig(name="polygonMainnet", url="https://rpc"), w3=w3)
        with pytest.raises(ConfigurationError, match="No signing account"):
            proxy.deploy(artifact)

    def test_reverted_receipt(self, w3, artifact):
        w3.eth.wait_for_transaction_receipt.return_value = _receipt(status=0)
        proxy = ChainProxy(NetworkConfig(name="hardhat", url="http://127.0.0.1:8545"), w3=w3)
        with pytest.raises(TransactionError, match="reverted"):
            proxy.deploy(artifact)

    def test_receipt_timeout(self, w3, artifact):
        w3.eth.wait_for_transaction_receipt.side_effect = TimeExhausted("no receipt")
        proxy = ChainProxy(NetworkConfig(name="hardhat", url="http://127.0.0.1:8545"), w3=w3)
        with pytest.raises(TransactionError, match="Timed out"):
            proxy.deploy(artifact)

    def test_bad_constructor_arguments(self, w3, artifact):
        w3.eth.contract.return_value.constructor.side_effect = Web3ValidationError("Incorrect argument count")
        proxy = ChainProxy(NetworkConfig(name="hardhat", url="http://127.0.0.1:8545"), w3=w3)
        with pytest.raises(TransactionError, match="Incorrect argument count"):
            proxy.deploy(artifact, ("extra",))

    def test_accounts_from_configured_key(self, w3):
        proxy = ChainProxy(NetworkConfig(name="polygonTestnet", url="https://rpc", accounts=(TEST_PRIVATE_KEY,)), w3=w3)
        assert proxy.accounts() == ["0x2c7536E3605D9C16a7a3D7b1898e529396a65c23"]
