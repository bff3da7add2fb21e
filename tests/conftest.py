"""
Pytest fixtures for the deployer tests.

Contains:
- A Hardhat-style artifacts directory (TrikonToken, BuyNFT, build info)
- A project configuration built from a fixed environment
- Deployed-contract factories
"""
import json
from pathlib import Path

import pytest

from config.network_config import load_config
from models.contracts import DeployedContract


TOKEN_ADDRESS = "0x5FbDB2315678afecb367f032d93F642f64180aa3"
MARKETPLACE_ADDRESS = "0xe7f1725E7734CE288F8367e1Bb143E90bb3F0512"
TEST_PRIVATE_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"

TOKEN_RUNTIME = "0x6080604052600080fd" + "aabbcc" + "0003"
# PUSH32 <immutable token address>, zeroed in the artifact
MARKETPLACE_RUNTIME = "0x7f" + "00" * 32 + "60043610" + "ddeeff" + "0003"
MARKETPLACE_IMMUTABLE_START = 1

BUILD_INPUT = {
    "language": "Solidity",
    "sources": {
        "contracts/TrikonToken.sol": {"content": "// token"},
        "contracts/BuyNFT.sol": {"content": "// marketplace"},
    },
    "settings": {"optimizer": {"enabled": True, "runs": 200}},
}


def _write_json(path: Path, data: dict):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def _write_artifact(root: Path, name: str, abi: list, runtime: str):
    contract_dir = root / "contracts" / f"{name}.sol"
    _write_json(contract_dir / f"{name}.json", {
        "_format": "hh-sol-artifact-1",
        "contractName": name,
        "sourceName": f"contracts/{name}.sol",
        "abi": abi,
        "bytecode": "0x60806040" + runtime[2:],
        "deployedBytecode": runtime,
        "linkReferences": {},
        "deployedLinkReferences": {},
    })
    _write_json(contract_dir / f"{name}.dbg.json", {
        "_format": "hh-sol-dbg-1",
        "buildInfo": "../../build-info/abc123.json",
    })


@pytest.fixture
def artifacts_dir(tmp_path):
    """Artifacts directory laid out the way `hardhat compile` leaves it."""
    root = tmp_path / "artifacts"
    _write_artifact(root, "TrikonToken", [
        {"type": "constructor", "inputs": [], "stateMutability": "nonpayable"},
    ], TOKEN_RUNTIME)
    _write_artifact(root, "BuyNFT", [
        {"type": "constructor", "inputs": [{"name": "_token", "type": "address"}], "stateMutability": "nonpayable"},
    ], MARKETPLACE_RUNTIME)
    _write_json(root / "build-info" / "abc123.json", {
        "id": "abc123",
        "_format": "hh-sol-build-info-1",
        "solcVersion": "0.8.18",
        "solcLongVersion": "0.8.18+commit.87f61d96",
        "input": BUILD_INPUT,
        "output": {
            "contracts": {
                "contracts/BuyNFT.sol": {
                    "BuyNFT": {"evm": {"deployedBytecode": {"immutableReferences": {
                        "42": [{"start": MARKETPLACE_IMMUTABLE_START, "length": 32}],
                    }}}},
                },
            },
        },
    })
    return root


@pytest.fixture
def env():
    return {
        "PRIVATE_KEY": TEST_PRIVATE_KEY,
        "POLYGON_API_KEY": "test-api-key",
        "POLYGON_RPC_URL": "https://rpc.example.org",
    }


@pytest.fixture
def project_config(env):
    return load_config(env)


def make_deployed(name: str, address: str, gas_used: int = 1_000_000, args=(), price=None) -> DeployedContract:
    return DeployedContract(
        contract_name=name,
        address=address,
        tx_hash="0x" + "ab" * 32,
        gas_used=gas_used,
        effective_gas_price=price,
        constructor_args=tuple(args),
    )
