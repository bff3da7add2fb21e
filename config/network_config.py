from dataclasses import dataclass, field
import os
from typing import Dict, Mapping, Optional, Tuple
from dotenv import load_dotenv

from models.constants import (
    SOLIDITY_VERSION, OPTIMIZER_ENABLED, OPTIMIZER_RUNS,
    LOCAL_RPC, POLYGON_MAINNET_RPC, ETHERSCAN_API_URL,
    GAS_REPORTER_CURRENCY, CONTRACTS_SRC_DIR,
    INFO_LOG_LEVEL, LOG_FORMAT
)
from models.errors import ConfigurationError

@dataclass(frozen=True)
class SolidityConfig:
    version: str
    optimizer_enabled: bool
    optimizer_runs: int

@dataclass(frozen=True)
class NetworkConfig:
    name: str
    url: Optional[str]
    accounts: Tuple[str, ...] = ()

@dataclass(frozen=True)
class EtherscanConfig:
    api_key: Optional[str]
    api_url: str = ETHERSCAN_API_URL

@dataclass(frozen=True)
class GasReporterConfig:
    enabled: bool
    currency: str
    exclude_contracts: Tuple[str, ...] = ()
    src: str = CONTRACTS_SRC_DIR

@dataclass(frozen=True)
class ProjectConfig:
    solidity: SolidityConfig
    networks: Dict[str, NetworkConfig]
    etherscan: EtherscanConfig
    gas_reporter: GasReporterConfig
    logging: Dict[str, str] = field(default_factory=dict)

    def network(self, name: str) -> NetworkConfig:
        if name not in self.networks:
            known = ", ".join(sorted(self.networks))
            raise ConfigurationError(f"Unknown network {name!r} (known networks: {known})")
        return self.networks[name]


def load_config(environ: Optional[Mapping[str, str]] = None) -> ProjectConfig:
    """
    Assemble the project configuration from the environment and literal defaults.

    Nothing is validated here: an empty PRIVATE_KEY or POLYGON_API_KEY only
    fails once signing or verification is attempted.

    Args:
        environ: Mapping to read from. Defaults to os.environ after loading .env

    Returns:
        Immutable project configuration
    """
    if environ is None:
        load_dotenv()
        environ = os.environ

    private_key = environ.get('PRIVATE_KEY') or ""
    # Same env lookup the signer would perform; empty values stay empty
    testnet_accounts = (private_key,) if private_key else ()

    networks = {
        'hardhat': NetworkConfig(name='hardhat', url=LOCAL_RPC),
        # Literal endpoint, and its accounts were never wired up
        'polygonMainnet': NetworkConfig(name='polygonMainnet', url=POLYGON_MAINNET_RPC),
        'polygonTestnet': NetworkConfig(
            name='polygonTestnet',
            url=environ.get('POLYGON_RPC_URL'),
            accounts=testnet_accounts
        ),
    }

    return ProjectConfig(
        solidity=SolidityConfig(
            version=SOLIDITY_VERSION,
            optimizer_enabled=OPTIMIZER_ENABLED,
            optimizer_runs=OPTIMIZER_RUNS
        ),
        networks=networks,
        etherscan=EtherscanConfig(api_key=environ.get('POLYGON_API_KEY')),
        gas_reporter=GasReporterConfig(
            enabled=bool(environ.get('REPORT_GAS')),
            currency=GAS_REPORTER_CURRENCY
        ),
        logging={
            'level': environ.get('LOG_LEVEL') or INFO_LOG_LEVEL,
            'format': LOG_FORMAT
        }
    )
