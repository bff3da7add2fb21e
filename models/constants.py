"""
Constants for the marketplace deployer.
Contains compiler settings, network endpoints, explorer URLs, and other constant values.
"""

# Solidity Compiler Configuration
SOLIDITY_VERSION = "0.8.18"
OPTIMIZER_ENABLED = True
OPTIMIZER_RUNS = 200

# Contracts
TOKEN_CONTRACT_NAME = "TrikonToken"
MARKETPLACE_CONTRACT_NAME = "BuyNFT"
ARTIFACTS_DIR = "./artifacts"
CONTRACTS_SRC_DIR = "./contracts"

# Network Configuration
DEFAULT_NETWORK = "hardhat"
LOCAL_RPC = "http://127.0.0.1:8545"
POLYGON_MAINNET_RPC = "https://polygon-mumbai.g.alchemy.com/v2/_ULp5HCwK_YWhB3OfsvTU64A8G9A0KsY"

# Transaction Constants
GAS_ESTIMATE_MULTIPLIER = 1.2
TX_RECEIPT_TIMEOUT = 120  # seconds

# Block Explorer Configuration
ETHERSCAN_API_URL = "https://api.etherscan.io/v2/api"
EXPLORER_RATE_LIMIT = 5  # requests per second
EXPLORER_TIMEOUT = 35  # seconds
VERIFY_DELAY = 1.0  # seconds between deployment and verification
VERIFY_POLL_INTERVAL = 3.0  # seconds
VERIFY_MAX_POLLS = 20

# Gas Reporter
GAS_REPORTER_CURRENCY = "USD"

# Logging Configuration
INFO_LOG_LEVEL = "INFO"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
