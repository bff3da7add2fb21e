from proxies.chain_proxy import ChainProxy
from proxies.explorer_proxy import EtherscanProxy
from clients.deploy_client import DeployClient
from clients.verify_client import VerifyClient
from deployment.marketplace_deployment import MarketplaceDeployment, VerifyTarget
from config.network_config import ProjectConfig, load_config
from models.constants import ARTIFACTS_DIR, DEFAULT_NETWORK
from utils.artifact_store import ArtifactStore
from utils.colored_logging import get_network_logger, setup_root_logger
from utils.gas_reporter import GasReporter
from typing import Optional, Sequence
import argparse
import logging
import sys


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="marketplace-deployer",
        description="Deploy the ERC20 token and NFT marketplace, then verify on the block explorer"
    )
    parser.add_argument("--network", default=DEFAULT_NETWORK, help=f"configured network name (default: {DEFAULT_NETWORK})")
    parser.add_argument("--artifacts", default=ARTIFACTS_DIR, help="compiled artifacts directory")
    sub = parser.add_subparsers(dest="command", required=True)

    deploy = sub.add_parser("deploy", help="deploy token and marketplace, then verify one of them")
    deploy.add_argument(
        "--verify",
        required=True,
        choices=[t.value for t in VerifyTarget],
        help="which deployed contract to submit for source verification"
    )

    verify = sub.add_parser("verify", help="verify an already deployed contract")
    verify.add_argument("address")
    verify.add_argument("constructor_args", nargs="*", help="constructor arguments, in order")
    verify.add_argument("--contract", help="contract name; inferred from on-chain code when omitted")

    sub.add_parser("accounts", help="print the signing accounts of the network")
    return parser


def build_deployment(config: ProjectConfig, network_name: str, verify_target: VerifyTarget, artifacts_dir: str):
    """Wire proxies and clients for one deployment run"""
    network = config.network(network_name)
    store = ArtifactStore(artifacts_dir, config.solidity)
    chain = ChainProxy(network)

    verify_client = None
    if verify_target != VerifyTarget.NONE:
        explorer = EtherscanProxy(config.etherscan, chain_id=lambda: chain.chain_id)
        verify_client = VerifyClient(store, chain, explorer)

    gas_reporter = GasReporter(config.gas_reporter)
    deployment = MarketplaceDeployment(
        DeployClient(store, chain),
        verify_client,
        network_name,
        verify_target,
        gas_reporter=gas_reporter,
        custom_logger=get_network_logger(network_name, config.logging.get('format'))
    )
    return deployment, gas_reporter


def run_deploy(config: ProjectConfig, args) -> None:
    deployment, gas_reporter = build_deployment(config, args.network, VerifyTarget(args.verify), args.artifacts)
    deployment.run()
    gas_reporter.report()


def run_verify(config: ProjectConfig, args) -> None:
    store = ArtifactStore(args.artifacts, config.solidity)
    chain = ChainProxy(config.network(args.network))
    explorer = EtherscanProxy(config.etherscan, chain_id=lambda: chain.chain_id)
    VerifyClient(store, chain, explorer).verify(
        args.address,
        constructor_args=args.constructor_args,
        contract_name=args.contract
    )


def run_accounts(config: ProjectConfig, args) -> None:
    chain = ChainProxy(config.network(args.network))
    for account in chain.accounts():
        print(account)


COMMANDS = {
    "deploy": run_deploy,
    "verify": run_verify,
    "accounts": run_accounts,
}


def main(argv: Optional[Sequence[str]] = None, config: Optional[ProjectConfig] = None) -> int:
    """Run one command; returns the process exit status"""
    args = build_parser().parse_args(argv)

    if config is None:
        config = load_config()
    setup_root_logger(config.logging.get('level', 'INFO'), config.logging.get('format'))

    try:
        COMMANDS[args.command](config, args)
    except Exception as e:
        print(e, file=sys.stderr)
        logging.error(f"{args.command} failed on {args.network}: {e!r}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
