from typing import Any, Callable, Optional, Sequence, Tuple
import logging
import time

from eth_abi import encode
from web3 import Web3

from proxies.chain_proxy import ChainProxy
from proxies.explorer_proxy import EtherscanProxy
from utils.artifact_store import ArtifactStore
from models.constants import VERIFY_POLL_INTERVAL, VERIFY_MAX_POLLS
from models.contracts import ContractArtifact
from models.errors import ArtifactNotFoundError, VerificationError

logger = logging.getLogger(__name__)


def mask_immutables(code: bytes, references: Sequence[Tuple[int, int]]) -> bytes:
    """Zero the immutable slots the constructor filled in, matching the artifact placeholders"""
    masked = bytearray(code)
    for start, length in references:
        end = min(start + length, len(masked))
        masked[start:end] = bytes(max(end - start, 0))
    return bytes(masked)


def strip_metadata(code: bytes) -> bytes:
    """Drop the CBOR metadata solc appends to runtime code (length in the last two bytes)"""
    if len(code) < 2:
        return code
    meta_len = int.from_bytes(code[-2:], "big")
    if meta_len + 2 > len(code):
        return code
    return code[:-(meta_len + 2)]


class VerifyClient:
    """Source verification of deployed contracts against their compiled artifacts"""

    def __init__(
        self,
        store: ArtifactStore,
        chain: ChainProxy,
        explorer: EtherscanProxy,
        poll_interval: float = VERIFY_POLL_INTERVAL,
        max_polls: int = VERIFY_MAX_POLLS,
        sleep: Callable[[float], None] = time.sleep
    ):
        self._logger = logger.getChild(__class__.__name__)
        self._store = store
        self._chain = chain
        self._explorer = explorer
        self._poll_interval = poll_interval
        self._max_polls = max_polls
        self._sleep = sleep

    @staticmethod
    def _coerce(abi_type: str, value: Any) -> Any:
        # Arguments typed on the command line arrive as strings
        if not isinstance(value, str):
            return value
        if abi_type.startswith(("uint", "int")) and "[" not in abi_type:
            return int(value, 0)
        if abi_type == "bool":
            return value.lower() in ("true", "1")
        return value

    def encode_constructor_args(self, artifact: ContractArtifact, constructor_args: Sequence[Any]) -> str:
        types = artifact.constructor_input_types()
        if len(types) != len(constructor_args):
            raise VerificationError(
                f"{artifact.contract_name} constructor takes {len(types)} arguments, got {len(constructor_args)}"
            )
        if not types:
            return ""
        values = [self._coerce(t, v) for t, v in zip(types, constructor_args)]
        return encode(types, values).hex()

    def infer_contract(self, address: str) -> ContractArtifact:
        code = self._chain.get_code(address)
        if not code:
            raise VerificationError(f"No contract code at {address} on {self._chain.network_name}")

        matches = []
        for artifact in self._store.artifacts():
            candidate = bytes(Web3.to_bytes(hexstr=artifact.deployed_bytecode or "0x"))
            if not candidate:
                continue
            try:
                references = self._store.get_build_info(artifact).immutable_references
            except ArtifactNotFoundError as e:
                self._logger.debug(f"No build info for {artifact.contract_name}, comparing unmasked: {e}")
                references = ()
            if strip_metadata(candidate) == strip_metadata(mask_immutables(code, references)):
                matches.append(artifact)

        if len(matches) != 1:
            names = ", ".join(a.fully_qualified_name for a in matches) or "none"
            raise VerificationError(
                f"Could not infer the contract deployed at {address} (matches: {names}), pass the contract name"
            )
        self._logger.info(f"Inferred {matches[0].fully_qualified_name} for {address}")
        return matches[0]

    def verify(
        self,
        address: str,
        constructor_args: Sequence[Any] = (),
        contract_name: Optional[str] = None
    ) -> bool:
        """
        Verify the source of a deployed contract.

        Returns True once the explorer reports the source as verified,
        raises VerificationError when it fails or never settles.
        """
        if contract_name:
            artifact = self._store.get_artifact(contract_name)
        else:
            artifact = self.infer_contract(address)

        build_info = self._store.get_build_info(artifact)
        submission = self._explorer.verify_source(
            address=address,
            contract_name=artifact.fully_qualified_name,
            compiler_version=build_info.solc_long_version,
            standard_json_input=build_info.input,
            constructor_args_hex=self.encode_constructor_args(artifact, constructor_args)
        )
        if submission.already_verified:
            print(f"{artifact.contract_name} at {address} is already verified.")
            return True

        for _ in range(self._max_polls):
            self._sleep(self._poll_interval)
            status = self._explorer.check_verify_status(submission.guid)
            if status.pending:
                self._logger.debug(f"Verification of {address} pending: {status.message}")
                continue
            if status.verified:
                print(f"Successfully verified {artifact.fully_qualified_name} at {address}.")
                return True
            raise VerificationError(f"Verification of {address} failed: {status.message}")

        raise VerificationError(f"Verification of {address} still pending after {self._max_polls} checks")
