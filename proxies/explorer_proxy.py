from typing import Callable, NamedTuple, Optional, Union
import json
import logging
import requests

from utils.rate_limit import SpacedLimiter
from config.network_config import EtherscanConfig
from models.constants import EXPLORER_RATE_LIMIT, EXPLORER_TIMEOUT
from models.errors import ConfigurationError, VerificationError
from models.explorer_response_types import ExplorerResponseDTO, VerifySourceBodyDTO


logger = logging.getLogger(__name__)

class EtherscanProxy:
    """Etherscan-compatible contract verification API (module=contract)"""

    ALREADY_VERIFIED_MARKERS = ("already verified",)
    PENDING_MARKERS = ("pending in queue", "in progress")
    PASS_MARKERS = ("pass - verified",)

    class VerifyStatus(NamedTuple):
        pending: bool
        verified: bool
        message: str

    class Submission(NamedTuple):
        guid: Optional[str]
        already_verified: bool
        message: str

    def __init__(self, config: EtherscanConfig, chain_id: Union[int, Callable[[], int]]):
        self._logger = logger.getChild(__class__.__name__)
        self._limiter = SpacedLimiter.per_second(EXPLORER_RATE_LIMIT)

        self._api_key = config.api_key
        self._api_url: str = config.api_url
        # A callable defers the chain id lookup until the first request
        self._chain_id_source = chain_id

    def __repr__(self):
        return f"EtherscanProxy(api_url={self._api_url!r})"

    @property
    def chain_id(self) -> int:
        if callable(self._chain_id_source):
            self._chain_id_source = int(self._chain_id_source())
        return self._chain_id_source

    def _require_api_key(self) -> str:
        if not self._api_key:
            raise ConfigurationError("POLYGON_API_KEY is not set, cannot talk to the block explorer")
        return self._api_key

    def _gated_request(self, method: str, params: dict, data: Optional[dict] = None) -> ExplorerResponseDTO:
        self._limiter.acquire()
        query = {"chainid": self.chain_id, **params}
        try:
            r = requests.request(method, self._api_url, params=query, data=data, timeout=EXPLORER_TIMEOUT)
            r.raise_for_status()
            out: ExplorerResponseDTO = r.json()
        except requests.RequestException as e:
            # also covers non-JSON bodies (requests' JSONDecodeError)
            raise VerificationError(f"Explorer request failed: {e}") from e

        self._logger.debug(f"Explorer response: {out}")
        return out

    def verify_source(
        self,
        address: str,
        contract_name: str,
        compiler_version: str,
        standard_json_input: dict,
        constructor_args_hex: str = "",
    ) -> Submission:
        """
        Submit a standard-JSON verification request.

        Args:
            address: Deployed contract address
            contract_name: Fully qualified name, e.g. contracts/BuyNFT.sol:BuyNFT
            compiler_version: solc long version without the leading "v"
            standard_json_input: Compiler input from the build info
            constructor_args_hex: ABI-encoded constructor arguments, no 0x prefix

        Returns:
            Submission with the GUID to poll, or already_verified set
        """
        body: VerifySourceBodyDTO = {
            "module": "contract",
            "action": "verifysourcecode",
            "apikey": self._require_api_key(),
            "contractaddress": address,
            "sourceCode": json.dumps(standard_json_input),
            "codeformat": "solidity-standard-json-input",
            "contractname": contract_name,
            "compilerversion": f"v{compiler_version}",
            "constructorArguements": constructor_args_hex.removeprefix("0x"),
        }
        self._logger.info(f"Submitting {contract_name} at {address} for verification")
        out = self._gated_request("POST", params={}, data=dict(body))

        result = str(out.get("result", ""))
        if out.get("status") == "1":
            self._logger.info(f"Verification request accepted, guid {result}")
            return self.Submission(guid=result, already_verified=False, message=out.get("message", ""))

        if any(m in result.lower() for m in self.ALREADY_VERIFIED_MARKERS):
            self._logger.info(f"{address} is already verified")
            return self.Submission(guid=None, already_verified=True, message=result)

        raise VerificationError(f"Explorer rejected verification of {address}: {result}")

    def check_verify_status(self, guid: str) -> VerifyStatus:
        out = self._gated_request("GET", params={
            "module": "contract",
            "action": "checkverifystatus",
            "guid": guid,
            "apikey": self._require_api_key(),
        })
        result = str(out.get("result", ""))
        lowered = result.lower()

        if any(m in lowered for m in self.PENDING_MARKERS):
            return self.VerifyStatus(pending=True, verified=False, message=result)
        if any(m in lowered for m in self.PASS_MARKERS + self.ALREADY_VERIFIED_MARKERS):
            return self.VerifyStatus(pending=False, verified=True, message=result)
        return self.VerifyStatus(pending=False, verified=False, message=result)
