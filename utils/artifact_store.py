"""
Reader for Hardhat-format compilation artifacts.
Contracts are compiled ahead of time; this module only reads what the compiler left on disk.
"""

import json
import logging
from pathlib import Path
from typing import Dict, Iterator, List, Optional, Tuple, Union

from config.network_config import SolidityConfig
from models.contracts import BuildInfo, ContractArtifact
from models.errors import ArtifactNotFoundError
from models.explorer_response_types import ArtifactDTO, BuildInfoDTO, DebugFileDTO

logger = logging.getLogger(__name__)


class ArtifactStore:
    """Looks up compiled contracts under an artifacts directory"""

    BUILD_INFO_DIR = "build-info"
    DEBUG_SUFFIX = ".dbg.json"

    def __init__(self, artifacts_dir: Union[str, Path], solidity: SolidityConfig):
        self._logger = logger.getChild(__class__.__name__)
        self._root = Path(artifacts_dir)
        self._solidity = solidity
        self._cache: Dict[str, ContractArtifact] = {}

    def __repr__(self):
        return f"ArtifactStore(root={str(self._root)!r})"

    def _artifact_paths(self) -> List[Path]:
        if not self._root.is_dir():
            raise ArtifactNotFoundError(
                f"Artifacts directory {self._root} does not exist, compile the contracts first"
            )
        paths = []
        for path in sorted(self._root.rglob("*.json")):
            if self.BUILD_INFO_DIR in path.relative_to(self._root).parts:
                continue
            if path.name.endswith(self.DEBUG_SUFFIX):
                continue
            paths.append(path)
        return paths

    @staticmethod
    def _read_artifact(path: Path) -> Optional[ContractArtifact]:
        with path.open(encoding="utf-8") as f:
            data: ArtifactDTO = json.load(f)

        # Anything without bytecode (interfaces, stray json) is not deployable
        if "contractName" not in data or "bytecode" not in data:
            return None

        return ContractArtifact(
            contract_name=data["contractName"],
            source_name=data.get("sourceName", ""),
            abi=data.get("abi", []),
            bytecode=data["bytecode"],
            deployed_bytecode=data.get("deployedBytecode", "0x"),
            path=str(path)
        )

    def artifacts(self) -> Iterator[ContractArtifact]:
        for path in self._artifact_paths():
            artifact = self._read_artifact(path)
            if artifact is not None:
                yield artifact

    def get_artifact(self, contract_name: str) -> ContractArtifact:
        if not contract_name:
            raise ValueError("Contract name is required")

        if contract_name in self._cache:
            return self._cache[contract_name]

        matches = [p for p in self._artifact_paths() if p.stem == contract_name]
        if not matches:
            raise ArtifactNotFoundError(f"No artifact for contract {contract_name} in {self._root}")
        if len(matches) > 1:
            found = ", ".join(str(p.relative_to(self._root)) for p in matches)
            raise ArtifactNotFoundError(f"Multiple artifacts named {contract_name}: {found}")

        artifact = self._read_artifact(matches[0])
        if artifact is None:
            raise ArtifactNotFoundError(f"{matches[0]} is not a contract artifact")

        self._logger.debug(f"Loaded artifact {artifact.fully_qualified_name} from {artifact.path}")
        self._cache[contract_name] = artifact
        return artifact

    @staticmethod
    def _immutable_references(data: BuildInfoDTO, artifact: ContractArtifact) -> List[Tuple[int, int]]:
        """(start, length) byte ranges of immutables in the runtime code"""
        contract = data.get("output", {}).get("contracts", {}).get(artifact.source_name, {}).get(artifact.contract_name, {})
        refs = contract.get("evm", {}).get("deployedBytecode", {}).get("immutableReferences", {})
        return sorted((int(r["start"]), int(r["length"])) for slots in refs.values() for r in slots)

    def get_build_info(self, artifact: ContractArtifact) -> BuildInfo:
        artifact_path = Path(artifact.path)
        dbg_path = artifact_path.with_name(artifact_path.stem + self.DEBUG_SUFFIX)
        if not dbg_path.is_file():
            raise ArtifactNotFoundError(f"Missing debug file {dbg_path} for {artifact.contract_name}")

        with dbg_path.open(encoding="utf-8") as f:
            dbg: DebugFileDTO = json.load(f)

        # buildInfo is relative to the .dbg.json file
        build_info_path = (dbg_path.parent / dbg["buildInfo"]).resolve()
        if not build_info_path.is_file():
            raise ArtifactNotFoundError(f"Missing build info {build_info_path} for {artifact.contract_name}")

        with build_info_path.open(encoding="utf-8") as f:
            data: BuildInfoDTO = json.load(f)

        solc_version = data.get("solcVersion", "")
        if solc_version != self._solidity.version:
            self._logger.warning(
                f"{artifact.contract_name} was compiled with solc {solc_version}, "
                f"configured version is {self._solidity.version}"
            )

        if "input" not in data:
            raise ArtifactNotFoundError(f"Build info {build_info_path} has no compiler input for {artifact.contract_name}")

        optimizer = data["input"].get("settings", {}).get("optimizer", {})
        if (bool(optimizer.get("enabled")) != self._solidity.optimizer_enabled
                or optimizer.get("runs") != self._solidity.optimizer_runs):
            self._logger.warning(
                f"{artifact.contract_name} optimizer settings {optimizer} differ from configured "
                f"enabled={self._solidity.optimizer_enabled} runs={self._solidity.optimizer_runs}"
            )

        return BuildInfo(
            solc_version=solc_version,
            solc_long_version=data.get("solcLongVersion", solc_version),
            input=data["input"],
            immutable_references=tuple(self._immutable_references(data, artifact))
        )
