from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ContractArtifact:
    contract_name: str
    source_name: str
    abi: List[Dict[str, Any]]
    bytecode: str
    deployed_bytecode: str
    path: str

    @property
    def fully_qualified_name(self) -> str:
        return f"{self.source_name}:{self.contract_name}"

    def constructor_input_types(self) -> List[str]:
        for entry in self.abi:
            if entry.get("type") == "constructor":
                return [param["type"] for param in entry.get("inputs", [])]
        return []


@dataclass(frozen=True)
class BuildInfo:
    solc_version: str
    solc_long_version: str
    input: Dict[str, Any]
    immutable_references: Tuple[Tuple[int, int], ...] = ()


@dataclass(frozen=True)
class DeployedContract:
    contract_name: str
    address: str
    tx_hash: str
    gas_used: int
    effective_gas_price: Optional[int] = None
    constructor_args: Tuple[Any, ...] = field(default_factory=tuple)
