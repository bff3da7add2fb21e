from typing import TypedDict, List, Dict, Any, Literal

# --- module=contract (all actions) ---
class ExplorerResponseDTO(TypedDict):
    status: Literal["0", "1"]
    message: str
    result: str

# --- POST action=verifysourcecode (request body) ---
class VerifySourceBodyDTO(TypedDict):
    module: Literal["contract"]
    action: Literal["verifysourcecode"]
    apikey: str
    contractaddress: str
    sourceCode: str
    codeformat: Literal["solidity-standard-json-input"]
    contractname: str
    compilerversion: str
    # misspelled by the explorer API itself
    constructorArguements: str

# --- artifacts/**/<Name>.json (Hardhat artifact format) ---
class ArtifactDTO(TypedDict, total=False):
    _format: str
    contractName: str
    sourceName: str
    abi: List[Dict[str, Any]]
    bytecode: str
    deployedBytecode: str
    linkReferences: Dict[str, Any]
    deployedLinkReferences: Dict[str, Any]

# --- artifacts/**/<Name>.dbg.json ---
class DebugFileDTO(TypedDict):
    _format: str
    buildInfo: str

# --- artifacts/build-info/<id>.json ---
class BuildInfoDTO(TypedDict, total=False):
    id: str
    _format: str
    solcVersion: str
    solcLongVersion: str
    input: Dict[str, Any]
    output: Dict[str, Any]
