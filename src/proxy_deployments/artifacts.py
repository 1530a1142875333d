"""Hardhat artifact lookup for proxy-deployments library."""

import json
from pathlib import Path
from typing import List, Union

from .exceptions import ArtifactNotFoundError
from .types import ContractArtifact


def parse_hardhat_artifact(file_path: Path) -> ContractArtifact:
    """
    Parse a hardhat artifact JSON file.

    Args:
        file_path: Path to artifacts/<source>.sol/<Name>.json

    Returns:
        ContractArtifact with name, source, ABI and creation bytecode

    Raises:
        ArtifactNotFoundError: If the file is not a readable artifact, or has no
                               deployable bytecode (interface or abstract contract)
    """
    try:
        with open(file_path) as f:
            data = json.load(f)
    except ValueError as e:
        raise ArtifactNotFoundError(
            file_path.stem, f"Artifact {file_path} is not valid JSON: {e}"
        ) from e

    if not isinstance(data, dict) or not isinstance(data.get("abi"), list):
        raise ArtifactNotFoundError(
            file_path.stem, f"Artifact {file_path} has no ABI; is it a hardhat artifact?"
        )

    contract_name = data.get("contractName", file_path.stem)
    bytecode = data.get("bytecode") or "0x"

    if bytecode in ("0x", ""):
        raise ArtifactNotFoundError(
            contract_name,
            f"Artifact for '{contract_name}' has no creation bytecode: {file_path}",
        )

    return ContractArtifact(
        contract_name=contract_name,
        source_name=data.get("sourceName", ""),
        abi=data["abi"],
        bytecode=bytecode,
    )


def _is_artifact_file(path: Path) -> bool:
    # Skip debug sidecars and the compiler's build-info dumps
    return not path.name.endswith(".dbg.json") and "build-info" not in path.parts


class HardhatArtifactRepository:
    """Resolves contract names to compiled artifacts in a hardhat artifacts/ directory."""

    def __init__(self, artifacts_dir: Union[Path, str] = "artifacts"):
        self.artifacts_dir = Path(artifacts_dir).absolute()

    def _candidates(self, contract_name: str) -> List[Path]:
        # Fully qualified name: "contracts/TokenWrapper.sol:TokenWrapper"
        if ":" in contract_name:
            source_name, name = contract_name.rsplit(":", 1)
            path = self.artifacts_dir / source_name / f"{name}.json"
            return [path] if path.exists() else []

        return sorted(
            p for p in self.artifacts_dir.rglob(f"{contract_name}.json") if _is_artifact_file(p)
        )

    def get(self, contract_name: str) -> ContractArtifact:
        """
        Get the artifact for a contract.

        Args:
            contract_name: Bare name ("TokenWrapper") or fully qualified
                           name ("contracts/TokenWrapper.sol:TokenWrapper")

        Returns:
            ContractArtifact

        Raises:
            ArtifactNotFoundError: If the artifacts directory is missing, no artifact
                                   matches, a bare name is ambiguous, or the contract
                                   is not deployable
        """
        if not self.artifacts_dir.is_dir():
            raise ArtifactNotFoundError(
                contract_name,
                f"Artifacts directory not found at {self.artifacts_dir}. "
                "Compile the contracts first.",
            )

        candidates = self._candidates(contract_name)
        if not candidates:
            raise ArtifactNotFoundError(
                contract_name,
                f"Contract artifact '{contract_name}' not found in {self.artifacts_dir}",
            )
        if len(candidates) > 1:
            sources = ", ".join(str(p.parent.relative_to(self.artifacts_dir)) for p in candidates)
            raise ArtifactNotFoundError(
                contract_name,
                f"Contract name '{contract_name}' is ambiguous ({sources}); "
                "use the fully qualified name",
            )

        return parse_hardhat_artifact(candidates[0])
