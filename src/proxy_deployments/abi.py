"""ABI encoding helpers for proxy-deployments library."""

from typing import Any, Dict, List, Sequence

import rlp
from eth_abi import encode
from eth_abi.exceptions import EncodingError
from eth_utils import keccak, to_checksum_address

from .types import ContractArtifact


class AbiEncodingError(ValueError):
    """Raised when arguments cannot be encoded for an ABI entry."""

    pass


def find_function(abi: List[Dict[str, Any]], name: str, arity: int) -> Dict[str, Any]:
    """
    Find a function entry by name and number of inputs.

    Raises:
        AbiEncodingError: If no function with that name and arity exists
    """
    for item in abi:
        if (
            item.get("type") == "function"
            and item.get("name") == name
            and len(item.get("inputs", [])) == arity
        ):
            return item
    raise AbiEncodingError(f"No function {name} with {arity} inputs in ABI")


def has_function(abi: List[Dict[str, Any]], name: str) -> bool:
    return any(item.get("type") == "function" and item.get("name") == name for item in abi)


def _input_types(entry: Dict[str, Any]) -> List[str]:
    return [i["type"] for i in entry.get("inputs", [])]


def coerce_argument(abi_type: str, value: Any) -> Any:
    """
    Convert a string argument to the Python value eth_abi expects for abi_type.

    Non-string values are passed through untouched.
    """
    if not isinstance(value, str):
        return value

    if abi_type == "address":
        return to_checksum_address(value)
    if abi_type.startswith(("uint", "int")):
        return int(value, 0)
    if abi_type == "bool":
        return value.lower() in ("true", "1")
    if abi_type.startswith("bytes"):
        return bytes.fromhex(value.removeprefix("0x"))
    return value


def encode_arguments(types: Sequence[str], args: Sequence[Any]) -> bytes:
    if len(types) != len(args):
        raise AbiEncodingError(f"Expected {len(types)} arguments, got {len(args)}")
    try:
        values = [coerce_argument(t, a) for t, a in zip(types, args)]
        return encode(list(types), values)
    except (EncodingError, ValueError, TypeError) as e:
        raise AbiEncodingError(f"Cannot encode arguments {list(args)} as {list(types)}: {e}") from e


def encode_function_call(abi: List[Dict[str, Any]], name: str, args: Sequence[Any]) -> bytes:
    """
    Build calldata for a function call: 4-byte selector followed by encoded arguments.

    Args:
        abi: Contract ABI
        name: Function name, e.g. "initialize"
        args: Arguments in declared order

    Returns:
        Calldata bytes
    """
    entry = find_function(abi, name, len(args))
    types = _input_types(entry)
    selector = keccak(text=f"{name}({','.join(types)})")[:4]
    return selector + encode_arguments(types, args)


def encode_deploy_data(artifact: ContractArtifact, args: Sequence[Any] = ()) -> str:
    """
    Build contract-creation data: bytecode followed by encoded constructor arguments.

    Returns:
        0x-prefixed hex string
    """
    constructor = next((item for item in artifact.abi if item.get("type") == "constructor"), None)
    types = _input_types(constructor) if constructor is not None else []

    bytecode = artifact.bytecode.removeprefix("0x")
    if not types and not args:
        return "0x" + bytecode
    return "0x" + bytecode + encode_arguments(types, args).hex()


def get_create_address(sender: str, nonce: int) -> str:
    """
    Address of a contract created by sender at the given account nonce.

    keccak256(rlp([sender, nonce]))[12:], checksummed.
    """
    sender_bytes = bytes.fromhex(sender.removeprefix("0x"))
    return to_checksum_address(keccak(rlp.encode([sender_bytes, nonce]))[12:])
