"""Default contract ABIs shipped with the registry.

The standard token interfaces are stored as JSON files in this directory and
loaded at runtime. Registries seed them under their interface name unless
created with ``without_default_abis=True``.
"""

import json
from pathlib import Path
from typing import Any, Union

# An ABI is stored verbatim: a JSON string or a decoded list of descriptors
ABI = Union[str, list[dict[str, Any]], dict[str, Any]]

DEFAULT_ABI_NAMES: tuple[str, ...] = ("ERC20", "ERC721", "ERC1155")


def get_contract_abi(contract_name: str) -> list[dict]:
    """Load contract ABI from package resources.

    Args:
        contract_name: Name of the interface (e.g. "ERC20")

    Returns:
        ABI as list of function/event descriptors

    Raises:
        FileNotFoundError: If no ABI file ships for contract_name

    Example:
        >>> abi = get_contract_abi("ERC20")
        >>> contract = w3.eth.contract(address=addr, abi=abi)
    """
    abi_path = Path(__file__).parent / f"{contract_name}.json"

    if not abi_path.exists():
        raise FileNotFoundError(
            f"ABI file not found: {abi_path}\n"
            f"Available default ABIs: {', '.join(DEFAULT_ABI_NAMES)}"
        )

    with open(abi_path) as f:
        return json.load(f)


def get_default_abis() -> dict[str, ABI]:
    """Load every default ABI, keyed by interface name.

    A fresh copy is returned on each call so registries never share
    the same descriptor lists.
    """
    return {name: get_contract_abi(name) for name in DEFAULT_ABI_NAMES}
