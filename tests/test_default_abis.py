"""Default ABI resource tests."""

import pytest

from contract_registry.abi import DEFAULT_ABI_NAMES, get_contract_abi, get_default_abis


@pytest.mark.parametrize(
    "name, expected_function",
    [("ERC20", "transfer"), ("ERC721", "ownerOf"), ("ERC1155", "safeBatchTransferFrom")],
)
def test_default_abis_describe_the_standard(name, expected_function):
    abi = get_contract_abi(name)

    function_names = {entry["name"] for entry in abi if entry["type"] == "function"}
    assert expected_function in function_names


def test_unknown_abi_raises_file_not_found():
    with pytest.raises(FileNotFoundError, match="Available default ABIs"):
        get_contract_abi("ERC4626")


def test_get_default_abis_order_and_fresh_copies():
    first = get_default_abis()
    second = get_default_abis()

    assert list(first) == list(DEFAULT_ABI_NAMES)
    assert first == second
    assert first["ERC20"] is not second["ERC20"]
