"""Build web3 contract objects from registry entries.

Bridges the registry to web3.py: a registered deployment is resolved to its
address and ABI, and handed to ``w3.eth.contract``. Building the contract
object makes no RPC call; the first function call on it does.
"""

import json
from typing import Optional, Union

import structlog
from web3 import Web3
from web3.contract import Contract as Web3Contract

from contract_registry.models.deployment import Contract
from contract_registry.registry.multi_network import ContractRegistry
from contract_registry.registry.network import NetworkRegistry

logger = structlog.get_logger()


def resolve_contract(
    registry: Union[NetworkRegistry, ContractRegistry],
    key: str,
    chain_id: Optional[int] = None,
) -> Contract:
    """Resolve a deployment key in a single- or multi-network registry.

    Raises:
        ValueError: If chain_id is missing for a multi-network registry
        RegistryError: If the network or deployment is unknown
    """
    if isinstance(registry, ContractRegistry):
        if chain_id is None:
            raise ValueError("chain_id is required to resolve a contract in a ContractRegistry")
        return registry.get_contract(chain_id, key)
    return registry.get_contract(key)


def build_contract(
    w3: Web3,
    registry: Union[NetworkRegistry, ContractRegistry],
    key: str,
    chain_id: Optional[int] = None,
) -> Web3Contract:
    """Create a web3 contract object for a registered deployment.

    Args:
        w3: Web3 instance the contract is bound to
        registry: Registry holding the deployment
        key: Deployment key
        chain_id: Chain ID, required when registry is a ContractRegistry

    Returns:
        web3 Contract with a checksummed address

    Raises:
        ValueError: If chain_id is missing or the address is not a valid EVM address
        RegistryError: If the network or deployment is unknown

    Example:
        >>> usdc = build_contract(w3, registry, "USDC", chain_id=8453)
        >>> usdc.functions.decimals().call()
        6
    """
    contract = resolve_contract(registry, key, chain_id)

    abi = contract.abi
    if isinstance(abi, str):
        abi = json.loads(abi)

    address = Web3.to_checksum_address(contract.address)
    logger.debug("contract.built", key=key, chain_id=chain_id, address=address)
    return w3.eth.contract(address=address, abi=abi)
