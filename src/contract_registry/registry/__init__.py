"""Registry layer: ABI and deployment tables, network and multi-network registries."""

from contract_registry.registry.abi_table import AbiTable
from contract_registry.registry.deployment_table import DeploymentTable
from contract_registry.registry.multi_network import ContractRegistry
from contract_registry.registry.network import NetworkRegistry

__all__ = [
    "AbiTable",
    "DeploymentTable",
    "NetworkRegistry",
    "ContractRegistry",
]
