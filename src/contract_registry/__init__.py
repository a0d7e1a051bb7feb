"""Registry of contract ABIs and deployments across blockchain networks."""

from contract_registry.abi import ABI, DEFAULT_ABI_NAMES, get_contract_abi, get_default_abis
from contract_registry.events import (
    AbiEvent,
    DeploymentEvent,
    DeploymentUpdatedEvent,
    EventEmitter,
    EventName,
    NetworkEvent,
    RegistryEvent,
)
from contract_registry.models import Contract, Deployment, NetworkConfig, RegistryConfig
from contract_registry.registry import AbiTable, ContractRegistry, DeploymentTable, NetworkRegistry

__all__ = [
    "ABI",
    "DEFAULT_ABI_NAMES",
    "get_contract_abi",
    "get_default_abis",
    "EventEmitter",
    "EventName",
    "RegistryEvent",
    "AbiEvent",
    "DeploymentEvent",
    "DeploymentUpdatedEvent",
    "NetworkEvent",
    "Deployment",
    "Contract",
    "NetworkConfig",
    "RegistryConfig",
    "AbiTable",
    "DeploymentTable",
    "NetworkRegistry",
    "ContractRegistry",
]
