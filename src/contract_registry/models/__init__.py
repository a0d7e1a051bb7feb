"""Registry data models.

Deployments and resolved contracts, plus the bulk configuration schemas.
"""

from contract_registry.models.config import NetworkConfig, RegistryConfig, normalize_chain_id
from contract_registry.models.deployment import Contract, Deployment

__all__ = [
    "Deployment",
    "Contract",
    "NetworkConfig",
    "RegistryConfig",
    "normalize_chain_id",
]
