"""Multi-network registry with a global ABI tier.

ContractRegistry owns one NetworkRegistry per configured chain ID plus a
global ABI table shared by every network. Global ABIs are replicated into
each network's ABI table, so deployments on any network can reference them.

Invariant: a key is either a global ABI key or a network-local ABI key,
never both. Network-level ABI operations on a global key are refused, and a
global ABI cannot be registered under a key any network already uses.

Example:
    >>> registry = ContractRegistry({
    ...     "global_abis": {"Vault": vault_abi},
    ...     "networks": {
    ...         1: {"deployments": {"MainVault": {"address": addr, "abi_key": "Vault"}}},
    ...         8453: {},
    ...     },
    ... })
    >>> registry.get_abi(8453, "Vault") is registry.get_global_abi("Vault")
    True
"""

from typing import Any, Optional, Union

import structlog

from contract_registry.abi import ABI, get_default_abis
from contract_registry.events import EventEmitter, EventName, Listener, NetworkEvent
from contract_registry.models.config import RegistryConfig, normalize_chain_id
from contract_registry.models.deployment import Contract, Deployment
from contract_registry.registry.abi_table import AbiTable, validate_key
from contract_registry.registry.network import NetworkRegistry
from contract_registry.services.exceptions import (
    AbiInUseError,
    DuplicateNetworkError,
    GlobalAbiKeyError,
    GlobalKeyCollisionError,
    NotGlobalAbiError,
    UnknownNetworkError,
)

logger = structlog.get_logger()


class ContractRegistry:
    """ABIs and deployments across several networks, plus global ABIs."""

    def __init__(
        self,
        config: Union[RegistryConfig, dict[str, Any], None] = None,
        *,
        without_default_abis: bool = False,
        emitter: Optional[EventEmitter] = None,
    ):
        """Create the registry and replay its initial configuration.

        Order of replay:
        1. One empty network per configured chain ID
        2. Default ABIs as global ABIs (unless without_default_abis)
        3. ``config.global_abis`` as global ABIs
        4. For each network, its ABIs then its deployments

        Args:
            config: Registry configuration (model or plain dict)
            without_default_abis: Skip the ERC20/ERC721/ERC1155 global defaults
            emitter: Event emitter shared with every network (a private one if omitted)

        Raises:
            GlobalAbiKeyError: If a network ABI reuses a global ABI key
            RegistryError: If the configuration violates another invariant
            pydantic.ValidationError: If config is malformed
        """
        registry_config = RegistryConfig.model_validate(config if config is not None else {})

        self.emitter = emitter if emitter is not None else EventEmitter()
        self._global_abis = AbiTable(None, self.emitter)
        self._networks: dict[int, NetworkRegistry] = {
            chain_id: self._create_network(chain_id) for chain_id in registry_config.networks
        }

        if not without_default_abis:
            for key, abi in get_default_abis().items():
                self.register_global_abi(key, abi)
        for key, abi in registry_config.global_abis.items():
            self.register_global_abi(key, abi)

        for chain_id, network_config in registry_config.networks.items():
            for key, abi in network_config.abis.items():
                self.register_abi(chain_id, key, abi)
            for key, deployment in network_config.deployments.items():
                self.register_deployment(chain_id, key, deployment)

        logger.info(
            "registry.constructed",
            chain_ids=self.get_chain_ids(),
            global_abi_count=len(self._global_abis),
        )

    @classmethod
    def from_object(
        cls,
        snapshot: dict[str, Any],
        *,
        emitter: Optional[EventEmitter] = None,
    ) -> "ContractRegistry":
        """Rebuild a registry from a ``to_object()`` snapshot.

        The snapshot's network tables contain replicated copies of the global
        ABIs; those copies are dropped before replay so they are restored
        through the global tier only. Defaults are not seeded again since the
        snapshot's global tier already holds them.
        """
        config = RegistryConfig.model_validate(snapshot)
        global_keys = set(config.global_abis)
        for network_config in config.networks.values():
            network_config.abis = {
                key: abi for key, abi in network_config.abis.items() if key not in global_keys
            }
        return cls(config, without_default_abis=True, emitter=emitter)

    def __repr__(self) -> str:
        return (
            f"ContractRegistry(chain_ids={self.get_chain_ids()}, "
            f"global_abis={len(self._global_abis)})"
        )

    def _create_network(self, chain_id: int) -> NetworkRegistry:
        return NetworkRegistry(chain_id, without_default_abis=True, emitter=self.emitter)

    def _get_network(self, chain_id: int) -> NetworkRegistry:
        try:
            return self._networks[normalize_chain_id(chain_id)]
        except KeyError:
            raise UnknownNetworkError(f"Chain ID {chain_id} is not configured.") from None

    def _reject_global_key(self, key: str, operation: str) -> None:
        if key in self._global_abis:
            raise GlobalAbiKeyError(
                f"Key {key} is associated to a global ABI. "
                f"Please, use '{operation}' in order to modify it."
            )

    def _require_global_key(self, key: str) -> None:
        validate_key(key)
        if key not in self._global_abis:
            raise NotGlobalAbiError(f"Key {key} is not associated to a global ABI.")

    # Events

    def on(self, event: str, listener: Listener) -> "ContractRegistry":
        self.emitter.on(event, listener)
        return self

    def off(self, event: str, listener: Listener) -> "ContractRegistry":
        self.emitter.off(event, listener)
        return self

    # Networks

    def get_chain_ids(self) -> list[int]:
        """Configured chain IDs, in configuration order."""
        return list(self._networks)

    def has_network(self, chain_id: int) -> bool:
        return normalize_chain_id(chain_id) in self._networks

    def get_network(self, chain_id: int) -> NetworkRegistry:
        """Return the registry of one network.

        Raises:
            UnknownNetworkError: If the chain ID is not configured
        """
        return self._get_network(chain_id)

    def add_network(self, chain_id: int) -> "ContractRegistry":
        """Add a network pre-loaded with every current global ABI.

        Raises:
            DuplicateNetworkError: If the chain ID is already configured
            ValueError: If chain_id is not an integer
        """
        chain_id = normalize_chain_id(chain_id)
        if chain_id in self._networks:
            raise DuplicateNetworkError(f"Chain ID {chain_id} is already configured.")

        network = self._create_network(chain_id)
        for key, abi in self._global_abis.to_dict().items():
            network.register_abi(key, abi)
        self._networks[chain_id] = network

        logger.info("network.added", chain_id=chain_id, global_abi_count=len(self._global_abis))
        self.emitter.emit(NetworkEvent(event=EventName.NETWORK_ADDED, chain_id=chain_id))
        return self

    def remove_network(self, chain_id: int) -> "ContractRegistry":
        """Remove a network with all of its ABIs and deployments.

        Raises:
            UnknownNetworkError: If the chain ID is not configured
        """
        network = self._get_network(chain_id)
        chain_id = network.chain_id
        del self._networks[chain_id]

        logger.info(
            "network.removed",
            chain_id=chain_id,
            deployment_count=len(network.get_deployment_keys()),
        )
        self.emitter.emit(NetworkEvent(event=EventName.NETWORK_DELETED, chain_id=chain_id))
        return self

    # Global ABIs

    def register_global_abi(self, key: str, abi: ABI) -> "ContractRegistry":
        """Register a global ABI and replicate it in every network.

        Raises:
            AbiAlreadyExistsError: If key is already a global ABI key
            GlobalKeyCollisionError: If a network already uses key for a local ABI
        """
        validate_key(key)
        if key not in self._global_abis:
            colliding = [
                chain_id for chain_id, network in self._networks.items() if network.has_abi(key)
            ]
            if colliding:
                raise GlobalKeyCollisionError(
                    f"Key {key} is already used for an ABI on chain IDs "
                    f"{', '.join(map(str, colliding))}."
                )

        self._global_abis.register(key, abi)
        for network in self._networks.values():
            network.register_abi(key, abi)
        return self

    def update_global_abi(self, key: str, abi: ABI) -> "ContractRegistry":
        """Update a global ABI and replicate the update in every network.

        Raises:
            NotGlobalAbiError: If key is not a global ABI key
        """
        self._require_global_key(key)
        for network in self._networks.values():
            network.update_abi(key, abi)
        self._global_abis.update(key, abi)
        return self

    def delete_global_abi(self, key: str) -> "ContractRegistry":
        """Delete a global ABI from every network.

        Raises:
            NotGlobalAbiError: If key is not a global ABI key
            AbiInUseError: If a deployment on any network references the ABI
        """
        self._require_global_key(key)
        using = [
            chain_id for chain_id, network in self._networks.items() if network.is_abi_used(key)
        ]
        if using:
            raise AbiInUseError(
                f"Unable to delete the global ABI for key {key} as it is used in at least "
                f"one deployment on chain IDs {', '.join(map(str, using))}."
            )

        for network in self._networks.values():
            network.delete_abi(key)
        self._global_abis.delete(key)
        return self

    def get_global_abi(self, key: str) -> ABI:
        """Get a global ABI.

        Raises:
            NotGlobalAbiError: If key is not a global ABI key
        """
        self._require_global_key(key)
        return self._global_abis.get(key)

    def is_global_abi(self, key: str) -> bool:
        return key in self._global_abis

    def get_global_abis(self) -> dict[str, ABI]:
        return self._global_abis.to_dict()

    # Network ABIs

    def register_abi(self, chain_id: int, key: str, abi: ABI) -> "ContractRegistry":
        """Register an ABI on one network.

        Raises:
            GlobalAbiKeyError: If key is a global ABI key
            UnknownNetworkError: If the chain ID is not configured
            AbiAlreadyExistsError: If the network already has an ABI under key
        """
        validate_key(key)
        self._reject_global_key(key, "register_global_abi")
        self._get_network(chain_id).register_abi(key, abi)
        return self

    def update_abi(self, chain_id: int, key: str, abi: ABI) -> "ContractRegistry":
        """Update an ABI of one network.

        Raises:
            GlobalAbiKeyError: If key is a global ABI key
            UnknownNetworkError: If the chain ID is not configured
            AbiNotFoundError: If the network has no ABI under key
        """
        validate_key(key)
        self._reject_global_key(key, "update_global_abi")
        self._get_network(chain_id).update_abi(key, abi)
        return self

    def delete_abi(self, chain_id: int, key: str) -> "ContractRegistry":
        """Delete an ABI of one network.

        Raises:
            GlobalAbiKeyError: If key is a global ABI key
            UnknownNetworkError: If the chain ID is not configured
            AbiNotFoundError: If the network has no ABI under key
            AbiInUseError: If a deployment still references the ABI
        """
        validate_key(key)
        self._reject_global_key(key, "delete_global_abi")
        self._get_network(chain_id).delete_abi(key)
        return self

    def get_abi(self, chain_id: int, key: str) -> ABI:
        """Get an ABI of one network, global ABIs included."""
        return self._get_network(chain_id).get_abi(key)

    def is_abi_used(self, chain_id: int, key: str) -> bool:
        return self._get_network(chain_id).is_abi_used(key)

    # Deployments and contracts

    def register_deployment(
        self, chain_id: int, key: str, deployment: Union[Deployment, dict[str, Any]]
    ) -> "ContractRegistry":
        self._get_network(chain_id).register_deployment(key, deployment)
        return self

    def register_contract(
        self, chain_id: int, key: str, contract: Union[Contract, dict[str, Any]]
    ) -> "ContractRegistry":
        self._get_network(chain_id).register_contract(key, contract)
        return self

    def update_deployment(self, chain_id: int, key: str, abi_key: str) -> "ContractRegistry":
        self._get_network(chain_id).update_deployment(key, abi_key)
        return self

    def delete_deployment(self, chain_id: int, key: str) -> "ContractRegistry":
        self._get_network(chain_id).delete_deployment(key)
        return self

    def get_contract(self, chain_id: int, key: str) -> Contract:
        return self._get_network(chain_id).get_contract(key)

    def get_address(self, chain_id: int, key: str) -> str:
        return self._get_network(chain_id).get_address(key)

    def get_addresses(self, chain_id: int) -> list[str]:
        return self._get_network(chain_id).get_addresses()

    # Serialization

    def to_object(self) -> dict[str, Any]:
        """Snapshot of the registry as plain, JSON-representable data.

        Network tables include the replicated global ABIs.

        Returns:
            {"global_abis": {key: abi}, "networks": {chain_id: {"abis", "deployments"}}}
        """
        return {
            "global_abis": self._global_abis.to_dict(),
            "networks": {
                chain_id: network.to_object() for chain_id, network in self._networks.items()
            },
        }
