"""Single-network registry of ABIs and deployments.

NetworkRegistry owns one ABI table and one deployment table for a chain ID.
It can be used on its own, or as one scope of a multi-network
ContractRegistry.

Example:
    >>> registry = NetworkRegistry(chain_id=8453)
    >>> registry.register_deployment("USDC", Deployment(address=usdc, abi_key="ERC20"))
    >>> contract = registry.get_contract("USDC")
    >>> w3.eth.contract(address=contract.address, abi=contract.abi)
"""

from typing import Any, Optional, Union

import structlog

from contract_registry.abi import ABI, get_default_abis
from contract_registry.events import EventEmitter, Listener
from contract_registry.models.config import NetworkConfig
from contract_registry.models.deployment import Contract, Deployment
from contract_registry.registry.abi_table import AbiTable, validate_key
from contract_registry.registry.deployment_table import DeploymentTable
from contract_registry.services.exceptions import (
    AbiAlreadyExistsError,
    DeploymentAlreadyExistsError,
)

logger = structlog.get_logger()


class NetworkRegistry:
    """ABIs and deployments of one network."""

    def __init__(
        self,
        chain_id: int,
        config: Union[NetworkConfig, dict[str, Any], None] = None,
        *,
        without_default_abis: bool = False,
        emitter: Optional[EventEmitter] = None,
    ):
        """Create the registry and replay its initial configuration.

        Default ABIs are registered first, then ``config.abis``, then
        ``config.deployments``, through the same operations available
        afterwards, so a bad configuration fails exactly like a bad call.

        Args:
            chain_id: Chain ID of the network
            config: Initial ABIs and deployments (model or plain dict)
            without_default_abis: Skip the ERC20/ERC721/ERC1155 defaults
            emitter: Event emitter to publish on (a private one if omitted)

        Raises:
            RegistryError: If the configuration violates a registry invariant
            pydantic.ValidationError: If config is malformed
        """
        self.chain_id = chain_id
        self.emitter = emitter if emitter is not None else EventEmitter()

        self._abis = AbiTable(chain_id, self.emitter, is_used=self.is_abi_used)
        self._deployments = DeploymentTable(chain_id, self._abis, self.emitter)

        if not without_default_abis:
            for key, abi in get_default_abis().items():
                self.register_abi(key, abi)

        if config is not None:
            network_config = NetworkConfig.model_validate(config)
            for key, abi in network_config.abis.items():
                self.register_abi(key, abi)
            for key, deployment in network_config.deployments.items():
                self.register_deployment(key, deployment)

        logger.debug(
            "network.constructed",
            chain_id=chain_id,
            abi_count=len(self._abis),
            deployment_count=len(self._deployments),
        )

    @classmethod
    def from_object(
        cls,
        chain_id: int,
        snapshot: dict[str, Any],
        *,
        emitter: Optional[EventEmitter] = None,
    ) -> "NetworkRegistry":
        """Rebuild a registry from a ``to_object()`` snapshot.

        Defaults are not seeded again since the snapshot already holds them.
        """
        return cls(chain_id, snapshot, without_default_abis=True, emitter=emitter)

    def __repr__(self) -> str:
        return (
            f"NetworkRegistry(chain_id={self.chain_id}, abis={len(self._abis)}, "
            f"deployments={len(self._deployments)})"
        )

    # Events

    def on(self, event: str, listener: Listener) -> "NetworkRegistry":
        self.emitter.on(event, listener)
        return self

    def off(self, event: str, listener: Listener) -> "NetworkRegistry":
        self.emitter.off(event, listener)
        return self

    # ABIs

    def register_abi(self, key: str, abi: ABI) -> "NetworkRegistry":
        """Register an ABI.

        Raises:
            AbiAlreadyExistsError: If an ABI is already registered under key
        """
        self._abis.register(key, abi)
        return self

    def update_abi(self, key: str, abi: ABI) -> "NetworkRegistry":
        """Replace an ABI.

        Raises:
            AbiNotFoundError: If no ABI is registered under key
        """
        self._abis.update(key, abi)
        return self

    def delete_abi(self, key: str) -> "NetworkRegistry":
        """Delete an ABI no deployment references.

        Raises:
            AbiNotFoundError: If no ABI is registered under key
            AbiInUseError: If a deployment still references the ABI
        """
        self._abis.delete(key)
        return self

    def get_abi(self, key: str) -> ABI:
        """Get an ABI.

        Raises:
            AbiNotFoundError: If no ABI is registered under key
        """
        return self._abis.get(key)

    def has_abi(self, key: str) -> bool:
        return key in self._abis

    def get_abi_keys(self) -> list[str]:
        return self._abis.keys()

    def is_abi_used(self, key: str) -> bool:
        """True if at least one deployment references the ABI."""
        return self._deployments.is_abi_used(key)

    # Deployments

    def register_deployment(
        self, key: str, deployment: Union[Deployment, dict[str, Any]]
    ) -> "NetworkRegistry":
        """Register a deployment of an already registered ABI.

        Raises:
            DeploymentAlreadyExistsError: If a deployment is already registered under key
            UnknownAbiError: If the deployment's ABI key is not registered
        """
        self._deployments.register(key, Deployment.model_validate(deployment))
        return self

    def update_deployment(self, key: str, abi_key: str) -> "NetworkRegistry":
        """Change the ABI of a deployment. Only the ABI key can be updated.

        Raises:
            DeploymentNotFoundError: If no deployment is registered under key
            UnknownAbiError: If abi_key is not registered
        """
        self._deployments.update(key, abi_key)
        return self

    def delete_deployment(self, key: str) -> "NetworkRegistry":
        """Delete a deployment.

        Raises:
            DeploymentNotFoundError: If no deployment is registered under key
        """
        self._deployments.delete(key)
        return self

    def get_deployment(self, key: str) -> Deployment:
        """Get a deployment.

        Raises:
            DeploymentNotFoundError: If no deployment is registered under key
        """
        return self._deployments.get(key)

    def has_deployment(self, key: str) -> bool:
        return key in self._deployments

    def get_deployment_keys(self) -> list[str]:
        return self._deployments.keys()

    def get_address(self, key: str) -> str:
        """Get the address of a deployment.

        Raises:
            DeploymentNotFoundError: If no deployment is registered under key
        """
        return self._deployments.get_address(key)

    def get_addresses(self) -> list[str]:
        """Get every deployment address, in registration order."""
        return self._deployments.list_addresses()

    # Contracts

    def register_contract(
        self, key: str, contract: Union[Contract, dict[str, Any]]
    ) -> "NetworkRegistry":
        """Register an ABI and a deployment of it, both under key.

        Both tables are checked before either is written, so a registry
        error leaves the registry unchanged. A listener raising on
        abi/registered interrupts the call after the ABI is stored.

        Raises:
            AbiAlreadyExistsError: If an ABI is already registered under key
            DeploymentAlreadyExistsError: If a deployment is already registered under key
        """
        validate_key(key)
        contract = Contract.model_validate(contract)
        if key in self._abis:
            raise AbiAlreadyExistsError(
                f"An ABI already exists for key {key} and chain ID {self.chain_id}."
            )
        if key in self._deployments:
            raise DeploymentAlreadyExistsError(
                f"A deployment already exists for key {key} and chain ID {self.chain_id}."
            )

        self._abis.register(key, contract.abi)
        self._deployments.register(key, Deployment(address=contract.address, abi_key=key))
        return self

    def get_contract(self, key: str) -> Contract:
        """Resolve a deployment and the ABI it references.

        Raises:
            DeploymentNotFoundError: If no deployment is registered under key
            AbiNotFoundError: If the referenced ABI is missing
        """
        deployment = self._deployments.get(key)
        abi = self._abis.get(deployment.abi_key)
        return Contract(address=deployment.address, abi=abi)

    # Serialization

    def to_object(self) -> dict[str, Any]:
        """Snapshot of the registry as plain, JSON-representable data.

        Returns:
            {"abis": {key: abi}, "deployments": {key: {"address", "abi_key"}}}
        """
        return {
            "abis": self._abis.to_dict(),
            "deployments": self._deployments.to_dict(),
        }
