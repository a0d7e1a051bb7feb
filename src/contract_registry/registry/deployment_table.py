"""Deployment table - insert-once mapping from key to (address, ABI key).

Every deployment references an ABI of the same network by key. The reference
is checked when the deployment is registered and whenever its ABI key
changes; the ABI table in turn refuses to delete referenced ABIs.
"""

from collections.abc import Iterator

import structlog

from contract_registry.events import (
    DeploymentEvent,
    DeploymentUpdatedEvent,
    EventEmitter,
    EventName,
)
from contract_registry.models.deployment import Deployment
from contract_registry.registry.abi_table import AbiTable, validate_key
from contract_registry.services.exceptions import (
    DeploymentAlreadyExistsError,
    DeploymentNotFoundError,
    UnknownAbiError,
)

logger = structlog.get_logger()


class DeploymentTable:
    """Deployments of one network, kept in registration order."""

    def __init__(self, chain_id: int, abis: AbiTable, emitter: EventEmitter):
        """Initialize an empty table.

        Args:
            chain_id: Owning chain ID
            abis: ABI table that deployment ABI keys must resolve in
            emitter: Event emitter receiving deployment/* events
        """
        self.chain_id = chain_id
        self._abis = abis
        self._emitter = emitter
        self._deployments: dict[str, Deployment] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._deployments

    def __len__(self) -> int:
        return len(self._deployments)

    def __iter__(self) -> Iterator[str]:
        return iter(self._deployments)

    def keys(self) -> list[str]:
        return list(self._deployments)

    def _require_abi(self, abi_key: str) -> None:
        if abi_key not in self._abis:
            raise UnknownAbiError(
                f"No ABI for key {abi_key} and chain ID {self.chain_id} has been found."
            )

    def register(self, key: str, deployment: Deployment) -> None:
        """Store a new deployment.

        Raises:
            DeploymentAlreadyExistsError: If a deployment is already registered under key
            UnknownAbiError: If deployment.abi_key names no registered ABI
        """
        validate_key(key)
        if key in self._deployments:
            raise DeploymentAlreadyExistsError(
                f"A deployment already exists for key {key} and chain ID {self.chain_id}."
            )
        self._require_abi(deployment.abi_key)

        self._deployments[key] = deployment
        logger.debug(
            "deployment.registered",
            key=key,
            address=deployment.address,
            abi_key=deployment.abi_key,
            chain_id=self.chain_id,
        )
        self._emitter.emit(
            DeploymentEvent(
                event=EventName.DEPLOYMENT_REGISTERED,
                key=key,
                deployment=deployment,
                chain_id=self.chain_id,
            )
        )

    def update(self, key: str, abi_key: str) -> None:
        """Point a deployment at another ABI. The address never changes.

        Raises:
            DeploymentNotFoundError: If no deployment is registered under key
            UnknownAbiError: If abi_key names no registered ABI
        """
        deployment = self.get(key)
        self._require_abi(abi_key)

        self._deployments[key] = deployment.model_copy(update={"abi_key": abi_key})
        logger.debug("deployment.updated", key=key, abi_key=abi_key, chain_id=self.chain_id)
        self._emitter.emit(
            DeploymentUpdatedEvent(
                event=EventName.DEPLOYMENT_UPDATED,
                key=key,
                abi_key=abi_key,
                chain_id=self.chain_id,
            )
        )

    def delete(self, key: str) -> Deployment:
        """Remove a deployment.

        Returns:
            The removed deployment

        Raises:
            DeploymentNotFoundError: If no deployment is registered under key
        """
        deployment = self.get(key)
        del self._deployments[key]
        logger.debug("deployment.deleted", key=key, chain_id=self.chain_id)
        self._emitter.emit(
            DeploymentEvent(
                event=EventName.DEPLOYMENT_DELETED,
                key=key,
                deployment=deployment,
                chain_id=self.chain_id,
            )
        )
        return deployment

    def get(self, key: str) -> Deployment:
        """Return the stored deployment.

        Raises:
            DeploymentNotFoundError: If no deployment is registered under key
        """
        validate_key(key)
        try:
            return self._deployments[key]
        except KeyError:
            raise DeploymentNotFoundError(
                f"No deployment for key {key} and chain ID {self.chain_id} has been found."
            ) from None

    def get_address(self, key: str) -> str:
        return self.get(key).address

    def list_addresses(self) -> list[str]:
        """All addresses in registration order, duplicates included."""
        return [deployment.address for deployment in self._deployments.values()]

    def is_abi_used(self, abi_key: str) -> bool:
        """True if at least one deployment references abi_key."""
        return any(d.abi_key == abi_key for d in self._deployments.values())

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Ordered plain-dict snapshot of every deployment."""
        return {key: deployment.model_dump() for key, deployment in self._deployments.items()}
