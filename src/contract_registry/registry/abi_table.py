"""ABI table - insert-once mapping from key to ABI for one scope.

A scope is either a network (integer chain ID) or the global tier
(``chain_id=None``). Deletion is refused while a deployment of the owning
network references the ABI; the table learns about deployments through the
``is_used`` predicate injected by its owner.
"""

from collections.abc import Callable, Iterator
from typing import Any, Optional

import structlog

from contract_registry.abi import ABI
from contract_registry.events import AbiEvent, EventEmitter, EventName
from contract_registry.services.exceptions import (
    AbiAlreadyExistsError,
    AbiInUseError,
    AbiNotFoundError,
)

logger = structlog.get_logger()


def validate_key(key: Any) -> str:
    """Ensure a registry key is a non-empty string.

    Raises:
        ValueError: If key is empty or not a string
    """
    if not isinstance(key, str) or not key:
        raise ValueError(f"Registry keys must be non-empty strings, got {key!r}")
    return key


def describe_scope(chain_id: Optional[int]) -> str:
    return "the global scope" if chain_id is None else f"chain ID {chain_id}"


class AbiTable:
    """ABIs of one scope, kept in registration order."""

    def __init__(
        self,
        chain_id: Optional[int],
        emitter: EventEmitter,
        is_used: Optional[Callable[[str], bool]] = None,
    ):
        """Initialize an empty table.

        Args:
            chain_id: Owning chain ID, or None for the global tier
            emitter: Event emitter receiving abi/* events
            is_used: Predicate telling whether a deployment references a key
        """
        self.chain_id = chain_id
        self._emitter = emitter
        self._is_used = is_used
        self._abis: dict[str, ABI] = {}

    def __contains__(self, key: object) -> bool:
        return key in self._abis

    def __len__(self) -> int:
        return len(self._abis)

    def __iter__(self) -> Iterator[str]:
        return iter(self._abis)

    def keys(self) -> list[str]:
        return list(self._abis)

    def register(self, key: str, abi: ABI) -> None:
        """Store a new ABI.

        Raises:
            AbiAlreadyExistsError: If an ABI is already registered under key
        """
        validate_key(key)
        if key in self._abis:
            raise AbiAlreadyExistsError(
                f"An ABI already exists for key {key} and {describe_scope(self.chain_id)}."
            )
        self._abis[key] = abi
        logger.debug("abi.registered", key=key, chain_id=self.chain_id)
        self._emitter.emit(
            AbiEvent(event=EventName.ABI_REGISTERED, key=key, abi=abi, chain_id=self.chain_id)
        )

    def update(self, key: str, abi: ABI) -> None:
        """Replace an existing ABI.

        Raises:
            AbiNotFoundError: If no ABI is registered under key
        """
        self.get(key)
        self._abis[key] = abi
        logger.debug("abi.updated", key=key, chain_id=self.chain_id)
        self._emitter.emit(
            AbiEvent(event=EventName.ABI_UPDATED, key=key, abi=abi, chain_id=self.chain_id)
        )

    def delete(self, key: str) -> ABI:
        """Remove an ABI no deployment references.

        Returns:
            The removed ABI

        Raises:
            AbiNotFoundError: If no ABI is registered under key
            AbiInUseError: If a deployment still references the ABI
        """
        abi = self.get(key)
        if self.is_referenced(key):
            raise AbiInUseError(
                f"Unable to delete the ABI for key {key} on {describe_scope(self.chain_id)} "
                "as it is used in at least one deployment."
            )
        del self._abis[key]
        logger.debug("abi.deleted", key=key, chain_id=self.chain_id)
        self._emitter.emit(
            AbiEvent(event=EventName.ABI_DELETED, key=key, abi=abi, chain_id=self.chain_id)
        )
        return abi

    def get(self, key: str) -> ABI:
        """Return the stored ABI.

        The returned object is the stored one. Callers wanting a change must
        submit a new ABI through ``update`` rather than editing it in place.

        Raises:
            AbiNotFoundError: If no ABI is registered under key
        """
        validate_key(key)
        try:
            return self._abis[key]
        except KeyError:
            raise AbiNotFoundError(
                f"No ABI for key {key} and {describe_scope(self.chain_id)} has been found."
            ) from None

    def is_referenced(self, key: str) -> bool:
        """True if a deployment of the owning network references key."""
        return self._is_used is not None and self._is_used(key)

    def to_dict(self) -> dict[str, ABI]:
        """Shallow ordered copy of the table."""
        return dict(self._abis)
