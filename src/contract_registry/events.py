"""Lifecycle events emitted by registries.

Registries publish an event after every successful mutation. Delivery is
synchronous: every listener runs inside the mutating call, before it returns,
in the order listeners were added. Exceptions raised by a listener propagate
to the caller of the mutating operation.

Example:
    >>> registry = NetworkRegistry(chain_id=1)
    >>> registry.on(EventName.ABI_REGISTERED, lambda event: print(event.key))
    >>> registry.register_abi("Vault", vault_abi)
    Vault
"""

from collections.abc import Callable
from typing import Any, Optional

import structlog
from pydantic import BaseModel

from contract_registry.models.deployment import Deployment

logger = structlog.get_logger()

# Subscribe to this name to receive every event
ALL_EVENTS = "*"


class EventName:
    """Names of the lifecycle events."""

    ABI_REGISTERED = "abi/registered"
    ABI_UPDATED = "abi/updated"
    ABI_DELETED = "abi/deleted"
    DEPLOYMENT_REGISTERED = "deployment/registered"
    DEPLOYMENT_UPDATED = "deployment/updated"
    DEPLOYMENT_DELETED = "deployment/deleted"
    NETWORK_ADDED = "network/added"
    NETWORK_DELETED = "network/deleted"


class RegistryEvent(BaseModel):
    """Base payload. ``event`` holds the name the payload was emitted under."""

    event: str


class AbiEvent(RegistryEvent):
    """Payload of abi/registered, abi/updated and abi/deleted.

    ``chain_id`` is None for events of the global tier.
    """

    key: str
    abi: Any
    chain_id: Optional[int]


class DeploymentEvent(RegistryEvent):
    """Payload of deployment/registered and deployment/deleted."""

    key: str
    deployment: Deployment
    chain_id: int


class DeploymentUpdatedEvent(RegistryEvent):
    """Payload of deployment/updated."""

    key: str
    abi_key: str
    chain_id: int


class NetworkEvent(RegistryEvent):
    """Payload of network/added and network/deleted."""

    chain_id: int


Listener = Callable[[RegistryEvent], Any]


class EventEmitter:
    """Synchronous in-process publish/subscribe."""

    def __init__(self) -> None:
        self._listeners: dict[str, list[Listener]] = {}

    def on(self, event: str, listener: Listener) -> "EventEmitter":
        """Add a listener for ``event`` (or ``"*"`` for all events)."""
        self._listeners.setdefault(event, []).append(listener)
        return self

    def once(self, event: str, listener: Listener) -> "EventEmitter":
        """Add a listener removed after its first call."""

        def _wrapper(payload: RegistryEvent) -> Any:
            self.off(event, _wrapper)
            return listener(payload)

        # Lets off() remove the listener by the function passed in
        _wrapper.listener = listener  # type: ignore[attr-defined]
        return self.on(event, _wrapper)

    def off(self, event: str, listener: Listener) -> "EventEmitter":
        """Remove one registration of ``listener``. Unknown listeners are ignored.

        A listener added with ``once`` can be removed by passing the same function.
        """
        listeners = self._listeners.get(event, [])
        for index, registered in enumerate(listeners):
            if registered == listener or getattr(registered, "listener", None) == listener:
                del listeners[index]
                break
        return self

    def listener_count(self, event: str) -> int:
        return len(self._listeners.get(event, []))

    def emit(self, payload: RegistryEvent) -> bool:
        """Deliver ``payload`` to listeners of ``payload.event``, then to wildcard listeners.

        Returns:
            True if at least one listener was called
        """
        # Snapshot so listeners may unsubscribe while being called
        listeners = list(self._listeners.get(payload.event, []))
        listeners += self._listeners.get(ALL_EVENTS, [])

        logger.debug("event.emitted", event_name=payload.event, listener_count=len(listeners))

        for listener in listeners:
            listener(payload)
        return bool(listeners)
