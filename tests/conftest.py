"""pytest fixtures for contract registry tests.

Provides:
- vault_abi / token_abi: Small hand-written ABIs for registration tests
- recorder: Listener recording every event it receives
- network: Empty single-network registry (no default ABIs)
- registry: Multi-network registry on chains 1 and 2 (no default ABIs)
- reset_structlog: Autouse fixture undoing configure_logging() between tests
"""

import pytest
import structlog

from contract_registry.events import ALL_EVENTS, RegistryEvent
from contract_registry.registry.multi_network import ContractRegistry
from contract_registry.registry.network import NetworkRegistry


class EventRecorder:
    """Callable listener keeping every payload it receives."""

    def __init__(self):
        self.events: list[RegistryEvent] = []

    def __call__(self, event: RegistryEvent) -> None:
        self.events.append(event)

    @property
    def names(self) -> list[str]:
        return [event.event for event in self.events]


@pytest.fixture(autouse=True)
def reset_structlog():
    """Restore default structlog configuration after tests that configure logging."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def vault_abi():
    """Minimal vault ABI with one function and one event."""
    return [
        {
            "type": "function",
            "name": "deposit",
            "stateMutability": "nonpayable",
            "inputs": [{"name": "amount", "type": "uint256"}],
            "outputs": [],
        },
        {
            "type": "event",
            "name": "Deposited",
            "anonymous": False,
            "inputs": [{"indexed": False, "name": "amount", "type": "uint256"}],
        },
    ]


@pytest.fixture
def token_abi():
    """Minimal token ABI with a view function."""
    return [
        {
            "type": "function",
            "name": "totalSupply",
            "stateMutability": "view",
            "inputs": [],
            "outputs": [{"name": "", "type": "uint256"}],
        }
    ]


@pytest.fixture
def recorder():
    return EventRecorder()


@pytest.fixture
def network(recorder):
    """Provide an empty network registry on chain 1 with an event recorder attached."""
    registry = NetworkRegistry(1, without_default_abis=True)
    registry.on(ALL_EVENTS, recorder)
    return registry


@pytest.fixture
def registry(recorder):
    """Provide a multi-network registry on chains 1 and 2 with an event recorder attached."""
    contract_registry = ContractRegistry({"networks": {1: {}, 2: {}}}, without_default_abis=True)
    contract_registry.on(ALL_EVENTS, recorder)
    return contract_registry
