"""Deployment table tests.

Tests cover:
- Registration checked against the ABI table
- ABI key updates (address is immutable)
- Address listing order and duplicates
- deployment/* event payloads
"""

import pytest
from pydantic import ValidationError

from contract_registry.events import (
    DeploymentEvent,
    DeploymentUpdatedEvent,
    EventEmitter,
    EventName,
)
from contract_registry.models.deployment import Deployment
from contract_registry.registry.abi_table import AbiTable
from contract_registry.registry.deployment_table import DeploymentTable
from contract_registry.services.exceptions import (
    DeploymentAlreadyExistsError,
    DeploymentNotFoundError,
    UnknownAbiError,
)

VAULT_ADDRESS = "0x1111111111111111111111111111111111111111"
TOKEN_ADDRESS = "0x2222222222222222222222222222222222222222"


@pytest.fixture
def emitter(recorder):
    emitter = EventEmitter()
    emitter.on("*", recorder)
    return emitter


@pytest.fixture
def abis(emitter, vault_abi, token_abi):
    table = AbiTable(5, emitter)
    table.register("Vault", vault_abi)
    table.register("Token", token_abi)
    return table


@pytest.fixture
def deployments(abis, emitter, recorder):
    table = DeploymentTable(5, abis, emitter)
    recorder.events.clear()
    return table


def test_register_and_get(deployments):
    deployments.register("MainVault", Deployment(address=VAULT_ADDRESS, abi_key="Vault"))

    deployment = deployments.get("MainVault")
    assert deployment.address == VAULT_ADDRESS
    assert deployment.abi_key == "Vault"
    assert deployments.get_address("MainVault") == VAULT_ADDRESS
    assert "MainVault" in deployments


def test_register_with_unknown_abi_fails(deployments):
    with pytest.raises(UnknownAbiError, match="No ABI for key Missing and chain ID 5"):
        deployments.register("MainVault", Deployment(address=VAULT_ADDRESS, abi_key="Missing"))
    assert "MainVault" not in deployments


def test_register_twice_fails(deployments):
    deployments.register("MainVault", Deployment(address=VAULT_ADDRESS, abi_key="Vault"))

    with pytest.raises(DeploymentAlreadyExistsError, match="MainVault and chain ID 5"):
        deployments.register("MainVault", Deployment(address=TOKEN_ADDRESS, abi_key="Token"))
    assert deployments.get_address("MainVault") == VAULT_ADDRESS


def test_stored_deployment_cannot_be_reassigned(deployments):
    """ABI keys change through update() only."""
    deployments.register("MainVault", Deployment(address=VAULT_ADDRESS, abi_key="Vault"))

    with pytest.raises(ValidationError):
        deployments.get("MainVault").abi_key = "Missing"
    assert deployments.get("MainVault").abi_key == "Vault"
    assert deployments.is_abi_used("Vault")


def test_update_replaces_the_stored_record(deployments):
    deployments.register("MainVault", Deployment(address=VAULT_ADDRESS, abi_key="Vault"))
    before = deployments.get("MainVault")

    deployments.update("MainVault", "Token")

    assert before.abi_key == "Vault"
    assert deployments.get("MainVault").abi_key == "Token"


def test_update_changes_abi_key_only(deployments):
    deployments.register("MainVault", Deployment(address=VAULT_ADDRESS, abi_key="Vault"))

    deployments.update("MainVault", "Token")

    deployment = deployments.get("MainVault")
    assert deployment.abi_key == "Token"
    assert deployment.address == VAULT_ADDRESS


def test_update_missing_deployment_fails(deployments):
    with pytest.raises(DeploymentNotFoundError):
        deployments.update("MainVault", "Token")


def test_update_to_unknown_abi_fails(deployments):
    deployments.register("MainVault", Deployment(address=VAULT_ADDRESS, abi_key="Vault"))

    with pytest.raises(UnknownAbiError):
        deployments.update("MainVault", "Missing")
    assert deployments.get("MainVault").abi_key == "Vault"


def test_delete_returns_removed_record(deployments):
    deployments.register("MainVault", Deployment(address=VAULT_ADDRESS, abi_key="Vault"))

    removed = deployments.delete("MainVault")

    assert removed.address == VAULT_ADDRESS
    assert "MainVault" not in deployments
    with pytest.raises(DeploymentNotFoundError):
        deployments.get_address("MainVault")


def test_delete_missing_deployment_fails(deployments):
    with pytest.raises(DeploymentNotFoundError, match="No deployment for key MainVault"):
        deployments.delete("MainVault")


def test_list_addresses_keeps_order_and_duplicates(deployments):
    deployments.register("B", Deployment(address=TOKEN_ADDRESS, abi_key="Token"))
    deployments.register("A", Deployment(address=VAULT_ADDRESS, abi_key="Vault"))
    deployments.register("C", Deployment(address=TOKEN_ADDRESS, abi_key="Vault"))

    assert deployments.list_addresses() == [TOKEN_ADDRESS, VAULT_ADDRESS, TOKEN_ADDRESS]
    assert deployments.keys() == ["B", "A", "C"]


def test_is_abi_used(deployments):
    assert deployments.is_abi_used("Vault") is False

    deployments.register("MainVault", Deployment(address=VAULT_ADDRESS, abi_key="Vault"))

    assert deployments.is_abi_used("Vault") is True
    assert deployments.is_abi_used("Token") is False


def test_to_dict_returns_plain_records(deployments):
    deployments.register("MainVault", Deployment(address=VAULT_ADDRESS, abi_key="Vault"))

    assert deployments.to_dict() == {
        "MainVault": {"address": VAULT_ADDRESS, "abi_key": "Vault"},
    }


def test_events_are_emitted_for_each_mutation(deployments, recorder):
    deployments.register("MainVault", Deployment(address=VAULT_ADDRESS, abi_key="Vault"))
    deployments.update("MainVault", "Token")
    deployments.delete("MainVault")

    assert recorder.names == [
        EventName.DEPLOYMENT_REGISTERED,
        EventName.DEPLOYMENT_UPDATED,
        EventName.DEPLOYMENT_DELETED,
    ]

    registered, updated, deleted = recorder.events
    assert isinstance(registered, DeploymentEvent)
    assert registered.deployment.address == VAULT_ADDRESS
    assert registered.chain_id == 5

    assert isinstance(updated, DeploymentUpdatedEvent)
    assert updated.abi_key == "Token"

    assert isinstance(deleted, DeploymentEvent)
    assert deleted.deployment.abi_key == "Token"
