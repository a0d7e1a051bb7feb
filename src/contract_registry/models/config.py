"""Bulk configuration schemas consumed once at registry construction."""

from typing import Any, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

from contract_registry.models.deployment import Deployment
from contract_registry.services.exceptions import DuplicateNetworkError


def normalize_chain_id(chain_id: Union[int, str]) -> int:
    """Coerce a chain ID given as an integer or a numeric string.

    Raises:
        ValueError: If chain_id is not an integer
    """
    try:
        return int(chain_id)
    except (TypeError, ValueError):
        raise ValueError(f"Chain ID must be an integer, got {chain_id!r}.") from None


class NetworkConfig(BaseModel):
    """ABIs and deployments to register on a single network."""

    model_config = ConfigDict(extra="forbid")

    abis: dict[str, Any] = Field(default_factory=dict)
    deployments: dict[str, Deployment] = Field(default_factory=dict)


class RegistryConfig(BaseModel):
    """Configuration of a multi-network registry.

    Chain IDs may be given as integers or numeric strings, since JSON object
    keys are always strings.
    """

    model_config = ConfigDict(extra="forbid")

    global_abis: dict[str, Any] = Field(
        default_factory=dict, validation_alias=AliasChoices("global_abis", "globalAbis")
    )
    networks: dict[int, NetworkConfig] = Field(default_factory=dict)

    @model_validator(mode="before")
    @classmethod
    def reject_duplicate_chain_ids(cls, data: Any) -> Any:
        """Fail when two network keys normalize to the same chain ID.

        Raises:
            DuplicateNetworkError: If e.g. both 1 and "1" are configured
        """
        if not isinstance(data, dict):
            return data
        networks = data.get("networks")
        if not isinstance(networks, dict):
            return data

        seen: set[int] = set()
        for raw_chain_id in networks:
            try:
                chain_id = normalize_chain_id(raw_chain_id)
            except ValueError:
                # Left for field validation to report
                continue
            if chain_id in seen:
                raise DuplicateNetworkError(f"Chain ID {chain_id} is configured more than once.")
            seen.add(chain_id)
        return data
