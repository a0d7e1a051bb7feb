"""Deployment and Contract entities - addresses bound to registered ABIs."""

from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Deployment(BaseModel):
    """A deployed contract address referencing an ABI by key.

    The ABI is not owned by the deployment: ``abi_key`` must name an ABI
    registered in the same network. Instances are immutable; registries
    change ``abi_key`` by storing a replacement.
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    address: str
    abi_key: str = Field(validation_alias=AliasChoices("abi_key", "abiKey"))


class Contract(BaseModel):
    """Resolved contract: deployment address plus the ABI it references."""

    address: str
    abi: Any
