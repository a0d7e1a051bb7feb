"""Registry error hierarchy for ABI and deployment bookkeeping.

This module defines the exception hierarchy for registry-level errors:
- RegistryError: Base for all registry errors
- AlreadyExistsError / NotFoundError: Key presence violations in a table
- UnknownAbiError / AbiInUseError: Referential integrity violations
- NetworkError: Chain ID configuration violations
- GlobalScopeError: Collisions between the global tier and network tiers

Every error is a precondition violation. Nothing here is transient, so
nothing is retried.
"""


class RegistryError(Exception):
    """Base exception for all registry errors."""

    pass


# Key presence errors
class AlreadyExistsError(RegistryError):
    """Register called with a key already present in the target table."""

    pass


class AbiAlreadyExistsError(AlreadyExistsError):
    """An ABI is already registered under this key."""

    pass


class DeploymentAlreadyExistsError(AlreadyExistsError):
    """A deployment is already registered under this key."""

    pass


class NotFoundError(RegistryError):
    """Get, update or delete called with an absent key."""

    pass


class AbiNotFoundError(NotFoundError):
    """No ABI is registered under this key."""

    pass


class DeploymentNotFoundError(NotFoundError):
    """No deployment is registered under this key."""

    pass


# Referential integrity errors
class UnknownAbiError(RegistryError):
    """A deployment names an ABI key absent from its network.

    Raised by deployment registration and by deployment updates.
    """

    pass


class AbiInUseError(RegistryError):
    """An ABI cannot be deleted while a deployment still references it."""

    pass


# Network errors
class NetworkError(RegistryError):
    """Base exception for chain ID configuration errors."""

    pass


class DuplicateNetworkError(NetworkError):
    """The chain ID is already configured."""

    pass


class UnknownNetworkError(NetworkError):
    """The chain ID is not configured."""

    pass


# Global tier errors
class GlobalScopeError(RegistryError):
    """Base exception for global/network key collisions."""

    pass


class GlobalKeyCollisionError(GlobalScopeError):
    """A global ABI key is already used by a network-local ABI."""

    pass


class GlobalAbiKeyError(GlobalScopeError):
    """A network-level ABI operation targets a global ABI key.

    The global variant of the operation must be used instead.
    """

    pass


class NotGlobalAbiError(GlobalScopeError):
    """A global ABI operation targets a key that is not a global ABI."""

    pass
