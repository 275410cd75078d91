"""Error types raised by the registry core and its clients."""
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from topology_registry.orchestrator import DeployStage


class RegistryError(Exception):
    """Base class for registry errors."""


class ValidationError(RegistryError):
    """A required field is missing or has the wrong type."""

    def __init__(self, message: str, errors: Optional[List[str]] = None):
        super().__init__(message)
        self.errors = errors or []


class ReferentialError(RegistryError):
    """A referenced owner, image or parent record could not be confirmed."""


class NotFoundError(RegistryError):
    """A record addressed by identifier does not exist."""


class DeploymentError(RegistryError):
    """A deployment stage failed. ``stage`` names the first failing stage."""

    def __init__(self, stage: "DeployStage", message: str):
        super().__init__(message)
        self.stage = stage


class StorageError(RegistryError):
    """The record store could not complete an operation."""


class BucketNotFoundError(StorageError):
    """The named bucket does not exist in the record store."""

    def __init__(self, bucket: str):
        super().__init__(f"bucket {bucket} does not exist")
        self.bucket = bucket


class IdentityServiceError(RegistryError):
    """The identity service could not answer a lookup."""


class UserNotFoundError(IdentityServiceError):
    """The identity service has no such user."""


class ImageRegistryError(RegistryError):
    """The image registry could not answer a lookup."""


class ImageNotFoundError(ImageRegistryError):
    """The image registry has no such image."""
