"""Entity repositories."""
from topology_registry.repositories.applications import ApplicationRepository
from topology_registry.repositories.base import BaseRepository
from topology_registry.repositories.instances import InstanceRepository
from topology_registry.repositories.manifests import ManifestRepository
from topology_registry.repositories.services import ServiceRepository

__all__ = [
    "BaseRepository",
    "ApplicationRepository",
    "ServiceRepository",
    "InstanceRepository",
    "ManifestRepository",
]
