"""Deployment policy: fields attached to every provisioning request."""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

from topology_registry.config import Settings


class DeploymentPolicy(Protocol):
    """Decides workload brand, sizing, networks and placement."""

    def resolve(self, params: Dict[str, Any]) -> Dict[str, Any]:
        ...


@dataclass
class StaticDeploymentPolicy:
    """Returns the same fixed values for every workload.

    Stand-in until a placement engine exists: sizing, networks and the
    target server should eventually come from the service definition.
    """
    brand: str = "joyent-minimal"
    ram: int = 256
    networks: List[str] = field(default_factory=lambda: ["cda22a50-15bd-43cf-b379-be0cbac60cb4"])
    server_uuid: str = "44454c4c-4800-1034-804a-b2c04f354d31"

    @classmethod
    def from_settings(cls, settings: Settings) -> "StaticDeploymentPolicy":
        return cls(
            brand=settings.DEFAULT_BRAND,
            ram=settings.DEFAULT_RAM_MB,
            networks=list(settings.DEFAULT_NETWORKS),
            server_uuid=settings.DEFAULT_SERVER_UUID,
        )

    def resolve(self, params: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "brand": self.brand,
            "ram": self.ram,
            "networks": list(self.networks),
            "server_uuid": self.server_uuid,
        }
