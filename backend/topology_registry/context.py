"""Explicitly constructed set of collaborators shared by every request."""
from dataclasses import dataclass, field
from typing import Any, Dict, Protocol

from topology_registry.config import Settings
from topology_registry.policy import DeploymentPolicy, StaticDeploymentPolicy
from topology_registry.storage import RecordStore
from topology_registry.utils.images import ImageRegistry
from topology_registry.utils.keycloak import KeycloakDirectory
from topology_registry.utils.kubernetes import KubernetesProvisioner, WorkloadHandle
from topology_registry.utils.kvstore import KeyValueStore


class IdentityClient(Protocol):
    async def get_user(self, user_id: str) -> Dict[str, Any]:
        ...


class ImageClient(Protocol):
    async def get_image(self, image_uuid: str) -> Dict[str, Any]:
        ...


class Provisioner(Protocol):
    async def create_workload(self, params: Dict[str, Any]) -> WorkloadHandle:
        ...


@dataclass
class RegistryContext:
    """Long-lived clients, injected into repositories and the orchestrator."""
    store: RecordStore
    identity: IdentityClient
    images: ImageClient
    provisioner: Provisioner
    policy: DeploymentPolicy = field(default_factory=StaticDeploymentPolicy)

    async def close(self) -> None:
        await self.store.kv.close()


def build_context(settings: Settings) -> RegistryContext:
    """Create the production clients from settings."""
    return RegistryContext(
        store=RecordStore(KeyValueStore(settings.DATABASE_URL)),
        identity=KeycloakDirectory(
            base_url=settings.KEYCLOAK_URL,
            realm=settings.KEYCLOAK_REALM,
            admin_user=settings.KEYCLOAK_ADMIN_USER,
            admin_password=settings.KEYCLOAK_ADMIN_PASSWORD,
        ),
        images=ImageRegistry(settings.IMAGE_REGISTRY_URL),
        provisioner=KubernetesProvisioner(
            kubeconfig_path=settings.KUBECONFIG_PATH,
            namespace=settings.WORKLOAD_NAMESPACE,
            image_template=settings.WORKLOAD_IMAGE_TEMPLATE,
        ),
        policy=StaticDeploymentPolicy.from_settings(settings),
    )
