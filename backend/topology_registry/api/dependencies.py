"""Request dependencies that hand out the shared context and repositories."""
from fastapi import Depends, Request

from topology_registry.context import RegistryContext
from topology_registry.orchestrator import DeploymentOrchestrator
from topology_registry.repositories import (
    ApplicationRepository,
    InstanceRepository,
    ManifestRepository,
    ServiceRepository,
)


def get_context(request: Request) -> RegistryContext:
    """Return the context built at startup."""
    return request.app.state.context


def get_applications(ctx: RegistryContext = Depends(get_context)) -> ApplicationRepository:
    return ApplicationRepository(ctx)


def get_services(ctx: RegistryContext = Depends(get_context)) -> ServiceRepository:
    return ServiceRepository(ctx)


def get_instances(ctx: RegistryContext = Depends(get_context)) -> InstanceRepository:
    return InstanceRepository(ctx)


def get_manifests(ctx: RegistryContext = Depends(get_context)) -> ManifestRepository:
    return ManifestRepository(ctx)


def get_orchestrator(
    ctx: RegistryContext = Depends(get_context),
    applications: ApplicationRepository = Depends(get_applications),
    services: ServiceRepository = Depends(get_services),
) -> DeploymentOrchestrator:
    return DeploymentOrchestrator(ctx, applications, services)
