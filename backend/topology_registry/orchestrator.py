"""Deployment of instances onto the workload provisioner."""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from topology_registry.context import RegistryContext
from topology_registry.errors import DeploymentError, ValidationError
from topology_registry.params import assemble_params
from topology_registry.repositories import ApplicationRepository, ServiceRepository
from topology_registry.repositories.base import BaseRepository
from topology_registry.utils.kubernetes import WorkloadHandle

logger = logging.getLogger(__name__)


class DeployStage(str, Enum):
    """Deployment stages, in the order they run."""
    RESOLVE_SERVICE = "resolve_service"
    RESOLVE_APPLICATION = "resolve_application"
    ASSEMBLE_PARAMS = "assemble_params"
    PROVISION = "provision"


@dataclass
class DeploymentResult:
    instance_uuid: str
    params: Dict[str, Any]
    handle: WorkloadHandle


class DeploymentOrchestrator:
    """Deploys an instance according to its application, service and itself.

    Stages run strictly in order and the first failure aborts the rest with
    a DeploymentError naming the stage. Every stage before provisioning only
    reads, so nothing is rolled back and nothing is retried here.
    """

    def __init__(
        self,
        ctx: RegistryContext,
        applications: Optional[ApplicationRepository] = None,
        services: Optional[ServiceRepository] = None,
    ):
        self.ctx = ctx
        self.applications = applications or ApplicationRepository(ctx)
        self.services = services or ServiceRepository(ctx)

    async def _resolve(
        self,
        stage: DeployStage,
        repository: BaseRepository,
        uuid: Optional[str],
    ) -> Dict[str, Any]:
        kind = repository.kind
        try:
            record = await repository.get(uuid) if uuid else None
        except Exception as e:
            logger.error(f"Failed to find {kind} {uuid}: {type(e).__name__}: {e}")
            raise DeploymentError(stage, f"failed to find {kind} {uuid}: {e}") from e

        if record is None:
            logger.error(f"{kind} {uuid} doesn't exist")
            raise DeploymentError(stage, f"{kind} {uuid} doesn't exist")

        return record

    async def deploy(self, instance: Dict[str, Any]) -> DeploymentResult:
        """Provision a workload for an instance record."""
        for key in ("uuid", "service_uuid"):
            if not isinstance(instance.get(key), str):
                raise ValidationError(f"instance.{key} must be a string", errors=[key])

        instance_uuid = instance["uuid"]

        service = await self._resolve(
            DeployStage.RESOLVE_SERVICE, self.services, instance["service_uuid"]
        )
        application = await self._resolve(
            DeployStage.RESOLVE_APPLICATION, self.applications, service.get("application_uuid")
        )

        try:
            params = assemble_params(application, service, instance)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Failed to assemble parameters for instance {instance_uuid}: {e}")
            raise DeploymentError(
                DeployStage.ASSEMBLE_PARAMS,
                f"failed to assemble parameters for instance {instance_uuid}: {e}",
            ) from e

        try:
            params.update(self.ctx.policy.resolve(params))
            logger.info(f"Provisioning instance {instance_uuid}")
            handle = await self.ctx.provisioner.create_workload(params)
        except Exception as e:
            logger.error(f"Failed to provision instance {instance_uuid}: {type(e).__name__}: {e}")
            raise DeploymentError(
                DeployStage.PROVISION,
                f"failed to provision instance {instance_uuid}: {e}",
            ) from e

        logger.info(f"Deployed instance {instance_uuid} as {handle.namespace}/{handle.name}")
        return DeploymentResult(instance_uuid=instance_uuid, params=params, handle=handle)
