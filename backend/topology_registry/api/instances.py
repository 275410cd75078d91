"""Instance endpoints, including deployment."""
from fastapi import Depends

from topology_registry.api.dependencies import get_instances, get_orchestrator
from topology_registry.api.records import crud_router
from topology_registry.errors import NotFoundError
from topology_registry.orchestrator import DeploymentOrchestrator
from topology_registry.repositories import InstanceRepository

router = crud_router("/instances", "Instances", get_instances)


@router.post("/{uuid}/deploy")
async def deploy_instance(
    uuid: str,
    instances: InstanceRepository = Depends(get_instances),
    orchestrator: DeploymentOrchestrator = Depends(get_orchestrator),
):
    """Provision a workload for an existing instance."""
    instance = await instances.get(uuid)
    if instance is None:
        raise NotFoundError(f"instance {uuid} not found")

    result = await orchestrator.deploy(instance)

    return {
        "instance_uuid": result.instance_uuid,
        "workload": {
            "name": result.handle.name,
            "namespace": result.handle.namespace,
            "uid": result.handle.uid,
        },
        "params": result.params,
    }
