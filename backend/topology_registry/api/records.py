"""CRUD endpoints shared by every entity kind."""
from fastapi import APIRouter, Body, Depends, Response
from typing import Any, Callable, Dict, List

from topology_registry.api.dependencies import get_applications, get_manifests, get_services
from topology_registry.errors import NotFoundError
from topology_registry.repositories.base import BaseRepository


def crud_router(prefix: str, tag: str, get_repository: Callable[..., BaseRepository]) -> APIRouter:
    """Build create/list/get/delete routes for one repository."""
    router = APIRouter(prefix=prefix, tags=[tag])

    @router.post("", status_code=200)
    async def create_record(
        record: Dict[str, Any] = Body(...),
        repository: BaseRepository = Depends(get_repository),
    ) -> Dict[str, Any]:
        return await repository.create(record)

    @router.get("")
    async def list_records(repository: BaseRepository = Depends(get_repository)) -> List[Dict[str, Any]]:
        return await repository.list()

    @router.get("/{uuid}")
    async def get_record(uuid: str, repository: BaseRepository = Depends(get_repository)) -> Dict[str, Any]:
        record = await repository.get(uuid)
        if record is None:
            raise NotFoundError(f"{repository.kind} {uuid} not found")
        return record

    @router.delete("/{uuid}", status_code=204)
    async def delete_record(uuid: str, repository: BaseRepository = Depends(get_repository)) -> Response:
        await repository.delete(uuid)
        return Response(status_code=204)

    return router


applications = crud_router("/applications", "Applications", get_applications)
services = crud_router("/services", "Services", get_services)
manifests = crud_router("/manifests", "Manifests", get_manifests)
