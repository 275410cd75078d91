"""Instance repository."""
from typing import Any, Dict

from topology_registry.models import InstanceCreate
from topology_registry.repositories.base import BaseRepository
from topology_registry.storage import INSTANCES


class InstanceRepository(BaseRepository):
    kind = "instance"
    bucket = INSTANCES
    schema = InstanceCreate

    async def check_references(self, record: Dict[str, Any]) -> None:
        svc_uuid = record["service_uuid"]
        await self.require(
            self.validator.service_exists(svc_uuid),
            f"service {svc_uuid} doesn't exist",
        )
