"""Application repository."""
from typing import Any, Dict

from topology_registry.models import ApplicationCreate
from topology_registry.repositories.base import BaseRepository
from topology_registry.storage import APPLICATIONS


class ApplicationRepository(BaseRepository):
    """Applications consist of a name and an owner known to the directory."""

    kind = "application"
    bucket = APPLICATIONS
    schema = ApplicationCreate

    async def check_references(self, record: Dict[str, Any]) -> None:
        owner_uuid = record["owner_uuid"]
        await self.require(
            self.validator.owner_exists(owner_uuid),
            f"invalid user: {owner_uuid}",
        )
