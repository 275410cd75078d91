"""Service repository."""
from typing import Any, Dict

from topology_registry.models import ServiceCreate
from topology_registry.repositories.base import BaseRepository
from topology_registry.storage import SERVICES


class ServiceRepository(BaseRepository):
    """Services belong to an application and run a registry image."""

    kind = "service"
    bucket = SERVICES
    schema = ServiceCreate

    async def check_references(self, record: Dict[str, Any]) -> None:
        app_uuid = record["application_uuid"]
        await self.require(
            self.validator.application_exists(app_uuid),
            f"application {app_uuid} doesn't exist",
        )

        # A registry outage fails the create like an unknown image.
        image_uuid = record["image_uuid"]
        await self.require(
            self.validator.image_exists(image_uuid),
            f"image {image_uuid} doesn't exist",
            wrap_errors=True,
        )

        for manifest_uuid in record.get("configs") or []:
            await self.require(
                self.validator.manifest_exists(manifest_uuid),
                f"config manifest {manifest_uuid} doesn't exist",
            )
