"""Existence checks for records referenced by a new entity."""
import logging

from topology_registry.context import RegistryContext
from topology_registry.errors import ImageNotFoundError
from topology_registry.storage import APPLICATIONS, MANIFESTS, SERVICES

logger = logging.getLogger(__name__)


class ReferenceValidator:
    """Answers "does this owner / image / record exist?" for repositories.

    The owner and image checks deliberately differ. A failed owner lookup,
    whatever the cause, is reported as a missing owner. An image lookup that
    fails for any reason other than "not found" raises instead. Record
    checks read the store, and store errors propagate.
    """

    def __init__(self, ctx: RegistryContext):
        self.ctx = ctx

    async def owner_exists(self, owner_uuid: str) -> bool:
        try:
            user = await self.ctx.identity.get_user(owner_uuid)
        except Exception as e:
            # Unreachable directory and unknown user look the same to callers.
            logger.error(f"Failed to lookup user {owner_uuid}: {type(e).__name__}: {e}")
            return False

        logger.info(f"Found owner_uuid {owner_uuid}: {user.get('username', owner_uuid)}")
        return True

    async def image_exists(self, image_uuid: str) -> bool:
        try:
            await self.ctx.images.get_image(image_uuid)
        except ImageNotFoundError:
            return False
        return True

    async def record_exists(self, bucket: str, uuid: str) -> bool:
        return await self.ctx.store.get(bucket, uuid) is not None

    async def application_exists(self, application_uuid: str) -> bool:
        return await self.record_exists(APPLICATIONS, application_uuid)

    async def service_exists(self, service_uuid: str) -> bool:
        return await self.record_exists(SERVICES, service_uuid)

    async def manifest_exists(self, manifest_uuid: str) -> bool:
        return await self.record_exists(MANIFESTS, manifest_uuid)
