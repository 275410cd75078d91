"""Record storage adapter over the key-value store."""
import asyncio
import logging
from typing import Any, Dict, List, Optional

from topology_registry.errors import BucketNotFoundError, StorageError
from topology_registry.utils.kvstore import KeyValueStore

logger = logging.getLogger(__name__)

APPLICATIONS = "registry_applications"
SERVICES = "registry_services"
INSTANCES = "registry_instances"
MANIFESTS = "registry_manifests"

BUCKETS = [APPLICATIONS, SERVICES, INSTANCES, MANIFESTS]

# Every bucket is keyed by uuid, and the engine enforces its uniqueness.
BUCKET_SCHEMA = {
    "index": {
        "uuid": {
            "type": "string",
            "unique": True,
        }
    }
}


class RecordStore:
    """Per-entity-kind namespaces ("buckets") of records keyed by uuid.

    Reads always go to the store; nothing is cached here.
    """

    def __init__(self, kv: KeyValueStore):
        self.kv = kv

    async def ensure_bucket(self, name: str, schema_hint: Dict[str, Any] = BUCKET_SCHEMA) -> None:
        """Create the bucket if it does not exist yet."""
        try:
            await self.kv.get_bucket(name)
            return
        except BucketNotFoundError:
            pass
        except Exception as e:
            logger.error(f"Failed to get bucket {name}: {e}")
            raise

        try:
            await self.kv.create_bucket(name, schema_hint)
        except Exception as e:
            logger.error(f"Failed to create bucket {name}: {e}")
            raise StorageError(f"failed to create bucket {name}") from e

        logger.info(f"Created bucket {name}")

    async def init_buckets(self, names: Optional[List[str]] = None) -> None:
        """Ensure every entity bucket exists. Buckets are created in parallel."""
        names = names or BUCKETS
        await asyncio.gather(*(self.ensure_bucket(name) for name in names))

    async def put(self, bucket: str, uuid: str, record: Dict[str, Any]) -> None:
        await self.kv.put_object(bucket, uuid, record)

    async def get(self, bucket: str, uuid: str) -> Optional[Dict[str, Any]]:
        """Return the record with this uuid, or None."""
        try:
            objs = await self.kv.find_objects(bucket, {"uuid": uuid})
        except Exception as e:
            logger.error(f"Failed to find object {uuid} in bucket {bucket}: {e}")
            raise
        return objs[0] if objs else None

    async def list(self, bucket: str) -> List[Dict[str, Any]]:
        try:
            return await self.kv.find_objects(bucket)
        except Exception as e:
            logger.error(f"Failed to list objects from bucket {bucket}: {e}")
            raise

    async def delete(self, bucket: str, uuid: str) -> None:
        await self.kv.del_object(bucket, uuid)
