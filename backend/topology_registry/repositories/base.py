"""
Base repository for registry records.

Provides create/list/get/delete over one record store bucket. Subclasses
name the bucket and input schema, and add the referential checks that must
pass before a record is written.
"""
import logging
import uuid as uuidlib
from typing import Any, Awaitable, Dict, List, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from topology_registry.context import RegistryContext
from topology_registry.errors import ReferentialError, ValidationError
from topology_registry.validators import ReferenceValidator

logger = logging.getLogger(__name__)


class BaseRepository:
    """
    Generic repository for one entity kind.

    Attributes:
        kind: Human readable entity name used in messages
        bucket: Record store bucket holding this kind
        schema: Pydantic model describing required fields
    """

    kind: str = "record"
    bucket: str
    schema: Type[BaseModel]

    def __init__(self, ctx: RegistryContext, validator: Optional[ReferenceValidator] = None) -> None:
        self.ctx = ctx
        self.validator = validator or ReferenceValidator(ctx)

    def validate(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Check required fields and types, and assign a uuid if absent.

        Args:
            record: Caller supplied fields

        Returns:
            A copy of the record with a guaranteed uuid

        Raises:
            ValidationError: A required field is missing or has the wrong type
        """
        if not isinstance(record, dict):
            raise ValidationError(f"{self.kind} must be an object")

        try:
            self.schema.model_validate(record)
        except PydanticValidationError as e:
            problems = [
                f"{'.'.join(str(part) for part in err['loc']) or self.kind}: {err['msg']}"
                for err in e.errors()
            ]
            logger.warning(f"Invalid {self.kind}: {problems}")
            raise ValidationError(f"invalid {self.kind}: {'; '.join(problems)}", errors=problems) from e

        record = dict(record)
        if not record.get("uuid"):
            record["uuid"] = str(uuidlib.uuid4())
        return record

    async def require(self, check: Awaitable[bool], message: str, wrap_errors: bool = False) -> None:
        """
        Await an existence check and raise ReferentialError unless it passes.

        Errors raised by the check propagate unchanged. With ``wrap_errors``
        they are reported as a failed check instead, chained as the cause.
        """
        try:
            found = await check
        except Exception as e:
            if not wrap_errors:
                raise
            logger.error(f"{message}: {type(e).__name__}: {e}")
            raise ReferentialError(message) from e

        if not found:
            logger.error(message)
            raise ReferentialError(message)

    async def check_references(self, record: Dict[str, Any]) -> None:
        """Run this kind's referential checks in order. No checks by default."""

    async def create(self, record: Dict[str, Any]) -> Dict[str, Any]:
        """
        Validate, check references, then persist a new record.

        Nothing is written unless every check passes.

        Returns:
            The stored record, including its uuid
        """
        record = self.validate(record)
        await self.check_references(record)

        try:
            await self.ctx.store.put(self.bucket, record["uuid"], record)
        except Exception as e:
            logger.error(f"Failed to put {self.kind} {record['name']}: {e}")
            raise

        logger.info(f"Created {self.kind} {record['name']} ({record['uuid']})")
        return record

    async def list(self) -> List[Dict[str, Any]]:
        return await self.ctx.store.list(self.bucket)

    async def get(self, uuid: str) -> Optional[Dict[str, Any]]:
        """Return the record, or None if there is none with this uuid."""
        return await self.ctx.store.get(self.bucket, uuid)

    async def delete(self, uuid: str) -> None:
        """
        Delete a record by uuid. Deleting an absent record is a no-op.

        Dependents are neither checked nor deleted: removing an application
        leaves its services and instances in place.
        """
        await self.ctx.store.delete(self.bucket, uuid)
        logger.info(f"Deleted {self.kind} {uuid}")
