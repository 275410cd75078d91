"""Key-value record store backed by an async SQLAlchemy engine."""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    Integer,
    MetaData,
    String,
    Table,
    delete,
    insert,
    inspect,
    select,
    update,
)
from sqlalchemy.ext.asyncio import create_async_engine

from topology_registry.errors import BucketNotFoundError

logger = logging.getLogger(__name__)

KEY_COLUMN = "_key"
VALUE_COLUMN = "_value"

INDEX_TYPES = {
    "string": String(255),
    "number": Integer(),
    "boolean": Boolean(),
}


class KeyValueStore:
    """Stores JSON objects in named buckets, one table per bucket.

    A bucket config names the fields to index, for example
    ``{"index": {"uuid": {"type": "string", "unique": True}}}``. Indexed
    fields are copied out of each object into their own column, so the
    database enforces uniqueness and can filter on them.
    """

    def __init__(self, url: str):
        self.url = url
        self.engine = create_async_engine(url, echo=False, pool_pre_ping=True)
        self.metadata = MetaData()

    async def get_bucket(self, name: str) -> Table:
        """Return the table for a bucket, raising BucketNotFoundError if absent."""
        async with self.engine.connect() as conn:
            table = await conn.run_sync(self._load_table, name)
        if table is None:
            raise BucketNotFoundError(name)
        return table

    def _load_table(self, sync_conn, name: str) -> Optional[Table]:
        if not inspect(sync_conn).has_table(name):
            return None
        if name in self.metadata.tables:
            return self.metadata.tables[name]
        return Table(name, self.metadata, autoload_with=sync_conn)

    async def _table(self, name: str) -> Table:
        table = self.metadata.tables.get(name)
        if table is None:
            table = await self.get_bucket(name)
        return table

    async def create_bucket(self, name: str, config: Dict[str, Any]) -> Table:
        """Create a bucket. Fails if the bucket already exists."""
        if name in self.metadata.tables:
            self.metadata.remove(self.metadata.tables[name])

        columns = [
            Column(KEY_COLUMN, String(255), primary_key=True),
            Column(VALUE_COLUMN, JSON, nullable=False),
        ]
        for field, spec in config.get("index", {}).items():
            column_type = INDEX_TYPES.get(spec.get("type", "string"))
            if column_type is None:
                raise ValueError(f"Unsupported index type for {field}: {spec.get('type')}")
            unique = bool(spec.get("unique", False))
            columns.append(Column(field, column_type, unique=unique, index=not unique))

        table = Table(name, self.metadata, *columns)
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(table.create)
        except Exception:
            self.metadata.remove(table)
            raise

        logger.debug(f"Created table for bucket {name}")
        return table

    async def put_object(self, bucket: str, key: str, value: Dict[str, Any]) -> None:
        """Insert or replace the object stored under ``key``."""
        table = await self._table(bucket)

        row = {VALUE_COLUMN: value}
        for column in table.columns:
            if column.name not in (KEY_COLUMN, VALUE_COLUMN):
                row[column.name] = value.get(column.name)

        async with self.engine.begin() as conn:
            result = await conn.execute(
                update(table).where(table.c[KEY_COLUMN] == key).values(row)
            )
            if result.rowcount == 0:
                await conn.execute(insert(table).values({KEY_COLUMN: key, **row}))

    async def find_objects(self, bucket: str, filters: Optional[Dict[str, Any]] = None) -> List[Dict[str, Any]]:
        """Return every object whose indexed fields equal ``filters``."""
        table = await self._table(bucket)

        stmt = select(table.c[VALUE_COLUMN])
        for field, expected in (filters or {}).items():
            if field not in table.c or field in (KEY_COLUMN, VALUE_COLUMN):
                raise ValueError(f"Bucket {bucket} has no index on {field}")
            stmt = stmt.where(table.c[field] == expected)

        async with self.engine.connect() as conn:
            result = await conn.execute(stmt)
            return [row[0] for row in result]

    async def del_object(self, bucket: str, key: str) -> None:
        """Delete the object stored under ``key``. Absence is not an error."""
        table = await self._table(bucket)
        async with self.engine.begin() as conn:
            await conn.execute(delete(table).where(table.c[KEY_COLUMN] == key))

    async def ping(self) -> None:
        """Round-trip a trivial query to check connectivity."""
        async with self.engine.connect() as conn:
            await conn.execute(select(1))

    async def close(self) -> None:
        await self.engine.dispose()
