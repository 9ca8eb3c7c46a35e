from databases import Database


CREATE_KEY_VALUE_TABLE = """
CREATE TABLE IF NOT EXISTS KeyValue (key VARCHAR(128) PRIMARY KEY, value TEXT NOT NULL)
"""


GET_VALUE = "SELECT value FROM KeyValue WHERE key = :key"


SET_VALUE = """
INSERT INTO KeyValue(key, value) VALUES (:key, :value)
ON CONFLICT(key) DO UPDATE SET value = excluded.value
"""


async def create_db(db: Database) -> None:
    await db.execute(  # pyright: ignore[reportUnknownMemberType]
        query=CREATE_KEY_VALUE_TABLE
    )


class KeyValueRepository:
    """String slots in a single table. Each `set` replaces the whole value."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def get(self, key: str) -> str | None:
        result = await self.db.fetch_one(  # pyright: ignore[reportUnknownMemberType]
            GET_VALUE, values={"key": key}
        )
        if result is None:
            return None
        return result["value"]

    async def set(self, key: str, value: str) -> None:
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            SET_VALUE, values={"key": key, "value": value}
        )


class MemoryKeyValueStore:
    def __init__(self, data: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = {} if data is None else data

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value
