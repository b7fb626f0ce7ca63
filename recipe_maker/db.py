import contextlib
import copy
import json
import logging
from typing import AsyncIterator, Protocol

from databases import Database


logger = logging.getLogger(__name__)


CREATE_PREFERENCES_TABLE = """
CREATE TABLE IF NOT EXISTS Preferences (key VARCHAR(256) PRIMARY KEY, value TEXT)
"""


SET_PREFERENCE = """
INSERT INTO Preferences(key, value) VALUES (:key, :value)
ON CONFLICT(key) DO UPDATE SET value = excluded.value
"""


GET_PREFERENCE = "SELECT value FROM Preferences WHERE key = :key"


REMOVE_PREFERENCE = "DELETE FROM Preferences WHERE key = :key"


class KeyValueStore(Protocol):
    """String keys to strings or lists of strings. Must survive restarts."""

    async def get_string(self, key: str) -> str | None:
        ...

    async def set_string(self, key: str, value: str) -> None:
        ...

    async def remove(self, key: str) -> None:
        ...

    async def get_string_list(self, key: str) -> list[str] | None:
        ...

    async def set_string_list(self, key: str, value: list[str]) -> None:
        ...

    def transaction(self) -> contextlib.AbstractAsyncContextManager[None]:
        ...


def _decode_string_list(key: str, value: str) -> list[str]:
    try:
        data = json.loads(value)
    except ValueError:
        data = None
    if not isinstance(data, list) or not all(isinstance(v, str) for v in data):
        logger.warning(f"Ignoring malformed string list under {key}.")
        return []
    return data


class SQLKeyValueStore:
    """Key-value store on top of a single SQL table."""

    def __init__(self, db: Database | str) -> None:
        self.db = Database(db) if isinstance(db, str) else db

    async def connect(self) -> None:
        await self.db.connect()
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            query=CREATE_PREFERENCES_TABLE
        )

    async def disconnect(self) -> None:
        await self.db.disconnect()

    async def get_string(self, key: str) -> str | None:
        result = await self.db.fetch_one(  # pyright: ignore[reportUnknownMemberType]
            GET_PREFERENCE, values={"key": key}
        )
        return None if result is None else result["value"]

    async def set_string(self, key: str, value: str) -> None:
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            SET_PREFERENCE, values={"key": key, "value": value}
        )

    async def remove(self, key: str) -> None:
        await self.db.execute(  # pyright: ignore[reportUnknownMemberType]
            REMOVE_PREFERENCE, values={"key": key}
        )

    async def get_string_list(self, key: str) -> list[str] | None:
        value = await self.get_string(key)
        return None if value is None else _decode_string_list(key, value)

    async def set_string_list(self, key: str, value: list[str]) -> None:
        await self.set_string(key, json.dumps(value))

    @contextlib.asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        async with self.db.transaction():
            yield


class InMemoryKeyValueStore:
    """Dict backed store. Lives as long as the process does."""

    def __init__(self, data: dict[str, str | list[str]] | None = None) -> None:
        self.data: dict[str, str | list[str]] = {} if data is None else data

    async def get_string(self, key: str) -> str | None:
        value = self.data.get(key)
        return value if isinstance(value, str) else None

    async def set_string(self, key: str, value: str) -> None:
        self.data[key] = value

    async def remove(self, key: str) -> None:
        self.data.pop(key, None)

    async def get_string_list(self, key: str) -> list[str] | None:
        value = self.data.get(key)
        return list(value) if isinstance(value, list) else None

    async def set_string_list(self, key: str, value: list[str]) -> None:
        self.data[key] = list(value)

    @contextlib.asynccontextmanager
    async def transaction(self) -> AsyncIterator[None]:
        snapshot = copy.deepcopy(self.data)
        try:
            yield
        except BaseException:
            self.data.clear()
            self.data.update(snapshot)
            raise
