import asyncio
import json
import logging

from recipe_maker.db import KeyValueStore
from recipe_maker.models import Recipe


logger = logging.getLogger(__name__)


WISHLIST_KEY = "wishlist"


def recipe_key(id: str) -> str:
    return f"recipe_{id}"


class WishlistStore:
    """Favourited recipes: an ordered id list plus one record per id.

    The id list and the records are always written in the same transaction, so a
    recipe can be fetched exactly when its id is listed. Membership checks hit an
    in-memory set and never touch the store.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self.kv = kv
        self._ids: list[str] = []
        self._index: set[str] = set()
        self._lock = asyncio.Lock()

    @classmethod
    async def open(cls, kv: KeyValueStore) -> "WishlistStore":
        store = cls(kv)
        await store.load()
        return store

    async def load(self) -> None:
        ids = await self.kv.get_string_list(WISHLIST_KEY) or []
        # Drop repeats that a hand-edited store might hold.
        self._ids = list(dict.fromkeys(ids))
        self._index = set(self._ids)
        logger.info(f"Loaded {len(self._ids)} wishlist ids.")

    def list_ids(self) -> list[str]:
        return list(self._ids)

    def contains(self, id: str) -> bool:
        return id in self._index

    def __contains__(self, id: object) -> bool:
        return id in self._index

    def __len__(self) -> int:
        return len(self._ids)

    async def add(self, recipe: Recipe) -> None:
        async with self._lock:
            await self._add(recipe)

    async def _add(self, recipe: Recipe) -> None:
        if recipe.id in self._index:
            return
        ids = self._ids + [recipe.id]
        async with self.kv.transaction():
            await self.kv.set_string(recipe_key(recipe.id), json.dumps(recipe.to_dict()))
            await self.kv.set_string_list(WISHLIST_KEY, ids)
        self._ids = ids
        self._index.add(recipe.id)
        logger.info(f"Added {recipe!r} to the wishlist.")

    async def remove(self, id: str) -> None:
        async with self._lock:
            await self._remove(id)

    async def _remove(self, id: str) -> None:
        if id not in self._index:
            return
        ids = [i for i in self._ids if i != id]
        async with self.kv.transaction():
            await self.kv.remove(recipe_key(id))
            await self.kv.set_string_list(WISHLIST_KEY, ids)
        self._ids = ids
        self._index.discard(id)
        logger.info(f"Removed {id} from the wishlist.")

    async def toggle(self, recipe: Recipe) -> bool:
        """Add the recipe if absent, remove it if present. Returns membership."""
        async with self._lock:
            if recipe.id in self._index:
                await self._remove(recipe.id)
                return False
            await self._add(recipe)
            return True

    async def get(self, id: str) -> Recipe | None:
        if id not in self._index:
            return None
        value = await self.kv.get_string(recipe_key(id))
        if value is None:
            return None
        try:
            return Recipe.from_dict(json.loads(value))
        except (ValueError, LookupError, TypeError) as e:
            logger.warning(f"Unreadable wishlist record {id}: {e!r}")
            return None

    async def list_all(self) -> list[Recipe]:
        recipes: list[Recipe] = []
        for id in self.list_ids():
            recipe = await self.get(id)
            if recipe is None:
                logger.warning(f"Skipping wishlist id {id} with no record.")
                continue
            recipes.append(recipe)
        return recipes
