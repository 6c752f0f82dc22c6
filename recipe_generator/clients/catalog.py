"""Catalog stores for ingredients and dietary restrictions.

Two read-only stores share the `CatalogStore` protocol:

- SupabaseCatalogStore: reads the `ingredients` and `dietary_restrictions`
  tables through the Supabase REST (PostgREST) API, ordered by name.
- InMemoryCatalogStore: serves fixed rows, by default the built-in catalog.
  Used when no Supabase project is configured, and in tests.

`load_catalog()` reads both lists into a `Catalog`.
"""

import asyncio
from typing import Any, Iterable, Optional, Protocol

import aiohttp
from pydantic import ValidationError

from recipe_generator.models.models import Catalog, DietaryRestriction, Ingredient
from recipe_generator.utils.config import Config, config as default_config
from recipe_generator.utils.errors import CatalogUnavailableError
from recipe_generator.utils.logger import logger


DEFAULT_INGREDIENTS: list[dict[str, str]] = [
    {"id": "ing-basil", "name": "Basil", "category": "Herbs"},
    {"id": "ing-bell-pepper", "name": "Bell pepper", "category": "Vegetables"},
    {"id": "ing-butter", "name": "Butter", "category": "Dairy"},
    {"id": "ing-cheddar", "name": "Cheddar", "category": "Dairy"},
    {"id": "ing-chicken-breast", "name": "Chicken breast", "category": "Meat"},
    {"id": "ing-chickpeas", "name": "Chickpeas", "category": "Legumes"},
    {"id": "ing-egg", "name": "Egg", "category": "Dairy"},
    {"id": "ing-flour", "name": "Flour", "category": "Baking"},
    {"id": "ing-garlic", "name": "Garlic", "category": "Vegetables"},
    {"id": "ing-lemon", "name": "Lemon", "category": "Fruit"},
    {"id": "ing-olive-oil", "name": "Olive oil", "category": "Pantry"},
    {"id": "ing-onion", "name": "Onion", "category": "Vegetables"},
    {"id": "ing-pasta", "name": "Pasta", "category": "Grains"},
    {"id": "ing-rice", "name": "Rice", "category": "Grains"},
    {"id": "ing-salmon", "name": "Salmon", "category": "Fish"},
    {"id": "ing-spinach", "name": "Spinach", "category": "Vegetables"},
    {"id": "ing-tofu", "name": "Tofu", "category": "Protein"},
    {"id": "ing-tomato", "name": "Tomato", "category": "Vegetables"},
]

DEFAULT_DIETARY_RESTRICTIONS: list[dict[str, str]] = [
    {"id": "diet-dairy-free", "name": "Dairy-free", "description": "No milk, cheese, butter or cream"},
    {"id": "diet-gluten-free", "name": "Gluten-free", "description": "No wheat, barley or rye"},
    {"id": "diet-keto", "name": "Keto", "description": "Very low carbohydrate, high fat"},
    {"id": "diet-nut-free", "name": "Nut-free", "description": "No peanuts or tree nuts"},
    {"id": "diet-vegan", "name": "Vegan", "description": "No animal products"},
    {"id": "diet-vegetarian", "name": "Vegetarian", "description": "No meat or fish"},
]


class CatalogStore(Protocol):
    """Read-only source of catalog rows, each list ordered by name."""

    async def list_ingredients(self) -> list[Ingredient]:
        ...

    async def list_dietary_restrictions(self) -> list[DietaryRestriction]:
        ...


def _sorted_by_name(rows: Iterable[Any]) -> list[Any]:
    return sorted(rows, key=lambda row: row.name.lower())


class InMemoryCatalogStore:
    """Catalog store backed by fixed rows."""

    def __init__(
        self,
        ingredients: Optional[Iterable[dict[str, Any]]] = None,
        dietary_restrictions: Optional[Iterable[dict[str, Any]]] = None,
    ) -> None:
        ingredients = DEFAULT_INGREDIENTS if ingredients is None else ingredients
        dietary_restrictions = DEFAULT_DIETARY_RESTRICTIONS if dietary_restrictions is None else dietary_restrictions
        self._ingredients = _sorted_by_name(Ingredient(**row) for row in ingredients)
        self._dietary = _sorted_by_name(DietaryRestriction(**row) for row in dietary_restrictions)

    async def list_ingredients(self) -> list[Ingredient]:
        return list(self._ingredients)

    async def list_dietary_restrictions(self) -> list[DietaryRestriction]:
        return list(self._dietary)


class SupabaseCatalogStore:
    """Catalog store reading from Supabase tables over the REST API."""

    def __init__(
        self,
        url: str,
        api_key: str,
        timeout_seconds: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        """Initialize the store.

        Args:
            url: Supabase project URL, e.g. https://xyz.supabase.co
            api_key: Anon (public) key, sent as `apikey` and bearer token.
            timeout_seconds: Total timeout per table read.
            session: Optional shared aiohttp session. Not closed by this store.

        Raises:
            ValueError: If url or api_key is empty.
        """
        if not url:
            raise ValueError("SUPABASE_URL is required")
        if not api_key:
            raise ValueError("SUPABASE_ANON_KEY is required")

        self.url = url.rstrip("/")
        self.api_key = api_key
        self.timeout_seconds = timeout_seconds
        self._session = session

    async def list_ingredients(self) -> list[Ingredient]:
        rows = await self._select("ingredients")
        return self._parse_rows(rows, Ingredient, "ingredients")

    async def list_dietary_restrictions(self) -> list[DietaryRestriction]:
        rows = await self._select("dietary_restrictions")
        return self._parse_rows(rows, DietaryRestriction, "dietary_restrictions")

    async def _select(self, table: str) -> list[dict[str, Any]]:
        """Fetch all rows of a table ordered by name."""
        try:
            if self._session is not None:
                return await self._get(self._session, table)
            async with aiohttp.ClientSession() as session:
                return await self._get(session, table)
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Error loading {table}: {e}")
            raise CatalogUnavailableError(f"Could not load {table}") from e

    async def _get(self, session: aiohttp.ClientSession, table: str) -> list[dict[str, Any]]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Accept": "application/json",
        }
        async with session.get(
            f"{self.url}/rest/v1/{table}",
            params={"select": "*", "order": "name"},
            headers=headers,
            timeout=aiohttp.ClientTimeout(total=self.timeout_seconds),
        ) as response:
            if response.status >= 400:
                body = await response.text()
                logger.error(f"Error loading {table}: {response.status} - {body}")
                raise CatalogUnavailableError(f"Could not load {table}: HTTP {response.status}")
            try:
                data = await response.json(content_type=None)
            except ValueError as e:
                logger.error(f"Error loading {table}: response is not JSON")
                raise CatalogUnavailableError(f"Unexpected response for {table}") from e

        if not isinstance(data, list):
            raise CatalogUnavailableError(f"Unexpected response for {table}")
        return data

    @staticmethod
    def _parse_rows(rows: list[dict[str, Any]], model: type, table: str) -> list[Any]:
        """Validate rows, skipping ones that do not fit the model.

        All catalog columns are text; ids may arrive as numbers or UUIDs and
        null descriptions fall back to the model default.
        """
        parsed = []
        for row in rows:
            if not isinstance(row, dict):
                logger.warning(f"Skipping invalid {table} row: {row!r}")
                continue
            try:
                fields = {key: str(row[key]) for key in model.model_fields if row.get(key) is not None}
                parsed.append(model(**fields))
            except (ValidationError, TypeError) as e:
                logger.warning(f"Skipping invalid {table} row {row.get('id')!r}: {e}")
        return parsed


def catalog_store_from_config(cfg: Optional[Config] = None) -> CatalogStore:
    """Supabase store when configured, otherwise the built-in catalog."""
    cfg = cfg or default_config
    if cfg.SUPABASE_URL:
        logger.info("Using Supabase catalog store")
        return SupabaseCatalogStore(url=cfg.SUPABASE_URL, api_key=cfg.SUPABASE_ANON_KEY)
    logger.info("Using built-in catalog store")
    return InMemoryCatalogStore()


async def load_catalog(store: CatalogStore) -> Catalog:
    """Read both catalog lists from the store.

    Raises:
        CatalogUnavailableError: If either list cannot be read.
    """
    ingredients, dietary = await asyncio.gather(
        store.list_ingredients(),
        store.list_dietary_restrictions(),
    )
    logger.debug(f"Catalog loaded: {len(ingredients)} ingredients, {len(dietary)} dietary restrictions")
    return Catalog(ingredients=ingredients, dietary_restrictions=dietary)
