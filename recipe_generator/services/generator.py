"""Recipe generation orchestration.

Two entry points share the same pipeline (validate → compose → call → normalize):

- generate_recipe(): stateless, takes names directly. Used by the HTTP
  endpoint and the CLI.
- RecipeGenerationSession: one user's live state (catalog, selection, current
  recipe) with an explicit state machine:

      IDLE → VALIDATING → COMPOSING → CALLING → NORMALIZING → DONE
                  └──────────┬─────────────┘
                          FAILED → IDLE

  Only one generation may be in flight; a second call is rejected, not queued.
  close() cancels the in-flight call so its result can never land in the
  session afterwards.
"""

import asyncio
import uuid
from enum import Enum
from typing import List, Optional, Protocol, Sequence

from recipe_generator.clients.catalog import CatalogStore, load_catalog
from recipe_generator.models.models import Catalog, GeneratedRecipe
from recipe_generator.prompts.prompts import compose_prompt
from recipe_generator.services.normalizer import normalize_recipe
from recipe_generator.services.selection import Selection
from recipe_generator.utils.errors import (
    CatalogUnavailableError,
    GenerationFailedError,
    GenerationInProgressError,
    NoInputError,
    UnknownSelectionError,
    UpstreamError,
)
from recipe_generator.utils.logger import logger


class ChatClient(Protocol):
    async def generate(self, prompt: str) -> str:
        ...


class GenerationState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    COMPOSING = "composing"
    CALLING = "calling"
    NORMALIZING = "normalizing"
    DONE = "done"
    FAILED = "failed"


BUSY_STATES = frozenset(
    {
        GenerationState.VALIDATING,
        GenerationState.COMPOSING,
        GenerationState.CALLING,
        GenerationState.NORMALIZING,
    }
)


async def generate_recipe(
    ingredients: Sequence[str],
    dietary_restrictions: Sequence[str],
    custom_prompt: str,
    client: ChatClient,
) -> GeneratedRecipe:
    """Generate one recipe from ingredient and dietary names.

    Raises:
        NoInputError: No ingredients and a blank custom prompt. No call is made.
        UpstreamError: The generation client failed (unavailable, HTTP error, timeout).
    """
    custom_prompt = custom_prompt or ""
    logger.info(
        f"Recipe generation request: ingredients={list(ingredients)}, "
        f"dietary_restrictions={list(dietary_restrictions)}, custom_prompt={custom_prompt!r}"
    )

    if not ingredients and not custom_prompt.strip():
        raise NoInputError()

    prompt = compose_prompt(ingredients, dietary_restrictions, custom_prompt)
    raw_text = await client.generate(prompt)
    recipe = normalize_recipe(raw_text, ingredients)

    logger.info(f"Recipe generated successfully: {recipe.title}")
    return recipe


class RecipeGenerationSession:
    """Live generation state for a single user session."""

    def __init__(
        self,
        client: ChatClient,
        catalog_store: CatalogStore,
        session_id: Optional[str] = None,
    ) -> None:
        self.session_id = session_id or uuid.uuid4().hex
        self.catalog = Catalog()
        self.selection = Selection()
        self.recipe: Optional[GeneratedRecipe] = None
        self.state = GenerationState.IDLE
        self.state_history: List[GenerationState] = [GenerationState.IDLE]
        self._client = client
        self._catalog_store = catalog_store
        self._inflight: Optional[asyncio.Future] = None
        self._closed = False

    @property
    def is_generating(self) -> bool:
        return self.state in BUSY_STATES

    def _log_extra(self) -> dict:
        return {"session_id": self.session_id}

    def _set_state(self, state: GenerationState) -> None:
        self.state = state
        self.state_history.append(state)
        logger.debug(f"Session {self.session_id}: {state.value}", extra=self._log_extra())

    def _fail(self) -> None:
        self._set_state(GenerationState.FAILED)
        self._set_state(GenerationState.IDLE)

    async def load_catalog(self) -> Catalog:
        """Load ingredients and dietary restrictions.

        A store failure is logged and leaves the current catalog in place, so
        the selection screens keep working with what they had.
        """
        try:
            self.catalog = await load_catalog(self._catalog_store)
        except CatalogUnavailableError as e:
            logger.error(f"Error loading catalog: {e}", extra=self._log_extra())
        return self.catalog

    def add_ingredient(self, ingredient_id: str) -> None:
        if not self.catalog.has_ingredient(ingredient_id):
            raise UnknownSelectionError(f"Unknown ingredient id: {ingredient_id}")
        self.selection.add_ingredient(ingredient_id)

    def remove_ingredient(self, ingredient_id: str) -> None:
        self.selection.remove_ingredient(ingredient_id)

    def toggle_dietary(self, dietary_id: str) -> bool:
        # Deselecting a stale id is always allowed
        if dietary_id not in self.selection.dietary_ids and not self.catalog.has_dietary_restriction(dietary_id):
            raise UnknownSelectionError(f"Unknown dietary restriction id: {dietary_id}")
        return self.selection.toggle_dietary(dietary_id)

    def set_free_text(self, text: str) -> None:
        self.selection.set_free_text(text)

    def reset_selection(self) -> None:
        self.selection.reset()

    async def generate(self) -> GeneratedRecipe:
        """Run one generation for the current selection.

        Raises:
            GenerationInProgressError: Another generation is running.
            NoInputError: Nothing selected and no free text. No call is made.
            GenerationFailedError: The upstream call failed, or the session is closed.
            asyncio.CancelledError: The session was closed during the call.
        """
        if self._closed:
            raise GenerationFailedError("Session is closed")
        if self.is_generating:
            raise GenerationInProgressError()

        self.recipe = None
        self._set_state(GenerationState.VALIDATING)
        if self.selection.is_empty(self.catalog):
            self._fail()
            raise NoInputError()

        self._set_state(GenerationState.COMPOSING)
        ingredient_names = self.selection.ingredient_names(self.catalog)
        prompt = compose_prompt(
            ingredient_names,
            self.selection.dietary_names(self.catalog),
            self.selection.free_text,
        )

        self._set_state(GenerationState.CALLING)
        logger.info(
            f"Generating recipe: {len(ingredient_names)} ingredients, "
            f"{len(self.selection.dietary_ids)} dietary restrictions",
            extra=self._log_extra(),
        )
        self._inflight = asyncio.ensure_future(self._client.generate(prompt))
        try:
            raw_text = await self._inflight
        except UpstreamError as e:
            logger.error(f"Error generating recipe: {e}", extra=self._log_extra())
            self._fail()
            raise GenerationFailedError() from e
        except asyncio.CancelledError:
            logger.info("Generation cancelled", extra=self._log_extra())
            self._set_state(GenerationState.IDLE)
            raise
        finally:
            self._inflight = None

        self._set_state(GenerationState.NORMALIZING)
        recipe = normalize_recipe(raw_text, ingredient_names)

        self.recipe = recipe
        self._set_state(GenerationState.DONE)
        logger.info(f"Recipe generated successfully: {recipe.title}", extra=self._log_extra())
        return recipe

    def close(self) -> None:
        """End the session, cancelling any in-flight generation."""
        self._closed = True
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
