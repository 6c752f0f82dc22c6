"""Response normalization: raw model text to GeneratedRecipe.

`normalize_recipe` is total. Parsing tries, in order:
1. json.loads() on the text with code fences stripped
2. Regex extraction of a single {...} object from surrounding prose
If both fail, or the JSON is not an object, a degraded recipe is built from
the raw text and the requested ingredients.

Parsed objects are mapped with explicit per-field defaults and lenient
coercion, so numbers sent as "20 minutes" or a difficulty of "Easy" still
produce a fully typed recipe.
"""

import json
import math
import re
from typing import Any, Optional, Sequence, Union

from pydantic import ValidationError

from recipe_generator.models.models import Difficulty, GeneratedRecipe
from recipe_generator.utils.errors import MalformedResponseError
from recipe_generator.utils.logger import logger


FALLBACK_TITLE = "Generated Recipe"
FALLBACK_DESCRIPTION = "A delicious recipe created for you"
FALLBACK_INGREDIENT = "Check ingredients based on your preferences"
FALLBACK_CUISINE = "International"
DEFAULT_PREP_TIME = 15
DEFAULT_COOK_TIME = 30
DEFAULT_SERVINGS = 4

_LEADING_FENCE = re.compile(r"^\s*```(?:json)?[ \t]*\n?", re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\n?```\s*$")
_JSON_OBJECT = re.compile(r"\{.*\}", re.DOTALL)
_STRUCTURAL_CHARS = re.compile(r'[{}\[\]"]')
_FIRST_NUMBER = re.compile(r"-?\d+(?:\.\d+)?")

Number = Union[int, float]


def strip_code_fences(text: str) -> str:
    """Remove a leading ```json / ``` marker and a trailing ``` marker, then trim."""
    text = _LEADING_FENCE.sub("", text, count=1)
    text = _TRAILING_FENCE.sub("", text, count=1)
    return text.strip()


def parse_recipe_json(text: str) -> dict[str, Any]:
    """Parse model output into a JSON object.

    Raises:
        MalformedResponseError: If no JSON object can be recovered.
    """
    try:
        parsed = json.loads(text)
    except RecursionError as e:
        raise MalformedResponseError("Model output is nested too deeply") from e
    except ValueError:
        match = _JSON_OBJECT.search(text)
        if not match:
            raise MalformedResponseError("No JSON object found in model output")
        try:
            parsed = json.loads(match.group())
        except (ValueError, RecursionError) as e:
            raise MalformedResponseError(f"Invalid JSON in model output: {e}") from e
        logger.debug("Recovered JSON object embedded in model output")

    if not isinstance(parsed, dict):
        raise MalformedResponseError(f"Expected a JSON object, got {type(parsed).__name__}")
    return parsed


def _as_text(value: Any, default: str) -> str:
    if value is None:
        return default
    if isinstance(value, (dict, list)):
        return default
    text = str(value).strip()
    return text or default


def _as_number(value: Any, default: Number, minimum: Number = 0) -> Number:
    """Pass finite numbers through; read the first number out of "20" or "20 minutes".

    Values below `minimum`, non-finite values and anything unparseable get the default.
    """
    if isinstance(value, bool):
        return default
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        match = _FIRST_NUMBER.search(value)
        if not match:
            return default
        text = match.group()
        number = float(text) if "." in text else int(text)
    else:
        return default
    try:
        finite = math.isfinite(number)
    except OverflowError:
        # Integers too large for a float
        return default
    if not finite or number < minimum:
        return default
    return number


def _as_ingredient_list(value: Any, fallback: list[str]) -> list[str]:
    if isinstance(value, str):
        items = [line.strip(" -*•\t") for line in value.splitlines()]
    elif isinstance(value, list):
        items = [_as_text(item, "") for item in value]
    else:
        return fallback
    items = [item for item in items if item]
    return items or fallback


def _as_instructions(value: Any) -> str:
    if isinstance(value, list):
        return "\n".join(_as_text(step, "") for step in value if _as_text(step, ""))
    return _as_text(value, "")


def _as_difficulty(value: Any) -> Difficulty:
    try:
        return Difficulty(str(value).strip().lower())
    except ValueError:
        return Difficulty.MEDIUM


def recipe_from_mapping(data: dict[str, Any], fallback_ingredients: Sequence[str]) -> GeneratedRecipe:
    """Map a parsed JSON object field-for-field, defaulting what is missing or unusable."""
    fallback = list(fallback_ingredients) or [FALLBACK_INGREDIENT]
    return GeneratedRecipe(
        title=_as_text(data.get("title"), FALLBACK_TITLE),
        description=_as_text(data.get("description"), ""),
        ingredients=_as_ingredient_list(data.get("ingredients"), fallback),
        instructions=_as_instructions(data.get("instructions")),
        prep_time_minutes=_as_number(data.get("prepTime"), DEFAULT_PREP_TIME),
        cook_time_minutes=_as_number(data.get("cookTime"), DEFAULT_COOK_TIME),
        servings=_as_number(data.get("servings"), DEFAULT_SERVINGS, minimum=1),
        difficulty=_as_difficulty(data.get("difficulty")),
        cuisine=_as_text(data.get("cuisine"), FALLBACK_CUISINE),
    )


def degraded_recipe(raw_text: str, fallback_ingredients: Sequence[str]) -> GeneratedRecipe:
    """Placeholder recipe carrying the raw model text as its instructions."""
    return GeneratedRecipe(
        title=FALLBACK_TITLE,
        description=FALLBACK_DESCRIPTION,
        ingredients=list(fallback_ingredients) or [FALLBACK_INGREDIENT],
        instructions=_STRUCTURAL_CHARS.sub("", raw_text),
        prep_time_minutes=DEFAULT_PREP_TIME,
        cook_time_minutes=DEFAULT_COOK_TIME,
        servings=DEFAULT_SERVINGS,
        difficulty=Difficulty.MEDIUM,
        cuisine=FALLBACK_CUISINE,
    )


def normalize_recipe(raw_text: Optional[str], fallback_ingredients: Sequence[str] = ()) -> GeneratedRecipe:
    """Turn raw model output into a GeneratedRecipe. Never raises.

    Args:
        raw_text: Completion text from the generation client.
        fallback_ingredients: Ingredient names from the request, used when the
            output carries no usable ingredient list.

    Returns:
        The parsed recipe, or a degraded recipe when the output is not a JSON object.
    """
    fallback_ingredients = [str(name) for name in fallback_ingredients]
    content = strip_code_fences(raw_text or "")

    try:
        data = parse_recipe_json(content)
        return recipe_from_mapping(data, fallback_ingredients)
    except (MalformedResponseError, ValidationError) as e:
        logger.warning(f"Model output is not a usable recipe, using fallback: {e}")
        logger.debug(f"Raw content: {content}")
        return degraded_recipe(content, fallback_ingredients)
