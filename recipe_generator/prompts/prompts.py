"""Prompts for recipe generation.

`compose_prompt` turns the user's selections into the user turn sent to the
chat model. The closing block is the output contract the normalizer relies on:
its field names and value types must match what `normalize_recipe` reads.
"""

from typing import Sequence


SYSTEM_INSTRUCTION = (
    "You are a professional chef that creates amazing recipes. "
    "Always respond with valid JSON only."
)

PREAMBLE = (
    "You are a professional chef and recipe creator. "
    "Create a detailed, delicious recipe based on the following requirements:\n\n"
)

RECIPE_SCHEMA_BLOCK = """
Please respond with a JSON object containing:
{
  "title": "Recipe name",
  "description": "Brief description",
  "ingredients": ["ingredient 1 with quantity", "ingredient 2 with quantity", ...],
  "instructions": "Step-by-step cooking instructions",
  "prepTime": "preparation time in minutes (number)",
  "cookTime": "cooking time in minutes (number)",
  "servings": "number of servings (number)",
  "difficulty": "easy/medium/hard",
  "cuisine": "cuisine type"
}

Make sure the recipe is practical, delicious, and follows all dietary restrictions. \
If using the provided ingredients, try to incorporate as many as possible while \
suggesting additional ingredients if needed for a complete recipe."""


def compose_prompt(
    ingredient_names: Sequence[str],
    dietary_names: Sequence[str],
    free_text: str,
) -> str:
    """Build the user prompt for a recipe request.

    Any input may be empty; rejecting an empty request is the caller's job.
    Lines for empty inputs are omitted, the preamble and schema block are
    always present.

    Args:
        ingredient_names: Ingredient names in display order.
        dietary_names: Dietary restriction names in display order.
        free_text: Additional requirements typed by the user.

    Returns:
        The composed prompt.
    """
    prompt = PREAMBLE

    if ingredient_names:
        prompt += f"Available ingredients: {', '.join(ingredient_names)}\n"

    if dietary_names:
        prompt += f"Dietary restrictions: {', '.join(dietary_names)}\n"

    if free_text and free_text.strip():
        prompt += f"Additional requirements: {free_text.strip()}\n"

    return prompt + RECIPE_SCHEMA_BLOCK
