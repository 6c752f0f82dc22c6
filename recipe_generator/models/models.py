"""Data models and schemas for the recipe generator.

Defines Pydantic models for catalog reference data, the generation request and
response contract, and the typed GeneratedRecipe produced by the normalizer.
All models use Pydantic v2. Wire names follow the JSON contract given to the
model (camelCase `prepTime`, `cookTime`, `dietaryRestrictions`, `customPrompt`).
"""

from enum import Enum
from typing import Annotated, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt, field_validator


UNKNOWN_INGREDIENT = "Unknown ingredient"
UNKNOWN_RESTRICTION = "Unknown restriction"

# Model output may use whole or fractional numbers; both are kept as sent
Minutes = Union[NonNegativeInt, NonNegativeFloat]
ServingCount = Union[Annotated[int, Field(ge=1)], Annotated[float, Field(ge=1)]]


class Difficulty(str, Enum):
    """Difficulty levels accepted in a generated recipe."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Ingredient(BaseModel):
    """Catalog ingredient. Identity is `id`."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: Annotated[str, Field(min_length=1, description="Catalog row id")]
    name: Annotated[str, Field(min_length=1, max_length=200, description="Display name sent to the model")]
    category: Annotated[str, Field("", description="Grouping such as 'Vegetables' or 'Dairy'")]


class DietaryRestriction(BaseModel):
    """Catalog dietary restriction. Identity is `id`."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: Annotated[str, Field(min_length=1, description="Catalog row id")]
    name: Annotated[str, Field(min_length=1, max_length=200, description="Display name sent to the model")]
    description: Annotated[str, Field("", description="Short explanation shown next to the toggle")]


class Catalog(BaseModel):
    """Reference lists offered for selection, each ordered by name."""

    model_config = ConfigDict(frozen=True)

    ingredients: Annotated[List[Ingredient], Field(default_factory=list)]
    dietary_restrictions: Annotated[List[DietaryRestriction], Field(default_factory=list)]

    def has_ingredient(self, ingredient_id: str) -> bool:
        return any(ing.id == ingredient_id for ing in self.ingredients)

    def has_dietary_restriction(self, dietary_id: str) -> bool:
        return any(diet.id == dietary_id for diet in self.dietary_restrictions)

    def ingredient_name(self, ingredient_id: str) -> str:
        """Resolve an ingredient id, tolerating ids from a stale catalog."""
        for ing in self.ingredients:
            if ing.id == ingredient_id:
                return ing.name
        return UNKNOWN_INGREDIENT

    def dietary_name(self, dietary_id: str) -> str:
        """Resolve a dietary restriction id, tolerating ids from a stale catalog."""
        for diet in self.dietary_restrictions:
            if diet.id == dietary_id:
                return diet.name
        return UNKNOWN_RESTRICTION

    def search_ingredients(self, query: str) -> List[Ingredient]:
        """Case-insensitive substring match on ingredient names, catalog order preserved."""
        needle = query.strip().lower()
        if not needle:
            return list(self.ingredients)
        return [ing for ing in self.ingredients if needle in ing.name.lower()]


class GeneratedRecipe(BaseModel):
    """Recipe produced by the normalizer. Never mutated after creation.

    Every field has a value: missing fields in the model output are defaulted
    by the normalizer, not left for the renderer to guess.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, str_strip_whitespace=True)

    title: Annotated[str, Field(min_length=1, description="Recipe name")]
    description: Annotated[str, Field("", description="Brief description")]
    ingredients: Annotated[List[str], Field(default_factory=list, description="Ingredients with quantities, in order")]
    instructions: Annotated[str, Field("", description="Newline-delimited cooking steps")]
    prep_time_minutes: Annotated[Minutes, Field(15, alias="prepTime", description="Preparation time in minutes")]
    cook_time_minutes: Annotated[Minutes, Field(30, alias="cookTime", description="Cooking time in minutes")]
    servings: Annotated[ServingCount, Field(4, description="Number of servings")]
    difficulty: Annotated[Difficulty, Field(Difficulty.MEDIUM, description="easy, medium or hard")]
    cuisine: Annotated[str, Field("International", description="Cuisine type")]

    @property
    def total_time_minutes(self) -> Union[int, float]:
        return self.prep_time_minutes + self.cook_time_minutes

    @property
    def steps(self) -> List[str]:
        """Instruction lines with blanks removed."""
        return [line.strip() for line in self.instructions.splitlines() if line.strip()]

    def to_wire(self) -> dict:
        """JSON-ready dict using the wire field names."""
        return self.model_dump(mode="json", by_alias=True)

    def to_markdown(self) -> str:
        """Render the recipe as markdown for terminal display."""
        lines = [f"# {self.title}", ""]
        if self.description:
            lines += [self.description, ""]
        lines.append(
            f"**Prep:** {self.prep_time_minutes:g} min · **Cook:** {self.cook_time_minutes:g} min · "
            f"**Total:** {self.total_time_minutes:g} min · **Serves:** {self.servings:g} · "
            f"**Difficulty:** {self.difficulty.value} · **Cuisine:** {self.cuisine}"
        )
        lines += ["", "## Ingredients", ""]
        lines += [f"- {item}" for item in self.ingredients]
        lines += ["", "## Instructions", ""]
        lines += [f"{n}. {step}" for n, step in enumerate(self.steps, start=1)]
        return "\n".join(lines)


class GenerateRecipeRequest(BaseModel):
    """Invocation surface input: ingredient and dietary names plus free text.

    `null` lists are accepted and treated as empty, blank names are dropped.
    """

    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    ingredients: Annotated[List[str], Field(default_factory=list, max_length=100)]
    dietary_restrictions: Annotated[
        List[str], Field(default_factory=list, max_length=50, alias="dietaryRestrictions")
    ]
    custom_prompt: Annotated[str, Field("", max_length=2000, alias="customPrompt")]

    @field_validator("ingredients", "dietary_restrictions", mode="before")
    @classmethod
    def parse_names(cls, names: Optional[List[str]]) -> List[str]:
        """Normalize null to [] and drop blank entries."""
        if names is None:
            return []
        if not isinstance(names, list):
            # Let field validation reject it
            return names
        return [str(name).strip() for name in names if name and str(name).strip()]

    @field_validator("custom_prompt", mode="before")
    @classmethod
    def parse_custom_prompt(cls, value: Optional[str]) -> str:
        return "" if value is None else value


class GenerateRecipeResponse(BaseModel):
    """Successful invocation result."""

    recipe: GeneratedRecipe


class ErrorResponse(BaseModel):
    """Failure body returned by the HTTP boundary."""

    error: str
    details: str = "Please check the function logs for more information"
