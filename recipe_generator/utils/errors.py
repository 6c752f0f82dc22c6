"""Exception hierarchy for the recipe generation pipeline.

Only `NoInputError`, `GenerationFailedError` and `GenerationInProgressError`
carry messages meant for the user. Upstream errors keep their diagnostics
(status, body) for logs and are replaced by a generic message at the boundary.
"""

from typing import Optional


class RecipeGeneratorError(Exception):
    """Base class for all recipe generator errors."""


class NoInputError(RecipeGeneratorError):
    """Neither ingredients nor a custom request were provided."""

    def __init__(self, message: str = "Please select some ingredients or add a custom request") -> None:
        super().__init__(message)


class UpstreamError(RecipeGeneratorError):
    """Base class for failures talking to the generation endpoint."""


class UpstreamUnavailableError(UpstreamError):
    """Generation endpoint is not configured or cannot be reached."""


class UpstreamHttpError(UpstreamError):
    """Generation endpoint rejected the call or answered with an unusable body."""

    def __init__(self, status: int, body: str, message: Optional[str] = None) -> None:
        self.status = status
        self.body = body
        super().__init__(message or f"Generation API error: {status}")


class UpstreamTimeoutError(UpstreamError):
    """Generation endpoint did not answer within the configured timeout."""

    def __init__(self, timeout_seconds: float) -> None:
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Generation API did not respond within {timeout_seconds:g}s")


class MalformedResponseError(RecipeGeneratorError):
    """Model output could not be parsed as a recipe object.

    Raised and absorbed inside the normalizer, never surfaced to callers.
    """


class GenerationFailedError(RecipeGeneratorError):
    """Generic, user-facing generation failure."""

    def __init__(self, message: str = "Failed to generate recipe. Please try again.") -> None:
        super().__init__(message)


class GenerationInProgressError(RecipeGeneratorError):
    """A generation is already running for this session."""

    def __init__(self, message: str = "A recipe is already being generated") -> None:
        super().__init__(message)


class CatalogUnavailableError(RecipeGeneratorError):
    """Catalog store could not be read."""


class UnknownSelectionError(RecipeGeneratorError, ValueError):
    """Selected id is not present in the loaded catalog."""
