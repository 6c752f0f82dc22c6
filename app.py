"""HTTP API for the Recipe Generator.

Endpoints:
- POST /generate-recipe: compose a prompt from ingredients, dietary restrictions
  and free text, call the chat model, return the normalized recipe
- GET /catalog/ingredients: catalog ingredients ordered by name (optional ?q= filter)
- GET /catalog/dietary-restrictions: catalog dietary restrictions ordered by name
- GET /health: liveness check

Every response, including errors and OPTIONS preflights, carries the CORS
headers browser clients expect.

Run with: python app.py
      or: uvicorn app:app --reload
"""

import uuid
from functools import lru_cache
from typing import Optional

import uvicorn
from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from recipe_generator.clients.catalog import CatalogStore, catalog_store_from_config
from recipe_generator.clients.openai_chat import OpenAIChatClient
from recipe_generator.models.models import (
    Catalog,
    ErrorResponse,
    GenerateRecipeRequest,
    GenerateRecipeResponse,
)
from recipe_generator.services.generator import ChatClient, generate_recipe
from recipe_generator.utils.config import config
from recipe_generator.utils.errors import CatalogUnavailableError, NoInputError, UpstreamError
from recipe_generator.utils.logger import logger


CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

app = FastAPI(
    title="Recipe Generator API",
    description="Generates recipes from selected ingredients and dietary preferences",
    version="1.0.0",
)


def get_generation_client() -> ChatClient:
    return OpenAIChatClient.from_config(config)


@lru_cache(maxsize=1)
def get_catalog_store() -> CatalogStore:
    return catalog_store_from_config(config)


def error_response(status_code: int, error: str) -> JSONResponse:
    # CORS headers are set here too: responses from the app-wide exception
    # handler bypass the middleware
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error).model_dump(),
        headers=CORS_HEADERS,
    )


@app.middleware("http")
async def cors_middleware(request: Request, call_next):
    """Answer preflights directly and stamp CORS headers on everything else."""
    if request.method == "OPTIONS":
        return Response(status_code=200, headers=CORS_HEADERS)

    request_id = uuid.uuid4().hex[:12]
    response = await call_next(request)
    response.headers.update(CORS_HEADERS)
    response.headers["X-Request-ID"] = request_id
    logger.info(
        f"{request.method} {request.url.path} -> {response.status_code}",
        extra={"request_id": request_id},
    )
    return response


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Invalid request body for {request.url.path}: {exc.errors()}")
    return error_response(500, "Invalid request body")


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error(f"Unhandled error in {request.url.path}: {exc}", exc_info=exc)
    return error_response(500, "Failed to generate recipe")


@app.post("/generate-recipe")
async def generate_recipe_endpoint(
    payload: GenerateRecipeRequest,
    client: ChatClient = Depends(get_generation_client),
):
    try:
        recipe = await generate_recipe(
            payload.ingredients,
            payload.dietary_restrictions,
            payload.custom_prompt,
            client,
        )
    except NoInputError as e:
        return error_response(500, str(e))
    except UpstreamError as e:
        # Diagnostics stay in the logs
        logger.error(f"Error in generate-recipe: {e}", exc_info=True)
        return error_response(500, "Failed to generate recipe")

    return GenerateRecipeResponse(recipe=recipe).model_dump(mode="json", by_alias=True)


@app.get("/catalog/ingredients")
async def list_ingredients(
    q: Optional[str] = None,
    store: CatalogStore = Depends(get_catalog_store),
):
    try:
        catalog = Catalog(ingredients=await store.list_ingredients())
    except CatalogUnavailableError as e:
        return error_response(502, str(e))
    items = catalog.search_ingredients(q) if q else catalog.ingredients
    return {"ingredients": [ing.model_dump() for ing in items]}


@app.get("/catalog/dietary-restrictions")
async def list_dietary_restrictions(store: CatalogStore = Depends(get_catalog_store)):
    try:
        restrictions = await store.list_dietary_restrictions()
    except CatalogUnavailableError as e:
        return error_response(502, str(e))
    return {"dietary_restrictions": [diet.model_dump() for diet in restrictions]}


@app.get("/health")
async def health():
    return {"status": "ok", "model": config.OPENAI_MODEL}


if __name__ == "__main__":
    logger.info(f"Starting Recipe Generator API on port {config.PORT}")
    logger.info(f"Generation model: {config.OPENAI_MODEL}")
    logger.info(f"API docs available at: http://localhost:{config.PORT}/docs")
    uvicorn.run(app, host="0.0.0.0", port=config.PORT)
