"""Unit tests for the HTTP API.

Generation client and catalog store are replaced through FastAPI dependency
overrides, so no network calls are made.
"""

from unittest.mock import AsyncMock

import pytest
from fastapi.testclient import TestClient

from app import CORS_HEADERS, app, get_catalog_store, get_generation_client
from fakes import FakeResponse, FakeSession
from recipe_generator.clients.catalog import InMemoryCatalogStore, SupabaseCatalogStore
from recipe_generator.utils.errors import UpstreamHttpError, UpstreamTimeoutError


@pytest.fixture
def chat_client():
    return AsyncMock()


@pytest.fixture
def client(chat_client):
    app.dependency_overrides[get_generation_client] = lambda: chat_client
    app.dependency_overrides[get_catalog_store] = lambda: InMemoryCatalogStore()
    yield TestClient(app)
    app.dependency_overrides.clear()


def assert_cors(response):
    for name, value in CORS_HEADERS.items():
        assert response.headers[name] == value


class TestCors:
    def test_preflight(self, client):
        response = client.options("/generate-recipe")

        assert response.status_code == 200
        assert_cors(response)

    def test_headers_on_success(self, client):
        assert_cors(client.get("/health"))

    def test_request_id_header(self, client):
        first = client.get("/health").headers["X-Request-ID"]
        second = client.get("/health").headers["X-Request-ID"]

        assert len(first) == 12
        assert first != second


class TestGenerateRecipeEndpoint:
    """Test POST /generate-recipe."""

    def test_success(self, client, chat_client, valid_recipe, valid_recipe_json):
        chat_client.generate.return_value = f"```json\n{valid_recipe_json}\n```"

        response = client.post(
            "/generate-recipe",
            json={"ingredients": ["egg", "flour"], "dietaryRestrictions": [], "customPrompt": "quick breakfast"},
        )

        assert response.status_code == 200
        assert response.json() == {"recipe": valid_recipe}
        assert_cors(response)

    def test_degraded_recipe_is_still_200(self, client, chat_client):
        chat_client.generate.return_value = "not json at all"

        response = client.post("/generate-recipe", json={"ingredients": ["egg"]})

        assert response.status_code == 200
        recipe = response.json()["recipe"]
        assert recipe["title"] == "Generated Recipe"
        assert recipe["ingredients"] == ["egg"]
        assert recipe["prepTime"] == 15

    def test_no_input(self, client, chat_client):
        response = client.post("/generate-recipe", json={"ingredients": [], "customPrompt": "  "})

        assert response.status_code == 500
        assert response.json()["error"] == "Please select some ingredients or add a custom request"
        assert "details" in response.json()
        chat_client.generate.assert_not_called()
        assert_cors(response)

    @pytest.mark.parametrize("body", ('"just a string"', "not json", '{"ingredients": "egg"}'))
    def test_invalid_body(self, client, body):
        response = client.post("/generate-recipe", content=body, headers={"Content-Type": "application/json"})

        assert response.status_code == 500
        assert response.json()["error"] == "Invalid request body"
        assert "details" in response.json()
        assert_cors(response)

    @pytest.mark.parametrize("error", (UpstreamHttpError(401, "Incorrect API key provided"), UpstreamTimeoutError(30)))
    def test_upstream_failure(self, client, chat_client, error):
        chat_client.generate.side_effect = error

        response = client.post("/generate-recipe", json={"ingredients": ["egg"]})

        assert response.status_code == 500
        assert response.json() == {
            "error": "Failed to generate recipe",
            "details": "Please check the function logs for more information",
        }
        assert "Incorrect API key" not in response.text
        assert_cors(response)


class TestCatalogEndpoints:
    def test_ingredients(self, client):
        response = client.get("/catalog/ingredients")

        assert response.status_code == 200
        names = [row["name"] for row in response.json()["ingredients"]]
        assert names == sorted(names, key=str.lower)
        assert "Egg" in names

    def test_ingredient_search(self, client):
        response = client.get("/catalog/ingredients", params={"q": "TOM"})
        assert [row["name"] for row in response.json()["ingredients"]] == ["Tomato"]

    def test_dietary_restrictions(self, client):
        response = client.get("/catalog/dietary-restrictions")

        rows = response.json()["dietary_restrictions"]
        assert {"id": "diet-vegan", "name": "Vegan", "description": "No animal products"} in rows

    def test_store_failure(self, client):
        failing = SupabaseCatalogStore("https://xyz.supabase.co", "anon", session=FakeSession(FakeResponse(503, "down")))
        app.dependency_overrides[get_catalog_store] = lambda: failing

        response = client.get("/catalog/dietary-restrictions")

        assert response.status_code == 502
        assert "error" in response.json()
        assert_cors(response)

    def test_store_non_json_body(self, client):
        session = FakeSession(FakeResponse(200, "<html>gateway</html>"))
        app.dependency_overrides[get_catalog_store] = lambda: SupabaseCatalogStore("https://xyz.supabase.co", "anon", session=session)

        response = client.get("/catalog/ingredients")

        assert response.status_code == 502
        assert set(response.json()) == {"error", "details"}
        assert_cors(response)


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"


class TestUnhandledErrors:
    def test_unexpected_error_is_500_with_cors(self, chat_client):
        chat_client.generate.side_effect = RuntimeError("boom")
        app.dependency_overrides[get_generation_client] = lambda: chat_client
        try:
            response = TestClient(app, raise_server_exceptions=False).post("/generate-recipe", json={"ingredients": ["egg"]})
        finally:
            app.dependency_overrides.clear()

        assert response.status_code == 500
        assert response.json()["error"] == "Failed to generate recipe"
        assert "boom" not in response.text
        assert_cors(response)
