"""Pytest fixtures for unit tests."""

import json
from typing import Any

import pytest

from fakes import VALID_RECIPE


@pytest.fixture
def valid_recipe() -> dict[str, Any]:
    return dict(VALID_RECIPE)


@pytest.fixture
def valid_recipe_json() -> str:
    return json.dumps(VALID_RECIPE)
