"""Pytest configuration and fixtures for integration tests.

Loads .env from the project root and skips the whole suite when no
OPENAI_API_KEY is available.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv


def pytest_configure(config):
    """Load .env before test collection so module-level config sees it."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: Integration tests call the live chat completion API (OPENAI_API_KEY)")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip integration tests when the API key is not configured."""
    if not os.getenv("OPENAI_API_KEY"):
        pytest.skip("OPENAI_API_KEY not set in environment or .env - skipping integration tests")
