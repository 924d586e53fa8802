"""Pytest configuration and fixtures for integration tests.

Loads .env and skips the whole directory unless RUN_LIVE_TESTS=true, since
these tests call the public TheMealDB API.
"""

import os
from pathlib import Path

import pytest
import pytest_asyncio
from dotenv import load_dotenv


def pytest_configure(config):
    """Load environment variables from .env before collection."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: live tests call TheMealDB and need network access")
    print(f"Environment loaded from: {env_path}")
    print(f"  - RUN_LIVE_TESTS: {os.getenv('RUN_LIVE_TESTS', 'false')}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def require_live_tests():
    """Skip unless live tests were explicitly enabled."""
    if os.getenv("RUN_LIVE_TESTS", "false").lower() != "true":
        pytest.skip("Live tests skipped. Set RUN_LIVE_TESTS=true to run them.", allow_module_level=True)


@pytest_asyncio.fixture
async def live_client():
    from recipe_ideas.clients.mealdb import MealDBClient

    async with MealDBClient(timeout_seconds=15) as client:
        yield client
