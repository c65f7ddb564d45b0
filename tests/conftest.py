"""Shared test fixtures for the invoicing test suite."""

import pytest
from pathlib import Path
from uuid import UUID

from dotenv import load_dotenv

# Load .env before anything reads env vars; the suite itself needs none
load_dotenv(Path(__file__).parent.parent / ".env", override=True)

from clients.vault_client import reset_vault_cache
from utils.user_context import user_context, clear_current_user_id

from factories import TEST_USER_ID

reset_vault_cache()


# =============================================================================
# USER CONTEXT FIXTURES
# =============================================================================


@pytest.fixture(autouse=True)
def reset_user_context():
    """Ensure clean user context before and after each test."""
    clear_current_user_id()
    yield
    clear_current_user_id()


@pytest.fixture
def test_user_id() -> UUID:
    """The primary test user's ID."""
    return TEST_USER_ID


@pytest.fixture
def as_test_user(test_user_id):
    """Sets the primary test user's context for the test."""
    with user_context(test_user_id):
        yield test_user_id
