"""Pytest configuration and fixtures."""

import pytest

from app.modules.auth.service import clear_identity_cache
from app.modules.profiles.repository import ProfileRepository
from tests.fakes import PROFILES_TABLE, FakeSupabase


@pytest.fixture(autouse=True)
def _clear_identity_cache():
    clear_identity_cache()
    yield
    clear_identity_cache()


@pytest.fixture
def supabase() -> FakeSupabase:
    return FakeSupabase()


@pytest.fixture
def repository(supabase: FakeSupabase) -> ProfileRepository:
    return ProfileRepository(supabase, table=PROFILES_TABLE)
