"""Integration tests for the profile endpoints."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.config.settings import Settings
from app.database.supabase_client import get_supabase, get_supabase_factory
from app.main import create_app
from tests.fakes import FakeSupabase, ScopedClients

TOKEN = "clerk-session-token"
HEADERS = {"Authorization": f"Bearer {TOKEN}"}


def _build_app(supabase: FakeSupabase, scoped: ScopedClients, **overrides) -> FastAPI:
    app = create_app(Settings(_env_file=None, **overrides))
    app.dependency_overrides[get_supabase] = lambda: supabase
    app.dependency_overrides[get_supabase_factory] = lambda: scoped
    return app


@pytest.fixture
def scoped(supabase: FakeSupabase) -> ScopedClients:
    return ScopedClients(supabase)


@pytest.fixture
def client(supabase: FakeSupabase, scoped: ScopedClients):
    supabase.auth.add_user(TOKEN, "user_2f9", first_name="Jane", last_name="Doe", image_url="http://img/jane.png")
    with TestClient(_build_app(supabase, scoped)) as c:
        yield c


class TestGetMyProfile:
    def test_requires_bearer_token(self, client: TestClient) -> None:
        response = client.get("/api/v1/profiles/me")
        assert response.status_code == 401

    def test_unknown_token_is_unauthorized(self, client: TestClient) -> None:
        response = client.get("/api/v1/profiles/me", headers={"Authorization": "Bearer nope"})
        assert response.status_code == 401

    def test_first_visit_returns_seeded_defaults(self, client: TestClient) -> None:
        response = client.get("/api/v1/profiles/me", headers=HEADERS)

        assert response.status_code == 200
        body = response.json()
        assert body["exists"] is False
        assert body["id"] == 29
        assert body["firstname"] == "Jane"
        assert body["lastname"] == "Doe"
        assert body["pfp_url"] == "http://img/jane.png"
        assert body["availability"] is False

    def test_reads_with_token_scoped_client(self, client: TestClient, scoped: ScopedClients) -> None:
        client.get("/api/v1/profiles/me", headers=HEADERS)

        assert scoped.tokens == [TOKEN]
        assert scoped.released == 1

    def test_backend_failure_is_service_unavailable(self, client: TestClient, supabase: FakeSupabase) -> None:
        supabase.error = APIError({"message": "upstream timeout", "code": "57014", "details": None, "hint": None})

        response = client.get("/api/v1/profiles/me", headers=HEADERS)

        assert response.status_code == 503
        assert "upstream timeout" in response.json()["detail"]

    def test_identity_without_digits_is_rejected(self, client: TestClient, supabase: FakeSupabase) -> None:
        supabase.auth.add_user("anon-token", "anonymous")

        response = client.get("/api/v1/profiles/me", headers={"Authorization": "Bearer anon-token"})

        assert response.status_code == 422


class TestSaveMyProfile:
    def test_save_then_fetch(self, client: TestClient) -> None:
        payload = {
            "firstname": "A",
            "lastname": "B",
            "bio": "hello",
            "pfp_url": "http://img/a.png",
            "skills": "react,python",
            "availability": True,
            "total_jobs_completed": 2,
            "ratings": 4.0,
        }

        saved = client.put("/api/v1/profiles/me", json=payload, headers=HEADERS)
        fetched = client.get("/api/v1/profiles/me", headers=HEADERS)

        assert saved.status_code == 200
        assert saved.json() == {"id": 29, **payload}
        assert fetched.json() == {"id": 29, "exists": True, **payload}

    def test_omitted_bio_is_erased(self, client: TestClient) -> None:
        client.put("/api/v1/profiles/me", json={"firstname": "A", "bio": "hello"}, headers=HEADERS)
        client.put("/api/v1/profiles/me", json={"firstname": "A"}, headers=HEADERS)

        assert client.get("/api/v1/profiles/me", headers=HEADERS).json()["bio"] == ""

    def test_unknown_fields_and_foreign_id_are_ignored(self, client: TestClient, supabase: FakeSupabase) -> None:
        response = client.put(
            "/api/v1/profiles/me",
            json={"firstname": "A", "id": "user_12345", "role": "admin"},
            headers=HEADERS,
        )

        assert response.status_code == 200
        assert response.json()["id"] == 29
        assert list(supabase.rows()) == [29]
        assert "role" not in supabase.rows()[29]

    def test_negative_job_count_is_invalid(self, client: TestClient) -> None:
        response = client.put("/api/v1/profiles/me", json={"total_jobs_completed": -3}, headers=HEADERS)
        assert response.status_code == 422

    def test_persistence_error_is_bad_gateway(self, client: TestClient, supabase: FakeSupabase) -> None:
        supabase.error = APIError({"message": "new row violates row-level security policy", "code": "42501", "details": None, "hint": None})

        response = client.put("/api/v1/profiles/me", json={"firstname": "A"}, headers=HEADERS)

        assert response.status_code == 502
        assert "row-level security" in response.json()["detail"]


class TestProbes:
    def test_health(self, client: TestClient) -> None:
        assert client.get("/health").json() == {"status": "healthy"}

    def test_ready(self, client: TestClient) -> None:
        assert client.get("/ready").json() == {"status": "ready"}

    def test_security_headers(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"


class TestRateLimit:
    def test_requests_over_the_limit_are_rejected(self, supabase: FakeSupabase, scoped: ScopedClients) -> None:
        supabase.auth.add_user(TOKEN, "user_2f9")
        with TestClient(_build_app(supabase, scoped, rate_limit="2/minute")) as c:
            statuses = [c.get("/api/v1/profiles/me", headers=HEADERS).status_code for _ in range(3)]

        assert statuses == [200, 200, 429]

    def test_limit_applies_to_root(self, supabase: FakeSupabase, scoped: ScopedClients) -> None:
        with TestClient(_build_app(supabase, scoped, rate_limit="2/minute")) as c:
            statuses = [c.get("/").status_code for _ in range(3)]

        assert statuses == [200, 200, 429]

    def test_probes_are_exempt(self, supabase: FakeSupabase, scoped: ScopedClients) -> None:
        with TestClient(_build_app(supabase, scoped, rate_limit="1/minute")) as c:
            health = [c.get("/health").status_code for _ in range(3)]
            ready = [c.get("/ready").status_code for _ in range(3)]

        assert health == [200, 200, 200]
        assert ready == [200, 200, 200]
