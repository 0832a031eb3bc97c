from contextlib import contextmanager
from typing import Iterator
from supabase import create_client, Client, ClientOptions
from app.config import settings


class SupabaseClient:
    _client: Client = None

    @classmethod
    def get_client(cls) -> Client:
        if cls._client is None:
            cls._client = create_client(settings.supabase_url, settings.supabase_key)
        return cls._client

    @classmethod
    @contextmanager
    def for_token(cls, token: str) -> Iterator[Client]:
        """Client that forwards the caller's identity token, so row-level security applies to them.

        Its PostgREST connection pool is closed when the block exits.
        """
        client = create_client(
            settings.supabase_url,
            settings.supabase_key,
            options=ClientOptions(headers={"Authorization": f"Bearer {token}"}),
        )
        with client.postgrest:
            yield client


def get_supabase() -> Client:
    return SupabaseClient.get_client()


def get_supabase_factory():
    return SupabaseClient.for_token
