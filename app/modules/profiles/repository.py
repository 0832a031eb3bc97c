import logging
from contextlib import contextmanager
from supabase import Client
from postgrest.exceptions import APIError
from typing import Any, Callable, ContextManager, Iterator, Mapping, Optional, Union

from app.config import settings
from app.core.exceptions import PersistenceError
from app.modules.profiles.identity import normalize_identity
from app.modules.profiles.schemas import ProfileLookup, ProfileRecord, ProfileUpdate

logger = logging.getLogger(__name__)

# PostgREST error code for ".single()" matching zero rows
NO_ROWS_CODE = "PGRST116"


class ProfileRepository:
    """Reads and writes user_profiles rows keyed by the normalized identity.

    A missing row is a normal outcome on read. Writes are full-replace upserts of the
    whitelisted fields: anything the caller leaves out is written as its default.
    """

    def __init__(
        self,
        supabase: Client,
        client_factory: Optional[Callable[[str], ContextManager[Client]]] = None,
        table: Optional[str] = None,
    ):
        self.supabase = supabase
        self.client_factory = client_factory
        self.table = table or settings.profiles_table

    @contextmanager
    def _client(self, identity_token: Optional[str]) -> Iterator[Client]:
        """Token-scoped client for one call, released afterwards; else the injected client."""
        if identity_token and self.client_factory is not None:
            with self.client_factory(identity_token) as client:
                yield client
        else:
            yield self.supabase

    def lookup_profile(self, identity_token: Optional[str], external_id: str) -> ProfileLookup:
        """Point lookup by identity. Returns found, absent or failed; raises InvalidIdentityError."""
        profile_id = normalize_identity(external_id)
        logger.debug(f"Looking up profile {profile_id}")
        try:
            with self._client(identity_token) as client:
                result = client.table(self.table)\
                    .select("*")\
                    .eq("id", profile_id)\
                    .single()\
                    .execute()
        except APIError as e:
            if e.code == NO_ROWS_CODE:
                return ProfileLookup.absent()
            logger.error(f"Error fetching profile {profile_id}: {e.message} ({e.code})")
            return ProfileLookup.failed(e.message or str(e))
        except Exception as e:
            logger.error(f"Error fetching profile {profile_id}: {e}")
            return ProfileLookup.failed(str(e))

        if not result.data:
            return ProfileLookup.absent()
        return ProfileLookup.found(ProfileRecord(**result.data))

    def fetch_profile(self, identity_token: Optional[str], external_id: str) -> Optional[ProfileRecord]:
        """Stored profile, or None when there is none yet or it could not be read."""
        return self.lookup_profile(identity_token, external_id).profile

    def save_profile(
        self,
        identity_token: Optional[str],
        profile_data: Union[ProfileUpdate, Mapping[str, Any]],
    ) -> ProfileRecord:
        """Upsert the profile and return the committed row. Raises PersistenceError on failure."""
        if not isinstance(profile_data, ProfileUpdate):
            profile_data = ProfileUpdate(**profile_data)
        profile_id = normalize_identity(profile_data.id)
        record = ProfileRecord(**profile_data.model_dump(exclude={"id"}), id=profile_id)
        row = record.model_dump(by_alias=True)

        logger.info(f"Saving profile {profile_id}")
        try:
            with self._client(identity_token) as client:
                result = client.table(self.table)\
                    .upsert(row, on_conflict="id")\
                    .execute()
        except APIError as e:
            logger.error(f"Error saving profile {profile_id}: {e.message} ({e.code})")
            raise PersistenceError(e.message or str(e), code=e.code)
        except Exception as e:
            logger.error(f"Error saving profile {profile_id}: {e}")
            raise PersistenceError(str(e))

        if not result.data:
            raise PersistenceError(f"Upsert of profile {profile_id} returned no row")
        return ProfileRecord(**result.data[0])
