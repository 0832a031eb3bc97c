import logging
from typing import Optional

from app.core.exceptions import ProfileUnavailableError
from app.modules.auth.schemas import AuthIdentity
from app.modules.profiles.identity import normalize_identity
from app.modules.profiles.repository import ProfileRepository
from app.modules.profiles.schemas import (
    LookupStatus, ProfileChanges, ProfileRecord, ProfileUpdate, ProfileView
)

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, repository: ProfileRepository):
        self.repository = repository

    def default_profile(self, identity: AuthIdentity) -> ProfileRecord:
        """Profile shown to a user who has never saved one, seeded from the auth provider"""
        return ProfileRecord(
            id=normalize_identity(identity.id),
            first_name=identity.first_name or "",
            last_name=identity.last_name or "",
            avatar_url=identity.image_url or "",
        )

    def load_profile(self, identity_token: Optional[str], identity: AuthIdentity) -> ProfileView:
        """Stored profile, or seeded defaults when none exists yet.

        Raises ProfileUnavailableError when the backend failed, so a read error is never
        mistaken for a missing profile.
        """
        lookup = self.repository.lookup_profile(identity_token, identity.id)
        if lookup.status == LookupStatus.FAILED:
            raise ProfileUnavailableError(lookup.error or "Profile could not be loaded")
        if lookup.status == LookupStatus.ABSENT:
            logger.info(f"No profile for {identity.id} yet, using defaults")
            return ProfileView(**self.default_profile(identity).model_dump(), exists=False)

        profile = lookup.profile
        view = ProfileView(**profile.model_dump(), exists=True)
        if not view.avatar_url and identity.image_url:
            view.avatar_url = identity.image_url
        return view

    def save_profile(
        self,
        identity_token: Optional[str],
        identity: AuthIdentity,
        changes: ProfileChanges,
    ) -> ProfileRecord:
        """Full-replace save of the caller's own profile"""
        update = ProfileUpdate(**changes.model_dump(), id=identity.id)
        return self.repository.save_profile(identity_token, update)
