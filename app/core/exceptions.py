"""Domain errors raised by the profile synchronization layer."""

from typing import Optional


class ProfileSyncError(Exception):
    """Base class for profile synchronization failures."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidIdentityError(ProfileSyncError):
    """The external identity contains no digits, so no storage key can be derived."""

    def __init__(self, external_id):
        self.external_id = external_id
        super().__init__(f"Identity {external_id!r} does not contain any digits")


class PersistenceError(ProfileSyncError):
    """The storage backend rejected a read or write."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.code = code
        super().__init__(message)


class ProfileUnavailableError(ProfileSyncError):
    """A stored profile could not be read; distinct from the profile not existing yet."""
