from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional


class ProfileFields(BaseModel):
    """Editable profile fields. Aliases are the user_profiles column names.

    The field set is the write whitelist: unknown keys are ignored on construction.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    first_name: str = Field("", alias="firstname")
    last_name: str = Field("", alias="lastname")
    bio: str = ""
    avatar_url: str = Field("", alias="pfp_url")
    skills: str = ""  # comma-delimited, kept as raw text
    availability: bool = False
    total_jobs_completed: int = Field(0, ge=0)
    rating: Optional[float] = Field(0.0, alias="ratings")  # None means no rating yet

    @field_validator("first_name", "last_name", "bio", "avatar_url", "skills", mode="before")
    @classmethod
    def _null_text(cls, value):
        return "" if value is None else value

    @field_validator("availability", mode="before")
    @classmethod
    def _null_availability(cls, value):
        return False if value is None else value

    @field_validator("total_jobs_completed", mode="before")
    @classmethod
    def _null_jobs(cls, value):
        return 0 if value is None else value


class ProfileChanges(ProfileFields):
    """Request body for saving the caller's own profile; the id comes from the token."""


class ProfileUpdate(ProfileFields):
    """Save payload: id is the external identity string, normalized at write time."""

    id: str


class ProfileRecord(ProfileFields):
    """A stored profile row."""

    id: int = Field(ge=0)


class ProfileView(ProfileRecord):
    exists: bool = True


class LookupStatus(str, Enum):
    FOUND = "found"
    ABSENT = "absent"
    FAILED = "failed"


class ProfileLookup(BaseModel):
    status: LookupStatus
    profile: Optional[ProfileRecord] = None
    error: Optional[str] = None

    @classmethod
    def found(cls, profile: ProfileRecord) -> "ProfileLookup":
        return cls(status=LookupStatus.FOUND, profile=profile)

    @classmethod
    def absent(cls) -> "ProfileLookup":
        return cls(status=LookupStatus.ABSENT)

    @classmethod
    def failed(cls, error: str) -> "ProfileLookup":
        return cls(status=LookupStatus.FAILED, error=error)
