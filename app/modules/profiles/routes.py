from fastapi import APIRouter, Depends, HTTPException, status
from app.core.dependencies import get_current_identity, get_current_token, get_profile_service
from app.core.exceptions import InvalidIdentityError, PersistenceError, ProfileUnavailableError
from app.modules.auth.schemas import AuthIdentity
from app.modules.profiles.schemas import ProfileChanges, ProfileRecord, ProfileView
from app.modules.profiles.service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileView)
async def get_my_profile(
    token: str = Depends(get_current_token),
    identity: AuthIdentity = Depends(get_current_identity),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the caller's profile, or defaults seeded from the auth provider when none exists"""
    try:
        return service.load_profile(token, identity)
    except InvalidIdentityError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    except ProfileUnavailableError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=f"Couldn't load profile: {e.message}")


@router.put("/me", response_model=ProfileRecord)
async def save_my_profile(
    changes: ProfileChanges,
    token: str = Depends(get_current_token),
    identity: AuthIdentity = Depends(get_current_identity),
    service: ProfileService = Depends(get_profile_service)
):
    """Replace the caller's profile; omitted fields are reset to their defaults"""
    try:
        return service.save_profile(token, identity, changes)
    except InvalidIdentityError as e:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=e.message)
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Error updating profile: {e.message}")
