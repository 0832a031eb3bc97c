"""
Core dependencies for resolving the caller and wiring profile storage
"""

from fastapi import Depends, Security
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from app.database.supabase_client import get_supabase, get_supabase_factory
from app.modules.auth.schemas import AuthIdentity
from app.modules.auth.service import AuthService
from app.modules.profiles.repository import ProfileRepository
from app.modules.profiles.service import ProfileService
from supabase import Client

security = HTTPBearer()


def get_auth_service(supabase: Client = Depends(get_supabase)) -> AuthService:
    return AuthService(supabase)


def get_current_token(
    credentials: HTTPAuthorizationCredentials = Security(security)
) -> str:
    """Extract bearer token from Authorization header"""
    return credentials.credentials


def get_current_identity(
    token: str = Depends(get_current_token),
    auth_service: AuthService = Depends(get_auth_service)
) -> AuthIdentity:
    """Resolve the caller's identity from the bearer token"""
    return auth_service.get_current_identity(token)


def get_profile_repository(
    supabase: Client = Depends(get_supabase),
    client_factory=Depends(get_supabase_factory)
) -> ProfileRepository:
    return ProfileRepository(supabase, client_factory=client_factory)


def get_profile_service(
    repository: ProfileRepository = Depends(get_profile_repository)
) -> ProfileService:
    return ProfileService(repository)
