import hashlib
import logging
import threading
import time
from supabase import Client
from app.config.settings import settings
from app.modules.auth.schemas import AuthIdentity
from fastapi import HTTPException
from typing import Any, Dict, Optional, Tuple

logger = logging.getLogger(__name__)

# In-memory cache for get_current_identity to reduce auth calls (e.g. load then save with the same token)
_AUTH_IDENTITY_CACHE: Dict[str, Tuple[AuthIdentity, float]] = {}
_AUTH_CACHE_LOCK = threading.Lock()


def _first_present(metadata: Dict[str, Any], *keys: str) -> Optional[str]:
    for key in keys:
        value = metadata.get(key)
        if value:
            return value
    return None


def clear_identity_cache():
    with _AUTH_CACHE_LOCK:
        _AUTH_IDENTITY_CACHE.clear()


def _cached_identity(cache_key: str, now: float) -> Optional[AuthIdentity]:
    with _AUTH_CACHE_LOCK:
        entry = _AUTH_IDENTITY_CACHE.get(cache_key)
        if entry is None:
            return None
        identity, expiry = entry
        if now < expiry:
            return identity
        _AUTH_IDENTITY_CACHE.pop(cache_key, None)
        return None


def _cache_identity(cache_key: str, identity: AuthIdentity, now: float):
    with _AUTH_CACHE_LOCK:
        if len(_AUTH_IDENTITY_CACHE) >= settings.auth_cache_max_size:
            expired = [key for key, (_, expiry) in _AUTH_IDENTITY_CACHE.items() if expiry <= now]
            for key in expired:
                del _AUTH_IDENTITY_CACHE[key]
        if len(_AUTH_IDENTITY_CACHE) < settings.auth_cache_max_size:
            _AUTH_IDENTITY_CACHE[cache_key] = (identity, now + settings.auth_cache_ttl_seconds)


class AuthService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def get_current_identity(self, token: str) -> AuthIdentity:
        """Resolve a bearer token to the provider's identity. Uses short TTL cache to reduce auth API calls."""
        try:
            cache_key = hashlib.sha256(token.encode()).hexdigest()
            now = time.monotonic()
            identity = _cached_identity(cache_key, now)
            if identity is not None:
                return identity
            user_response = self.supabase.auth.get_user(jwt=token)
            if not user_response or not user_response.user:
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            user = user_response.user
            metadata = user.user_metadata or {}
            identity = AuthIdentity(
                id=user.id,
                first_name=_first_present(metadata, "first_name", "firstName"),
                last_name=_first_present(metadata, "last_name", "lastName"),
                image_url=_first_present(metadata, "image_url", "avatar_url", "picture"),
            )
            _cache_identity(cache_key, identity, now)
            return identity
        except HTTPException:
            raise
        except Exception as e:
            error_msg = str(e)
            logger.warning(f"Token resolution failed: {error_msg}")
            if "JWT" in error_msg or "expired" in error_msg.lower() or "invalid" in error_msg.lower():
                raise HTTPException(status_code=401, detail="Invalid or expired token")
            raise HTTPException(status_code=401, detail="Authentication failed")
