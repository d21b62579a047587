# src/app/deps.py
from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from supabase import Client, create_client

from src.app.config import settings
from src.app.domain.models import Viewer
from src.app.infra.db.base import FavoritesRepository, RecipeRepository, UserRepository
from src.app.infra.db.supabase_recipes_repo import (
    SupabaseFavoritesRepository,
    SupabaseRecipeRepository,
    SupabaseUserRepository,
)
from src.app.services.favorites_service import FavoritesService
from src.app.services.user_service import UserService

_client: Client | None = None


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(str(settings.SUPABASE_URL),
                                settings.SUPABASE_SERVICE_ROLE_KEY)
    return _client


def get_recipe_repository(supa: Client = Depends(get_supabase)) -> RecipeRepository:
    return SupabaseRecipeRepository(supa, table_name=settings.RECIPES_TABLE)


def get_favorites_repository(supa: Client = Depends(get_supabase)) -> FavoritesRepository:
    return SupabaseFavoritesRepository(supa, table_name=settings.FAVORITES_TABLE)


def get_user_repository(supa: Client = Depends(get_supabase)) -> UserRepository:
    return SupabaseUserRepository(supa, table_name=settings.PROFILES_TABLE)


def get_favorites_service(
    repo: FavoritesRepository = Depends(get_favorites_repository),
) -> FavoritesService:
    return FavoritesService(repo)


def get_user_service(repo: UserRepository = Depends(get_user_repository)) -> UserService:
    return UserService(repo, default_role=settings.DEFAULT_USER_ROLE)


auth_scheme = HTTPBearer(auto_error=False)


class CurrentUser(BaseModel):
    id: str
    email: str | None = None
    name: str | None = None
    role: str | None = None

    def as_viewer(self) -> Viewer:
        return Viewer(id=self.id, role=self.role)


async def get_current_user(
    cred: HTTPAuthorizationCredentials | None = Depends(auth_scheme),
    supa: Client = Depends(get_supabase),
    users: UserService = Depends(get_user_service),
) -> CurrentUser:
    """
    Validate a Supabase access token (Authorization: Bearer <token>) and
    resolve the user's role from their profile, registering users seen
    for the first time.
    """
    if cred is None or cred.scheme.lower() != "bearer":
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token")

    token = cred.credentials
    try:
        res = supa.auth.get_user(token)
        user = res.user
        if not user:
            raise HTTPException(status_code=401, detail="Invalid token")
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=401, detail="Invalid/expired token")

    name = None
    meta = getattr(user, "user_metadata", None) or {}
    if isinstance(meta, dict):
        name = meta.get("name")

    profile = users.get_profile(str(user.id))
    if profile is None:
        profile = users.register_user(str(user.id), email=user.email, name=name)
    role = profile.role or settings.DEFAULT_USER_ROLE
    role = getattr(role, "value", role)

    return CurrentUser(id=str(user.id), email=user.email, name=name, role=str(role))


def get_viewer(user: CurrentUser = Depends(get_current_user)) -> Viewer:
    return user.as_viewer()
