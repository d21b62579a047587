# src/app/routers/users.py
from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException

from src.app.deps import get_user_service, get_viewer
from src.app.domain.errors import LastAdminError, PermissionDeniedError, UserNotFoundError
from src.app.domain.models import UserProfile, Viewer
from src.app.schemas.users import RoleUpdate, UserSummary
from src.app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["users"])


def _iso(value: Any) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _summary(profile: UserProfile) -> UserSummary:
    return UserSummary(
        id=profile.id,
        email=profile.email,
        name=profile.name,
        role=str(getattr(profile.role, "value", profile.role)) if profile.role else None,
        isAdmin=profile.is_admin,
        createdAt=_iso(profile.created_at),
    )


@router.get("/", response_model=list[UserSummary])
async def list_users(
    viewer: Viewer = Depends(get_viewer),
    users: UserService = Depends(get_user_service),
) -> list[UserSummary]:
    try:
        profiles = users.list_users(viewer)
    except PermissionDeniedError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    return [_summary(profile) for profile in profiles]


@router.patch("/{user_id}/role", response_model=UserSummary)
async def update_user_role(
    user_id: str,
    payload: RoleUpdate,
    viewer: Viewer = Depends(get_viewer),
    users: UserService = Depends(get_user_service),
) -> UserSummary:
    try:
        profile = users.update_role(viewer, user_id, payload.role)
    except PermissionDeniedError as exc:
        raise HTTPException(status_code=403, detail=str(exc))
    except UserNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except LastAdminError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    return _summary(profile)
