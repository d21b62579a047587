from __future__ import annotations
from fastapi import APIRouter, Depends
from src.app.deps import get_current_user, CurrentUser
from src.app.schemas.users import MeResponse
from src.app.services.capabilities import can_create_version, is_admin

router = APIRouter(prefix="/auth", tags=["auth"])

@router.get("/me", response_model=MeResponse)
async def me(user: CurrentUser = Depends(get_current_user)) -> MeResponse:
    viewer = user.as_viewer()
    return MeResponse(
        id=user.id,
        email=user.email,
        name=user.name,
        role=user.role,
        isAdmin=is_admin(viewer),
        canCreateVersion=can_create_version(viewer),
    )
