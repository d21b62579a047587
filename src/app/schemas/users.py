from __future__ import annotations

from typing import Optional

from pydantic import BaseModel

from src.app.domain.models import Role


class UserSummary(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    isAdmin: bool = False
    createdAt: Optional[str] = None


class RoleUpdate(BaseModel):
    role: Role


class MeResponse(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    isAdmin: bool = False
    canCreateVersion: bool = False
