import logging
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi_users.exceptions import InvalidPasswordException, UserAlreadyExists
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import UserManager, get_user_manager
from core.permissions import MANAGE_USERS, ROLE_ADMIN, Capability, current_capability, require_permission
from db.database import get_async_session
from db.users import User
from schemas.users import UserCreate, UserMe, UserRead, UserRoleUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=UserMe)
async def read_me(cap: Capability = Depends(current_capability)):
    return UserMe(**cap.user.to_schema, permissions=sorted(cap.permissions))


@router.get("/", response_model=List[UserRead])
async def list_users(
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(MANAGE_USERS)),
):
    res = await db.execute(select(User).order_by(func.lower(User.email).asc()))
    return [UserRead(**u.to_schema) for u in res.scalars().all()]


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(
    payload: UserCreate,
    user_manager: UserManager = Depends(get_user_manager),
    cap: Capability = Depends(require_permission(MANAGE_USERS)),
):
    try:
        payload = UserCreate(**{**payload.model_dump(), "is_superuser": payload.role == ROLE_ADMIN})
        user = await user_manager.create(payload, safe=False)
    except UserAlreadyExists:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="User already exists")
    except InvalidPasswordException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.reason)

    logger.info("User %s created user %s with role %s", cap.user.id, user.id, user.role)
    return UserRead(**user.to_schema)


@router.patch("/{user_id}/role", response_model=UserRead)
async def update_user_role(
    user_id: UUID,
    payload: UserRoleUpdate,
    db: AsyncSession = Depends(get_async_session),
    cap: Capability = Depends(require_permission(MANAGE_USERS)),
):
    res = await db.execute(select(User).where(User.id == user_id))
    user = res.scalar_one_or_none()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    previous_role = user.role
    if previous_role == ROLE_ADMIN and payload.role != ROLE_ADMIN:
        admins = await db.execute(
            select(func.count()).select_from(User).where(User.role == ROLE_ADMIN, User.is_active.is_(True))
        )
        if admins.scalar_one() <= 1:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Cannot demote the last admin")

    user.role = payload.role
    user.is_superuser = payload.role == ROLE_ADMIN
    await db.commit()
    await db.refresh(user)
    logger.info("User %s changed role of %s: %s -> %s", cap.user.id, user.id, previous_role, user.role)
    return UserRead(**user.to_schema)
