import logging

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi_users.exceptions import InvalidPasswordException
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.auth import UserManager, get_user_manager
from core.permissions import ROLE_ADMIN
from db.database import get_async_session
from db.users import User
from schemas.users import SetupRequest, SetupStatus, UserCreate, UserRead

logger = logging.getLogger(__name__)

router = APIRouter()


async def _has_users(db: AsyncSession) -> bool:
    res = await db.execute(select(func.count()).select_from(User))
    return res.scalar_one() > 0


@router.get("/", response_model=SetupStatus)
async def get_setup_status(db: AsyncSession = Depends(get_async_session)):
    """Setup is needed until the first account exists"""
    return SetupStatus(setup_needed=not await _has_users(db))


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_first_admin(
    payload: SetupRequest,
    db: AsyncSession = Depends(get_async_session),
    user_manager: UserManager = Depends(get_user_manager),
):
    if await _has_users(db):
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Setup already completed")

    try:
        user = await user_manager.create(
            UserCreate(
                email=payload.email,
                password=payload.password,
                name=payload.name,
                role=ROLE_ADMIN,
                is_superuser=True,
            ),
            safe=False,
        )
    except InvalidPasswordException as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.reason)

    logger.info("Initial admin %s created", user.id)
    return UserRead(**user.to_schema)
