"""
사용자 API
인증은 외부 협력자 담당, 여기서는 레코드 조회/생성만 제공
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from brochure.api.deps import get_db
from brochure.core.exceptions import ConflictError, ResourceNotFoundError
from brochure.models.brochure_models import UserCreate, UserRead
from brochure.repositories import UserRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/by-username/{username}", response_model=UserRead)
async def get_user_by_username(username: str, db: AsyncSession = Depends(get_db)):
    """사용자명으로 조회"""
    user = await UserRepository(db).get_by_username(username)
    if user is None:
        raise ResourceNotFoundError("사용자", username)
    return user


@router.get("/{user_id}", response_model=UserRead)
async def get_user(user_id: int, db: AsyncSession = Depends(get_db)):
    user = await UserRepository(db).get(user_id)
    if user is None:
        raise ResourceNotFoundError("사용자", user_id)
    return user


@router.post("/", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def create_user(request: UserCreate, db: AsyncSession = Depends(get_db)):
    """사용자 생성 (사용자명 중복 시 409)"""
    repository = UserRepository(db)
    if await repository.get_by_username(request.username) is not None:
        raise ConflictError(f"이미 존재하는 사용자명입니다: {request.username}")

    user = await repository.create_user(request.username, request.password, request.name)
    logger.info(f"사용자 생성: {user.id}")
    return user
