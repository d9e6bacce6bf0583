# app/domains/usr/routers.py

"""
'usr' 도메인 (인증 및 사용자 프로필)과 관련된 API 엔드포인트를 정의하는 모듈입니다.
"""

from fastapi import APIRouter, Depends, status
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core import dependencies as deps
from app.core.responses import DataResponse

from . import crud as usr_crud
from . import models as usr_models
from . import schemas as usr_schemas


router = APIRouter(
    tags=["Authentication (인증)"],
    responses={401: {"description": "Not authenticated"}},
)


# =============================================================================
# 1. 공개 인증 엔드포인트
# =============================================================================
@router.post("/auth/login", response_model=DataResponse[usr_schemas.AuthResponse], summary="로그인 및 Access Token 획득")
async def login(
    login_in: usr_schemas.LoginRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    user = await usr_crud.user.authenticate(db, email=login_in.email, password=login_in.password)
    return {"data": {"token": deps.create_user_token(user), "user": user}}


@router.post(
    "/auth/register",
    response_model=DataResponse[usr_schemas.AuthResponse],
    status_code=status.HTTP_201_CREATED,
    summary="회원가입",
)
async def register(
    register_in: usr_schemas.RegisterRequest,
    db: AsyncSession = Depends(deps.get_db_session),
):
    user = await usr_crud.user.register(db, obj_in=register_in)
    return {"data": {"token": deps.create_user_token(user), "user": user}}


# =============================================================================
# 2. 인증된 사용자 엔드포인트
# =============================================================================
@router.get("/auth/profile", response_model=DataResponse[usr_schemas.UserRead], summary="현재 사용자 정보 조회")
async def read_profile(current_user: usr_models.User = Depends(deps.get_current_active_user)):
    return {"data": current_user}


@router.post(
    "/auth/change-password",
    response_model=DataResponse[usr_schemas.MessageResponse],
    summary="비밀번호 변경",
)
async def change_password(
    password_in: usr_schemas.ChangePasswordRequest,
    db: AsyncSession = Depends(deps.get_db_session),
    current_user: usr_models.User = Depends(deps.get_current_active_user),
):
    # 인증 의존성과 다른 세션일 수 있으므로 현재 세션에서 다시 조회합니다.
    db_user = await usr_crud.user.get(db, current_user.id)
    await usr_crud.user.change_password(
        db,
        db_obj=db_user,
        old_password=password_in.old_password,
        new_password=password_in.new_password,
    )
    return {"data": {"message": "Password changed successfully"}}
