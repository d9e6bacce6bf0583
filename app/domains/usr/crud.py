# app/domains/usr/crud.py

"""
'usr' 도메인의 CRUD 작업을 담당하는 모듈입니다.
사용자 생성(비밀번호 해싱, 이메일 중복 검사), 인증, 비밀번호 변경 로직을 포함합니다.
"""

import logging
from typing import Optional

from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import status

from app.core.crud_base import CRUDBase
from app.core.exceptions import AppError, ErrorCode, conflict
from app.core.security import get_password_hash, verify_password
from . import models as usr_models
from . import schemas as usr_schemas

logger = logging.getLogger(__name__)


class CRUDUser(CRUDBase[usr_models.User, usr_schemas.UserCreate, usr_schemas.UserCreate]):
    def __init__(self):
        super().__init__(model=usr_models.User)

    async def get_by_email(self, db: AsyncSession, *, email: str) -> Optional[usr_models.User]:
        """이메일로 사용자를 조회합니다. 이메일은 소문자로 정규화하여 비교합니다."""
        return await self.get_by_attribute(db, attribute="email", value=email.strip().lower())

    async def create(self, db: AsyncSession, *, obj_in: usr_schemas.UserCreate) -> usr_models.User:
        """새로운 사용자를 생성하며 비밀번호를 해싱하고 이메일 중복을 검사합니다."""
        if await self.get_by_email(db, email=obj_in.email):
            raise conflict(ErrorCode.EMAIL_EXISTS, "Email already registered")

        user_data = obj_in.model_dump(exclude={"password"})
        user_data["email"] = user_data["email"].strip().lower()
        db_user = usr_models.User(**user_data, password_hash=get_password_hash(obj_in.password))

        db.add(db_user)
        await db.commit()
        await db.refresh(db_user)
        logger.info("사용자 생성: %s (role=%s)", db_user.email, db_user.role)
        return db_user

    async def register(self, db: AsyncSession, *, obj_in: usr_schemas.RegisterRequest) -> usr_models.User:
        """공개 회원가입. 역할은 항상 USER입니다."""
        user_in = usr_schemas.UserCreate(
            **obj_in.model_dump(),
            role=usr_models.UserRole.USER,
        )
        return await self.create(db, obj_in=user_in)

    async def authenticate(self, db: AsyncSession, *, email: str, password: str) -> usr_models.User:
        """
        이메일과 비밀번호로 사용자를 인증합니다.
        존재하지 않는 사용자와 잘못된 비밀번호는 같은 오류로 응답합니다.
        """
        user = await self.get_by_email(db, email=email)
        if not user or not verify_password(password, user.password_hash):
            logger.info("로그인 실패: %s", email)
            raise AppError(status.HTTP_401_UNAUTHORIZED, ErrorCode.INVALID_CREDENTIALS, "Invalid email or password")
        if not user.is_active:
            raise AppError(status.HTTP_403_FORBIDDEN, ErrorCode.USER_INACTIVE, "User account is inactive")
        return user

    async def change_password(
        self, db: AsyncSession, *, db_obj: usr_models.User, old_password: str, new_password: str
    ) -> usr_models.User:
        if not verify_password(old_password, db_obj.password_hash):
            raise AppError(status.HTTP_401_UNAUTHORIZED, ErrorCode.INVALID_PASSWORD, "Invalid old password")
        return await self.set_password(db, db_obj=db_obj, new_password=new_password)

    async def set_password(self, db: AsyncSession, *, db_obj: usr_models.User, new_password: str) -> usr_models.User:
        """검증 없이 비밀번호를 교체합니다 (관리 스크립트용)."""
        db_obj.password_hash = get_password_hash(new_password)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        logger.info("비밀번호 변경: %s", db_obj.email)
        return db_obj


user = CRUDUser()
