# app/domains/usr/schemas.py

"""
'usr' 도메인 (사용자 및 인증)의 API 데이터 전송 객체(DTO)를 정의하는 모듈입니다.
"""

import uuid
from typing import Optional
from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from app.core.responses import APIModel
from . import models as usr_models


# =============================================================================
# 1. 사용자 (User) 스키마
# =============================================================================
class UserBase(APIModel):
    """사용자 정보의 기본 필드를 정의하는 스키마"""
    email: EmailStr = Field(..., max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    organization_id: uuid.UUID


class UserCreate(UserBase):
    """사용자 생성을 위한 스키마 (관리자 생성 스크립트 등 내부용)"""
    password: str = Field(..., min_length=8)
    role: usr_models.UserRole = usr_models.UserRole.USER
    is_active: bool = True


class UserRead(UserBase):
    """
    사용자 정보 조회 스키마.
    비밀번호 해시값 등 민감한 정보는 제외됩니다.
    """
    id: uuid.UUID
    role: usr_models.UserRole
    is_active: bool
    created_at: Optional[datetime] = Field(None, description="레코드 생성 일시")
    updated_at: Optional[datetime] = Field(None, description="레코드 마지막 업데이트 일시")


# =============================================================================
# 2. 인증 (Auth) 요청/응답 스키마
# =============================================================================
class LoginRequest(APIModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class RegisterRequest(UserBase):
    """공개 회원가입 요청. 역할은 항상 USER로 생성됩니다."""
    password: str = Field(..., min_length=8)

    @field_validator("first_name", "last_name")
    @classmethod
    def strip_names(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class ChangePasswordRequest(APIModel):
    old_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8)


class AuthResponse(APIModel):
    """로그인/회원가입 응답: JWT와 사용자 정보"""
    token: str
    user: UserRead


class MessageResponse(APIModel):
    message: str
