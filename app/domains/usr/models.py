# app/domains/usr/models.py

"""
'usr' 도메인의 데이터베이스 ORM 모델을 정의하는 모듈입니다.

이 모듈은 시스템 사용자(users) 테이블에 대한 SQLModel 클래스와 사용자 역할 Enum을 포함합니다.
사용자는 조직(organization_id) 단위로 묶이며, 재고 데이터도 같은 조직 단위로 분리됩니다.
"""

import uuid
from enum import Enum
from typing import Optional
from datetime import datetime, UTC

from sqlmodel import Field, SQLModel, Column
from sqlalchemy.sql import func
from sqlalchemy.types import TIMESTAMP


# =============================================================================
# 사용자 역할(RBAC)
# =============================================================================
class UserRole(str, Enum):
    """
    사용자 역할을 정의하는 문자열 Enum 클래스입니다.
    JWT 클레임과 API 응답에는 값('ADMIN' 등)이 그대로 사용됩니다.
    """
    ADMIN = "ADMIN"      # 품목/카테고리 관리, 단가 조회 가능
    MANAGER = "MANAGER"
    USER = "USER"


# =============================================================================
# users 테이블 모델
# =============================================================================
class UserBase(SQLModel):
    """
    users 테이블의 기본 속성을 정의하는 SQLModel Base 클래스입니다.
    """
    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True, description="사용자 고유 ID")
    organization_id: uuid.UUID = Field(index=True, description="소속 조직 ID")
    email: str = Field(max_length=255, sa_column_kwargs={"unique": True}, description="로그인 이메일")
    password_hash: str = Field(max_length=255, description="해싱된 비밀번호")
    first_name: str = Field(max_length=100, description="이름")
    last_name: str = Field(max_length=100, description="성")
    role: UserRole = Field(default=UserRole.USER, description="사용자 역할 (권한)")
    is_active: bool = Field(default=True, description="계정 활성 여부")

    created_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now()),
        description="레코드 생성 일시"
    )
    updated_at: Optional[datetime] = Field(
        default_factory=lambda: datetime.now(UTC),
        sa_column=Column(TIMESTAMP(timezone=True), server_default=func.now(), onupdate=lambda: datetime.now(UTC)),
        description="레코드 마지막 업데이트 일시"
    )


class User(UserBase, table=True):
    """
    users 테이블에 매핑되는 SQLModel ORM 클래스입니다.
    """
    __tablename__ = "users"
