# app/core/security.py

"""
애플리케이션의 보안 관련 유틸리티 함수 및 의존성 주입을 정의하는 모듈입니다.

- 비밀번호 해싱 및 검증.
- JWT(JSON Web Token) 생성 및 검증. 클레임: user_id, email, organization_id, role.
- OAuth2 Bearer 스키마를 사용하여 현재 사용자 획득.
- 사용자 역할(role) 기반 권한 부여(Authorization) 검사.
"""

import logging
import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from app import API_PREFIX
from app.core.config import settings
from app.core.database import get_session
from app.core.exceptions import AppError, ErrorCode, forbidden, unauthorized
from app.domains.usr import models as usr_models
from app.domains.usr import permissions

logger = logging.getLogger(__name__)

# --- 비밀번호 해싱 설정 ---
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    일반 텍스트 비밀번호와 해싱된 비밀번호를 비교하여 일치하는지 확인합니다.
    """
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """
    주어진 비밀번호를 해싱합니다.
    """
    return pwd_context.hash(password)


# --- OAuth2 스키마 설정 ---
# Swagger UI에서 토큰 발급 경로를 안내하기 위한 설정입니다.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{API_PREFIX}/auth/login")


# --- JWT 토큰 생성 및 검증 ---
def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """
    Access Token을 생성합니다.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)


def create_user_token(user: usr_models.User) -> str:
    """사용자 정보를 클레임으로 담은 Access Token을 생성합니다."""
    return create_access_token({
        "sub": str(user.id),
        "user_id": str(user.id),
        "email": user.email,
        "organization_id": str(user.organization_id),
        "role": user.role.value if isinstance(user.role, usr_models.UserRole) else str(user.role),
    })


def decode_access_token(token: str) -> Dict[str, Any]:
    """토큰을 검증하고 클레임을 반환합니다. 실패 시 401 오류를 발생시킵니다."""
    try:
        return jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
    except JWTError as e:
        logger.info("JWT 검증 실패: %s", e)
        raise unauthorized()


async def get_current_user_from_token(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_session),
) -> usr_models.User:
    """
    JWT 토큰을 디코딩하고 검증하여 현재 사용자를 데이터베이스에서 가져옵니다.
    """
    payload = decode_access_token(token)
    raw_user_id = payload.get("user_id") or payload.get("sub")
    if raw_user_id is None:
        raise unauthorized()
    try:
        user_id = uuid.UUID(str(raw_user_id))
    except ValueError:
        raise unauthorized()

    user = await db.get(usr_models.User, user_id)
    if user is None:
        raise unauthorized()
    return user


# --- 역할 기반 권한 부여 의존성 ---

def get_current_active_user(
    current_user: usr_models.User = Depends(get_current_user_from_token),
) -> usr_models.User:
    """
    현재 인증된 활성 사용자를 반환합니다.
    계정이 비활성화된 경우 403 USER_INACTIVE를 발생시킵니다.
    """
    if not current_user.is_active:
        raise AppError(403, ErrorCode.USER_INACTIVE, "User account is inactive")
    return current_user


def get_current_admin_user(
    current_user: usr_models.User = Depends(get_current_active_user),
) -> usr_models.User:
    """
    현재 인증된 관리자 사용자를 반환합니다.
    관리자 권한이 없는 경우 403 FORBIDDEN을 발생시킵니다.
    """
    if not permissions.is_admin(current_user.role):
        logger.info("권한 거부: user=%s role=%s", current_user.id, current_user.role)
        raise forbidden()
    return current_user
