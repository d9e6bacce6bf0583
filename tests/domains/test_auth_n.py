# tests/domains/test_auth_n.py

"""
'usr' 도메인 내의 인증 관련 API 엔드포인트에 대한 통합 테스트를 정의하는 모듈입니다.
로그인, 회원가입, 프로필 조회, 비밀번호 변경을 다룹니다.
"""

import uuid

import pytest
from httpx import AsyncClient
from sqlmodel.ext.asyncio.session import AsyncSession

from app.core.security import decode_access_token, verify_password
from app.domains.usr import models as usr_models

from tests.conftest import USER_PASSWORD


# =================================================================================
# 1. 로그인
# =================================================================================
@pytest.mark.asyncio
async def test_login_success(client: AsyncClient, test_user: usr_models.User):
    """(성공) 올바른 이메일/비밀번호로 토큰과 사용자 정보를 발급"""
    response = await client.post("/api/v1/auth/login", json={"email": test_user.email, "password": USER_PASSWORD})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["email"] == test_user.email
    assert data["user"]["role"] == "USER"
    assert data["user"]["firstName"] == "Test"
    assert "passwordHash" not in data["user"]

    claims = decode_access_token(data["token"])
    assert claims["user_id"] == str(test_user.id)
    assert claims["organization_id"] == str(test_user.organization_id)
    assert claims["role"] == "USER"


@pytest.mark.asyncio
async def test_login_email_is_case_insensitive(client: AsyncClient, test_user: usr_models.User):
    response = await client.post("/api/v1/auth/login", json={"email": "USER@Example.com", "password": USER_PASSWORD})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_login_wrong_password(client: AsyncClient, test_user: usr_models.User):
    """(실패) 잘못된 비밀번호는 401 INVALID_CREDENTIALS"""
    response = await client.post("/api/v1/auth/login", json={"email": test_user.email, "password": "wrong-password"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"


@pytest.mark.asyncio
async def test_login_nonexistent_user(client: AsyncClient):
    """(실패) 존재하지 않는 사용자도 같은 401 오류"""
    response = await client.post("/api/v1/auth/login", json={"email": "nobody@example.com", "password": "whatever123"})

    assert response.status_code == 401
    assert response.json()["error"] == {"code": "INVALID_CREDENTIALS", "message": "Invalid email or password"}


@pytest.mark.asyncio
async def test_login_inactive_user(client: AsyncClient, user_factory):
    """(실패) 비활성 사용자는 403 USER_INACTIVE"""
    await user_factory("inactive@example.com", "inactivepass1", is_active=False)

    response = await client.post("/api/v1/auth/login", json={"email": "inactive@example.com", "password": "inactivepass1"})

    assert response.status_code == 403
    assert response.json()["error"]["code"] == "USER_INACTIVE"


@pytest.mark.asyncio
async def test_login_invalid_body(client: AsyncClient):
    """(실패) 이메일 형식 오류는 400 INVALID_REQUEST와 필드 상세"""
    response = await client.post("/api/v1/auth/login", json={"email": "not-an-email", "password": "x"})

    assert response.status_code == 400
    error = response.json()["error"]
    assert error["code"] == "INVALID_REQUEST"
    assert any(d["field"] == "email" for d in error["details"])


# =================================================================================
# 2. 회원가입
# =================================================================================
@pytest.mark.asyncio
async def test_register_creates_user_role(client: AsyncClient, db_session: AsyncSession):
    """(성공) 회원가입은 항상 USER 역할로 생성되며 토큰을 반환"""
    org_id = str(uuid.uuid4())
    payload = {
        "email": "New.User@Example.com",
        "password": "newuserpass1",
        "firstName": "  New ",
        "lastName": "User",
        "organizationId": org_id,
    }
    response = await client.post("/api/v1/auth/register", json=payload)

    assert response.status_code == 201
    data = response.json()["data"]
    assert data["token"]
    assert data["user"]["email"] == "new.user@example.com"
    assert data["user"]["firstName"] == "New"
    assert data["user"]["role"] == "USER"
    assert data["user"]["organizationId"] == org_id

    db_user = await db_session.get(usr_models.User, uuid.UUID(data["user"]["id"]))
    assert db_user is not None
    assert verify_password("newuserpass1", db_user.password_hash)


@pytest.mark.asyncio
async def test_register_duplicate_email(client: AsyncClient, test_user: usr_models.User):
    """(실패) 이미 등록된 이메일은 409 EMAIL_EXISTS"""
    payload = {
        "email": test_user.email,
        "password": "anotherpass1",
        "firstName": "Dup",
        "lastName": "User",
        "organizationId": str(uuid.uuid4()),
    }
    response = await client.post("/api/v1/auth/register", json=payload)

    assert response.status_code == 409
    assert response.json()["error"]["code"] == "EMAIL_EXISTS"


@pytest.mark.asyncio
async def test_register_short_password(client: AsyncClient):
    payload = {
        "email": "short@example.com",
        "password": "short",
        "firstName": "Short",
        "lastName": "Pass",
        "organizationId": str(uuid.uuid4()),
    }
    response = await client.post("/api/v1/auth/register", json=payload)

    assert response.status_code == 400
    assert any(d["field"] == "password" for d in response.json()["error"]["details"])


# =================================================================================
# 3. 프로필 / 비밀번호 변경
# =================================================================================
@pytest.mark.asyncio
async def test_read_profile(authorized_client: AsyncClient, test_user: usr_models.User):
    response = await authorized_client.get("/api/v1/auth/profile")

    assert response.status_code == 200
    assert response.json()["data"]["id"] == str(test_user.id)


@pytest.mark.asyncio
async def test_read_profile_with_real_token(client: AsyncClient, test_user: usr_models.User):
    """(성공) 의존성 오버라이드 없이 발급된 토큰만으로 프로필 조회"""
    login = await client.post("/api/v1/auth/login", json={"email": test_user.email, "password": USER_PASSWORD})
    token = login.json()["data"]["token"]

    response = await client.get("/api/v1/auth/profile", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    assert response.json()["data"]["email"] == test_user.email


@pytest.mark.asyncio
async def test_read_profile_unauthenticated(client: AsyncClient):
    """(실패) 토큰이 없으면 401 UNAUTHORIZED"""
    response = await client.get("/api/v1/auth/profile")

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_read_profile_invalid_token(client: AsyncClient):
    response = await client.get("/api/v1/auth/profile", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "UNAUTHORIZED"


@pytest.mark.asyncio
async def test_change_password(authorized_client: AsyncClient, test_user: usr_models.User, db_session: AsyncSession):
    """(성공) 기존 비밀번호 확인 후 새 비밀번호로 변경"""
    response = await authorized_client.post(
        "/api/v1/auth/change-password",
        json={"oldPassword": USER_PASSWORD, "newPassword": "brandnewpass1"},
    )

    assert response.status_code == 200
    assert response.json()["data"] == {"message": "Password changed successfully"}

    await db_session.refresh(test_user)
    assert verify_password("brandnewpass1", test_user.password_hash)


@pytest.mark.asyncio
async def test_change_password_wrong_old_password(authorized_client: AsyncClient):
    """(실패) 기존 비밀번호가 틀리면 401 INVALID_PASSWORD"""
    response = await authorized_client.post(
        "/api/v1/auth/change-password",
        json={"oldPassword": "not-my-password", "newPassword": "brandnewpass1"},
    )

    assert response.status_code == 401
    assert response.json()["error"]["code"] == "INVALID_PASSWORD"
