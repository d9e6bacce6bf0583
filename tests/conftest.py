# tests/conftest.py

import os
import uuid
from decimal import Decimal
from typing import AsyncGenerator, Callable, Awaitable, Optional
from contextlib import asynccontextmanager

# app 모듈이 설정을 읽기 전에 테스트용 환경 변수를 지정합니다.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ.setdefault("APP_ENV", "testing")
os.environ["TASK_QUEUE_ENABLED"] = "false"

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

# app.main을 임포트하여 FastAPI 앱 인스턴스에 접근합니다.
from app.main import app as main_app
from app.core import dependencies as deps
from app.core.database import get_session
from app.core.security import get_password_hash

# --- 모든 모델 임포트 ---
#  SQLModel.metadata.create_all()이 모든 테이블을 인식하도록 모델을 한 번 임포트합니다.
from app.domains.models import *    # noqa: F401, F403
from app.domains.usr import models as usr_models
from app.domains.inv import models as inv_models


# --- 테스트용 데이터베이스 설정 ---
# 테스트마다 새 인메모리 SQLite 데이터베이스를 사용합니다.
TEST_DATABASE_URL = "sqlite+aiosqlite://"

ADMIN_PASSWORD = "adminpass123"
USER_PASSWORD = "userpass123"


@pytest_asyncio.fixture(scope="function")
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    각 테스트 함수마다 빈 스키마를 가진 데이터베이스와 세션을 제공합니다.
    StaticPool로 하나의 연결을 공유해야 인메모리 데이터베이스가 유지됩니다.
    """
    test_engine = create_async_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )
    async with TestingSessionLocal() as session:
        yield session

    await test_engine.dispose()


@pytest.fixture(scope="function")
def organization_id() -> uuid.UUID:
    """기본 테스트 조직 ID."""
    return uuid.uuid4()


# --- 사용자 픽스처 ---
@pytest_asyncio.fixture(scope="function")
def user_factory(db_session: AsyncSession, organization_id: uuid.UUID) -> Callable[..., Awaitable[usr_models.User]]:
    """
    역할과 속성을 지정하여 테스트 사용자를 생성하는 팩토리 함수를 반환합니다.
    **kwargs는 User 모델 생성자에 그대로 전달됩니다.
    """
    async def _create_user(
        email: str,
        password: str,
        role: usr_models.UserRole = usr_models.UserRole.USER,
        organization_id: Optional[uuid.UUID] = None,
        is_active: bool = True,
        **kwargs,
    ) -> usr_models.User:
        user_data = {
            "email": email,
            "password_hash": get_password_hash(password),
            "first_name": "Test",
            "last_name": role.value.title(),
            "organization_id": organization_id or _default_org,
            "role": role,
            "is_active": is_active,
            **kwargs,
        }
        user = usr_models.User(**user_data)
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    _default_org = organization_id
    return _create_user


@pytest_asyncio.fixture(scope="function")
async def test_admin_user(user_factory: Callable) -> usr_models.User:
    """관리자(ADMIN) 사용자를 생성합니다."""
    return await user_factory("admin@example.com", ADMIN_PASSWORD, role=usr_models.UserRole.ADMIN)


@pytest_asyncio.fixture(scope="function")
async def test_user(user_factory: Callable) -> usr_models.User:
    """일반 사용자(USER)를 생성합니다."""
    return await user_factory("user@example.com", USER_PASSWORD, role=usr_models.UserRole.USER)


@pytest_asyncio.fixture(scope="function")
async def test_other_org_admin(user_factory: Callable) -> usr_models.User:
    """다른 조직의 관리자를 생성합니다."""
    return await user_factory(
        "other-admin@example.com", ADMIN_PASSWORD,
        role=usr_models.UserRole.ADMIN,
        organization_id=uuid.uuid4(),
    )


# --- 역할별 인증 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
def authorized_client_factory(
    db_session: AsyncSession,
) -> Callable[[usr_models.User, str], AsyncGenerator[AsyncClient, None]]:
    """
    특정 사용자로 로그인된 AsyncClient를 생성하는 팩토리 함수를 반환합니다.
    사용자 역할에 따라 의존성 오버라이드를 다르게 적용합니다.
    """
    @asynccontextmanager
    async def _create_client_context(user: usr_models.User, password: str) -> AsyncGenerator[AsyncClient, None]:
        def override_get_session():
            yield db_session

        def override_get_current_user():
            return user

        original_overrides = main_app.dependency_overrides.copy()

        try:
            main_app.dependency_overrides.update({
                get_session: override_get_session,
                deps.get_db_session: override_get_session,
                deps.get_current_active_user: override_get_current_user,
            })

            # 관리자 역할(ADMIN)일 경우에만 추가로 관리자 의존성을 오버라이드
            if user.role == usr_models.UserRole.ADMIN:
                main_app.dependency_overrides[deps.get_current_admin_user] = override_get_current_user

            transport = ASGITransport(app=main_app)
            async with AsyncClient(transport=transport, base_url="http://test") as client:
                res = await client.post("/api/v1/auth/login", json={"email": user.email, "password": password})
                if res.status_code != 200:
                    pytest.fail(f"Login failed for {user.email}: {res.text}")

                token = res.json()["data"]["token"]
                client.headers["Authorization"] = f"Bearer {token}"
                yield client

        finally:
            main_app.dependency_overrides.clear()
            main_app.dependency_overrides.update(original_overrides)

    return _create_client_context


@pytest_asyncio.fixture(scope="function")
async def admin_client(
    authorized_client_factory: Callable[..., AsyncGenerator[AsyncClient, None]],
    test_admin_user: usr_models.User,
) -> AsyncGenerator[AsyncClient, None]:
    """관리자로 인증된 클라이언트를 반환합니다."""
    async with authorized_client_factory(test_admin_user, ADMIN_PASSWORD) as client:
        yield client


@pytest_asyncio.fixture(scope="function")
async def authorized_client(
    authorized_client_factory: Callable[..., AsyncGenerator[AsyncClient, None]],
    test_user: usr_models.User,
) -> AsyncGenerator[AsyncClient, None]:
    """일반 사용자로 인증된 클라이언트를 반환합니다."""
    async with authorized_client_factory(test_user, USER_PASSWORD) as client:
        yield client


# --- 비동기 테스트 클라이언트 픽스처 ---
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """
    인증되지 않은 사용자를 위한 AsyncClient 인스턴스를 생성하고,
    테스트용 비동기 DB 세션을 주입합니다.
    """
    def override_get_session_and_dependency():
        yield db_session

    original_overrides = main_app.dependency_overrides.copy()

    try:
        main_app.dependency_overrides[get_session] = override_get_session_and_dependency
        main_app.dependency_overrides[deps.get_db_session] = override_get_session_and_dependency

        async with AsyncClient(transport=ASGITransport(app=main_app), base_url="http://test") as async_client:
            yield async_client

    finally:
        main_app.dependency_overrides.clear()
        main_app.dependency_overrides.update(original_overrides)


# --- 도메인별 공통 픽스처 ---
@pytest_asyncio.fixture
async def test_category(db_session: AsyncSession, organization_id: uuid.UUID) -> inv_models.Category:
    """테스트용 카테고리를 데이터베이스에 생성하고 반환합니다."""
    category = inv_models.Category(organization_id=organization_id, name="Hardware", color="#3B82F6")
    db_session.add(category)
    await db_session.commit()
    await db_session.refresh(category)
    return category


@pytest_asyncio.fixture
def item_factory(db_session: AsyncSession, organization_id: uuid.UUID, test_category: inv_models.Category):
    """품목을 데이터베이스에 직접 생성하는 팩토리 함수를 반환합니다 (알림 동기화 없음)."""
    async def _create_item(name: str = "Bolt", **kwargs) -> inv_models.Item:
        data = {
            "organization_id": organization_id,
            "category_id": test_category.id,
            "name": name,
            "minimum_threshold": 10,
            "current_stock": 100,
            "unit_cost": Decimal("2.50"),
            **kwargs,
        }
        item = inv_models.Item(**data)
        db_session.add(item)
        await db_session.commit()
        await db_session.refresh(item)
        return item
    return _create_item
