# app/main.py

import logging
from typing import AsyncGenerator
from contextlib import asynccontextmanager
from arq.connections import create_pool, RedisSettings
from arq.cron import cron

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession
from fastapi import FastAPI, Depends
from fastapi.middleware.cors import CORSMiddleware

# 핵심 설정 및 데이터베이스 모듈 임포트
from app import API_PREFIX
from app.core.config import settings
from app.core.database import engine, get_session, create_db_and_tables
from app.core.exceptions import AppError, ErrorCode
from app.core.responses import register_exception_handlers

# 태스크 모듈 임포트
from app.core import tasks as core_tasks
from app.domains.inv import tasks as inv_tasks

# 도메인 라우터 임포트
from app.domains.usr.routers import router as usr_router
from app.domains.inv.routers import router as inv_router
from app.domains.dash.routers import router as dash_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)

# ARQ 워커가 실행할 태스크 함수 목록
worker_functions = [
    core_tasks.health_check_database_task,
    inv_tasks.sync_low_stock_alerts_task,
]


# ARQ 워커 설정 클래스 (실행: arq app.main.ArqWorkerSettings)
class ArqWorkerSettings:
    redis_settings = RedisSettings(host=settings.REDIS_HOST, port=settings.REDIS_PORT)
    functions = worker_functions
    cron_jobs = [
        # 매일 자정 데이터베이스 헬스 체크
        cron(core_tasks.health_check_database_task, name="daily_db_health_check",
             hour={0}, minute={0}, timeout=300, keep_result=600),
        # 매시 정각 전체 조직의 재고 부족 알림 동기화
        cron(inv_tasks.sync_low_stock_alerts_task, name="hourly_low_stock_alert_sync",
             minute={0}, timeout=1800, keep_result=3600),
    ]


# -- 애플리케이션 수명 주기 이벤트 핸들러 --
@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    FastAPI 애플리케이션의 수명 주기 이벤트(데이터베이스, ARQ Redis)를 함께 처리합니다.
    """
    logger.info("%s 시작 중 (env=%s)...", settings.APP_NAME, settings.APP_ENV)

    # 1. 운영 환경이 아니면 테이블을 생성합니다.
    if settings.APP_ENV != "production":
        await create_db_and_tables()

    # 2. ARQ Redis 커넥션 풀 생성 및 app.state에 할당
    app.state.redis = None
    if settings.TASK_QUEUE_ENABLED:
        logger.info("ARQ Redis 커넥션 풀을 생성합니다...")
        app.state.redis = await create_pool(ArqWorkerSettings.redis_settings)
        logger.info("ARQ Redis 커넥션 풀 생성 완료.")

    yield  # 애플리케이션 실행

    logger.info("%s 종료 중...", settings.APP_NAME)
    if app.state.redis:
        await app.state.redis.close()
        logger.info("ARQ Redis 연결 풀 종료 완료.")
    await engine.dispose()
    logger.info("데이터베이스 연결 풀 종료 완료.")


# -- FastAPI 애플리케이션 인스턴스 생성 --
app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESCRIPTION,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# -- CORS (Cross-Origin Resource Sharing) 미들웨어 설정 --
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["X-Total-Count", "Link"],
)

# -- 오류 응답 봉투 --
register_exception_handlers(app)

# -- 도메인 라우터 포함 --
app.include_router(usr_router, prefix=API_PREFIX)
app.include_router(inv_router, prefix=API_PREFIX)
app.include_router(dash_router, prefix=f"{API_PREFIX}/dashboard")


# -- 루트 엔드포인트 --
@app.get("/", summary="API Root", response_description="Welcome message and documentation link.")
async def read_root():
    return {"message": f"Welcome to {settings.APP_NAME}. Visit /docs for interactive API documentation."}


@app.get(f"{API_PREFIX}/health", summary="Liveness")
async def health():
    return {"data": {"status": "ok"}}


# -- 헬스 체크 엔드포인트 --
# 애플리케이션과 데이터베이스의 연결 상태를 확인하는 엔드포인트입니다.
@app.get("/health-check", summary="Health Check", response_description="Status of the application and database connection.")
async def health_check(session: AsyncSession = Depends(get_session)):
    """
    데이터베이스 연결을 테스트하여 서비스의 정상 작동 여부를 확인합니다.
    """
    result = await session.exec(select(1))
    if result.first() is None:
        raise AppError(500, ErrorCode.INTERNAL_ERROR, "Database health check failed: No result from test query")
    return {"data": {"status": "ok", "database_connection": "successful"}}
