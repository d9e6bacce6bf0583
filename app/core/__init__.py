# app/core/__init__.py

"""
FastAPI 애플리케이션의 핵심 구성 요소 패키지입니다.

주요 서브모듈은 다음과 같습니다:

- `config.py`: 애플리케이션의 설정 및 환경 변수 관리 (Pydantic Settings).
- `database.py`: 데이터베이스 연결, 세션 관리 (SQLModel 및 AsyncSQLAlchemy).
- `crud_base.py`: 도메인 CRUD 클래스가 상속하는 공통 비동기 CRUD 클래스.
- `exceptions.py`: 오류 코드를 가진 HTTP 예외 정의.
- `responses.py`: `{"data": ...}` / `{"error": ...}` 응답 봉투와 예외 핸들러.
- `security.py`: 비밀번호 해싱, JWT 발급/검증, 현재 사용자 획득.
- `dependencies.py`: FastAPI 의존성 주입에서 사용될 공통 의존성 함수들.
- `tasks.py`: ARQ 워커가 실행하는 공통 백그라운드 태스크.
"""

__title__ = "Stockkeeper Core"
__description__ = "Core components for the Stockkeeper FastAPI application."
__version__ = "0.1.0"
__all__ = []
