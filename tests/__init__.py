# tests/__init__.py

"""
Stockkeeper 테스트 스위트 패키지입니다.

- `conftest.py`: 테스트마다 새로 만드는 SQLite 데이터베이스, 사용자/클라이언트 픽스처.
- `domains/`: 도메인(usr, inv, dash)별 API 통합 테스트와 재고 계산 단위 테스트.
- `client/`: 서버 없이 동작하는 클라이언트 로직(미리보기, 검증, 필터, 페이지, 내보내기)과
             httpx 기반 API 클라이언트 테스트.
"""

__title__ = "Stockkeeper API Tests"
__description__ = "Test suite for the Stockkeeper FastAPI application and client helpers."
__version__ = "0.1.0"
__all__ = []
