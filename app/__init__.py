# app/__init__.py

"""
Stockkeeper FastAPI 애플리케이션의 메인 패키지입니다.

이 패키지는 소규모 사업장용 재고 관리 API와 그 클라이언트 로직을 포함합니다.
FastAPI 애플리케이션의 진입점 (main.py)과
공통 설정, 데이터베이스 연결, 보안, 오류 응답을 담는 core 서브패키지,
각 비즈니스 도메인(usr, inv, dash)을 대표하는 domains 서브패키지,
그리고 API를 호출하는 쪽에서 사용하는 client 서브패키지로 구성됩니다.
"""

APP_NAME = "Stockkeeper API"
APP_VERSION = "0.1.0"
API_PREFIX = "/api/v1"  # API 라우트의 공통 접두사 (main.py에서 적용)

__version__ = APP_VERSION
__title__ = APP_NAME
__description__ = "Inventory tracking API (items, categories, stock movements, dashboard)."
__license__ = "MIT"
__all__ = []
