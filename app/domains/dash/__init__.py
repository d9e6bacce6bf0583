# app/domains/dash/__init__.py

"""
FastAPI 애플리케이션의 'dash' 도메인 패키지입니다.

'dash' 도메인은 자체 테이블 없이 'inv' 도메인의 데이터를 집계하여
대시보드 지표, 입출고 추이, 카테고리별 재고 가치, 재고 부족 품목과 알림을 제공합니다.

주요 서브모듈:
- `schemas.py`: 대시보드 응답 Pydantic 모델.
- `crud.py`: 집계 쿼리.
- `routers.py`: /dashboard/* API 엔드포인트 정의.
"""

__title__ = "Stockkeeper Dashboard Domain"
__description__ = "Aggregates inventory data for the dashboard."
__version__ = "0.1.0"
__all__ = []
