# app/domains/inv/__init__.py

"""
FastAPI 애플리케이션의 'inv' 도메인 패키지입니다.

'inv' 도메인은 카테고리(Category), 품목(Item), 입출고 이력(StockMovement),
그리고 재고 부족/소진 알림(Alert)을 관리합니다.
재고는 입출고 기록을 통해서만 변경되며, 입출고 이력은 추가만 가능합니다.

주요 서브모듈:
- `models.py`: categories, items, stock_movements, alerts 테이블의 SQLModel 정의.
- `schemas.py`: 요청 및 응답 유효성 검사용 Pydantic 모델.
- `stock.py`: 입출고 한 건에 대한 재고 계산 (IN / OUT / ADJUSTMENT).
- `alerts.py`: 품목 상태에 따른 알림 생성/갱신/삭제.
- `crud.py`: 조직 단위 비동기 CRUD 로직.
- `routers.py`: /categories, /items, /movements API 엔드포인트 정의.
- `tasks.py`: ARQ 알림 동기화 태스크.
"""

__title__ = "Stockkeeper Inventory Domain"
__description__ = "Manages categories, items, stock movements and low-stock alerts."
__version__ = "0.1.0"
__all__ = []
