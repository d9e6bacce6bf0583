# app/client/__init__.py

"""
Stockkeeper API를 호출하는 쪽(프론트엔드, 스크립트)에서 사용하는 'client' 패키지입니다.

서버를 거치지 않고 계산하거나 검증할 수 있는 로직과 HTTP 클라이언트를 제공합니다.

주요 서브모듈:
- `config.py`: 클라이언트 설정 (STOCKKEEPER_ 접두사 환경 변수).
- `api.py`: httpx 기반 비동기 API 클라이언트와 오류 클래스.
- `preview.py`: 입출고 제출 전 재고 미리보기 계산.
- `validation.py`: 품목/카테고리/입출고 입력 폼 검증.
- `filters.py`: 목록 필터 상태와 검색어 디바운스.
- `pagination.py`: 페이지 범위, 라벨, 페이지 버튼 계산.
- `stock_status.py`: 품목의 재고 상태 라벨.
- `export.py`: 품목 목록 CSV 내보내기.
"""

__title__ = "Stockkeeper Client"
__description__ = "Client-side helpers and async HTTP client for the Stockkeeper API."
__version__ = "0.1.0"
__all__ = []
