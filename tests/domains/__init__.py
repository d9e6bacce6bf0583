# tests/domains/__init__.py

"""
도메인별 테스트 모듈 패키지입니다.

- `test_auth_n.py`: 'usr' 도메인 (로그인, 회원가입, 프로필, 비밀번호 변경).
- `test_inv_n.py`: 'inv' 도메인 (카테고리, 품목, 입출고, 알림) API.
- `test_inv_stock_n.py`: 재고 계산, 알림 판정, 알림 동기화 태스크.
- `test_dash_n.py`: 'dash' 도메인 (대시보드 집계, 알림 읽음/새로고침).
"""

__title__ = "Stockkeeper Domain Tests"
__description__ = "Categorized tests for each business domain in the Stockkeeper application."
__version__ = "0.1.0"
__all__ = []
