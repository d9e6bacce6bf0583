# app/domains/usr/__init__.py

"""
FastAPI 애플리케이션의 'usr' 도메인 패키지입니다.

'usr' 도메인은 시스템 사용자와 인증/권한 부여와 관련된 핵심 데이터를 관리합니다.

주요 서브모듈:
- `models.py`: users 테이블에 매핑되는 SQLModel 정의와 UserRole Enum.
- `schemas.py`: 요청 및 응답 유효성 검사용 Pydantic 모델 (로그인, 회원가입, 비밀번호 변경).
- `crud.py`: 사용자 생성, 인증, 비밀번호 변경 로직.
- `permissions.py`: 역할 기반 권한 검사 함수 (서버와 클라이언트 공용).
- `routers.py`: /auth/* API 엔드포인트 정의.
"""

__title__ = "Stockkeeper User Domain"
__description__ = "Manages users and handles authentication."
__version__ = "0.1.0"
__all__ = []
