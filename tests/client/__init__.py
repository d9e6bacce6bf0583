# tests/client/__init__.py

"""
'app.client' 패키지 (서버 없이 동작하는 계산/검증 로직과 HTTP 클라이언트)에 대한 테스트입니다.
"""
