# app/core/exceptions.py

"""
API 전역에서 사용하는 오류 코드와 예외 클래스를 정의하는 모듈입니다.

CRUD/라우터 계층은 FastAPI의 `HTTPException` 대신 그 하위 클래스인 `AppError`를 발생시킵니다.
`AppError`는 상태 코드 외에 클라이언트가 분기할 수 있는 기계 판독용 `code`와
필드 단위 오류 목록(`details`)을 함께 전달합니다.
응답 봉투로의 변환은 `app.core.responses`의 예외 핸들러가 담당합니다.
"""

from typing import Any, Dict, List, Optional

from fastapi import HTTPException, status


class ErrorCode:
    """클라이언트와 공유하는 오류 코드 문자열."""
    INVALID_REQUEST = "INVALID_REQUEST"
    INVALID_QUANTITY = "INVALID_QUANTITY"
    INSUFFICIENT_STOCK = "INSUFFICIENT_STOCK"
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    INVALID_PASSWORD = "INVALID_PASSWORD"
    FORBIDDEN = "FORBIDDEN"
    USER_INACTIVE = "USER_INACTIVE"
    NOT_FOUND = "NOT_FOUND"
    ITEM_NOT_FOUND = "ITEM_NOT_FOUND"
    CATEGORY_NOT_FOUND = "CATEGORY_NOT_FOUND"
    ALERT_NOT_FOUND = "ALERT_NOT_FOUND"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    CATEGORY_HAS_ITEMS = "CATEGORY_HAS_ITEMS"
    CONFLICT = "CONFLICT"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# 코드를 지정하지 않은 HTTPException을 봉투로 바꿀 때 사용하는 기본 코드
DEFAULT_CODES_BY_STATUS: Dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.INVALID_REQUEST,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.INVALID_REQUEST,
    status.HTTP_409_CONFLICT: ErrorCode.CONFLICT,
    status.HTTP_422_UNPROCESSABLE_ENTITY: ErrorCode.INVALID_REQUEST,
}


def code_for_status(status_code: int) -> str:
    if status_code in DEFAULT_CODES_BY_STATUS:
        return DEFAULT_CODES_BY_STATUS[status_code]
    return ErrorCode.INTERNAL_ERROR if status_code >= 500 else ErrorCode.INVALID_REQUEST


class AppError(HTTPException):
    """
    오류 코드를 가진 HTTPException.
    `detail`에는 사람이 읽을 메시지를, `code`에는 오류 코드를 담습니다.
    """

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[List[Dict[str, Any]]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> None:
        super().__init__(status_code=status_code, detail=message, headers=headers)
        self.code = code
        self.details = details

    @property
    def message(self) -> str:
        return self.detail


# =============================================================================
# 자주 쓰는 오류 생성 함수
# =============================================================================
def not_found(code: str, message: str) -> AppError:
    return AppError(status.HTTP_404_NOT_FOUND, code, message)


def conflict(code: str, message: str) -> AppError:
    return AppError(status.HTTP_409_CONFLICT, code, message)


def forbidden(message: str = "Admin role required") -> AppError:
    return AppError(status.HTTP_403_FORBIDDEN, ErrorCode.FORBIDDEN, message)


def unauthorized(code: str = ErrorCode.UNAUTHORIZED, message: str = "Could not validate credentials") -> AppError:
    return AppError(
        status.HTTP_401_UNAUTHORIZED, code, message,
        headers={"WWW-Authenticate": "Bearer"},
    )
