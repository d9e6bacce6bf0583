# app/core/responses.py

"""
API 응답 봉투와 전역 예외 핸들러를 정의하는 모듈입니다.

- 성공 응답: `{"data": ...}`
- 실패 응답: `{"error": {"code": ..., "message": ..., "details": [...]}}`

라우터는 `response_model=DataResponse[...]`로 선언하고 `{"data": obj}`를 반환합니다.
예외 핸들러는 `register_exception_handlers(app)`로 main.py에서 등록합니다.
"""

import logging
from typing import Any, Dict, Generic, List, Optional, TypeVar

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.core.exceptions import AppError, ErrorCode, code_for_status

logger = logging.getLogger(__name__)

T = TypeVar("T")


class APIModel(BaseModel):
    """
    모든 요청/응답 스키마의 기반 클래스.
    JSON은 camelCase, 파이썬 속성은 snake_case를 사용합니다.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class DataResponse(BaseModel, Generic[T]):
    data: T


class ErrorDetail(BaseModel):
    field: Optional[str] = None
    message: str


class ErrorBody(BaseModel):
    code: str
    message: str
    details: Optional[List[ErrorDetail]] = None


class ErrorResponse(BaseModel):
    error: ErrorBody


def error_payload(code: str, message: str, details: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"code": code, "message": message}
    if details:
        body["details"] = details
    return {"error": body}


# =============================================================================
# 예외 핸들러
# =============================================================================
async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if isinstance(exc, AppError):
        code, details = exc.code, exc.details
    else:
        code, details = code_for_status(exc.status_code), None
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    if exc.status_code >= 500:
        logger.error("HTTP %s on %s %s: %s", exc.status_code, request.method, request.url.path, message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(code, message, details),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    details = []
    for error in exc.errors():
        # loc 예: ("body", "quantity") / ("query", "limit")
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "header")]
        details.append({"field": ".".join(loc) or None, "message": error.get("msg", "Invalid value")})
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_payload(ErrorCode.INVALID_REQUEST, "Invalid request body", details),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_payload(ErrorCode.INTERNAL_ERROR, "Internal server error"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# =============================================================================
# 페이지네이션 헤더
# =============================================================================
def set_pagination_headers(response: Response, request: Request, *, total: int, limit: int, offset: int) -> None:
    """
    목록 응답에 `X-Total-Count`와 RFC 8288 `Link` 헤더(first/prev/next/last)를 설정합니다.
    """
    response.headers["X-Total-Count"] = str(total)
    if limit <= 0:
        return

    def page_url(page_offset: int) -> str:
        return str(request.url.include_query_params(limit=limit, offset=page_offset))

    last_offset = ((total - 1) // limit) * limit if total > 0 else 0
    links = [f'<{page_url(0)}>; rel="first"']
    if offset > 0:
        links.append(f'<{page_url(max(0, offset - limit))}>; rel="prev"')
    if offset + limit < total:
        links.append(f'<{page_url(offset + limit)}>; rel="next"')
    links.append(f'<{page_url(last_offset)}>; rel="last"')
    response.headers["Link"] = ", ".join(links)
