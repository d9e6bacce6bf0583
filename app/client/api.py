# app/client/api.py

"""
Stockkeeper API용 비동기 HTTP 클라이언트입니다.

- 응답 봉투 `{"data": ...}`를 풀어서 데이터만 반환합니다.
- 오류 봉투 `{"error": {...}}`는 `ApiError`로 변환합니다.
- 401 응답은 저장된 토큰을 지우고 `AuthenticationError`를 발생시킵니다.
- GET 요청만 네트워크 오류/5xx 응답 시 한 번 재시도합니다.

    async with ApiClient() as api:
        await api.login("admin@example.com", "password123")
        page = await api.list_items(search="bolt", limit=25)
"""

import logging
import os
import uuid
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx
from pydantic import BaseModel

from app.client.config import ClientSettings, client_settings

logger = logging.getLogger(__name__)

NETWORK_ERROR = "NETWORK_ERROR"
UNKNOWN_ERROR = "UNKNOWN_ERROR"

Payload = Optional[Union[BaseModel, Mapping[str, Any]]]


class ApiError(Exception):
    """API 오류 봉투 또는 전송 실패를 나타냅니다."""

    def __init__(
        self,
        message: str,
        code: str = UNKNOWN_ERROR,
        details: Optional[List[Dict[str, Any]]] = None,
        status_code: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.status_code = status_code

    def field_errors(self) -> Dict[str, str]:
        """details를 {필드: 메시지}로 변환합니다."""
        return {d.get("field") or "form": d.get("message", "") for d in self.details or []}


class AuthenticationError(ApiError):
    """토큰이 없거나 만료되어 다시 로그인해야 합니다."""


class TokenStore:
    """Access Token 보관소. 경로가 주어지면 파일에 저장하여 재실행 후에도 유지합니다."""

    def __init__(self, path: Optional[str] = None):
        self.path = os.path.expanduser(path) if path else None
        self._token: Optional[str] = None
        if self.path and os.path.exists(self.path):
            with open(self.path, encoding="utf-8") as f:
                self._token = f.read().strip() or None

    def get(self) -> Optional[str]:
        return self._token

    def set(self, token: Optional[str]) -> None:
        if not token:
            self.clear()
            return
        self._token = token
        if self.path:
            os.makedirs(os.path.dirname(self.path) or ".", exist_ok=True)
            # 토큰 파일은 소유자만 읽고 쓸 수 있습니다.
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
            os.chmod(self.path, 0o600)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(token)

    def clear(self) -> None:
        self._token = None
        if self.path and os.path.exists(self.path):
            os.remove(self.path)


def _payload(data: Payload) -> Optional[Dict[str, Any]]:
    if data is None:
        return None
    if isinstance(data, BaseModel):
        return data.model_dump(mode="json", by_alias=True, exclude_unset=True)
    return {k: str(v) if isinstance(v, uuid.UUID) else v for k, v in data.items()}


def _params(params: Mapping[str, Any]) -> Dict[str, Any]:
    """값이 None인 파라미터는 보내지 않습니다."""
    cleaned = {}
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, bool):
            value = "true" if value else "false"
        elif isinstance(value, uuid.UUID):
            value = str(value)
        cleaned[key] = value
    return cleaned


class ApiClient:
    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        token_store: Optional[TokenStore] = None,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        settings = settings or client_settings
        self.token_store = token_store or TokenStore(settings.TOKEN_FILE)
        self._client = httpx.AsyncClient(
            base_url=(base_url or settings.API_URL).rstrip("/"),
            timeout=settings.TIMEOUT,
            transport=transport,
        )

    async def __aenter__(self) -> "ApiClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self._client.aclose()

    @property
    def is_authenticated(self) -> bool:
        return self.token_store.get() is not None

    # =========================================================================
    # 요청/응답 처리
    # =========================================================================
    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Payload = None,
    ) -> Any:
        method = method.upper()
        headers = {"Accept": "application/json"}
        token = self.token_store.get()
        if token:
            headers["Authorization"] = f"Bearer {token}"

        attempts = 2 if method == "GET" else 1
        response = None
        for attempt in range(1, attempts + 1):
            try:
                response = await self._client.request(
                    method, path, params=_params(params or {}), json=_payload(json), headers=headers
                )
            except httpx.TransportError as e:
                if attempt < attempts:
                    logger.warning("%s %s 실패, 재시도합니다: %s", method, path, e)
                    continue
                raise ApiError(str(e) or "Network error", NETWORK_ERROR) from e
            if response.status_code >= 500 and attempt < attempts:
                logger.warning("%s %s -> %s, 재시도합니다", method, path, response.status_code)
                continue
            break
        return self._handle_response(response)

    def _handle_response(self, response: httpx.Response) -> Any:
        if response.status_code == 204 or not response.content:
            if response.is_error:
                raise ApiError(response.reason_phrase or "Request failed", UNKNOWN_ERROR,
                               status_code=response.status_code)
            return None

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            error = body.get("error") if isinstance(body, dict) else None
            if isinstance(error, dict):
                exc_class = AuthenticationError if response.status_code == 401 else ApiError
                exc = exc_class(
                    error.get("message", "Request failed"),
                    error.get("code", UNKNOWN_ERROR),
                    error.get("details"),
                    response.status_code,
                )
            elif response.status_code == 401:
                exc = AuthenticationError("Authentication required", "UNAUTHORIZED", status_code=401)
            else:
                exc = ApiError(response.reason_phrase or "Request failed", UNKNOWN_ERROR,
                               status_code=response.status_code)
            if isinstance(exc, AuthenticationError):
                self.token_store.clear()
            raise exc

        if isinstance(body, dict) and "data" in body:
            return body["data"]
        return body

    async def get(self, path: str, **params: Any) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, data: Payload = None) -> Any:
        return await self.request("POST", path, json=data)

    async def put(self, path: str, data: Payload = None) -> Any:
        return await self.request("PUT", path, json=data)

    async def delete(self, path: str, data: Payload = None) -> Any:
        return await self.request("DELETE", path, json=data)

    # =========================================================================
    # 인증
    # =========================================================================
    async def login(self, email: str, password: str) -> Dict[str, Any]:
        result = await self.post("/auth/login", {"email": email, "password": password})
        self.token_store.set(result["token"])
        return result

    async def register(
        self, *, email: str, password: str, first_name: str, last_name: str, organization_id: Union[str, uuid.UUID]
    ) -> Dict[str, Any]:
        result = await self.post("/auth/register", {
            "email": email,
            "password": password,
            "firstName": first_name,
            "lastName": last_name,
            "organizationId": organization_id,
        })
        self.token_store.set(result["token"])
        return result

    def logout(self) -> None:
        self.token_store.clear()

    async def get_profile(self) -> Dict[str, Any]:
        return await self.get("/auth/profile")

    async def change_password(self, old_password: str, new_password: str) -> Dict[str, Any]:
        return await self.post("/auth/change-password", {"oldPassword": old_password, "newPassword": new_password})

    # =========================================================================
    # 품목 / 카테고리 / 입출고
    # =========================================================================
    async def list_items(
        self,
        *,
        search: Optional[str] = None,
        category_id: Optional[Union[str, uuid.UUID]] = None,
        low_stock: Optional[bool] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Dict[str, Any]:
        """`{"items": [...], "total": n}`을 반환합니다. InventoryFilters.to_query()를 그대로 넘길 수도 있습니다."""
        return await self.get(
            "/items", search=search or None, categoryId=category_id, lowStock=low_stock or None,
            limit=limit, offset=offset,
        )

    async def list_items_by_query(self, query: Mapping[str, Any]) -> Dict[str, Any]:
        return await self.request("GET", "/items", params=query)

    async def get_item(self, item_id: Union[str, uuid.UUID]) -> Dict[str, Any]:
        return await self.get(f"/items/{item_id}")

    async def create_item(self, data: Payload) -> Dict[str, Any]:
        return await self.post("/items", data)

    async def update_item(self, item_id: Union[str, uuid.UUID], data: Payload) -> Dict[str, Any]:
        return await self.put(f"/items/{item_id}", data)

    async def delete_item(self, item_id: Union[str, uuid.UUID]) -> None:
        await self.delete(f"/items/{item_id}")

    async def get_item_movements(
        self, item_id: Union[str, uuid.UUID], *, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        return await self.get(f"/items/{item_id}/movements", limit=limit, offset=offset)

    async def list_categories(self) -> List[Dict[str, Any]]:
        return await self.get("/categories")

    async def create_category(self, data: Payload) -> Dict[str, Any]:
        return await self.post("/categories", data)

    async def update_category(self, category_id: Union[str, uuid.UUID], data: Payload) -> Dict[str, Any]:
        return await self.put(f"/categories/{category_id}", data)

    async def delete_category(
        self, category_id: Union[str, uuid.UUID], target_category_id: Optional[Union[str, uuid.UUID]] = None
    ) -> None:
        body = {"targetCategoryId": target_category_id} if target_category_id else None
        await self.delete(f"/categories/{category_id}", body)

    async def list_movements(
        self,
        *,
        item_id: Optional[Union[str, uuid.UUID]] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        return await self.get("/movements", itemId=item_id, limit=limit, offset=offset)

    async def create_movement(self, data: Payload) -> Dict[str, Any]:
        return await self.post("/movements", data)

    # =========================================================================
    # 대시보드
    # =========================================================================
    async def get_metrics(self) -> Dict[str, Any]:
        return await self.get("/dashboard/metrics")

    async def get_recent_movements(self, limit: int = 10) -> List[Dict[str, Any]]:
        return await self.get("/dashboard/recent-movements", limit=limit)

    async def get_stock_trends(self, days: int = 7) -> List[Dict[str, Any]]:
        return await self.get("/dashboard/stock-trends", days=days)

    async def get_category_breakdown(self) -> List[Dict[str, Any]]:
        return await self.get("/dashboard/category-breakdown")

    async def get_low_stock_items(self, limit: int = 10) -> List[Dict[str, Any]]:
        return await self.get("/dashboard/low-stock", limit=limit)

    async def get_alerts(self, limit: int = 10) -> List[Dict[str, Any]]:
        return await self.get("/dashboard/alerts", limit=limit)

    async def mark_alert_read(self, alert_id: Union[str, uuid.UUID]) -> Dict[str, Any]:
        return await self.put(f"/dashboard/alerts/{alert_id}/read")

    async def refresh_alerts(self) -> Dict[str, Any]:
        return await self.post("/dashboard/alerts/refresh")

    async def health(self) -> Dict[str, Any]:
        return await self.get("/health")
