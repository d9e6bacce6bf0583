# app/client/filters.py

"""
품목 목록의 필터 상태와 검색어 디바운스입니다.

필터(검색어, 카테고리, 재고 부족, 페이지 크기)가 바뀌면 항상 1페이지로 돌아갑니다.
"""

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Union

from app.client.config import client_settings

logger = logging.getLogger(__name__)

PAGE_SIZE_CHOICES = (10, 25, 50, 100)
DEFAULT_PAGE_SIZE = 25


@dataclass
class InventoryFilters:
    search: str = ""
    category_id: Optional[str] = None
    low_stock: bool = False
    page: int = 1
    page_size: int = DEFAULT_PAGE_SIZE

    def set_search(self, search: str) -> None:
        self.search = search
        self.page = 1

    def set_category(self, category_id: Optional[str]) -> None:
        self.category_id = str(category_id) if category_id else None
        self.page = 1

    def set_low_stock(self, low_stock: bool) -> None:
        self.low_stock = bool(low_stock)
        self.page = 1

    def set_page_size(self, page_size: int) -> None:
        if page_size not in PAGE_SIZE_CHOICES:
            raise ValueError(f"page_size must be one of {PAGE_SIZE_CHOICES}")
        self.page_size = page_size
        self.page = 1

    def set_page(self, page: int) -> None:
        if page < 1:
            raise ValueError("page must be 1 or greater")
        self.page = page

    def reset(self) -> None:
        self.search = ""
        self.category_id = None
        self.low_stock = False
        self.page = 1

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def to_query(self) -> Dict[str, Any]:
        """GET /items 쿼리 파라미터. 값이 없는 필터는 생략합니다."""
        query: Dict[str, Any] = {"limit": self.page_size, "offset": self.offset}
        if self.search.strip():
            query["search"] = self.search.strip()
        if self.category_id:
            query["categoryId"] = self.category_id
        if self.low_stock:
            query["lowStock"] = True
        return query


Callback = Callable[[str], Union[Awaitable[Any], Any]]


class SearchDebouncer:
    """
    연속 입력을 모아 마지막 값으로 한 번만 콜백을 호출합니다.
    실행 중인 이벤트 루프 안에서 사용해야 합니다.
    """

    def __init__(self, callback: Callback, delay: Optional[float] = None):
        self.callback = callback
        self.delay = client_settings.SEARCH_DEBOUNCE_SECONDS if delay is None else delay
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def push(self, value: str) -> None:
        self.cancel()
        self._task = asyncio.get_running_loop().create_task(self._fire(value))

    def cancel(self) -> None:
        if self.pending:
            self._task.cancel()

    async def flush(self) -> None:
        """
        대기 중인 호출이 끝날 때까지 기다립니다.
        flush를 기다리는 쪽이 취소되면 CancelledError를 그대로 전달하고, 대기 중인 호출은 계속 진행됩니다.
        """
        if self._task is None:
            return
        try:
            await asyncio.shield(self._task)
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if not self._task.cancelled() or (current is not None and current.cancelling()):
                raise
            logger.debug("debounced search cancelled")

    async def _fire(self, value: str) -> None:
        await asyncio.sleep(self.delay)
        result = self.callback(value)
        if inspect.isawaitable(result):
            await result
