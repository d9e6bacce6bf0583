# app/client/pagination.py

"""
목록 화면의 페이지 계산 유틸리티입니다.

    >>> range_label(3, 10, 25)
    '21-25 of 25'
    >>> page_numbers(5, 10)
    [1, '...', 4, 5, 6, '...', 10]
"""

import math
from dataclasses import dataclass, field
from typing import List, Tuple, Union

ELLIPSIS = "..."
MAX_VISIBLE_PAGES = 7

PageButton = Union[int, str]


def total_pages(total: int, page_size: int) -> int:
    if page_size <= 0:
        raise ValueError("page_size must be positive")
    return math.ceil(total / page_size)


def item_range(page: int, page_size: int, total: int) -> Tuple[int, int]:
    """현재 페이지에 표시되는 항목의 (시작, 끝) 번호 (1부터). 항목이 없으면 (0, 0)."""
    if total <= 0:
        return 0, 0
    start = (page - 1) * page_size + 1
    end = min(page * page_size, total)
    return start, end


def range_label(page: int, page_size: int, total: int) -> str:
    if total <= 0:
        return "No items"
    start, end = item_range(page, page_size, total)
    return f"{start}-{end} of {total}"


def page_numbers(current: int, pages: int) -> List[PageButton]:
    """
    페이지 버튼 목록. 7페이지 이하면 모두, 그보다 많으면
    첫 페이지, 현재 페이지 주변, 마지막 페이지와 생략 기호를 반환합니다.
    """
    if pages <= MAX_VISIBLE_PAGES:
        return list(range(1, pages + 1))

    buttons: List[PageButton] = [1]
    if current > 3:
        buttons.append(ELLIPSIS)
    buttons.extend(range(max(2, current - 1), min(pages - 1, current + 1) + 1))
    if current < pages - 2:
        buttons.append(ELLIPSIS)
    buttons.append(pages)
    return buttons


@dataclass(frozen=True)
class PageState:
    page: int
    page_size: int
    total: int
    total_pages: int = field(init=False)

    def __post_init__(self):
        object.__setattr__(self, "total_pages", total_pages(self.total, self.page_size))

    @property
    def label(self) -> str:
        return range_label(self.page, self.page_size, self.total)

    @property
    def previous_disabled(self) -> bool:
        return self.page <= 1

    @property
    def next_disabled(self) -> bool:
        return self.total_pages == 0 or self.page >= self.total_pages

    @property
    def buttons(self) -> List[PageButton]:
        return page_numbers(self.page, self.total_pages)
