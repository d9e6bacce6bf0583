# app/client/stock_status.py

from dataclasses import dataclass
from typing import Any, Mapping, Union

from app.domains.inv.models import Item


@dataclass(frozen=True)
class StockStatus:
    label: str
    severity: str  # "critical" | "warning" | "ok"


NOT_TRACKED = StockStatus("Not Tracked", "ok")
OUT_OF_STOCK = StockStatus("Out of Stock", "critical")
LOW_STOCK = StockStatus("Low Stock", "warning")
IN_STOCK = StockStatus("In Stock", "ok")


def _field(item: Union[Item, Mapping[str, Any]], name: str, alias: str, default: Any = None) -> Any:
    if isinstance(item, Mapping):
        return item.get(alias, item.get(name, default))
    return getattr(item, name, default)


def stock_status(item: Union[Item, Mapping[str, Any]]) -> StockStatus:
    """
    품목의 재고 상태를 반환합니다.
    API 응답(dict, camelCase)과 모델 객체를 모두 받습니다.
    """
    if _field(item, "track_stock", "trackStock", True) is False:
        return NOT_TRACKED
    current = _field(item, "current_stock", "currentStock", 0)
    threshold = _field(item, "minimum_threshold", "minimumThreshold", 0)
    if current == 0:
        return OUT_OF_STOCK
    if current <= threshold:
        return LOW_STOCK
    return IN_STOCK
