# app/client/export.py

"""
품목 목록을 CSV 문자열로 내보냅니다.
인용 처리는 csv 모듈에 맡기며, 행 구분자는 CRLF입니다.
"""

import csv
from datetime import date
from io import StringIO
from typing import Any, Iterable, Mapping, Optional

from app.client.stock_status import stock_status

CSV_HEADERS = [
    "Name",
    "SKU",
    "Category",
    "Current Stock",
    "Unit",
    "Minimum Threshold",
    "Unit Cost",
    "Total Value",
    "Status",
]


def _row(item: Mapping[str, Any], category_names: Mapping[str, str]) -> list:
    current_stock = item.get("currentStock", 0)
    unit_cost = item.get("unitCost")
    total_value = current_stock * unit_cost if unit_cost else 0
    category_name = category_names.get(str(item.get("categoryId"))) or "N/A"
    return [
        item.get("name", ""),
        item.get("sku") or "",
        category_name,
        current_stock,
        item.get("unit", ""),
        item.get("minimumThreshold", 0),
        f"{unit_cost:.2f}" if unit_cost is not None else "",
        f"{total_value:.2f}",
        stock_status(item).label,
    ]


def items_to_csv(items: Iterable[Mapping[str, Any]], category_names: Optional[Mapping[str, str]] = None) -> str:
    """
    API 응답 형태(camelCase dict)의 품목 목록을 CSV로 변환합니다.
    category_names는 카테고리 ID 문자열 -> 이름 매핑입니다.
    """
    category_names = category_names or {}
    buf = StringIO()
    writer = csv.writer(buf, lineterminator="\r\n")
    writer.writerow(CSV_HEADERS)
    for item in items:
        writer.writerow(_row(item, category_names))
    return buf.getvalue()


def generate_export_filename(prefix: str = "inventory", today: Optional[date] = None) -> str:
    today = today or date.today()
    return f"{prefix}-{today.isoformat()}.csv"
