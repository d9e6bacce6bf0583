# tests/client/test_export.py

import csv
from datetime import date
from io import StringIO

from app.client.export import CSV_HEADERS, generate_export_filename, items_to_csv


def _item(**kwargs) -> dict:
    data = {
        "name": "Bolt",
        "sku": None,
        "categoryId": "c-1",
        "currentStock": 4,
        "unit": "pcs",
        "minimumThreshold": 10,
        "unitCost": 2.5,
        "trackStock": True,
    }
    data.update(kwargs)
    return data


def test_items_to_csv():
    items = [
        _item(name="Bolt, M6", sku="B-6"),
        _item(name="Glue", categoryId="missing", currentStock=0, unit="ltr", minimumThreshold=0,
              unitCost=None, trackStock=False),
    ]

    lines = items_to_csv(items, {"c-1": "Hardware"}).split("\r\n")

    assert lines[0] == ",".join(CSV_HEADERS)
    assert lines[1] == '"Bolt, M6",B-6,Hardware,4,pcs,10,2.50,10.00,Low Stock'
    assert lines[2] == "Glue,,N/A,0,ltr,0,,0.00,Not Tracked"
    assert lines[3] == ""


def test_items_to_csv_quotes_line_breaks_and_quotes():
    """(성공) 이름에 CR, LF, 따옴표가 있어도 한 행으로 읽힘"""
    items = [_item(name='Bolt\rM8 "zinc"'), _item(name="Nut\nM8")]

    rows = list(csv.reader(StringIO(items_to_csv(items, {"c-1": "Hardware"}), newline="")))

    assert len(rows) == 3
    assert rows[1][0] == 'Bolt\rM8 "zinc"'
    assert rows[1][2] == "Hardware"
    assert rows[2][0] == "Nut\nM8"
    assert all(len(row) == len(CSV_HEADERS) for row in rows)


def test_items_to_csv_empty():
    assert items_to_csv([]) == ",".join(CSV_HEADERS) + "\r\n"


def test_generate_export_filename():
    assert generate_export_filename(today=date(2024, 3, 9)) == "inventory-2024-03-09.csv"
    assert generate_export_filename("low-stock", date(2024, 12, 31)) == "low-stock-2024-12-31.csv"
