# ================================
# registration/services/sheet_store.py
# ================================
from __future__ import annotations

import logging
import threading
from datetime import datetime
from functools import lru_cache
from pathlib import Path
from typing import Any, List, Mapping, Optional

from openpyxl import Workbook, load_workbook
from openpyxl.styles import Alignment

from ..core.config import settings
from ..utils.datetime import now_local

log = logging.getLogger("sheet")

# Thứ tự cột cố định, khớp sheet đang dùng
HEADERS = [
    "Timestamp", "Name", "Enrollment", "Course", "Phone",
    "Residency Type", "Team Choices", "Why", "Portfolio", "Experience",
]
RECORD_KEYS = ("name", "enrollment", "course", "phone", "residency")
TAIL_KEYS = ("why", "portfolio", "experience")


# ---------- Helper ----------
def flatten_teams(teams: Any) -> str:
    """["Tech", "Design", "PR"] -> "Tech, Design, PR"; chuỗi sẵn thì giữ nguyên."""
    if teams in (None, ""):
        return ""
    if isinstance(teams, str):
        return teams
    return ", ".join(str(getattr(t, "value", t)) for t in teams)


def _cell(v: Any) -> Any:
    return "" if v is None else v


def build_row(record: Mapping[str, Any], *, now: Optional[datetime] = None) -> List[Any]:
    row: List[Any] = [now or now_local()]
    row += [_cell(record.get(k)) for k in RECORD_KEYS]
    row.append(flatten_teams(record.get("teams")))
    row += [_cell(record.get(k)) for k in TAIL_KEYS]
    return row


def _autosize(ws):
    ws.freeze_panes = "A2"
    for col in ws.columns:
        w = max(10, *(len(str(c.value)) if c.value else 0 for c in col)) + 2
        ws.column_dimensions[col[0].column_letter].width = min(w, 40)


class SheetStore:
    """Ghi mỗi lần nộp thành 1 dòng trong file .xlsx; ghi tuần tự qua lock."""

    def __init__(self, path: str | Path, title: str = "Registrations"):
        self.path = Path(path)
        self.title = title
        self._lock = threading.Lock()

    def append(self, record: Mapping[str, Any]) -> List[Any]:
        with self._lock:
            wb, ws = self._open()
            row = build_row(record)
            ws.append(row)

            # format cột Timestamp
            c = ws.cell(row=ws.max_row, column=1)
            c.number_format = "dd/mm/yyyy hh:mm:ss"
            c.alignment = Alignment(horizontal="center")

            _autosize(ws)
            wb.save(self.path)
        log.info("Appended row %s to %s", ws.max_row, self.path.name)
        return row

    def _open(self):
        if self.path.exists():
            wb = load_workbook(self.path)
            if self.title in wb.sheetnames:
                return wb, wb[self.title]
            ws = wb.create_sheet(self.title)
            ws.append(HEADERS)
            return wb, ws

        self.path.parent.mkdir(parents=True, exist_ok=True)
        wb = Workbook()
        ws = wb.active
        ws.title = self.title
        ws.append(HEADERS)
        return wb, ws


@lru_cache(maxsize=None)
def sheet_store_for(path: str, title: str) -> SheetStore:
    # 1 store (1 lock) cho mỗi file
    return SheetStore(path, title)


def get_sheet_store() -> SheetStore:
    return sheet_store_for(settings.SHEET_PATH, settings.SHEET_TITLE)
