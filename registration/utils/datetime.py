# ================================
# file: registration/utils/datetime.py
# ================================
from datetime import datetime, timezone

def now_local() -> datetime:
    # naive theo giờ máy chủ, openpyxl không ghi được tzinfo
    return datetime.now(timezone.utc).astimezone().replace(tzinfo=None)

def now_str() -> str:
    return now_local().strftime("%d/%m/%Y %H:%M:%S")
