# registration/routers/storage.py
from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Request
from starlette.concurrency import run_in_threadpool

from ..services.sheet_store import SheetStore, flatten_teams, get_sheet_store

log = logging.getLogger("storage")

router = APIRouter(prefix="/storage", tags=["Storage"])


@router.post("/exec")
async def append_row(request: Request, store: SheetStore = Depends(get_sheet_store)):
    """
    Storage Collaborator: nhận JSON từ relay, ghi 1 dòng vào sheet.
    Luôn trả HTTP 200; thành công/thất bại nằm ở field `status`.
    """
    try:
        raw = await request.body()
        data = json.loads(raw or b"null")
        if not isinstance(data, dict):
            raise ValueError("Expected a JSON object")
        log.debug("Received data: %s", data)

        teams = flatten_teams(data.get("teams"))
        await run_in_threadpool(store.append, data)
    except Exception as e:
        log.exception("Append failed")
        return {"status": "error", "message": str(e) or type(e).__name__}

    return {
        "status": "success",
        "data": json.dumps(data, ensure_ascii=False),
        "teams": teams,
    }
