# registration/routers/submit.py
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends, Request
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from ..schemas.application import SubmitOut, ValidateOut, requires_portfolio
from ..services.relay import SubmissionRelay, get_relay
from ..services.validation import ApplicationInvalid, parse_application, validate_application

router = APIRouter(tags=["Submit"])

SUCCESS_MESSAGE = "Form submitted successfully"
INVALID_MESSAGE = "Please fix the highlighted fields."
BAD_JSON_MESSAGE = "Request body must be valid JSON."


def _error(status_code: int, message: str, errors=None) -> JSONResponse:
    body = SubmitOut(status="error", message=message, errors=errors)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True))


# ================= SUBMIT (relay) =================
@router.post("/submit", response_model=SubmitOut, response_model_exclude_none=True)
async def submit(
    request: Request,
    relay: SubmissionRelay = Depends(get_relay),
):
    # tự đọc body: JSON hỏng vẫn trả về dạng {status, message}
    raw = await request.body()
    try:
        payload = await request.json() if raw.strip() else None
    except ValueError:
        return _error(422, BAD_JSON_MESSAGE)

    try:
        application = parse_application(payload if payload is not None else {})
    except ApplicationInvalid as e:
        return _error(422, INVALID_MESSAGE, e.errors)

    outcome = await run_in_threadpool(relay.send, application)
    if outcome.ok:
        return SubmitOut(status="success", message=SUCCESS_MESSAGE)
    return _error(500, outcome.message)


# ================= VALIDATE (hiển thị lỗi trực tiếp) =================
@router.post("/validate", response_model=ValidateOut)
def validate(payload: Any = Body(None)):
    data = payload if payload is not None else {}
    errors = validate_application(data)

    teams = data.get("teams") if isinstance(data, dict) else None
    if isinstance(teams, str):
        teams = [teams]
    if not isinstance(teams, list):
        teams = []

    return ValidateOut(valid=not errors, errors=errors, show_portfolio=requires_portfolio(teams))
