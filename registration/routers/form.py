# registration/routers/form.py
import os
from typing import List, Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates

from ..schemas.application import RESIDENCY_VALUES, TEAM_VALUES, MAX_TEAMS
from ..services.form_controller import FormController, FormState
from ..services.relay import SubmissionRelay, get_relay

BASE_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
templates = Jinja2Templates(directory=os.path.join(BASE_DIR, "web", "templates"))

router = APIRouter(tags=["Form"])

CELEBRATE_KEY = "celebrate"


def _render(request: Request, controller: FormController, status_code: int = 200):
    return templates.TemplateResponse(
        request,
        "form.html",
        {
            "values": controller.values,
            "errors": controller.errors,
            "error_message": controller.error_message,
            "show_portfolio": controller.show_portfolio_field,
            "submit_enabled": controller.submit_enabled,
            "team_choices": TEAM_VALUES,
            "residency_choices": RESIDENCY_VALUES,
            "max_teams": MAX_TEAMS,
        },
        status_code=status_code,
    )


# =====================
# Form đăng ký
# =====================

@router.get("/form", response_class=HTMLResponse)
def form_page(request: Request):
    return _render(request, FormController(relay=None))


@router.post("/form", response_class=HTMLResponse)
def submit_form(
    request: Request,
    name: str = Form(""),
    enrollment: str = Form(""),
    course: str = Form(""),
    phone: str = Form(""),
    residency: Optional[str] = Form(None),
    teams: List[str] = Form([]),
    why: str = Form(""),
    portfolio: str = Form(""),
    experience: str = Form(""),
    relay: SubmissionRelay = Depends(get_relay),
):
    controller = FormController(
        relay,
        values={
            "name": name,
            "enrollment": enrollment,
            "course": course,
            "phone": phone,
            "residency": residency or "",
            "teams": teams,
            "why": why,
            "portfolio": portfolio,
            "experience": experience,
        },
    )
    state = controller.submit()

    if state == FormState.SUCCESS:
        # confetti chỉ bắn 1 lần ở trang cảm ơn
        if controller.consume_celebration():
            request.session[CELEBRATE_KEY] = True
        return RedirectResponse(url="/form/thanks", status_code=303)

    # sai field -> 422; relay lỗi -> vẫn hiện form với dữ liệu cũ + thông báo
    return _render(request, controller, status_code=422 if controller.errors else 200)


@router.get("/form/thanks", response_class=HTMLResponse)
def thanks_page(request: Request):
    celebrate = bool(request.session.pop(CELEBRATE_KEY, False))
    return templates.TemplateResponse(request, "thanks.html", {"celebrate": celebrate})
