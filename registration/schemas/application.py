# registration/schemas/application.py
from __future__ import annotations

import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Literal, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    TypeAdapter,
    ValidationError,
    ValidationInfo,
    field_validator,
)
from pydantic_core import PydanticCustomError


# ========= Enums =========
class Residency(str, Enum):
    HOSTELLER = "Hosteller"
    DAY_SCHOLAR = "Day Scholar"


class Team(str, Enum):
    TECH = "Tech"
    MULTIMEDIA = "Multimedia"
    RESEARCH = "Research"
    MANAGEMENT = "Management"
    PR = "PR"
    SPONSORSHIP = "Sponsorship"
    DESIGN = "Design"


# Chọn 1 trong các team này thì bắt buộc có link portfolio
PORTFOLIO_TEAMS = frozenset({Team.TECH.value, Team.MULTIMEDIA.value, Team.DESIGN.value})
TEAM_VALUES = tuple(t.value for t in Team)
RESIDENCY_VALUES = tuple(r.value for r in Residency)

MAX_TEAMS = 3
WHY_MIN_CHARS = 20
WHY_MAX_CHARS = 500

FIELD_ORDER = (
    "name", "enrollment", "course", "phone", "residency",
    "teams", "why", "portfolio", "experience",
)

MESSAGES = {
    "name": "Name must be at least 2 characters.",
    "enrollment": "Please enter a valid Enrollment No. or Year.",
    "course": "Please enter your course.",
    "phone": "Please enter a valid 10-digit Indian phone number.",
    "residency": "Please select your residency type.",
    "teams_empty": "Please select at least one team.",
    "teams_too_many": f"You can select up to {MAX_TEAMS} teams.",
    "why_short": f"Please tell us a bit more (min. {WHY_MIN_CHARS} characters).",
    "why_long": f"Response must be under {WHY_MAX_CHARS} characters.",
    "portfolio": "A valid portfolio URL is required for this team.",
}

# thông điệp khi field văn bản nhận giá trị không phải chuỗi/số (list, object, bool)
_TEXT_MESSAGES = {
    "name": MESSAGES["name"],
    "enrollment": MESSAGES["enrollment"],
    "course": MESSAGES["course"],
    "phone": MESSAGES["phone"],
    "why": MESSAGES["why_short"],
    "portfolio": MESSAGES["portfolio"],
}

_LEADING_DIGITS = re.compile(r"^\d(-\d)?$")
_HTTP_URL = TypeAdapter(HttpUrl)


def build_phone_pattern(leading_digits: str = "6-9") -> re.Pattern:
    """
    +91 (kèm '-' hoặc khoảng trắng), '0' hoặc '91' ở đầu đều tuỳ chọn,
    sau đó là 10 chữ số với chữ số đầu nằm trong khoảng `leading_digits`.
    """
    s = (leading_digits or "").strip()
    if not _LEADING_DIGITS.fullmatch(s):
        raise ValueError(f"leading_digits phải có dạng '6-9' hoặc '7', nhận: {leading_digits!r}")
    return re.compile(rf"^(\+91[\-\s]?)?[0]?(91)?[{s}]\d{{9}}$")


DEFAULT_PHONE_PATTERN = build_phone_pattern()


def requires_portfolio(teams: Optional[Iterable[Any]]) -> bool:
    """True nếu danh sách team có Tech / Multimedia / Design."""
    for t in teams or ():
        name = getattr(t, "value", t)
        if isinstance(name, str) and name in PORTFOLIO_TEAMS:
            return True
    return False


def is_valid_url(value: str) -> bool:
    """Chỉ nhận URL tuyệt đối http/https (ftp://, mailto:, link thiếu scheme đều bị loại)."""
    try:
        _HTTP_URL.validate_python(value.strip())
    except ValidationError:
        return False
    return True


def _rule_error(message: str) -> PydanticCustomError:
    return PydanticCustomError("application_rule", message)


# ========= Application (dữ liệu từ form) =========
class ApplicationIn(BaseModel):
    # validate cả giá trị mặc định để field bị thiếu vẫn báo đúng thông điệp
    model_config = ConfigDict(validate_default=True, extra="ignore")

    name: str = ""
    enrollment: str = ""
    course: str = ""
    phone: str = ""
    residency: Optional[Residency] = None
    # teams phải khai báo trước portfolio: validator của portfolio đọc teams qua info.data
    teams: List[Team] = Field(default_factory=list)
    why: str = ""
    portfolio: str = ""
    experience: str = ""

    # ---- Validators ----
    @field_validator("name", "enrollment", "course", "phone", "why", "portfolio", "experience", mode="before")
    @classmethod
    def _none_to_empty(cls, v, info: ValidationInfo):
        if v is None:
            return ""
        # số từ JSON (vd. phone: 9876543210) → chuỗi, để luật của field quyết định
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        if not isinstance(v, str):
            raise _rule_error(_TEXT_MESSAGES.get(info.field_name, "Please enter text."))
        return v

    @field_validator("name", "course")
    @classmethod
    def _min_two(cls, v: str, info: ValidationInfo) -> str:
        if len(v) < 2:
            raise _rule_error(MESSAGES[info.field_name])
        return v

    @field_validator("enrollment")
    @classmethod
    def _check_enrollment(cls, v: str) -> str:
        if len(v) < 4:
            raise _rule_error(MESSAGES["enrollment"])
        return v

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, v: str, info: ValidationInfo) -> str:
        pattern = (info.context or {}).get("phone_pattern") or DEFAULT_PHONE_PATTERN
        if not pattern.fullmatch(v):
            raise _rule_error(MESSAGES["phone"])
        return v

    @field_validator("residency", mode="before")
    @classmethod
    def _check_residency(cls, v):
        v = getattr(v, "value", v)
        if v not in RESIDENCY_VALUES:
            raise _rule_error(MESSAGES["residency"])
        return v

    @field_validator("teams", mode="before")
    @classmethod
    def _check_teams(cls, v):
        """Cho phép None / 1 chuỗi / list. Gộp trùng, giữ thứ tự chọn."""
        if v is None:
            v = []
        elif isinstance(v, (str, Team)):
            v = [v]
        if not isinstance(v, (list, tuple, set, frozenset)):
            raise _rule_error(MESSAGES["teams_empty"])

        picked: List[str] = []
        for raw in v:
            name = getattr(raw, "value", raw)
            if name not in TEAM_VALUES:
                raise _rule_error(f"Unknown team: {name}.")
            if name not in picked:
                picked.append(name)

        if not picked:
            raise _rule_error(MESSAGES["teams_empty"])
        if len(picked) > MAX_TEAMS:
            raise _rule_error(MESSAGES["teams_too_many"])
        return picked

    @field_validator("why")
    @classmethod
    def _check_why(cls, v: str) -> str:
        if len(v) < WHY_MIN_CHARS:
            raise _rule_error(MESSAGES["why_short"])
        if len(v) > WHY_MAX_CHARS:
            raise _rule_error(MESSAGES["why_long"])
        return v

    @field_validator("portfolio")
    @classmethod
    def _check_portfolio(cls, v: str, info: ValidationInfo) -> str:
        # teams không hợp lệ thì không có trong info.data -> lỗi đã nằm ở field teams
        if not requires_portfolio(info.data.get("teams")):
            return v
        if not v.strip() or not is_valid_url(v):
            raise _rule_error(MESSAGES["portfolio"])
        return v

    @property
    def team_choices(self) -> str:
        """["Tech", "Design"] -> "Tech, Design" (đúng định dạng cột trong sheet)."""
        return ", ".join(t.value for t in self.teams)


# ========= Out (payload trả về) =========
class SubmitOut(BaseModel):
    status: Literal["success", "error"]
    message: str
    errors: Optional[Dict[str, str]] = None


class ValidateOut(BaseModel):
    valid: bool
    errors: Dict[str, str] = Field(default_factory=dict)
    show_portfolio: bool = False


class StorageAck(BaseModel):
    status: Literal["success", "error"]
    message: Optional[str] = None
    data: Optional[str] = None
    teams: Optional[str] = None
