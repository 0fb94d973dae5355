# registration/services/validation.py
from __future__ import annotations

import re
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional

from pydantic import ValidationError

from ..core.config import settings
from ..schemas.application import ApplicationIn, FIELD_ORDER, build_phone_pattern


class ApplicationInvalid(ValueError):
    """Dữ liệu form sai; `errors` là map {field: thông điệp}."""

    def __init__(self, errors: Dict[str, str]):
        self.errors = errors
        super().__init__(", ".join(f"{k}: {v}" for k, v in errors.items()))


@lru_cache(maxsize=8)
def _pattern_for(leading_digits: str) -> re.Pattern:
    return build_phone_pattern(leading_digits)


def current_phone_pattern() -> re.Pattern:
    return _pattern_for(settings.PHONE_LEADING_DIGITS)


def errors_by_field(exc: ValidationError) -> Dict[str, str]:
    """
    Gom lỗi pydantic thành {field: message}, mỗi field giữ thông điệp đầu tiên,
    sắp theo thứ tự field trên form.
    """
    found: Dict[str, str] = {}
    for err in exc.errors():
        loc = err.get("loc") or ()
        field = str(loc[0]) if loc else "__root__"
        found.setdefault(field, err.get("msg") or "Invalid value.")

    def _order(k: str) -> int:
        return FIELD_ORDER.index(k) if k in FIELD_ORDER else len(FIELD_ORDER)

    return {k: found[k] for k in sorted(found, key=_order)}


def parse_application(data: Any, *, phone_pattern: Optional[re.Pattern] = None) -> ApplicationIn:
    """Validate 1 lượt toàn bộ record; sai thì raise ApplicationInvalid với đủ các lỗi."""
    if isinstance(data, ApplicationIn):
        data = data.model_dump(mode="json")
    try:
        return ApplicationIn.model_validate(
            data,
            context={"phone_pattern": phone_pattern or current_phone_pattern()},
        )
    except ValidationError as e:
        raise ApplicationInvalid(errors_by_field(e)) from e


def validate_application(data: Mapping[str, Any], *, phone_pattern: Optional[re.Pattern] = None) -> Dict[str, str]:
    """{} nghĩa là hợp lệ."""
    try:
        parse_application(data, phone_pattern=phone_pattern)
    except ApplicationInvalid as e:
        return e.errors
    return {}
