# ================================
# file: registration/services/form_controller.py
# ================================
from __future__ import annotations

import copy
import logging
import re
from enum import Enum
from typing import Any, Dict, Mapping, Optional

from ..schemas.application import FIELD_ORDER, requires_portfolio
from .relay import Failure, RelayOutcome
from .validation import ApplicationInvalid, parse_application, validate_application

log = logging.getLogger("form")


class FormState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    SUCCESS = "success"
    ERROR = "error"


class FormError(Exception):
    pass


class SubmissionInProgress(FormError):
    """Đang gửi: không cho sửa field hay submit lần nữa."""


class FormLocked(FormError):
    """Đã gửi thành công: form chỉ còn màn hình xác nhận."""


class UnknownField(FormError):
    pass


def empty_values() -> Dict[str, Any]:
    values: Dict[str, Any] = {k: "" for k in FIELD_ORDER}
    values["teams"] = []
    return values


class FormController:
    """
    Trạng thái của 1 form (1 người dùng, 1 tab):
      idle -> submitting -> success | error
    error vẫn sửa được như idle, giữ nguyên dữ liệu đã nhập.
    """

    def __init__(
        self,
        relay,
        *,
        values: Optional[Mapping[str, Any]] = None,
        phone_pattern: Optional[re.Pattern] = None,
    ):
        self._relay = relay
        self._phone_pattern = phone_pattern
        self._values = empty_values()
        self.state = FormState.IDLE
        self.error_message: Optional[str] = None
        self.errors: Dict[str, str] = {}
        self._celebrate_pending = False
        for k, v in (values or {}).items():
            if k in self._values:
                self._values[k] = self._copy_value(k, v)

    # ---- derived ----
    @property
    def values(self) -> Dict[str, Any]:
        return copy.deepcopy(self._values)

    @property
    def show_portfolio_field(self) -> bool:
        return requires_portfolio(self._values["teams"])

    @property
    def submit_enabled(self) -> bool:
        return self.state in (FormState.IDLE, FormState.ERROR)

    @property
    def is_valid(self) -> bool:
        return not validate_application(self._values, phone_pattern=self._phone_pattern)

    # ---- editing ----
    def update(self, field: str, value: Any) -> Dict[str, str]:
        """Đổi 1 field rồi validate lại toàn bộ (hiển thị lỗi trực tiếp)."""
        self._ensure_editable()
        if field not in self._values:
            raise UnknownField(field)
        self._values[field] = self._copy_value(field, value)
        return self.validate()

    def validate(self) -> Dict[str, str]:
        self.errors = validate_application(self._values, phone_pattern=self._phone_pattern)
        return self.errors

    def reset(self) -> None:
        if self.state == FormState.SUBMITTING:
            raise SubmissionInProgress("cannot reset while submitting")
        self._values = empty_values()
        self.state = FormState.IDLE
        self.error_message = None
        self.errors = {}
        self._celebrate_pending = False

    # ---- submit ----
    def submit(self) -> FormState:
        self._ensure_editable()

        # chụp dữ liệu trước khi rời idle; validate và relay dùng đúng bản này
        snapshot = copy.deepcopy(self._values)
        try:
            application = parse_application(snapshot, phone_pattern=self._phone_pattern)
        except ApplicationInvalid as e:
            self.errors = e.errors
            self.state = FormState.IDLE
            self.error_message = None
            return self.state

        self.errors = {}
        self.error_message = None
        self.state = FormState.SUBMITTING
        try:
            outcome: RelayOutcome = self._relay.send(application)
        except Exception:
            log.exception("Relay raised while submitting")
            outcome = Failure()

        if outcome.ok:
            self.state = FormState.SUCCESS
            self._celebrate_pending = True
        else:
            self.state = FormState.ERROR
            self.error_message = outcome.message
        return self.state

    def consume_celebration(self) -> bool:
        """True đúng 1 lần sau khi vào success."""
        if self._celebrate_pending:
            self._celebrate_pending = False
            return True
        return False

    # ---- helpers ----
    def _ensure_editable(self) -> None:
        if self.state == FormState.SUBMITTING:
            raise SubmissionInProgress("a submission is already in flight")
        if self.state == FormState.SUCCESS:
            raise FormLocked("application already submitted")

    @staticmethod
    def _copy_value(field: str, value: Any) -> Any:
        if field == "teams":
            if value is None:
                return []
            if isinstance(value, str):
                return [value]
            return list(value)
        return value
