# ================================
# file: registration/services/relay.py
# ================================
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Union

import httpx

from ..core.config import settings
from ..schemas.application import ApplicationIn

log = logging.getLogger("relay")

GENERIC_FAILURE = "Something went wrong. Please try again."


# ---------- Kết quả gửi: đúng 2 trường hợp ----------
@dataclass(frozen=True)
class Success:
    @property
    def ok(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    message: str = GENERIC_FAILURE

    @property
    def ok(self) -> bool:
        return False


RelayOutcome = Union[Success, Failure]


def storage_payload(application: ApplicationIn) -> Dict[str, Any]:
    """JSON gửi sang Storage Collaborator: teams gộp thành 1 chuỗi "Tech, Design"."""
    body = application.model_dump(mode="json")
    body["teams"] = application.team_choices
    return body


def _message_of(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    msg = body.get("message")
    if isinstance(msg, str) and msg.strip():
        return msg.strip()
    return None


def parse_storage_response(response: httpx.Response) -> RelayOutcome:
    """
    Chỉ nhận là thành công khi body là JSON object có status == "success".
    Mọi hình dạng khác đều là Failure.
    """
    try:
        body = response.json()
    except ValueError:
        body = None

    if not response.is_success:
        return Failure(_message_of(body) or GENERIC_FAILURE)
    if isinstance(body, dict) and body.get("status") == "success":
        return Success()
    return Failure(_message_of(body) or GENERIC_FAILURE)


class SubmissionRelay:
    """
    Gửi 1 Application đã validate tới Storage Collaborator, đúng 1 lần, không retry.
    Timeout dùng mặc định của httpx.
    """

    def __init__(self, storage_url: str, *, client: Optional[httpx.Client] = None):
        if not storage_url:
            raise ValueError("storage_url is required")
        self._url = storage_url
        # Apps Script trả 302 sang googleusercontent -> phải follow redirect
        self._client = client or httpx.Client(follow_redirects=True)
        self._owns_client = client is None

    def send(self, application: ApplicationIn) -> RelayOutcome:
        payload = storage_payload(application)
        try:
            response = self._client.post(self._url, json=payload)
        except httpx.HTTPError as e:
            log.warning("Storage request failed: %s", type(e).__name__)
            return Failure()

        outcome = parse_storage_response(response)
        if outcome.ok:
            log.info("Stored application for enrollment=%s teams=%s", application.enrollment, payload["teams"])
        else:
            log.warning("Storage rejected application (HTTP %s): %s", response.status_code, outcome.message)
        return outcome

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "SubmissionRelay":
        return self

    def __exit__(self, *exc) -> None:
        self.close()


def get_relay() -> Iterator[SubmissionRelay]:
    relay = SubmissionRelay(settings.STORAGE_URL)
    try:
        yield relay
    finally:
        relay.close()
