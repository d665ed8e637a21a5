import json
import logging
from typing import Any, Dict, List, Optional, Protocol

import requests

from .config import Config
from .errors import DecodeError, ServiceError, TransportError
from .messages import (
    ActionCardMessage,
    AtParams,
    LinkMessage,
    MarkdownMessage,
    Message,
    TextMessage,
    encode_message,
)
from .ratelimit import WindowRateLimiter

logger = logging.getLogger("dingrobot.trace")

JSON_HEADERS = {"Content-Type": "application/json"}


class Roboter(Protocol):
    def send_text(
        self, content: str, at_mobiles: Optional[List[str]] = None, is_at_all: bool = False
    ) -> None: ...

    def send_link(self, title: str, text: str, message_url: str, pic_url: str) -> None: ...

    def send_markdown(
        self,
        title: str,
        text: str,
        at_mobiles: Optional[List[str]] = None,
        is_at_all: bool = False,
    ) -> None: ...

    def send_action_card(
        self,
        title: str,
        text: str,
        single_title: str,
        single_url: str,
        btn_orientation: str,
        hide_avatar: str,
    ) -> None: ...


class DingRobot:
    """Blocking client for a group robot webhook.

    Every send blocks until the HTTP round trip finishes. The rate limiter is
    lock-guarded, but the underlying ``requests.Session`` is not guaranteed to
    be thread safe; give each thread its own client (or inject a session per
    thread) when sending concurrently.
    """

    def __init__(
        self,
        webhook_url: str,
        timeout_seconds: Optional[float] = None,
        session: Optional[requests.Session] = None,
        rate_limiter: Optional[WindowRateLimiter] = None,
    ) -> None:
        if not webhook_url:
            raise ValueError("Missing DINGROBOT_WEBHOOK_URL")
        self.webhook_url = webhook_url
        self.timeout_seconds = timeout_seconds
        self._owns_session = session is None
        self.session = session if session is not None else requests.Session()
        self.rate_limiter = rate_limiter or WindowRateLimiter()

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self) -> "DingRobot":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def send_text(
        self, content: str, at_mobiles: Optional[List[str]] = None, is_at_all: bool = False
    ) -> None:
        self._dispatch(TextMessage(content=content, at=AtParams(at_mobiles, is_at_all)))

    def send_link(self, title: str, text: str, message_url: str, pic_url: str) -> None:
        self._dispatch(
            LinkMessage(title=title, text=text, message_url=message_url, pic_url=pic_url)
        )

    def send_markdown(
        self,
        title: str,
        text: str,
        at_mobiles: Optional[List[str]] = None,
        is_at_all: bool = False,
    ) -> None:
        self._dispatch(
            MarkdownMessage(title=title, text=text, at=AtParams(at_mobiles, is_at_all))
        )

    def send_action_card(
        self,
        title: str,
        text: str,
        single_title: str,
        single_url: str,
        btn_orientation: str,
        hide_avatar: str,
    ) -> None:
        self._dispatch(
            ActionCardMessage(
                title=title,
                text=text,
                single_title=single_title,
                single_url=single_url,
                btn_orientation=btn_orientation,
                hide_avatar=hide_avatar,
            )
        )

    def _dispatch(self, message: Message) -> None:
        self.rate_limiter.acquire()
        body = encode_message(message)
        logger.debug("Sending %s message (%s bytes)", message.msgtype, len(body))

        try:
            response = self.session.post(
                self.webhook_url,
                data=body,
                headers=JSON_HEADERS,
                timeout=self.timeout_seconds,
            )
            raw = response.text
        except requests.RequestException as exc:
            raise TransportError(str(exc)) from exc

        logger.debug("RAW_RESPONSE: %s", raw)
        status = _decode_status(raw, response.status_code)
        if status["errcode"] != 0:
            raise ServiceError(status["errcode"], status["errmsg"])


def _decode_status(raw: str, status_code: Optional[int]) -> Dict[str, Any]:
    try:
        payload = json.loads(raw)
    except ValueError as exc:
        raise DecodeError(
            f"Response is not valid JSON (HTTP {status_code})", status_code, raw
        ) from exc
    if not isinstance(payload, dict):
        raise DecodeError(
            f"Response is not a JSON object (HTTP {status_code})", status_code, raw
        )
    errcode = payload.get("errcode")
    if isinstance(errcode, bool) or not isinstance(errcode, int):
        raise DecodeError(
            f"Response has no integer errcode (HTTP {status_code})", status_code, raw
        )
    errmsg = payload.get("errmsg")
    return {"errcode": errcode, "errmsg": "" if errmsg is None else str(errmsg)}


def create_client(config: Config) -> DingRobot:
    if not config.webhook_url:
        raise ValueError("Missing DINGROBOT_WEBHOOK_URL")
    return DingRobot(
        webhook_url=config.webhook_url,
        timeout_seconds=config.request_timeout_seconds,
        rate_limiter=WindowRateLimiter(
            max_calls=config.rate_limit_max_calls,
            window_seconds=config.rate_limit_window_seconds,
        ),
    )
