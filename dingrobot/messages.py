from dataclasses import dataclass, field
import json
from typing import Any, ClassVar, Dict, List, Optional, Union

from .errors import SerializationError

MSG_TYPE_TEXT = "text"
MSG_TYPE_LINK = "link"
MSG_TYPE_MARKDOWN = "markdown"
MSG_TYPE_ACTION_CARD = "actionCard"

MESSAGE_TYPES = frozenset(
    {MSG_TYPE_TEXT, MSG_TYPE_LINK, MSG_TYPE_MARKDOWN, MSG_TYPE_ACTION_CARD}
)


@dataclass(frozen=True)
class AtParams:
    at_mobiles: Optional[List[str]] = None
    is_at_all: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "atMobiles": list(self.at_mobiles or []),
            "isAtAll": self.is_at_all,
        }


@dataclass(frozen=True)
class TextMessage:
    msgtype: ClassVar[str] = MSG_TYPE_TEXT

    content: str
    at: AtParams = field(default_factory=AtParams)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "msgtype": self.msgtype,
            "text": {"content": self.content},
            "at": self.at.to_payload(),
        }


@dataclass(frozen=True)
class LinkMessage:
    msgtype: ClassVar[str] = MSG_TYPE_LINK

    title: str
    text: str
    message_url: str
    pic_url: str = ""

    def to_payload(self) -> Dict[str, Any]:
        return {
            "msgtype": self.msgtype,
            "link": {
                "title": self.title,
                "text": self.text,
                "messageUrl": self.message_url,
                "picUrl": self.pic_url,
            },
        }


@dataclass(frozen=True)
class MarkdownMessage:
    msgtype: ClassVar[str] = MSG_TYPE_MARKDOWN

    title: str
    text: str
    at: AtParams = field(default_factory=AtParams)

    def to_payload(self) -> Dict[str, Any]:
        return {
            "msgtype": self.msgtype,
            "markdown": {"title": self.title, "text": self.text},
            "at": self.at.to_payload(),
        }


@dataclass(frozen=True)
class ActionCardMessage:
    """Whole-card action card with a single button.

    ``btn_orientation`` is "0" (vertical) or "1" (horizontal) and
    ``hide_avatar`` is "0" (show) or "1" (hide); both travel as strings.
    """

    msgtype: ClassVar[str] = MSG_TYPE_ACTION_CARD

    title: str
    text: str
    single_title: str
    single_url: str
    btn_orientation: str = "0"
    hide_avatar: str = "0"

    def to_payload(self) -> Dict[str, Any]:
        return {
            "msgtype": self.msgtype,
            "actionCard": {
                "title": self.title,
                "text": self.text,
                "singleTitle": self.single_title,
                "singleURL": self.single_url,
                "btnOrientation": self.btn_orientation,
                "hideAvatar": self.hide_avatar,
            },
        }


Message = Union[TextMessage, LinkMessage, MarkdownMessage, ActionCardMessage]


def encode_message(message: Message) -> bytes:
    if message.msgtype not in MESSAGE_TYPES:
        raise SerializationError(f"Unknown msgtype: {message.msgtype!r}")
    try:
        return json.dumps(message.to_payload(), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        raise SerializationError(
            f"Unable to encode {message.msgtype} message: {exc}"
        ) from exc
