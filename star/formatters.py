import enum
from dataclasses import dataclass

from .constants import WATCH_MESSAGE_TEMPLATE
from .webhook import WatchEvent


class FormatMode(enum.Enum):
    PLAIN = "plain"
    MARKDOWN = "markdown"


@dataclass(frozen=True)
class OutboundMessage:
    chat_id: int
    text: str
    format_mode: FormatMode = FormatMode.PLAIN


def format_watch_text(event: WatchEvent) -> str:
    return WATCH_MESSAGE_TEMPLATE.format(
        name=event.repository_name,
        count=event.star_count,
        sender_url=event.sender_profile_url,
    )


def build_watch_message(event: WatchEvent, chat_id: int) -> OutboundMessage:
    return OutboundMessage(
        chat_id=chat_id,
        text=format_watch_text(event),
        format_mode=FormatMode.MARKDOWN,
    )
