"""Inbound ports — platform-agnostic chat event representation."""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class IncomingText:
    """Free-text chat message."""

    chat_id: int
    author_name: str
    text: str


@dataclass(frozen=True)
class IncomingCallback:
    """Button tap on an inline keyboard."""

    callback_id: str
    author_name: str
    data: str
    chat_id: Optional[int] = None
