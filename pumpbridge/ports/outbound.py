"""Outbound ports — interfaces for external system adapters."""

from dataclasses import dataclass, field
from typing import Awaitable, Callable, List, Optional, Protocol, runtime_checkable


@dataclass
class SendResult:
    """Unified result type for chat transport operations."""

    success: bool
    message_id: Optional[int] = None
    error: Optional[str] = None


@dataclass
class PublishResult:
    """Unified result type for broker publish operations."""

    success: bool
    topic: Optional[str] = None
    mid: Optional[int] = None
    error: Optional[str] = None


@dataclass(frozen=True)
class KeyboardButton:
    label: str
    # callback identifier for inline keyboards, command text for reply keyboards
    value: str


@dataclass
class Keyboard:
    """Command selector attached to a chat message."""

    rows: List[List[KeyboardButton]] = field(default_factory=list)
    inline: bool = True


BrokerHandler = Callable[[str, bytes], Awaitable[None]]


@runtime_checkable
class ChatPort(Protocol):
    """Interface for the chat transport."""

    async def send_message(
        self,
        chat_id: int,
        text: str,
        keyboard: Optional[Keyboard] = None,
    ) -> SendResult: ...

    async def answer_callback(self, callback_id: str, text: str) -> SendResult: ...


@runtime_checkable
class BrokerPort(Protocol):
    """Interface for the publish/subscribe broker."""

    async def publish(self, topic: str, payload: bytes) -> PublishResult: ...

    def subscribe(self, topic_pattern: str, handler: BrokerHandler) -> None: ...
