"""Port interfaces (Hexagonal Architecture)."""

from pumpbridge.ports.inbound import IncomingCallback, IncomingText
from pumpbridge.ports.outbound import (
    BrokerHandler,
    BrokerPort,
    ChatPort,
    Keyboard,
    KeyboardButton,
    PublishResult,
    SendResult,
)

__all__ = [
    "IncomingCallback",
    "IncomingText",
    "BrokerHandler",
    "BrokerPort",
    "ChatPort",
    "Keyboard",
    "KeyboardButton",
    "PublishResult",
    "SendResult",
]
