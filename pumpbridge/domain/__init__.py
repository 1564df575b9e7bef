"""Domain layer — pure Python, no framework dependencies."""

from pumpbridge.domain.bridge import BridgeController
from pumpbridge.domain.commands import (
    BUTTON_ROWS,
    COMMAND_SPECS,
    ButtonSpec,
    CommandSpec,
    build_menu,
    parse,
    parse_callback,
)
from pumpbridge.domain.models import (
    ControlMessage,
    Intent,
    Notification,
    PumpOff,
    PumpOn,
    SetInterval,
    ShowMenu,
    Status,
    Unknown,
    ValveOff,
    ValveOn,
)
from pumpbridge.domain.relay import relay
from pumpbridge.domain.translator import translate

__all__ = [
    "BridgeController",
    "BUTTON_ROWS",
    "COMMAND_SPECS",
    "ButtonSpec",
    "CommandSpec",
    "build_menu",
    "parse",
    "parse_callback",
    "ControlMessage",
    "Intent",
    "Notification",
    "PumpOff",
    "PumpOn",
    "SetInterval",
    "ShowMenu",
    "Status",
    "Unknown",
    "ValveOff",
    "ValveOn",
    "relay",
    "translate",
]
