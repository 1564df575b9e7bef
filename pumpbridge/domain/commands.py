"""Command grammar — text commands and button callbacks.

Pure Python, no framework dependencies. Both chat surfaces resolve through
COMMAND_SPECS, so a command added there is available to text, callbacks
and the reply keyboard at once.
"""

import re
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple, Type

from pumpbridge.domain.models import (
    PUMP_OFF,
    PUMP_ON,
    SET_INTERVAL,
    STATUS,
    VALVE_OFF,
    VALVE_ON,
    Intent,
    PumpOff,
    PumpOn,
    SetInterval,
    ShowMenu,
    Status,
    Unknown,
    ValveOff,
    ValveOn,
)
from pumpbridge.ports.outbound import Keyboard, KeyboardButton

COMMAND_PREFIX = "/"

MENU_PROMPT = "Choose a command:"

# Signed base-10 integer, ASCII digits only
_INT_RE = re.compile(r"[+-]?[0-9]+")

# Devices decode arguments as signed 64-bit integers
MAX_ARGUMENT = 2**63 - 1


@dataclass(frozen=True)
class CommandSpec:
    """Registry entry: command name -> intent constructor."""

    name: str
    intent: Type
    parameter: Optional[str] = None  # intent field fed by the numeric argument
    required: bool = False
    text_command: bool = True

    @property
    def keyword(self) -> str:
        return COMMAND_PREFIX + self.name

    def build(self, argument: Optional[int] = None) -> Intent:
        if self.parameter is None:
            return self.intent()
        if argument is None:
            return Unknown(raw_text=self.name) if self.required else self.intent()
        return self.intent(**{self.parameter: argument})


@dataclass(frozen=True)
class ButtonSpec:
    """Inline button bound to a command with a preset argument."""

    callback_id: str
    label: str
    command: str
    argument: Optional[int] = None


COMMAND_SPECS: Tuple[CommandSpec, ...] = (
    CommandSpec("start", ShowMenu),
    CommandSpec(PUMP_ON, PumpOn, parameter="duration_minutes"),
    CommandSpec(PUMP_OFF, PumpOff),
    CommandSpec(STATUS, Status),
    CommandSpec(VALVE_ON, ValveOn, parameter="duration_seconds"),
    CommandSpec(VALVE_OFF, ValveOff),
    CommandSpec(SET_INTERVAL, SetInterval, parameter="minutes", required=True, text_command=False),
)

BUTTON_ROWS: Tuple[Tuple[ButtonSpec, ...], ...] = (
    (
        ButtonSpec("pump_on", "💧On", PUMP_ON),
        ButtonSpec("pump_on_60", "💧1 h", PUMP_ON, 60),
        ButtonSpec("pump_on_120", "💧2 h", PUMP_ON, 120),
    ),
    (ButtonSpec("status", "📊Status", STATUS),),
    (ButtonSpec("pump_off", "⛔Off", PUMP_OFF),),
    (
        ButtonSpec("valve_on_60", "🚰10L", VALVE_ON, 60),
        ButtonSpec("valve_off", "🚫🚰Off", VALVE_OFF),
    ),
    (
        ButtonSpec("plant_interval_1", "🪴1m", SET_INTERVAL, 1),
        ButtonSpec("plant_interval_5", "🪴5m", SET_INTERVAL, 5),
        ButtonSpec("plant_interval_30", "🪴30m", SET_INTERVAL, 30),
    ),
)

COMMANDS: Dict[str, CommandSpec] = {spec.name: spec for spec in COMMAND_SPECS}

TEXT_COMMANDS: Dict[str, CommandSpec] = {
    spec.keyword: spec for spec in COMMAND_SPECS if spec.text_command
}

CALLBACKS: Dict[str, ButtonSpec] = {
    button.callback_id: button for row in BUTTON_ROWS for button in row
}


def _check_registry() -> None:
    for button in CALLBACKS.values():
        spec = COMMANDS.get(button.command)
        if spec is None:
            raise ValueError(f"button {button.callback_id!r} targets unknown command {button.command!r}")
        if button.argument is not None and spec.parameter is None:
            raise ValueError(f"button {button.callback_id!r} binds an argument to {spec.name!r}")
        if spec.required and button.argument is None:
            raise ValueError(f"button {button.callback_id!r} is missing the argument for {spec.name!r}")


_check_registry()


def parse_argument(token: str) -> Optional[int]:
    """Return a positive integer, or None when the token is not one."""
    if len(token) > 64 or not _INT_RE.fullmatch(token):
        return None
    value = int(token)
    return value if 0 < value <= MAX_ARGUMENT else None


def parse(raw_text: str) -> Intent:
    """Parse a free-text chat command.

    Unrecognized input yields Unknown; a malformed argument is dropped
    and the base command still goes through.
    """
    parts = raw_text.split()
    if not parts or not parts[0].startswith(COMMAND_PREFIX):
        return Unknown(raw_text=raw_text)

    spec = TEXT_COMMANDS.get(parts[0])
    if spec is None:
        return Unknown(raw_text=raw_text)

    argument = None
    if spec.parameter is not None and len(parts) > 1:
        argument = parse_argument(parts[1])
    return spec.build(argument)


def parse_callback(callback_id: str) -> Intent:
    """Resolve a button identifier to its preset intent."""
    button = CALLBACKS.get(callback_id)
    if button is None:
        return Unknown(raw_text=callback_id)
    return COMMANDS[button.command].build(button.argument)


def build_menu(style: str = "inline") -> Keyboard:
    """Command selector sent in reply to /start."""
    if style == "inline":
        rows: List[List[KeyboardButton]] = [
            [KeyboardButton(label=b.label, value=b.callback_id) for b in row]
            for row in BUTTON_ROWS
        ]
        return Keyboard(rows=rows, inline=True)
    if style == "reply":
        keywords = [
            spec.keyword for spec in COMMAND_SPECS
            if spec.text_command and spec.intent is not ShowMenu
        ]
        rows = [
            [KeyboardButton(label=k, value=k) for k in keywords[i:i + 2]]
            for i in range(0, len(keywords), 2)
        ]
        return Keyboard(rows=rows, inline=False)
    raise ValueError(f"unknown menu style: {style!r}")
