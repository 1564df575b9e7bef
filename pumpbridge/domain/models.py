"""Domain data models — pure Python dataclasses."""

import json
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

# Canonical command names understood by the device firmware
PUMP_ON = "pump_on"
PUMP_OFF = "pump_off"
VALVE_ON = "valve_on"
VALVE_OFF = "valve_off"
SET_INTERVAL = "set_interval"
STATUS = "status"


# --- Intents ---


@dataclass(frozen=True)
class PumpOn:
    duration_minutes: Optional[int] = None


@dataclass(frozen=True)
class PumpOff:
    pass


@dataclass(frozen=True)
class ValveOn:
    duration_seconds: Optional[int] = None


@dataclass(frozen=True)
class ValveOff:
    pass


@dataclass(frozen=True)
class SetInterval:
    minutes: int


@dataclass(frozen=True)
class Status:
    pass


@dataclass(frozen=True)
class ShowMenu:
    pass


@dataclass(frozen=True)
class Unknown:
    raw_text: str


Intent = Union[PumpOn, PumpOff, ValveOn, ValveOff, SetInterval, Status, ShowMenu, Unknown]


# --- Wire payloads ---


@dataclass(frozen=True)
class ControlMessage:
    """Structured command published to the broker."""

    command: str
    minutes: Optional[int] = None
    seconds: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"command": self.command}
        if self.minutes is not None:
            payload["minutes"] = self.minutes
        if self.seconds is not None:
            payload["seconds"] = self.seconds
        return payload

    def encode(self) -> bytes:
        return json.dumps(self.to_payload(), separators=(",", ":"), ensure_ascii=False).encode("utf-8")


@dataclass(frozen=True)
class Notification:
    """Chat message derived from a broker message."""

    topic: str
    body: str

    def render(self) -> str:
        return f"[{self.topic}]\n{self.body}"
