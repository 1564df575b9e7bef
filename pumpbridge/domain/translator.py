"""Intent -> broker control message."""

from typing import Optional

from pumpbridge.domain.models import (
    PUMP_OFF,
    PUMP_ON,
    SET_INTERVAL,
    STATUS,
    VALVE_OFF,
    VALVE_ON,
    ControlMessage,
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


def translate(intent: Intent) -> Optional[ControlMessage]:
    """Map an intent to the message published on the commands topic.

    ShowMenu and Unknown produce nothing for the broker.
    """
    if isinstance(intent, PumpOn):
        return ControlMessage(PUMP_ON, minutes=intent.duration_minutes)
    if isinstance(intent, PumpOff):
        return ControlMessage(PUMP_OFF)
    if isinstance(intent, ValveOn):
        return ControlMessage(VALVE_ON, seconds=intent.duration_seconds)
    if isinstance(intent, ValveOff):
        return ControlMessage(VALVE_OFF)
    if isinstance(intent, SetInterval):
        return ControlMessage(SET_INTERVAL, minutes=intent.minutes)
    if isinstance(intent, Status):
        return ControlMessage(STATUS)
    if isinstance(intent, (ShowMenu, Unknown)):
        return None
    raise TypeError(f"not an intent: {intent!r}")
