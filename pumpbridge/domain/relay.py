"""Broker message -> chat notification."""

from typing import Optional, Union

from pumpbridge.domain.models import Notification


def decode_payload(payload: Union[bytes, str]) -> str:
    if isinstance(payload, str):
        return payload
    return payload.decode("utf-8", errors="replace")


def relay(topic: str, payload: Union[bytes, str]) -> Optional[Notification]:
    """Build the notification for a device message, or None if it is blank."""
    text = decode_payload(payload)
    if not text.strip():
        return None
    return Notification(topic=topic, body=text)
