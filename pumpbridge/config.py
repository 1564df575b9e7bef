"""Configuration loaded from the environment (.env supported)."""

__version__ = "0.1.0"

import os
import sys
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from urllib.parse import urlsplit

from dotenv import load_dotenv

load_dotenv()

_stderr_print = lambda *a, **kw: print(*a, **kw, file=sys.stderr)

SUPPORTED_MENU_STYLES = ("inline", "reply")

_TLS_SCHEMES = ("ssl", "mqtts", "tls")
_PLAIN_SCHEMES = ("tcp", "mqtt")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        _stderr_print(f"Invalid {name}={raw!r}, falling back to {default}")
        return default


def parse_broker_url(url: str) -> Tuple[str, int, bool]:
    """Split a broker URL into (host, port, tls).

    Accepts tcp://, mqtt://, ssl://, mqtts:// or a bare host[:port].
    """
    if "://" not in url:
        url = "tcp://" + url
    parts = urlsplit(url)
    scheme = parts.scheme.lower()
    if scheme not in _TLS_SCHEMES + _PLAIN_SCHEMES:
        raise ValueError(f"Unsupported MQTT broker scheme: {scheme!r}")
    tls = scheme in _TLS_SCHEMES
    if not parts.hostname:
        raise ValueError(f"MQTT broker URL has no host: {url!r}")
    port = parts.port or (8883 if tls else 1883)
    return parts.hostname, port, tls


@dataclass
class TelegramConfig:
    bot_token: str = ""
    chat_id: int = 0
    webhook_root_url: str = ""
    webhook_path: str = "/tg/webhook"
    test_path: str = "/tg/test"
    menu_style: str = "inline"

    @property
    def webhook_url(self) -> str:
        return self.webhook_root_url.rstrip("/") + self.webhook_path


@dataclass
class MQTTConfig:
    broker: str = "tcp://localhost:1883"
    username: str = ""
    password: str = ""
    client_id: str = "ServerAppClient"
    keepalive: int = 2
    qos: int = 0
    commands_topic: str = "commands"
    messages_topic: str = "messages/#"

    @property
    def endpoint(self) -> Tuple[str, int, bool]:
        return parse_broker_url(self.broker)


@dataclass
class AppConfig:
    """Typed configuration for the bridge process."""

    host: str = "0.0.0.0"
    port: int = 8080
    telegram: TelegramConfig = field(default_factory=TelegramConfig)
    mqtt: MQTTConfig = field(default_factory=MQTTConfig)

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Create AppConfig from environment variables."""
        menu_style = os.getenv("TELEGRAM_MENU_STYLE", "inline").strip().lower()
        if menu_style not in SUPPORTED_MENU_STYLES:
            _stderr_print(f"Unsupported TELEGRAM_MENU_STYLE={menu_style!r}, falling back to 'inline'")
            menu_style = "inline"

        return cls(
            host=os.getenv("HOST", "0.0.0.0"),
            port=_env_int("PORT", 8080),
            telegram=TelegramConfig(
                bot_token=os.getenv("TELEGRAM_BOT_TOKEN", ""),
                chat_id=_env_int("TELEGRAM_CHAT_ID", 0),
                webhook_root_url=os.getenv("WWW_SERVER_ROOT_URL", ""),
                webhook_path=os.getenv("TELEGRAM_WEBHOOK_PATH", "/tg/webhook"),
                menu_style=menu_style,
            ),
            mqtt=MQTTConfig(
                broker=os.getenv("MQTT_BROKER", "tcp://localhost:1883"),
                username=os.getenv("MQTT_USER", ""),
                password=os.getenv("MQTT_PASSWORD", ""),
                client_id=os.getenv("MQTT_CLIENT_ID", "ServerAppClient"),
                keepalive=_env_int("MQTT_KEEPALIVE", 2),
                commands_topic=os.getenv("MQTT_COMMANDS_TOPIC", "commands"),
                messages_topic=os.getenv("MQTT_MESSAGES_TOPIC", "messages/#"),
            ),
        )

    def missing(self) -> List[str]:
        """Names of required environment variables that are not set."""
        missing: List[str] = []
        if not self.telegram.bot_token:
            missing.append("TELEGRAM_BOT_TOKEN")
        if not self.telegram.chat_id:
            missing.append("TELEGRAM_CHAT_ID")
        if not self.telegram.webhook_root_url:
            missing.append("WWW_SERVER_ROOT_URL")
        return missing

    def broker_error(self) -> Optional[str]:
        try:
            self.mqtt.endpoint
        except ValueError as e:
            return str(e)
        return None
