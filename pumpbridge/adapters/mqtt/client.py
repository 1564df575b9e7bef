"""MQTT broker adapter: paho-mqtt bridged onto asyncio.

paho runs its network loop in a background thread (loop_start). Incoming
messages are handed to the event loop with run_coroutine_threadsafe, and
publish tokens are awaited in the default executor so the loop never blocks.
"""

import asyncio
import sys
from typing import Dict, Optional

import paho.mqtt.client as mqtt

from pumpbridge.config import MQTTConfig
from pumpbridge.ports.outbound import BrokerHandler, PublishResult


def _log(msg: str):
    print(msg, file=sys.stderr)


class BrokerConnectionError(ConnectionError):
    """Broker refused the connection or subscription."""


class MQTTBroker:
    """BrokerPort implementation using paho-mqtt."""

    def __init__(
        self,
        settings: MQTTConfig,
        client: Optional[mqtt.Client] = None,
    ):
        self.settings = settings
        self.host, self.port, self.tls = settings.endpoint
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._connected: Optional[asyncio.Future] = None
        self._subscriptions: Dict[str, BrokerHandler] = {}

        self.client = client or mqtt.Client(
            mqtt.CallbackAPIVersion.VERSION2, client_id=settings.client_id
        )
        if settings.username:
            self.client.username_pw_set(settings.username, settings.password or None)
        if self.tls:
            self.client.tls_set()

        self.client.on_connect = self._on_connect
        self.client.on_disconnect = self._on_disconnect

    # --- paho callbacks (network thread) ---

    def _on_connect(self, client, userdata, flags, reason_code, properties=None):
        if reason_code.is_failure:
            _log(f"[mqtt] connection refused by {self.host}:{self.port}: {reason_code}")
            self._resolve_connect(BrokerConnectionError(f"MQTT connect refused: {reason_code}"))
            return

        _log(f"[mqtt] connected to {self.host}:{self.port}")
        # Restore subscriptions after an automatic reconnect
        for pattern in self._subscriptions:
            client.subscribe(pattern, qos=self.settings.qos)
        self._resolve_connect(None)

    def _on_disconnect(self, client, userdata, flags, reason_code, properties=None):
        if reason_code.is_failure:
            _log(f"[mqtt] unexpected disconnect: {reason_code}, paho will reconnect")
        else:
            _log("[mqtt] disconnected")

    def _resolve_connect(self, error: Optional[Exception]) -> None:
        if self._loop is None or self._connected is None:
            return

        def _set(fut: asyncio.Future):
            if fut.done():
                return
            if error is None:
                fut.set_result(True)
            else:
                fut.set_exception(error)

        self._loop.call_soon_threadsafe(_set, self._connected)

    def _make_callback(self, handler: BrokerHandler):
        def _on_message(client, userdata, message):
            if self._loop is None:
                return
            topic = message.topic

            def _report(future):
                if future.cancelled():
                    return
                error = future.exception()
                if error is not None:
                    _log(f"[mqtt] handler error topic={topic}: {error}")

            asyncio.run_coroutine_threadsafe(
                handler(topic, message.payload), self._loop
            ).add_done_callback(_report)

        return _on_message

    # --- lifecycle ---

    async def connect(self) -> None:
        """Connect and wait for CONNACK. Raises BrokerConnectionError."""
        self._loop = asyncio.get_running_loop()
        self._connected = self._loop.create_future()
        try:
            await self._loop.run_in_executor(
                None, self.client.connect, self.host, self.port, self.settings.keepalive
            )
        except OSError as e:
            raise BrokerConnectionError(
                f"Unable to connect to MQTT broker at {self.host}:{self.port}: {e}"
            ) from e
        self.client.loop_start()
        try:
            await self._connected
        except BrokerConnectionError:
            self.client.loop_stop()
            raise

    def close(self) -> None:
        self.client.disconnect()
        self.client.loop_stop()

    # --- BrokerPort ---

    def subscribe(self, topic_pattern: str, handler: BrokerHandler) -> None:
        self._subscriptions[topic_pattern] = handler
        self.client.message_callback_add(topic_pattern, self._make_callback(handler))
        result, _mid = self.client.subscribe(topic_pattern, qos=self.settings.qos)
        if result != mqtt.MQTT_ERR_SUCCESS:
            raise BrokerConnectionError(
                f"Subscribe to {topic_pattern!r} failed: {mqtt.error_string(result)}"
            )
        _log(f"[mqtt] subscribed to {topic_pattern}")

    async def publish(self, topic: str, payload: bytes) -> PublishResult:
        try:
            info = self.client.publish(topic, payload, qos=self.settings.qos, retain=False)
            if info.rc != mqtt.MQTT_ERR_SUCCESS:
                return PublishResult(
                    success=False, topic=topic, mid=info.mid, error=mqtt.error_string(info.rc)
                )
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, info.wait_for_publish)
            return PublishResult(success=True, topic=topic, mid=info.mid)
        except Exception as e:
            return PublishResult(success=False, topic=topic, error=str(e))
