"""BridgeController: chat <-> broker relay, no framework dependencies.

Owns the two independent flows:
- chat event -> command grammar -> translator -> BrokerPort.publish()
- broker message -> relay -> ChatPort.send_message()

Transports are injected as ports so the controller runs against mock ports
in tests.
"""

import asyncio
import sys
from typing import Optional, Set, Union

from pumpbridge.domain.commands import MENU_PROMPT, build_menu, parse, parse_callback
from pumpbridge.domain.models import ControlMessage, Intent, ShowMenu
from pumpbridge.domain.relay import relay
from pumpbridge.domain.translator import translate
from pumpbridge.ports.inbound import IncomingCallback, IncomingText
from pumpbridge.ports.outbound import BrokerPort, ChatPort, PublishResult, SendResult

DEFAULT_COMMANDS_TOPIC = "commands"

CALLBACK_ACK_PREFIX = "✅ Command accepted: "


def _log(msg: str):
    print(msg, file=sys.stderr)


class BridgeController:
    """Stateless per-event dispatcher between chat and broker.

    Publishes run as detached tasks: the caller gets the task back and may
    await it, the webhook path does not.
    """

    def __init__(
        self,
        chat: ChatPort,
        broker: BrokerPort,
        recipient_chat_id: int,
        commands_topic: str = DEFAULT_COMMANDS_TOPIC,
        menu_style: str = "inline",
    ):
        self._chat = chat
        self._broker = broker
        self.recipient_chat_id = recipient_chat_id
        self.commands_topic = commands_topic
        self._menu = build_menu(menu_style)
        self._pending: Set[asyncio.Task] = set()

    @property
    def pending_count(self) -> int:
        return len(self._pending)

    # --- chat -> broker ---

    async def handle_update(
        self, event: Union[IncomingText, IncomingCallback, None]
    ) -> Optional[asyncio.Task]:
        if isinstance(event, IncomingCallback):
            return await self.handle_callback(event)
        if isinstance(event, IncomingText):
            return await self.handle_text(event)
        return None

    async def handle_callback(self, callback: IncomingCallback) -> Optional[asyncio.Task]:
        _log(
            f"[bridge] callback chat_id={callback.chat_id} "
            f"from={callback.author_name} data={callback.data!r}"
        )
        # Ack first so the operator gets feedback even if the publish lags
        await self._answer_callback(callback)
        return await self._handle_intent(parse_callback(callback.data), callback.chat_id)

    async def handle_text(self, message: IncomingText) -> Optional[asyncio.Task]:
        text = message.text.strip()
        _log(
            f"[bridge] message chat_id={message.chat_id} "
            f"from={message.author_name} text={text!r}"
        )
        if not text:
            return None
        return await self._handle_intent(parse(text), message.chat_id)

    async def _answer_callback(self, callback: IncomingCallback) -> None:
        try:
            result = await self._chat.answer_callback(
                callback.callback_id, CALLBACK_ACK_PREFIX + callback.data
            )
        except Exception as e:
            result = SendResult(success=False, error=str(e))
        if not result.success:
            _log(f"[bridge] callback ack failed id={callback.callback_id}: {result.error}")

    async def _handle_intent(self, intent: Intent, chat_id: Optional[int]) -> Optional[asyncio.Task]:
        if isinstance(intent, ShowMenu):
            await self.send_menu(chat_id if chat_id is not None else self.recipient_chat_id)
            return None

        message = translate(intent)
        if message is None:
            return None
        return self.dispatch(message)

    async def send_menu(self, chat_id: int) -> SendResult:
        try:
            result = await self._chat.send_message(chat_id, MENU_PROMPT, keyboard=self._menu)
        except Exception as e:
            result = SendResult(success=False, error=str(e))
        if result.success:
            _log(f"[bridge] menu sent chat_id={chat_id} message_id={result.message_id}")
        else:
            _log(f"[bridge] menu send failed chat_id={chat_id}: {result.error}")
        return result

    def dispatch(self, message: ControlMessage) -> asyncio.Task:
        """Start publishing in the background and return the task."""
        task = asyncio.create_task(self._publish(message))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    async def _publish(self, message: ControlMessage) -> PublishResult:
        payload = message.encode()
        try:
            result = await self._broker.publish(self.commands_topic, payload)
        except Exception as e:
            result = PublishResult(success=False, topic=self.commands_topic, error=str(e))

        if result.success:
            _log(f"[bridge] published topic={self.commands_topic} payload={payload.decode()}")
        else:
            _log(
                f"[bridge] publish failed command={message.command} topic={self.commands_topic} "
                f"payload={payload.decode()}: {result.error}"
            )
        return result

    async def drain(self) -> None:
        """Wait for in-flight publishes (used at shutdown)."""
        if self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    # --- broker -> chat ---

    async def handle_broker_message(self, topic: str, payload: bytes) -> Optional[SendResult]:
        notification = relay(topic, payload)
        if notification is None:
            _log(f"[bridge] empty broker message on {topic}, not forwarded")
            return None

        text = notification.render()
        try:
            result = await self._chat.send_message(self.recipient_chat_id, text)
        except Exception as e:
            result = SendResult(success=False, error=str(e))

        if result.success:
            _log(f"[bridge] forwarded topic={topic} text={notification.body!r}")
        else:
            _log(f"[bridge] notification failed topic={topic} text={notification.body!r}: {result.error}")
        return result
