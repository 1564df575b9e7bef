"""Telegram Bot API client using aiohttp."""

import sys
from typing import Any, Dict, List, Optional

import aiohttp

from pumpbridge.ports.outbound import Keyboard, SendResult

TELEGRAM_API_BASE = "https://api.telegram.org"

# Bot API hard limit for sendMessage text
MAX_MESSAGE_LENGTH = 4096


def _log(msg: str):
    print(msg, file=sys.stderr)


class TelegramAPIError(RuntimeError):
    """Bot API call rejected or unreachable."""


class TelegramClient:
    """ChatPort implementation over the Telegram Bot HTTP API."""

    def __init__(self, token: str, api_base: str = TELEGRAM_API_BASE):
        self._token = token
        self._api_base = api_base.rstrip("/")

    @property
    def is_configured(self) -> bool:
        return bool(self._token)

    def _url(self, method: str) -> str:
        return f"{self._api_base}/bot{self._token}/{method}"

    async def _call(self, method: str, payload: Optional[Dict[str, Any]] = None) -> Any:
        async with aiohttp.ClientSession() as session:
            async with session.post(self._url(method), json=payload or {}) as resp:
                data = await resp.json()
        if not data.get("ok"):
            raise TelegramAPIError(
                f"{method} failed: {data.get('description', data)}"
            )
        return data.get("result")

    @staticmethod
    def render_keyboard(keyboard: Keyboard) -> Dict[str, Any]:
        """Keyboard -> Bot API reply_markup object."""
        if keyboard.inline:
            return {
                "inline_keyboard": [
                    [{"text": b.label, "callback_data": b.value} for b in row]
                    for row in keyboard.rows
                ]
            }
        return {
            "keyboard": [[{"text": b.value} for b in row] for row in keyboard.rows],
            "resize_keyboard": True,
        }

    @staticmethod
    def split_text(text: str, limit: int = MAX_MESSAGE_LENGTH) -> List[str]:
        return [text[i:i + limit] for i in range(0, len(text), limit)] or [""]

    # --- startup ---

    async def get_me(self) -> Dict[str, Any]:
        return await self._call("getMe")

    async def set_webhook(self, url: str) -> None:
        await self._call("setWebhook", {"url": url})
        _log(f"[telegram] webhook set to {url}")

    # --- ChatPort ---

    async def send_message(
        self,
        chat_id: int,
        text: str,
        keyboard: Optional[Keyboard] = None,
    ) -> SendResult:
        chunks = self.split_text(text)
        message_id = None
        try:
            for i, chunk in enumerate(chunks):
                payload: Dict[str, Any] = {"chat_id": chat_id, "text": chunk}
                # Selector goes on the last chunk
                if keyboard is not None and i == len(chunks) - 1:
                    payload["reply_markup"] = self.render_keyboard(keyboard)
                result = await self._call("sendMessage", payload)
                message_id = (result or {}).get("message_id")
            return SendResult(success=True, message_id=message_id)
        except Exception as e:
            return SendResult(success=False, message_id=message_id, error=str(e))

    async def answer_callback(self, callback_id: str, text: str) -> SendResult:
        try:
            await self._call(
                "answerCallbackQuery", {"callback_query_id": callback_id, "text": text}
            )
            return SendResult(success=True)
        except Exception as e:
            return SendResult(success=False, error=str(e))
