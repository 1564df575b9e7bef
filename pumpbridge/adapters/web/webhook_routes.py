"""Telegram webhook routes."""

import json
import sys

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel

from pumpbridge.adapters.telegram.updates import parse_update


def _log(msg: str):
    print(msg, file=sys.stderr)


class WebhookAck(BaseModel):
    ok: bool = True


def create_webhook_router(
    webhook_path: str = "/tg/webhook",
    test_path: str = "/tg/test",
) -> APIRouter:
    router = APIRouter(tags=["Telegram"])

    @router.post(webhook_path, response_model=WebhookAck)
    async def telegram_webhook(request: Request):
        body = await request.body()
        try:
            update = json.loads(body)
        except ValueError:
            raise HTTPException(status_code=400, detail="Invalid request")

        event = parse_update(update)
        if event is None:
            return WebhookAck()

        controller = request.app.state.controller
        try:
            await controller.handle_update(event)
        except Exception as e:
            # Telegram redelivers on non-2xx, so the update is still acked
            _log(f"[webhook] error handling update {update.get('update_id')}: {e}")
        return WebhookAck()

    @router.get(test_path, response_class=PlainTextResponse)
    async def webhook_test():
        _log("[webhook] test handler triggered")
        return "OK\n"

    return router
