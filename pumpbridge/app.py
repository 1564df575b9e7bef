"""Process wiring: adapters, startup checks, and the uvicorn entry point."""

import asyncio
import sys
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI

from pumpbridge.adapters.mqtt.client import MQTTBroker
from pumpbridge.adapters.telegram.client import TelegramClient
from pumpbridge.adapters.web.server import create_app
from pumpbridge.config import AppConfig
from pumpbridge.domain.bridge import BridgeController

SHUTDOWN_TIMEOUT = 5.0


def _log(msg: str):
    print(msg, file=sys.stderr)


def build_app(config: AppConfig) -> FastAPI:
    """Create the FastAPI app with real Telegram and MQTT adapters.

    Startup raises (and uvicorn exits) if the bot token is rejected, the
    webhook cannot be registered, or the broker is unreachable.
    """
    telegram = TelegramClient(config.telegram.bot_token)
    broker = MQTTBroker(config.mqtt)
    controller = BridgeController(
        chat=telegram,
        broker=broker,
        recipient_chat_id=config.telegram.chat_id,
        commands_topic=config.mqtt.commands_topic,
        menu_style=config.telegram.menu_style,
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        me = await telegram.get_me()
        _log(f"[app] bot @{me.get('username')} authorized")
        await telegram.set_webhook(config.telegram.webhook_url)

        await broker.connect()
        broker.subscribe(config.mqtt.messages_topic, controller.handle_broker_message)
        _log("[app] ready")
        try:
            yield
        finally:
            _log("[app] shutting down...")
            try:
                await asyncio.wait_for(controller.drain(), timeout=SHUTDOWN_TIMEOUT)
            except asyncio.TimeoutError:
                _log(
                    f"[app] shutdown timed out after {SHUTDOWN_TIMEOUT:g}s, "
                    f"abandoning {controller.pending_count} publish(es)"
                )
            broker.close()
            _log("[app] stopped")

    return create_app(
        controller,
        webhook_path=config.telegram.webhook_path,
        test_path=config.telegram.test_path,
        lifespan=lifespan,
    )


def main() -> None:
    config = AppConfig.from_env()
    missing = config.missing()
    if missing:
        _log(f"Missing required environment variables: {', '.join(missing)}")
        sys.exit(1)
    broker_error = config.broker_error()
    if broker_error:
        _log(broker_error)
        sys.exit(1)

    app = build_app(config)
    _log(f"[app] HTTP server listening on {config.host}:{config.port}")
    uvicorn.run(app, host=config.host, port=config.port, log_level="info")


if __name__ == "__main__":
    main()
