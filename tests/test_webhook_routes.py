"""Unit tests for the Telegram webhook routes."""

import asyncio
import json

import pytest
from httpx import ASGITransport, AsyncClient

from pumpbridge.adapters.web.server import create_app
from pumpbridge.domain.bridge import BridgeController
from pumpbridge.ports.outbound import PublishResult, SendResult


class RecordingChat:
    def __init__(self):
        self.sent = []
        self.acks = []

    async def send_message(self, chat_id, text, keyboard=None):
        self.sent.append((chat_id, text, keyboard))
        return SendResult(success=True, message_id=1)

    async def answer_callback(self, callback_id, text):
        self.acks.append(callback_id)
        return SendResult(success=True)


class RecordingBroker:
    def __init__(self):
        self.published = []

    async def publish(self, topic, payload):
        self.published.append((topic, payload))
        return PublishResult(success=True, topic=topic, mid=1)

    def subscribe(self, topic_pattern, handler):
        pass


@pytest.fixture
def ports():
    return RecordingChat(), RecordingBroker()


@pytest.fixture
def controller(ports):
    chat, broker = ports
    return BridgeController(chat, broker, recipient_chat_id=254617095)


@pytest.fixture
def transport(controller):
    return ASGITransport(app=create_app(controller))


class TestWebhook:
    @pytest.mark.asyncio
    async def test_malformed_json(self, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/tg/webhook", content=b"{not json")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid request"

    @pytest.mark.asyncio
    async def test_unrecognized_update(self, transport, ports):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/tg/webhook", json={"update_id": 9, "poll": {"id": "1"}})
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}
        assert ports[1].published == []

    @pytest.mark.asyncio
    async def test_invalid_update_shape_acked(self, transport, ports):
        update = {"update_id": 3, "message": {"chat": {"id": True}, "text": "/status"}}
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/tg/webhook", json=update)
        assert resp.status_code == 200
        assert ports[1].published == []

    @pytest.mark.asyncio
    async def test_text_command_published(self, transport, controller, ports):
        update = {
            "update_id": 1,
            "message": {"chat": {"id": 42}, "from": {"username": "op"}, "text": "/pump_on 60"},
        }
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/tg/webhook", json=update)
        assert resp.status_code == 200
        await controller.drain()
        topic, payload = ports[1].published[0]
        assert topic == "commands"
        assert json.loads(payload) == {"command": "pump_on", "minutes": 60}

    @pytest.mark.asyncio
    async def test_callback_acked_and_published(self, transport, controller, ports):
        update = {
            "update_id": 2,
            "callback_query": {
                "id": "cb9",
                "from": {"username": "op"},
                "data": "valve_on_60",
                "message": {"chat": {"id": 42}},
            },
        }
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/tg/webhook", json=update)
        assert resp.status_code == 200
        assert ports[0].acks == ["cb9"]
        await controller.drain()
        assert json.loads(ports[1].published[0][1]) == {"command": "valve_on", "seconds": 60}

    @pytest.mark.asyncio
    async def test_start_sends_menu(self, transport, ports):
        update = {"message": {"chat": {"id": 42}, "from": {"username": "op"}, "text": "/start"}}
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/tg/webhook", json=update)
        assert resp.status_code == 200
        assert ports[0].sent[0][2] is not None
        assert ports[1].published == []

    @pytest.mark.asyncio
    async def test_controller_error_still_200(self, ports):
        class BrokenController:
            async def handle_update(self, event):
                raise RuntimeError("boom")

        transport = ASGITransport(app=create_app(BrokenController()))
        update = {"message": {"chat": {"id": 1}, "text": "/status"}}
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/tg/webhook", json=update)
        assert resp.status_code == 200

    @pytest.mark.asyncio
    async def test_acks_before_publish_completes(self, ports):
        chat, _ = ports
        gate = asyncio.Event()

        class GatedBroker(RecordingBroker):
            async def publish(self, topic, payload):
                await gate.wait()
                return await super().publish(topic, payload)

        broker = GatedBroker()
        controller = BridgeController(chat, broker, recipient_chat_id=254617095)
        transport = ASGITransport(app=create_app(controller))
        update = {"message": {"chat": {"id": 42}, "from": {"username": "op"}, "text": "/pump_off"}}
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/tg/webhook", json=update)
        assert resp.status_code == 200
        assert controller.pending_count == 1
        assert broker.published == []

        gate.set()
        await controller.drain()
        assert controller.pending_count == 0
        assert json.loads(broker.published[0][1]) == {"command": "pump_off"}

    @pytest.mark.asyncio
    async def test_custom_path(self, controller):
        transport = ASGITransport(app=create_app(controller, webhook_path="/hook"))
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.post("/hook", json={})
        assert resp.status_code == 200


class TestHealth:
    @pytest.mark.asyncio
    async def test_test_route(self, transport):
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            resp = await ac.get("/tg/test")
        assert resp.status_code == 200
        assert resp.text == "OK\n"
