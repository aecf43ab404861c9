"""Tests for the Telegram / VK Teams clients and the channel sender."""

import json

import httpx
import pytest

from notifier.config import Settings
from notifier.services import telegram, vkteams
from notifier.services.delivery import (
    LoggerChannel,
    Sender,
    TelegramChannel,
    VKTeamsChannel,
    build_sender,
)
from notifier.utils import DeliveryError, split_text


def _recorder(status: int = 200, body=None):
    requests: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        return httpx.Response(status, json=body if body is not None else {"ok": True})

    return requests, httpx.MockTransport(handler)


class TestTelegram:
    async def test_send_message(self):
        requests, transport = _recorder()
        await telegram.send_message("123:abc", "-100", "*hi*", transport=transport)
        assert len(requests) == 1
        request = requests[0]
        assert str(request.url) == "https://api.telegram.org/bot123:abc/sendMessage"
        assert json.loads(request.content) == {
            "chat_id": "-100",
            "text": "*hi*",
            "parse_mode": "MarkdownV2",
        }

    async def test_long_message_is_split(self):
        requests, transport = _recorder()
        text = "\n".join(["x" * 100] * 100)
        await telegram.send_message("t", "1", text, transport=transport)
        assert len(requests) == 3
        assert all(len(json.loads(r.content)["text"]) <= 4096 for r in requests)

    async def test_api_error(self):
        _, transport = _recorder(400, {"ok": False, "description": "Bad Request"})
        with pytest.raises(DeliveryError, match="status 400"):
            await telegram.send_message("t", "1", "hi", transport=transport)

    async def test_not_ok_body(self):
        _, transport = _recorder(200, {"ok": False})
        with pytest.raises(DeliveryError):
            await telegram.send_message("t", "1", "hi", transport=transport)

    async def test_missing_token_or_chat(self):
        with pytest.raises(DeliveryError):
            await telegram.send_message("", "1", "hi")
        with pytest.raises(DeliveryError):
            await telegram.send_message("t", "", "hi")

    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(DeliveryError, match="failed to send message"):
            await telegram.send_message("t", "1", "hi", transport=httpx.MockTransport(handler))


class TestVKTeams:
    async def test_send_text(self):
        requests, transport = _recorder()
        await vkteams.send_text("https://api.vk.team/bot/v1/", "tok", "chat@x", "hi", transport=transport)
        request = requests[0]
        assert request.method == "GET"
        assert request.url.path == "/bot/v1/messages/sendText"
        assert request.url.params["token"] == "tok"
        assert request.url.params["chatId"] == "chat@x"
        assert request.url.params["text"] == "hi"
        assert request.url.params["parseMode"] == "MarkdownV2"

    async def test_api_error(self):
        _, transport = _recorder(500, {"ok": False})
        with pytest.raises(DeliveryError, match="vkteams API error"):
            await vkteams.send_text("https://api", "tok", "chat", "hi", transport=transport)

    async def test_missing_chat(self):
        with pytest.raises(DeliveryError):
            await vkteams.send_text("https://api", "tok", "", "hi")


class TestSender:
    async def test_routes_to_channel(self):
        requests, transport = _recorder()
        sender = Sender()
        sender.register(TelegramChannel("t", transport=transport))
        await sender.send("telegram", "42", "hello")
        assert json.loads(requests[0].content)["chat_id"] == "42"

    async def test_vkteams_channel(self):
        requests, transport = _recorder()
        sender = Sender()
        sender.register(VKTeamsChannel("tok", "https://api", transport=transport))
        await sender.send("vkteams", "chat", "hello")
        assert requests[0].url.params["chatId"] == "chat"

    async def test_logger_channel(self):
        sender = Sender()
        sender.register(LoggerChannel())
        await sender.send("logger", None, "hello")

    async def test_empty_message(self):
        sender = Sender()
        sender.register(LoggerChannel())
        with pytest.raises(DeliveryError, match="empty"):
            await sender.send("logger", None, "")

    async def test_unknown_channel(self):
        with pytest.raises(DeliveryError, match="not registered"):
            await Sender().send("telegram", "1", "hello")

    def test_register_ignores_invalid(self):
        sender = Sender()
        sender.register(None)
        nameless = LoggerChannel()
        nameless.name = ""
        sender.register(nameless)
        assert sender.channels() == []

    def test_build_sender_registers_configured_channels(self):
        assert build_sender(Settings()).channels() == ["logger"]
        settings = Settings(telegram_bot_token="t", vkteams_bot_token="v", vkteams_api_url="https://api")
        assert build_sender(settings).channels() == ["logger", "telegram", "vkteams"]


def test_split_text_prefers_line_breaks():
    chunks = list(split_text("aaa\nbbb\nccc", limit=8))
    assert chunks == ["aaa\nbbb", "ccc"]


def test_split_text_keeps_blank_line_after_cut():
    chunks = list(split_text("head\n\nbody", limit=5))
    assert chunks == ["head", "\nbody"]


def test_split_text_hard_cut_without_line_break():
    assert list(split_text("abcdefgh", limit=3)) == ["abc", "def", "gh"]
