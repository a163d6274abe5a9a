import httpx
import pytest

from stockledger.core.config import Settings
from stockledger.services import telegram


@pytest.mark.asyncio
async def test_send_is_simulated_without_token(mocker):
    mocker.patch("stockledger.services.telegram.get_settings", return_value=Settings(telegram_bot_token=""))
    client_cls = mocker.patch("stockledger.services.telegram.httpx.AsyncClient")

    result = await telegram.send_telegram_message("123", "Low stock")

    assert result == {"status": "simulated", "channel": "telegram", "message": "Low stock"}
    client_cls.assert_not_called()


@pytest.mark.asyncio
async def test_send_posts_to_bot_api(mocker):
    mocker.patch("stockledger.services.telegram.get_settings", return_value=Settings(telegram_bot_token="abc"))
    client = mocker.AsyncMock()
    client.post.return_value = mocker.Mock(json=mocker.Mock(return_value={"ok": True}))
    client_cls = mocker.patch("stockledger.services.telegram.httpx.AsyncClient")
    client_cls.return_value.__aenter__.return_value = client

    result = await telegram.send_telegram_message("123", "Low stock")

    assert result == {"ok": True}
    client.post.assert_awaited_once_with(
        "https://api.telegram.org/botabc/sendMessage", json={"chat_id": "123", "text": "Low stock"}
    )


@pytest.mark.asyncio
async def test_relay_logs_http_failures(mocker):
    mocker.patch(
        "stockledger.services.telegram.get_settings",
        return_value=Settings(telegram_bot_token="abc", telegram_default_chat_id="99"),
    )
    mocker.patch(
        "stockledger.services.telegram.send_telegram_message",
        side_effect=httpx.ConnectError("unreachable"),
    )

    result = await telegram.relay_notification("Out of stock")

    assert result["status"] == "failed"
