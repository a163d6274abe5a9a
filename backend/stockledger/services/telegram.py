from __future__ import annotations

import logging

import httpx

from stockledger.core.config import get_settings


logger = logging.getLogger(__name__)


async def send_telegram_message(chat_id: str, text: str) -> dict:
    settings = get_settings()
    if not settings.telegram_bot_token or not chat_id:
        return {"status": "simulated", "channel": "telegram", "message": text}

    url = f"https://api.telegram.org/bot{settings.telegram_bot_token}/sendMessage"
    async with httpx.AsyncClient(timeout=10) as client:
        response = await client.post(url, json={"chat_id": chat_id, "text": text})
        response.raise_for_status()
        return response.json()


async def relay_notification(text: str) -> dict:
    """Push a notification to the default chat; relay failures are logged, not raised."""
    settings = get_settings()
    try:
        return await send_telegram_message(settings.telegram_default_chat_id, text)
    except httpx.HTTPError:
        logger.exception("Telegram relay failed")
        return {"status": "failed", "channel": "telegram", "message": text}
