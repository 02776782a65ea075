import pytest

from src.communication.console_notifier import ConsoleChatNotifier
from src.communication.factory import create_chat_notifier
from src.communication.telegram_notifier import TelegramChatNotifier


def test_console_is_default(monkeypatch):
    monkeypatch.delenv("CHAT_CHANNEL", raising=False)
    assert isinstance(create_chat_notifier(), ConsoleChatNotifier)


def test_telegram_from_env(monkeypatch):
    monkeypatch.setenv("CHAT_CHANNEL", "telegram")
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "123:abc")
    monkeypatch.setenv("POLL_TIMEOUT", "5")
    assert isinstance(create_chat_notifier(), TelegramChatNotifier)


def test_unknown_channel():
    with pytest.raises(ValueError, match="carrier-pigeon"):
        create_chat_notifier("carrier-pigeon")
