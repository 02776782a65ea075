import os

from .ports import ChatNotifier


def create_chat_notifier(channel: str | None = None) -> ChatNotifier:
    """
    Factory: create the right adapter based on config.

    The channel can be passed explicitly or read from the
    CHAT_CHANNEL env var. Defaults to "console".
    """
    channel = channel or os.environ.get("CHAT_CHANNEL", "console")

    if channel == "telegram":
        from .telegram_notifier import TelegramChatNotifier

        return TelegramChatNotifier(
            bot_token=os.environ["TELEGRAM_BOT_TOKEN"],
            poll_timeout=int(os.environ.get("POLL_TIMEOUT", "30")),
        )

    if channel == "console":
        from .console_notifier import ConsoleChatNotifier

        return ConsoleChatNotifier()

    raise ValueError(f"Unknown chat channel: {channel!r}")
