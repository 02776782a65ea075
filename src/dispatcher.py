"""
Inbound dispatcher — turns chat events into actions.

Direct messages are gated by the single allowed sender (when one is
configured).  A message is either a /command or free text for the
intent parser; either way it resolves to an action name plus parameters,
which is run immediately or proposed for confirmation.

Per confirmable request:

  PROPOSED --confirm--> EXECUTING --ok------> DONE       (removed from store)
  PROPOSED --confirm--> EXECUTING --raises--> PROPOSED   (kept, error shown)
  PROPOSED --cancel---> CANCELLED                        (removed from store)

EXECUTING is never stored: it only means "the lock for this id is held".
DONE and CANCELLED both mean "absent from the store".  Holding the lock
and re-reading the store inside it is what keeps a second Confirm tap
from running the action twice.

Button taps are not gated by the allowed sender; a confirm is accepted
only from the user who requested the action (or anyone, when that was 0).
"""

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from typing import Literal

from src.communication.ports import (
    CallbackEvent,
    ChatEvent,
    ChatMessage,
    ChatNotifier,
    InlineButton,
)
from src.domain.actions import ActionExecutor, ActionRegistry, PendingAction
from src.domain.audit import AuditLog
from src.domain.intent import NO_INTENT, IntentParser
from src.domain.pending import MutexStore, PendingActionStore

log = logging.getLogger(__name__)

CONFIRM = "confirm"
CANCEL = "cancel"

MSG_INVALID_CALLBACK = "Invalid callback data."
MSG_EXPIRED = "This action has expired or is unknown."
MSG_NOT_AUTHORIZED = "You are not authorized to confirm this action."
MSG_CANCELLED = "❌ Action cancelled."
MSG_UNKNOWN_COMMAND = "Unknown command."
MSG_NO_INTENT = "Sorry, I couldn't find an action to run in that message."


@dataclass(frozen=True)
class SlashCommand:
    action: str
    parameters: dict[str, str] = field(default_factory=dict)
    require_confirm: bool = False
    prompt: str = ""   # confirmation prompt; a generic one is built when empty


DEFAULT_COMMANDS: dict[str, SlashCommand] = {
    "shutdown": SlashCommand(
        action="shutdown_server",
        parameters={"environment": "prod"},
        require_confirm=True,
        prompt="⚠️ This will shutdown the server. Confirm?",
    ),
    "lights_off": SlashCommand(action="lights_off"),
}


@dataclass
class DispatcherConfig:
    registry: ActionRegistry
    pending: PendingActionStore
    locks: MutexStore
    parser: IntentParser
    chat: ChatNotifier
    audit: AuditLog
    allowed_user_id: int = 0           # 0 = accept direct messages from anyone
    commands: dict[str, SlashCommand] = field(default_factory=lambda: dict(DEFAULT_COMMANDS))
    execute_timeout: float | None = None


@dataclass
class DispatchResult:
    action: Literal[
        "ignored",           # sender not allowed, or nothing to do
        "help",              # /help answered
        "unknown_command",   # /something we don't know
        "no_intent",         # parser found nothing actionable
        "proposed",          # pending action stored, confirm/cancel prompt sent
        "executed",          # executor ran and succeeded
        "cancelled",         # pending action removed on Cancel
        "expired",           # callback for an id that is not pending
        "unauthorized",      # confirm from someone other than the requester
        "unknown_action",    # no executor registered under that name
        "failed",            # executor raised (pending action kept, if any)
        "invalid_callback",  # malformed callback payload
    ]
    details: str = ""
    pending_id: str = ""


def parse_callback_data(data: str) -> tuple[str, str] | None:
    """Split "confirm:<id>" / "cancel:<id>" into (kind, id). None if malformed."""
    kind, sep, pending_id = (data or "").partition(":")
    kind = kind.strip().lower()
    pending_id = pending_id.strip()
    if not sep or kind not in (CONFIRM, CANCEL) or not pending_id:
        return None
    return kind, pending_id


def _describe(parameters: dict[str, str]) -> str:
    if not parameters:
        return ""
    return " (" + ", ".join(f"{k}={v}" for k, v in sorted(parameters.items())) + ")"


class Dispatcher:
    """
    Handles one inbound chat event per call.

    Safe to call concurrently: events for different pending ids never
    wait on each other; events for the same id are serialized by its lock.
    """

    def __init__(self, config: DispatcherConfig):
        self._cfg = config

    async def dispatch(self, event: ChatEvent) -> DispatchResult:
        """Route an event. Never raises for ordinary failures; they are logged."""
        try:
            if isinstance(event, CallbackEvent):
                return await self.handle_callback(event)
            return await self.handle_message(event)
        except Exception as exc:
            log.exception("chat=%d user=%d: unhandled error while dispatching",
                          event.chat_id, event.sender_id)
            return DispatchResult(action="failed", details=str(exc))

    # -- direct messages -----------------------------------------------------

    async def handle_message(self, message: ChatMessage) -> DispatchResult:
        allowed = self._cfg.allowed_user_id
        if allowed and message.sender_id != allowed:
            # Acknowledged upstream all the same, so Telegram stops redelivering
            log.info("Dropping message from user=%d (not allowed)", message.sender_id)
            return DispatchResult(action="ignored", details="sender not allowed")

        text = message.text.strip()
        if not text:
            return DispatchResult(action="ignored", details="empty message")

        log.debug("chat=%d user=%d text=%.60r", message.chat_id, message.sender_id, text)

        if text.startswith("/"):
            return await self._handle_command(message, text)
        return await self._handle_free_text(message, text)

    async def _handle_command(self, message: ChatMessage, text: str) -> DispatchResult:
        parts = text[1:].split()
        # "/shutdown@my_bot" in group chats
        command = parts[0].split("@", 1)[0].lower() if parts else ""

        if command == "help":
            await self._cfg.chat.send_message(message.chat_id, self._help_text())
            return DispatchResult(action="help")

        slash = self._cfg.commands.get(command)
        if slash is None:
            await self._cfg.chat.send_message(message.chat_id, MSG_UNKNOWN_COMMAND)
            return DispatchResult(action="unknown_command", details=command)

        if slash.require_confirm:
            return await self._propose(message, slash.action, dict(slash.parameters), slash.prompt)
        return await self._execute_now(message, slash.action, dict(slash.parameters))

    async def _handle_free_text(self, message: ChatMessage, text: str) -> DispatchResult:
        try:
            intent = await self._cfg.parser.parse(text)
        except Exception as exc:
            log.error("chat=%d intent parser failed: %s", message.chat_id, exc)
            intent = NO_INTENT

        if not intent.action:
            await self._cfg.chat.send_message(message.chat_id, MSG_NO_INTENT)
            return DispatchResult(action="no_intent")

        log.info(
            "chat=%d user=%d parsed → action=%s confirm=%s params=%s",
            message.chat_id, message.sender_id, intent.action,
            intent.require_confirm, intent.parameters,
        )

        if intent.require_confirm:
            return await self._propose(message, intent.action, dict(intent.parameters))
        return await self._execute_now(message, intent.action, dict(intent.parameters))

    async def _propose(
        self,
        message: ChatMessage,
        action_name: str,
        parameters: dict[str, str],
        prompt: str = "",
    ) -> DispatchResult:
        pending = PendingAction(
            action_name=action_name,
            parameters=parameters,
            requested_by=message.sender_id,
        )
        pending_id = uuid.uuid4().hex
        while not self._cfg.pending.try_add(pending_id, pending):
            pending_id = uuid.uuid4().hex

        text = prompt or f"⚠️ Run {action_name}{_describe(parameters)}? Confirm?"
        buttons = [
            InlineButton("✅ Yes", f"{CONFIRM}:{pending_id}"),
            InlineButton("❌ Cancel", f"{CANCEL}:{pending_id}"),
        ]
        try:
            await self._cfg.chat.send_with_buttons(
                message.chat_id, f"{text} (id={pending_id[:8]})", buttons,
            )
        except Exception:
            # Nobody can ever tap a button that was never delivered
            self._cfg.pending.try_remove(pending_id)
            raise

        await self._cfg.audit.record(message.sender_id, action_name, "proposed", pending_id)
        log.info(
            "chat=%d user=%d proposed %s id=%s",
            message.chat_id, message.sender_id, action_name, pending_id,
        )
        return DispatchResult(action="proposed", details=action_name, pending_id=pending_id)

    async def _execute_now(
        self, message: ChatMessage, action_name: str, parameters: dict[str, str]
    ) -> DispatchResult:
        executor = self._cfg.registry.lookup(action_name)
        if executor is None:
            await self._cfg.chat.send_message(message.chat_id, f"Unknown action: {action_name}")
            return DispatchResult(action="unknown_action", details=action_name)

        try:
            result = await self._run(executor, parameters)
        except Exception as exc:
            log.error("chat=%d action %s failed: %s", message.chat_id, action_name, exc)
            await self._cfg.chat.send_message(message.chat_id, f"Error executing action: {exc}")
            return DispatchResult(action="failed", details=str(exc))

        await self._cfg.audit.record(message.sender_id, action_name, "executed")
        log.info("chat=%d user=%d executed %s", message.chat_id, message.sender_id, action_name)
        await self._report(message.chat_id, result)
        return DispatchResult(action="executed", details=result)

    # -- button taps ---------------------------------------------------------

    async def handle_callback(self, event: CallbackEvent) -> DispatchResult:
        parsed = parse_callback_data(event.data)
        if parsed is None:
            log.warning("chat=%d user=%d invalid callback data %.60r",
                        event.chat_id, event.sender_id, event.data)
            await self._cfg.chat.send_message(event.chat_id, MSG_INVALID_CALLBACK)
            return DispatchResult(action="invalid_callback", details=event.data)

        kind, pending_id = parsed
        lock = self._cfg.locks.get_lock(pending_id)
        try:
            async with lock:
                if kind == CANCEL:
                    return await self._cancel(event, pending_id)
                return await self._confirm(event, pending_id)
        finally:
            # Keep the lock while the action is still pending, so a retry
            # tap queues behind any tap that is already waiting on it.
            if self._cfg.pending.try_get(pending_id) is None:
                self._cfg.locks.release(pending_id)

    async def _cancel(self, event: CallbackEvent, pending_id: str) -> DispatchResult:
        pending = self._cfg.pending.try_remove(pending_id)
        if pending is None:
            await self._cfg.chat.send_message(event.chat_id, MSG_EXPIRED)
            return DispatchResult(action="expired", pending_id=pending_id)

        await self._cfg.audit.record(event.sender_id, pending.action_name, "cancelled", pending_id)
        log.info("chat=%d user=%d cancelled %s id=%s",
                 event.chat_id, event.sender_id, pending.action_name, pending_id)
        await self._report(event.chat_id, MSG_CANCELLED)
        return DispatchResult(action="cancelled", details=pending.action_name, pending_id=pending_id)

    async def _confirm(self, event: CallbackEvent, pending_id: str) -> DispatchResult:
        pending = self._cfg.pending.try_get(pending_id)
        if pending is None:
            await self._cfg.chat.send_message(event.chat_id, MSG_EXPIRED)
            return DispatchResult(action="expired", pending_id=pending_id)

        if not pending.may_be_confirmed_by(event.sender_id):
            log.warning("id=%s: confirm from user=%d, requested by user=%d — refused",
                        pending_id, event.sender_id, pending.requested_by)
            await self._cfg.chat.send_message(event.chat_id, MSG_NOT_AUTHORIZED)
            return DispatchResult(action="unauthorized", pending_id=pending_id)

        executor = self._cfg.registry.lookup(pending.action_name)
        if executor is None:
            log.error("id=%s: no executor registered for %r", pending_id, pending.action_name)
            await self._cfg.chat.send_message(event.chat_id, f"Unknown action: {pending.action_name}")
            return DispatchResult(action="unknown_action", details=pending.action_name,
                                  pending_id=pending_id)

        try:
            result = await self._run(executor, dict(pending.parameters))
        except Exception as exc:
            log.error("Failed executing action %s id=%s: %s", pending.action_name, pending_id, exc)
            await self._cfg.chat.send_message(
                event.chat_id, f"Error executing action (kept pending): {exc}",
            )
            return DispatchResult(action="failed", details=str(exc), pending_id=pending_id)

        # Remove only after success
        self._cfg.pending.try_remove(pending_id)
        await self._cfg.audit.record(event.sender_id, pending.action_name, "confirmed", pending_id)
        log.info("chat=%d user=%d confirmed %s id=%s",
                 event.chat_id, event.sender_id, pending.action_name, pending_id)
        await self._report(event.chat_id, f"✅ {result}")
        return DispatchResult(action="executed", details=result, pending_id=pending_id)

    # -- helpers -------------------------------------------------------------

    async def _report(self, chat_id: int, text: str) -> None:
        """Reply once the action is done; a lost reply does not undo the action."""
        try:
            await self._cfg.chat.send_message(chat_id, text)
        except Exception as exc:
            log.error("chat=%d: could not deliver result: %s", chat_id, exc)

    async def _run(self, executor: ActionExecutor, parameters: dict[str, str]) -> str:
        timeout = self._cfg.execute_timeout
        if timeout is None:
            return await executor.execute(parameters)
        try:
            return await asyncio.wait_for(executor.execute(parameters), timeout)
        except asyncio.TimeoutError as exc:
            raise TimeoutError(f"{executor.name} timed out after {timeout:g}s") from exc

    def _help_text(self) -> str:
        lines = ["Commands:"]
        for name, slash in sorted(self._cfg.commands.items()):
            suffix = " (asks for confirmation)" if slash.require_confirm else ""
            lines.append(f"  /{name} → {slash.action}{suffix}")
        lines.append("Actions: " + ", ".join(sorted(self._cfg.registry.list_actions())))
        lines.append("Or just tell me what you need in plain words.")
        return "\n".join(lines)
