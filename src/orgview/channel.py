"""Typed bidirectional message channel between a view and its host."""

from __future__ import annotations

from typing import Any, Callable

from pydantic import BaseModel, TypeAdapter, ValidationError

from orgview.exceptions import ProtocolError
from orgview.schemas.messages import MESSAGE_ADAPTER
from orgview.utils.logging_config import get_logger

logger = get_logger(__name__)

Transport = Callable[[dict[str, Any]], None]
Handler = Callable[[Any], None]


class MessageChannel:
    """One outbound ``send`` and one inbound dispatcher keyed on ``command``.

    Outbound messages are serialised to plain dicts and handed to the
    transport. Inbound payloads (dicts or JSON text) are validated against the
    message union and routed to the handler registered for their command.
    """

    def __init__(self, transport: Transport | None = None, *, adapter: TypeAdapter = MESSAGE_ADAPTER) -> None:
        self._transport = transport
        self._adapter = adapter
        self._handlers: dict[str, Handler] = {}

    @property
    def connected(self) -> bool:
        return self._transport is not None

    def connect(self, transport: Transport) -> None:
        self._transport = transport

    def on(self, command: str, handler: Handler) -> None:
        self._handlers[command] = handler

    def send(self, message: BaseModel) -> None:
        if self._transport is None:
            raise ProtocolError("Channel is not connected")
        logger.debug("Sending message", extra={"command": getattr(message, "command", None)})
        self._transport(message.model_dump())

    def receive(self, payload: dict[str, Any] | str | bytes) -> BaseModel:
        """Validate ``payload`` and dispatch it; return the parsed message."""
        try:
            if isinstance(payload, (str, bytes)):
                message = self._adapter.validate_json(payload)
            else:
                message = self._adapter.validate_python(payload)
        except ValidationError as exc:
            raise ProtocolError(f"Invalid message: {exc.errors(include_url=False)}") from exc

        handler = self._handlers.get(message.command)
        if handler is None:
            logger.debug("No handler registered", extra={"command": message.command})
            return message
        handler(message)
        return message


def connect_pair(first: MessageChannel, second: MessageChannel) -> None:
    """Wire two in-process channels back to back."""
    first.connect(second.receive)
    second.connect(first.receive)
