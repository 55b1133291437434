"""WebSocket relay to the external companion process."""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Awaitable, Callable, Mapping, Optional, Set

import websockets
from websockets.exceptions import WebSocketException

__all__ = ["SocketRelay", "encode_message"]

log = logging.getLogger(__name__)

Connector = Callable[[str], Awaitable[object]]


def encode_message(message: Mapping[str, object]) -> str:
    return json.dumps(message, separators=(",", ":"))


class SocketRelay:
    """Point-to-point WebSocket channel with fire-and-forget sends.

    Sends are dropped while the connection is not open and failures are only
    logged. Reconnecting is left to the operator.
    """

    def __init__(
        self,
        url: str,
        sender: str,
        *,
        connector: Optional[Connector] = None,
    ) -> None:
        self._url = url
        self._sender = sender
        self._connector: Connector = connector or websockets.connect
        self._connection: Optional[object] = None
        self._reader: Optional[asyncio.Task] = None
        self._is_open = False
        self._pending: Set[asyncio.Task] = set()

    @property
    def url(self) -> str:
        return self._url

    @property
    def is_open(self) -> bool:
        return self._is_open and self._connection is not None

    async def connect(self) -> bool:
        """Open a fresh connection, closing any existing one first."""

        await self.close()
        log.info("Attempting to connect to WebSocket at %s...", self._url)
        try:
            connection = await self._connector(self._url)
        except (OSError, asyncio.TimeoutError, WebSocketException) as exc:
            log.error("WebSocket connection to %s failed: %s", self._url, exc)
            return False

        self._connection = connection
        self._is_open = True
        log.info("WebSocket connection opened.")
        self.send({"type": "identification", "sender": self._sender})
        log.info("Sent identification as [%s]", self._sender)
        self._reader = asyncio.create_task(self._read(connection))
        return True

    async def reconnect(self) -> bool:
        return await self.connect()

    def send(self, message: Mapping[str, object]) -> bool:
        """Schedule ``message`` for sending; return ``False`` if it was dropped."""

        connection = self._connection
        if connection is None or not self._is_open:
            log.debug("Socket not open; dropping %s message", message.get("type"))
            return False
        text = encode_message(message)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.error("No running event loop; dropping %s message", message.get("type"))
            return False
        task = loop.create_task(self._send(connection, text))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return True

    async def _send(self, connection, text: str) -> None:
        try:
            await connection.send(text)
        except (OSError, WebSocketException):
            log.exception("WebSocket send error")

    async def _read(self, connection) -> None:
        try:
            async for message in connection:
                log.info("WebSocket message received: %s", message)
        except (OSError, WebSocketException) as exc:
            log.error("WebSocket error: %s", exc)
        finally:
            if self._connection is connection:
                self._is_open = False
                self._connection = None
                log.info(
                    "WebSocket connection closed. Code: %s, Reason: %s",
                    getattr(connection, "close_code", None),
                    getattr(connection, "close_reason", None),
                )

    async def close(self) -> None:
        connection = self._connection
        reader = self._reader
        self._connection = None
        self._reader = None
        self._is_open = False
        if reader is not None and not reader.done():
            reader.cancel()
        if connection is None:
            return
        log.info("Closing WebSocket connection.")
        try:
            await connection.close()
        except (OSError, WebSocketException) as exc:
            log.debug("Error while closing WebSocket: %s", exc)
