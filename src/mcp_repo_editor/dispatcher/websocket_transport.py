"""
Websocket transport to the remote controller.

websocket-client is blocking, so every socket call runs in a worker thread
and the event loop stays free.
"""

import logging
from typing import Optional, Union

import anyio
import anyio.to_thread
import websocket

from .exceptions import TransportError

logger = logging.getLogger(__name__)


class WebSocketTransport:
    """
    ITransport implementation over a websocket client connection.
    """

    def __init__(self, url: str, timeout: Optional[float] = None):
        """
        Args:
            url (str): Controller URL, e.g. ``ws://localhost:5000``.
            timeout (Optional[float]): Socket timeout in seconds for connect/send;
                None waits indefinitely.
        """
        self._url = url
        self._timeout = timeout
        self._ws: Optional[websocket.WebSocket] = None

    @property
    def url(self) -> str:
        return self._url

    def _require_connection(self) -> websocket.WebSocket:
        if self._ws is None:
            raise TransportError("Websocket is not connected")
        return self._ws

    async def connect(self) -> None:
        """
        Opens the connection.

        Raises:
            TransportError: If the controller cannot be reached.
        """
        try:
            self._ws = await anyio.to_thread.run_sync(
                lambda: websocket.create_connection(self._url, timeout=self._timeout)
            )
        except (websocket.WebSocketException, OSError) as e:
            raise TransportError(f"Failed to connect to {self._url}: {e}") from e
        # Waiting for the next call has no deadline.
        self._ws.settimeout(None)
        logger.info("Connected to controller at %s", self._url)

    async def receive(self) -> Optional[Union[str, bytes]]:
        ws = self._require_connection()
        try:
            opcode, data = await anyio.to_thread.run_sync(ws.recv_data)
        except websocket.WebSocketConnectionClosedException:
            return None
        except (websocket.WebSocketException, OSError) as e:
            raise TransportError(f"Error receiving message: {e}") from e

        if opcode == websocket.ABNF.OPCODE_CLOSE:
            return None
        if opcode == websocket.ABNF.OPCODE_TEXT:
            try:
                return data.decode("utf-8")
            except UnicodeDecodeError:
                return data
        return data

    async def send(self, message: str) -> None:
        ws = self._require_connection()
        try:
            await anyio.to_thread.run_sync(ws.send, message)
        except (websocket.WebSocketException, OSError) as e:
            raise TransportError(f"Error sending message: {e}") from e

    async def close(self) -> None:
        if self._ws is None:
            return
        ws, self._ws = self._ws, None
        try:
            await anyio.to_thread.run_sync(ws.close)
        except (websocket.WebSocketException, OSError) as e:
            logger.warning("Error closing websocket: %s", e)

    async def __aenter__(self) -> "WebSocketTransport":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
