# services/echo_session.py
import asyncio
import enum
import logging

from fastapi.websockets import WebSocket, WebSocketDisconnect, WebSocketState

logger = logging.getLogger(__name__)


class SessionState(str, enum.Enum):
    CONNECTING = "CONNECTING"
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class EchoSession:
    """
    EchoSession
    -----------------------
    One WebSocket connection and its receive/echo loop.

    CONNECTING -> OPEN      accept() succeeded
    CONNECTING -> CLOSED    handshake failed
    OPEN       -> CLOSED    peer closed, read/write error or idle timeout

    Every received frame is written back with the same type and payload
    before the next one is read. Nothing here is shared with other sessions.
    """

    def __init__(self, websocket: WebSocket, idle_timeout: float | None = None):
        self.websocket = websocket
        # zero or negative means no timeout
        self.idle_timeout = idle_timeout if idle_timeout and idle_timeout > 0 else None
        self.state = SessionState.CONNECTING
        self.messages_echoed = 0

    @property
    def peer(self) -> str:
        client = self.websocket.client
        if client is None:
            return "unknown"
        return f"{client.host}:{client.port}"

    # ---------------------------------------------------------
    # Lifecycle
    # ---------------------------------------------------------
    async def run(self):
        try:
            await self.websocket.accept()
        except Exception as e:
            logger.error("[EchoSession] handshake with %s failed: %s", self.peer, e)
            self.state = SessionState.CLOSED
            return

        self.state = SessionState.OPEN
        logger.info("[EchoSession] connection established with %s", self.peer)

        try:
            await self._echo_loop()
        except WebSocketDisconnect as e:
            logger.info("[EchoSession] %s disconnected (code=%s)", self.peer, e.code)
        except asyncio.TimeoutError:
            logger.info("[EchoSession] %s idle for %ss, closing", self.peer, self.idle_timeout)
        except Exception as e:
            logger.warning("[EchoSession] %s session error: %s", self.peer, e)
        finally:
            await self._release()

        logger.info(
            "[EchoSession] connection with %s closed after %d messages",
            self.peer,
            self.messages_echoed,
        )

    async def _echo_loop(self):
        while True:
            message = await self._receive()

            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))

            if message.get("text") is not None:
                text = message["text"]
                logger.debug("[EchoSession] text message from %s (%d chars)", self.peer, len(text))
                await self.websocket.send_text(text)
            elif message.get("bytes") is not None:
                data = message["bytes"]
                logger.debug("[EchoSession] binary message from %s (%d bytes)", self.peer, len(data))
                await self.websocket.send_bytes(data)
            else:
                continue

            self.messages_echoed += 1

    async def _receive(self) -> dict:
        if self.idle_timeout is None:
            return await self.websocket.receive()
        return await asyncio.wait_for(self.websocket.receive(), timeout=self.idle_timeout)

    async def _release(self):
        self.state = SessionState.CLOSED

        ws = self.websocket
        if ws.application_state != WebSocketState.CONNECTED or ws.client_state != WebSocketState.CONNECTED:
            return

        try:
            await ws.close(code=1000)
        except Exception as e:
            logger.warning("[EchoSession] closing %s failed: %s", self.peer, e)
