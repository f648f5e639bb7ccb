# api/ws_api.py
from fastapi import APIRouter, WebSocket

from services.echo_session import EchoSession


def create_ws_router(idle_timeout: float | None = None):
    """
    /ws  → echo every text/binary frame back to the sender
    """
    router = APIRouter()

    @router.websocket("/ws")
    async def echo(websocket: WebSocket):
        session = EchoSession(websocket, idle_timeout=idle_timeout)
        await session.run()

    return router
