# game/consumers.py
import json
import logging

from channels.generic.websocket import AsyncJsonWebsocketConsumer

from .ai.errors import NoLegalMoveError
from .ai.quantum_engine import select_move
from .serializers import BoardStateSerializer, analysis_payload

logger = logging.getLogger(__name__)


class MoveConsumer(AsyncJsonWebsocketConsumer):
    """
    Socket flavour of POST /api/move : ws://<host>/ws/move/
    Every message is independent:
      -> { "boardState": [null, "X", ...] }
      <- same payload as the HTTP endpoint, or { "error": ... }
    """
    async def connect(self):
        await self.accept()

    async def receive(self, text_data=None, bytes_data=None, **kwargs):
        if not text_data:
            return
        try:
            content = await self.decode_json(text_data)
        except json.JSONDecodeError:
            await self.send_json({"error": {"detail": "Invalid JSON"}})
            return
        await self.receive_json(content, **kwargs)

    async def receive_json(self, content, **kwargs):
        ser = BoardStateSerializer(data=content)
        if not ser.is_valid():
            logger.warning("[MoveConsumer] Rejected board: %s", ser.errors)
            await self.send_json({"error": ser.errors})
            return

        try:
            result = select_move(ser.to_board())
        except NoLegalMoveError as exc:
            await self.send_json({"error": {"detail": str(exc)}})
            return

        await self.send_json(analysis_payload(result))
