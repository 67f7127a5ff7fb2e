# game/views.py
import logging
import mimetypes
from pathlib import Path

from django.conf import settings
from django.http import FileResponse
from django.shortcuts import render
from django.views import View
from rest_framework import permissions, status
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response
from rest_framework.views import APIView

from .ai.errors import NoLegalMoveError
from .ai.quantum_engine import select_move
from .serializers import BoardStateSerializer, analysis_payload

logger = logging.getLogger(__name__)


class JsonAPIView(APIView):
    renderer_classes = [JSONRenderer]
    permission_classes = [permissions.AllowAny]


class HealthView(JsonAPIView):
    def get(self, request):
        return Response({"status": "ok"})


class MoveView(JsonAPIView):
    """
    POST /api/move
    Body JSON:
    {
      "boardState": [null, "X", null, "O", null, null, null, null, null]   # optionnel
    }
    The engine always answers as O; the client owns turn order.
    """
    def post(self, request):
        logger.info("[MoveView] Move request received: %s", request.data)

        ser = BoardStateSerializer(data=request.data)
        if not ser.is_valid():
            logger.warning("[MoveView] Rejected board: %s", ser.errors)
            return Response(ser.errors, status=status.HTTP_400_BAD_REQUEST)

        try:
            result = select_move(ser.to_board())
        except NoLegalMoveError as exc:
            logger.warning("[MoveView] %s", exc)
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        return Response(analysis_payload(result), status=status.HTTP_200_OK)


class FrontendView(View):
    """
    Every non-API path: a file from FRONTEND_DIR when one exists there,
    otherwise the default game page.
    """
    def get(self, request, path=""):
        asset = _frontend_asset(path)
        if asset is not None:
            content_type, _ = mimetypes.guess_type(str(asset))
            return FileResponse(open(asset, "rb"), content_type=content_type)
        return render(request, "game/index.html")


def _frontend_asset(path: str):
    root = getattr(settings, "FRONTEND_DIR", None)
    if not root or not path:
        return None
    root = Path(root).resolve()
    candidate = (root / path).resolve()
    # stay inside FRONTEND_DIR
    if root not in candidate.parents or not candidate.is_file():
        return None
    return candidate
