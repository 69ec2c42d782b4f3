from __future__ import annotations

from typing import Any

from rest_framework import status as http_status  # type: ignore
from rest_framework.response import Response  # type: ignore


def success_response(data: Any = None, status: int = http_status.HTTP_200_OK, **extra: Any) -> Response:
    """Wrap ``data`` in the ``{"success": true, "data": ...}`` envelope."""
    payload: dict[str, Any] = {"success": True}
    payload.update(extra)
    if data is not None:
        payload["data"] = data
    return Response(payload, status=status)
