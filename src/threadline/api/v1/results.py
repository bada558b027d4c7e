"""Translation of action results into HTTP responses."""

from __future__ import annotations

import math
import time
from typing import Any

from fastapi import status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from threadline.schemas.common import ActionResult

STATUS_BY_CODE: dict[str, int] = {
    "unauthorized": status.HTTP_401_UNAUTHORIZED,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "validation": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "not_found": status.HTTP_404_NOT_FOUND,
    "rate_limited": status.HTTP_429_TOO_MANY_REQUESTS,
    "internal": status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def retry_after_seconds(reset_time: int, now_ms: int | None = None) -> int:
    """Whole seconds until ``reset_time`` (epoch ms), never negative."""
    now_ms = int(time.time() * 1000) if now_ms is None else now_ms
    return max(0, math.ceil((reset_time - now_ms) / 1000))


def to_response(
    result: ActionResult[Any],
    success_status: int = status.HTTP_200_OK,
) -> JSONResponse:
    """Send the result body with a status code matching its outcome."""
    body = jsonable_encoder(result)
    if result.success:
        return JSONResponse(status_code=success_status, content=body)

    headers: dict[str, str] = {}
    if result.code == "rate_limited" and result.reset_time is not None:
        headers["Retry-After"] = str(retry_after_seconds(result.reset_time))
    return JSONResponse(
        status_code=STATUS_BY_CODE.get(result.code or "", status.HTTP_400_BAD_REQUEST),
        content=body,
        headers=headers,
    )
