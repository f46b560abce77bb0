"""统一响应结构工具。

成功响应：`{request_id, data, meta}`；列表响应的 meta 额外带 total。
错误响应：`{request_id, error: {code, message, details}}`。
"""

from collections.abc import Sequence
from datetime import datetime, timezone
from time import perf_counter
from typing import Any

from fastapi import Request

DEFAULT_ERROR_MESSAGE = "internal server error"


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _request_id(request: Request) -> str:
    # 未经过中间件（例如直接调用路由函数）时返回空串。
    return getattr(request.state, "request_id", "")


def _elapsed_ms(request: Request) -> int | None:
    started_at = getattr(request.state, "request_started_at", None)
    if not isinstance(started_at, float):
        return None
    return int((perf_counter() - started_at) * 1000)


def _request_context(request: Request) -> dict[str, Any]:
    return {
        "method": request.method.upper(),
        "path": request.url.path,
        "timestamp": _utc_now_iso(),
    }


def success(request: Request, data: Any, meta: dict[str, Any] | None = None) -> dict[str, Any]:
    """构造统一成功响应结构。"""
    final_meta = _request_context(request)
    final_meta["process_ms"] = _elapsed_ms(request)
    if meta:
        final_meta.update(meta)
    return {"request_id": _request_id(request), "data": data, "meta": final_meta}


def list_success(request: Request, items: Sequence[Any]) -> dict[str, Any]:
    """构造列表成功响应，meta.total 为本次返回的未删除记录数。"""
    return success(request, list(items), meta={"total": len(items)})


def error_payload(
    request: Request,
    code: str,
    message: str,
    details: dict[str, Any] | None = None,
) -> dict[str, Any]:
    """构造统一错误响应结构。"""
    final_details = _request_context(request)
    if details:
        final_details.update(details)
    return {
        "request_id": _request_id(request),
        "error": {"code": code, "message": message, "details": final_details},
    }
