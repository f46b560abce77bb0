"""应用异常处理注册。"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ucr_api.core.errors import RegistryError
from ucr_api.utils.response import DEFAULT_ERROR_MESSAGE, error_payload

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    status.HTTP_400_BAD_REQUEST: "BAD_REQUEST",
    status.HTTP_404_NOT_FOUND: "NOT_FOUND",
    status.HTTP_405_METHOD_NOT_ALLOWED: "METHOD_NOT_ALLOWED",
    status.HTTP_409_CONFLICT: "CONFLICT",
    status.HTTP_422_UNPROCESSABLE_CONTENT: "VALIDATION_ERROR",
    status.HTTP_503_SERVICE_UNAVAILABLE: "SERVICE_UNAVAILABLE",
}

_HTTP_SUGGESTIONS = {
    status.HTTP_400_BAD_REQUEST: "请确认记录 ID 为正整数后重试。",
    status.HTTP_404_NOT_FOUND: "请确认记录 ID 是否正确，或记录是否已被删除。",
    status.HTTP_409_CONFLICT: "请确认用户名/邮箱未被其他账号占用，且凭据归属于该账号。",
    status.HTTP_422_UNPROCESSABLE_CONTENT: "请根据错误字段提示修正请求参数后重试。",
    status.HTTP_503_SERVICE_UNAVAILABLE: "请先执行 infra/sql 下的建表脚本后重试。",
}


def _default_http_message(status_code: int) -> str:
    if status_code == status.HTTP_400_BAD_REQUEST:
        return "请求参数不合法。"
    if status_code == status.HTTP_404_NOT_FOUND:
        return "请求资源不存在。"
    if status_code == status.HTTP_409_CONFLICT:
        return "请求与当前数据状态冲突。"
    if status_code == status.HTTP_422_UNPROCESSABLE_CONTENT:
        return "请求参数校验失败。"
    return "请求处理失败。"


def _default_http_suggestion(status_code: int) -> str:
    return _HTTP_SUGGESTIONS.get(status_code, "请稍后重试，若持续失败请联系管理员。")


async def registry_error_handler(request: Request, exc: RegistryError):
    """将协调层业务异常包装为标准错误结构。"""
    details = exc.to_details()
    details.setdefault("suggestion", _default_http_suggestion(exc.http_status))
    return JSONResponse(
        status_code=exc.http_status,
        content=error_payload(request, code=exc.code, message=exc.message, details=details),
    )


async def http_exception_handler(request: Request, exc: HTTPException):
    """将协议异常统一包装为标准错误结构。"""
    code = _HTTP_ERROR_CODES.get(exc.status_code, "HTTP_ERROR")
    message = exc.detail if isinstance(exc.detail, str) else _default_http_message(exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_payload(
            request,
            code=code,
            message=message,
            details={
                "status_code": exc.status_code,
                "reason": code.lower(),
                "suggestion": _default_http_suggestion(exc.status_code),
            },
        ),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """统一处理请求参数校验错误。"""
    normalized_errors = [
        {
            "field": ".".join(str(item) for item in err.get("loc", []) if item != "body"),
            "message": err.get("msg"),
            "type": err.get("type"),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_CONTENT,
        content=error_payload(
            request,
            code="VALIDATION_ERROR",
            message="请求参数校验失败。",
            details={
                "status_code": status.HTTP_422_UNPROCESSABLE_CONTENT,
                "reason": "validation_error",
                "suggestion": _default_http_suggestion(status.HTTP_422_UNPROCESSABLE_CONTENT),
                "errors": normalized_errors,
            },
        ),
    )


async def unexpected_exception_handler(request: Request, exc: Exception):
    """处理未捕获异常，避免内部细节泄露。"""
    logger.exception("unexpected error path=%s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_payload(
            request,
            code="INTERNAL_ERROR",
            message=DEFAULT_ERROR_MESSAGE,
            details={
                "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR,
                "reason": "unexpected_exception",
                "suggestion": "请稍后重试，若持续失败请联系管理员并提供 request_id。",
            },
        ),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """集中注册异常处理器。"""
    app.exception_handler(RegistryError)(registry_error_handler)
    app.exception_handler(HTTPException)(http_exception_handler)
    app.exception_handler(RequestValidationError)(validation_exception_handler)
    app.exception_handler(Exception)(unexpected_exception_handler)
