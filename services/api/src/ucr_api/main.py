"""FastAPI 应用入口点。"""

from fastapi import FastAPI

from ucr_api.core.config import get_settings
from ucr_api.core.logging import setup_logging
from ucr_api.exceptions import register_exception_handlers
from ucr_api.middlewares import register_middlewares
from ucr_api.api.router import api_router

settings = get_settings()


def create_app() -> FastAPI:
    """创建并配置 FastAPI 应用实例。"""
    setup_logging(settings.log_level)
    app = FastAPI(
        title=settings.app_name,
        version="1.0.0",
        debug=settings.app_debug,
        description=(
            "用户账号与访问凭据管理接口。\n\n"
            "所有业务接口统一返回：`{request_id, data, meta}`。\n"
            "删除均为逻辑删除；凭据哈希不会出现在任何响应中。"
        ),
        openapi_tags=[
            {"name": "health", "description": "服务存活与就绪探针。"},
            {"name": "accounts", "description": "账号生命周期、检索与凭据关联管理。"},
            {"name": "credentials", "description": "独立凭据的创建、查询、更新与删除。"},
        ],
    )

    register_middlewares(app)
    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.api_prefix)
    return app


app = create_app()
