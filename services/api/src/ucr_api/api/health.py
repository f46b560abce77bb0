"""服务探针接口。

应用不会自动建表，就绪探针额外确认 infra/sql 脚本创建的账号与凭据表已存在。
"""

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy import inspect, text
from sqlalchemy.orm import Session

from ucr_api.db.session import get_db
from ucr_api.models import AccessCredential, UserAccount
from ucr_api.schemas.common import ErrorResponse, SuccessResponse
from ucr_api.schemas.responses import HealthStatusData
from ucr_api.utils.response import success

router = APIRouter(prefix="/health", tags=["health"])

REQUIRED_TABLES = (AccessCredential.__tablename__, UserAccount.__tablename__)


def missing_tables(db: Session) -> list[str]:
    """返回当前连接下缺失的业务表名。"""
    inspector = inspect(db.connection())
    return [name for name in REQUIRED_TABLES if not inspector.has_table(name)]


@router.get(
    "/live",
    summary="存活探针",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[HealthStatusData],
)
def live(request: Request):
    """进程存活即返回。"""
    return success(request, {"status": "ok"})


@router.get(
    "/ready",
    summary="就绪探针",
    description="确认数据库可连通，且账号表与凭据表均已创建。",
    status_code=status.HTTP_200_OK,
    response_model=SuccessResponse[HealthStatusData],
    responses={503: {"model": ErrorResponse}},
)
def ready(request: Request, db: Session = Depends(get_db)):
    """数据库可用且业务表齐全时返回 ready。"""
    db.execute(text("select 1"))
    missing = missing_tables(db)
    if missing:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=f"required tables missing: {', '.join(missing)}",
        )
    return success(request, {"status": "ready", "tables": list(REQUIRED_TABLES)})
