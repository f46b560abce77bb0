"""协调层依赖装配。

按请求会话显式构造仓储与协调器：
1. 仓储持有请求级 Session，每次写操作独立提交。
2. 账号协调器通过构造参数持有凭据协调器，不使用全局注册表。
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ucr_api.db.session import get_db
from ucr_api.repositories import AccountRepository, CredentialRepository
from ucr_api.services import AccountService, CredentialService


def build_credential_service(db: Session) -> CredentialService:
    """基于会话构造凭据协调器。"""
    return CredentialService(CredentialRepository(db))


def build_account_service(db: Session) -> AccountService:
    """基于会话构造账号协调器，两者共享同一会话。"""
    return AccountService(AccountRepository(db), build_credential_service(db))


def get_credential_service(db: Session = Depends(get_db)) -> CredentialService:
    """路由依赖：凭据协调器。"""
    return build_credential_service(db)


def get_account_service(db: Session = Depends(get_db)) -> AccountService:
    """路由依赖：账号协调器。"""
    return build_account_service(db)
