"""用户账号请求结构。"""

from datetime import datetime

from pydantic import BaseModel, Field

from ucr_api.records import AccountRecord
from ucr_api.schemas.credential import CredentialWriteRequest


class AccountCredentialPayload(CredentialWriteRequest):
    """随账号提交的凭据；携带 id 表示复用已有凭据并更新其字段。"""

    id: int = Field(default=0, ge=0, description="已有凭据 ID，0 表示新建。")


class AccountWriteRequest(BaseModel):
    """新建或更新账号请求体。"""

    username: str = Field(description="登录用户名。", examples=["alice"])
    email: str = Field(description="联系邮箱。", examples=["alice@example.com"])
    active: bool = Field(default=True, description="账号是否启用。")
    registered_at: datetime | None = Field(default=None, description="注册时间。")
    credential: AccountCredentialPayload | None = Field(default=None, description="可选关联凭据。")

    def to_record(self, account_id: int = 0) -> AccountRecord:
        """转换为协调层记录。"""
        credential = None
        if self.credential is not None:
            credential = self.credential.to_record(self.credential.id)
        return AccountRecord(
            id=account_id,
            username=self.username,
            email=self.email,
            active=self.active,
            registered_at=self.registered_at,
            credential=credential,
        )
