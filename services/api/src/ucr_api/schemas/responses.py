"""接口成功响应 `data` 字段结构定义。

凭据的哈希与盐值不会出现在任何响应中，只返回截断预览。
"""

from datetime import datetime

from pydantic import Field

from ucr_api.records import AccountRecord, CredentialRecord
from ucr_api.schemas.common import BaseSchema


class HealthStatusData(BaseSchema):
    """健康检查返回结构。"""

    status: str = Field(description="健康状态值，常见为 ok 或 ready。")
    tables: list[str] = Field(default_factory=list, description="就绪探针已确认存在的业务表。")


class CredentialData(BaseSchema):
    """凭据视图。"""

    id: int = Field(description="凭据 ID。")
    hash_preview: str = Field(description="截断后的口令哈希。")
    has_salt: bool = Field(description="是否设置了盐值。")
    password_changed_at: datetime | None = Field(default=None, description="最近一次修改口令时间。")
    must_reset: bool = Field(description="下次使用时是否必须重置口令。")

    @classmethod
    def from_record(cls, record: CredentialRecord) -> "CredentialData":
        return cls(
            id=record.id,
            hash_preview=record.hash_preview,
            has_salt=bool(record.salt and record.salt.strip()),
            password_changed_at=record.password_changed_at,
            must_reset=record.must_reset,
        )


class AccountData(BaseSchema):
    """账号视图。"""

    id: int = Field(description="账号 ID。")
    username: str = Field(description="登录用户名。")
    email: str = Field(description="联系邮箱。")
    active: bool = Field(description="账号是否启用。")
    registered_at: datetime | None = Field(default=None, description="注册时间。")
    credential: CredentialData | None = Field(default=None, description="关联凭据，未关联时为空。")

    @classmethod
    def from_record(cls, record: AccountRecord) -> "AccountData":
        return cls(
            id=record.id,
            username=record.username,
            email=record.email,
            active=record.active,
            registered_at=record.registered_at,
            credential=CredentialData.from_record(record.credential) if record.credential else None,
        )


class CredentialDetachData(BaseSchema):
    """解除并删除凭据结果。"""

    account_id: int = Field(description="账号 ID。")
    credential_id: int = Field(description="已删除的凭据 ID。")
    detached: bool = Field(description="账号是否已解除关联。")
    deleted: bool = Field(description="凭据是否已逻辑删除。")


class DeletedData(BaseSchema):
    """逻辑删除结果。"""

    id: int = Field(description="被删除记录 ID。")
    deleted: bool = Field(description="是否已逻辑删除。")
