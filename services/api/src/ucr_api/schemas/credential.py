"""访问凭据请求结构。

长度与时间规则由服务层统一校验，这里只约束字段类型与必填项：
修改时间必须带时区偏移，must_reset 必须显式给出。
"""

from pydantic import AwareDatetime, BaseModel, Field

from ucr_api.records import CredentialRecord


class CredentialWriteRequest(BaseModel):
    """新建或更新凭据请求体。"""

    password_hash: str = Field(description="预先计算好的口令哈希。", examples=["pbkdf2_sha256$390000$..."])
    salt: str | None = Field(default=None, description="可选盐值。")
    password_changed_at: AwareDatetime | None = Field(
        default=None,
        description="最近一次修改口令时间，必须携带时区偏移，例如 2024-05-01T08:00:00+08:00。",
    )
    must_reset: bool = Field(description="下次使用时是否必须重置口令，必填。")

    def to_record(self, credential_id: int = 0) -> CredentialRecord:
        """转换为协调层记录。"""
        return CredentialRecord(
            id=credential_id,
            password_hash=self.password_hash,
            salt=self.salt,
            password_changed_at=self.password_changed_at,
            must_reset=self.must_reset,
        )


class AccountCredentialUpdateRequest(CredentialWriteRequest):
    """更新账号当前凭据请求体。"""

    credential_id: int = Field(description="账号当前持有的凭据 ID。")
