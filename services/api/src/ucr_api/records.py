"""协调层与存储层之间传递的账号/凭据记录。

记录在创建时 id 为 0（未分配），首次插入成功后由存储层回填数据库分配的 ID。
"""

from dataclasses import dataclass, field
from datetime import datetime

UNASSIGNED_ID = 0


@dataclass
class CredentialRecord:
    """访问凭据记录。"""

    password_hash: str
    must_reset: bool = False
    salt: str | None = None
    password_changed_at: datetime | None = None
    id: int = UNASSIGNED_ID
    deleted: bool = False

    @property
    def hash_preview(self) -> str:
        """返回截断后的哈希，避免完整哈希出现在日志或界面中。"""
        if self.password_hash is None:
            return "null"
        if len(self.password_hash) <= 8:
            return self.password_hash
        return f"{self.password_hash[:8]}…"

    def __repr__(self) -> str:
        return (
            f"CredentialRecord(id={self.id}, deleted={self.deleted}, "
            f"password_hash={self.hash_preview!r}, has_salt={bool(self.salt)}, "
            f"password_changed_at={self.password_changed_at!r}, must_reset={self.must_reset})"
        )


@dataclass
class AccountRecord:
    """用户账号记录，credential 为空表示未关联凭据。"""

    username: str
    email: str
    active: bool = True
    registered_at: datetime | None = None
    credential: CredentialRecord | None = field(default=None)
    id: int = UNASSIGNED_ID
    deleted: bool = False

    @property
    def credential_id(self) -> int | None:
        """返回关联凭据 ID，未关联或凭据尚未持久化时为 None。"""
        if self.credential is None or self.credential.id <= UNASSIGNED_ID:
            return None
        return self.credential.id

    def __repr__(self) -> str:
        # 仅输出凭据 ID，不展开凭据内容。
        credential = "None" if self.credential is None else f"CredentialRecord(id={self.credential.id})"
        return (
            f"AccountRecord(id={self.id}, deleted={self.deleted}, username={self.username!r}, "
            f"email={self.email!r}, active={self.active}, registered_at={self.registered_at!r}, "
            f"credential={credential})"
        )
