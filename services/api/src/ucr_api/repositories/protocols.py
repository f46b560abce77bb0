"""存储层协议：协调层依赖的持久化契约。

约定:
1. 所有读取只返回未逻辑删除的记录，找不到时返回 None / 空列表而不是抛错。
2. update / soft_delete 命中 0 行时抛出 NotFoundError。
3. 每次写操作独立提交，协调层不持有跨实体事务。
"""

from typing import Protocol

from ucr_api.records import AccountRecord, CredentialRecord


class CredentialStore(Protocol):
    """访问凭据存储契约。"""

    def insert(self, record: CredentialRecord) -> int: ...

    def update(self, record: CredentialRecord) -> None: ...

    def soft_delete(self, credential_id: int) -> None: ...

    def get_by_id(self, credential_id: int) -> CredentialRecord | None: ...

    def get_all(self) -> list[CredentialRecord]: ...


class AccountStore(Protocol):
    """用户账号存储契约，读取时一并带出关联凭据。"""

    def insert(self, record: AccountRecord) -> int: ...

    def update(self, record: AccountRecord) -> None: ...

    def soft_delete(self, account_id: int) -> None: ...

    def get_by_id(self, account_id: int) -> AccountRecord | None: ...

    def get_all(self) -> list[AccountRecord]: ...

    def find_by_username(self, username: str) -> AccountRecord | None: ...

    def find_by_email(self, email: str) -> AccountRecord | None: ...

    def find_by_credential_id(self, credential_id: int) -> AccountRecord | None: ...
