"""用户账号协调服务。

职责:
1. 校验账号字段，并在未删除账号范围内保证用户名与邮箱唯一。
2. 新增/更新账号时先持久化关联凭据，再写账号，保证外键可用。
3. 安全解除并删除凭据：先把账号外键置空并落库，再逻辑删除凭据。
4. 一条凭据至多被一个未删除账号引用，挂到其他账号名下时抛出 ConflictError。

各步骤均为独立的存储调用，不在同一事务内：
- 先写凭据后写账号失败时，凭据已持久化但账号尚未指向它。
- 解除关联成功但删除凭据失败时，账号已不再引用凭据，凭据保持有效但成为孤立记录。
以上中间状态均不做补偿回滚，错误原样抛给调用方。
"""

import logging
import re
from datetime import datetime, timezone

from ucr_api.core.config import get_settings
from ucr_api.core.errors import ConflictError, NotFoundError, ValidationError
from ucr_api.records import UNASSIGNED_ID, AccountRecord, CredentialRecord
from ucr_api.repositories.protocols import AccountStore
from ucr_api.services.credential_service import CredentialService, require_positive_id, validate_credential

logger = logging.getLogger(__name__)

USERNAME_MAX_LENGTH = 30
EMAIL_MAX_LENGTH = 120

EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9-]+(?:\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}$")


def is_valid_email(value: str) -> bool:
    """判断邮箱是否符合 local@domain.tld 格式。"""
    return EMAIL_PATTERN.fullmatch(value) is not None


def normalize_account(account: AccountRecord | None) -> None:
    """去除用户名与邮箱首尾空白，唯一性按去空白后的值判断与存储。"""
    if account is None:
        return
    if isinstance(account.username, str):
        account.username = account.username.strip()
    if isinstance(account.email, str):
        account.email = account.email.strip()


def validate_account(account: AccountRecord | None) -> None:
    """校验账号字段，不合法时抛出 ValidationError。"""
    if account is None:
        raise ValidationError("account must not be null")

    username = account.username
    if username is None or not username.strip():
        raise ValidationError("username must not be blank", field="username")
    if len(username) > USERNAME_MAX_LENGTH:
        raise ValidationError(
            f"username exceeds the maximum length ({USERNAME_MAX_LENGTH})",
            field="username",
        )

    email = account.email
    if email is None or not email.strip():
        raise ValidationError("email must not be blank", field="email")
    if len(email) > EMAIL_MAX_LENGTH:
        raise ValidationError(f"email exceeds the maximum length ({EMAIL_MAX_LENGTH})", field="email")
    if not is_valid_email(email):
        raise ValidationError("email format is not valid", field="email")


class AccountService:
    """账号协调器，负责跨账号与凭据两类实体的一致性。"""

    def __init__(self, store: AccountStore, credential_service: CredentialService):
        if store is None:
            raise ValueError("account store must not be None")
        if credential_service is None:
            raise ValueError("credential service must not be None")
        self.store = store
        self.credential_service = credential_service

    # ------------------------------------------------------------------
    # 写操作
    # ------------------------------------------------------------------

    def insert(self, account: AccountRecord) -> AccountRecord:
        """新增账号；携带凭据时先持久化凭据。"""
        normalize_account(account)
        validate_account(account)
        if account.credential is not None:
            validate_credential(account.credential)
        self._ensure_username_unique(account.username)
        self._ensure_email_unique(account.email)
        self._ensure_credential_unclaimed(account.credential)

        if account.registered_at is None and get_settings().stamp_registration_on_insert:
            account.registered_at = datetime.now(timezone.utc)

        self._persist_credential(account.credential)
        self.store.insert(account)
        logger.info("account created id=%s credential_id=%s", account.id, account.credential_id)
        return account

    def update(self, account: AccountRecord) -> AccountRecord:
        """更新账号；唯一性校验排除自身，携带凭据时先持久化凭据。"""
        if account is None:
            raise ValidationError("account must not be null")
        require_positive_id(account.id, "account id must be greater than 0 to update")
        normalize_account(account)
        validate_account(account)
        if account.credential is not None:
            validate_credential(account.credential)
        self._ensure_username_unique(account.username, exclude_id=account.id)
        self._ensure_email_unique(account.email, exclude_id=account.id)
        self._ensure_credential_unclaimed(account.credential, exclude_id=account.id)

        self._persist_credential(account.credential)
        self.store.update(account)
        logger.info("account updated id=%s credential_id=%s", account.id, account.credential_id)
        return account

    def delete(self, account_id: int) -> None:
        """逻辑删除账号，关联凭据保留，可后续重新分配。"""
        require_positive_id(account_id)
        self.store.soft_delete(account_id)
        logger.info("account soft-deleted id=%s", account_id)

    def update_account_credential(self, account_id: int, credential: CredentialRecord) -> CredentialRecord:
        """更新账号当前持有的凭据。"""
        if credential is None:
            raise ValidationError("credential must not be null")
        require_positive_id(account_id, "ids must be greater than 0")
        require_positive_id(credential.id, "ids must be greater than 0")
        self._require_owned_credential(account_id, credential.id)
        return self.credential_service.update(credential)

    def detach_and_delete_credential(self, account_id: int, credential_id: int) -> None:
        """解除账号与凭据的关联并逻辑删除该凭据。

        顺序固定：先将账号外键置空并提交，再删除凭据。反过来会在账号上留下指向已删除凭据的引用。
        """
        require_positive_id(account_id, "ids must be greater than 0")
        require_positive_id(credential_id, "ids must be greater than 0")
        account = self._require_owned_credential(account_id, credential_id)

        account.credential = None
        self.store.update(account)
        logger.info("credential detached account_id=%s credential_id=%s", account_id, credential_id)

        try:
            self.credential_service.delete(credential_id)
        except Exception:
            logger.warning(
                "credential left orphaned after detach account_id=%s credential_id=%s",
                account_id,
                credential_id,
            )
            raise

    # ------------------------------------------------------------------
    # 读操作
    # ------------------------------------------------------------------

    def get_by_id(self, account_id: int) -> AccountRecord | None:
        require_positive_id(account_id)
        return self.store.get_by_id(account_id)

    def get_all(self) -> list[AccountRecord]:
        return self.store.get_all()

    def find_by_username(self, username: str) -> AccountRecord | None:
        """按用户名精确查找，空白输入抛出 ValidationError。"""
        if username is None or not username.strip():
            raise ValidationError("username must not be blank", field="username")
        return self.store.find_by_username(username.strip())

    def find_by_email(self, email: str) -> AccountRecord | None:
        """按邮箱精确查找，空白或格式不合法时抛出 ValidationError。"""
        if email is None or not email.strip():
            raise ValidationError("email must not be blank", field="email")
        candidate = email.strip()
        if not is_valid_email(candidate):
            raise ValidationError("email format is not valid", field="email")
        return self.store.find_by_email(candidate)

    # ------------------------------------------------------------------
    # 内部规则
    # ------------------------------------------------------------------

    def _ensure_username_unique(self, username: str, exclude_id: int | None = None) -> None:
        existing = self.store.find_by_username(username.strip())
        if existing is not None and (exclude_id is None or existing.id != exclude_id):
            raise ConflictError(f"an account with username '{username.strip()}' already exists")

    def _ensure_email_unique(self, email: str, exclude_id: int | None = None) -> None:
        existing = self.store.find_by_email(email.strip())
        if existing is not None and (exclude_id is None or existing.id != exclude_id):
            raise ConflictError(f"an account with email '{email.strip()}' already exists")

    def _ensure_credential_unclaimed(self, credential: CredentialRecord | None, exclude_id: int | None = None) -> None:
        # 一条凭据至多被一个未删除账号引用。
        if credential is None or credential.id <= UNASSIGNED_ID:
            return
        owner = self.store.find_by_credential_id(credential.id)
        if owner is not None and (exclude_id is None or owner.id != exclude_id):
            raise ConflictError("credential already belongs to another account")

    def _persist_credential(self, credential: CredentialRecord | None) -> None:
        if credential is None:
            return
        if credential.id == UNASSIGNED_ID:
            self.credential_service.insert(credential)
        else:
            self.credential_service.update(credential)

    def _require_owned_credential(self, account_id: int, credential_id: int) -> AccountRecord:
        account = self.store.get_by_id(account_id)
        if account is None:
            raise NotFoundError("account", account_id)
        if account.credential is None or account.credential.id != credential_id:
            raise ConflictError("credential does not belong to this account")
        return account
