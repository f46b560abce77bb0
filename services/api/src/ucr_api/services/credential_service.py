"""访问凭据协调服务。

职责:
1. 插入/更新前校验凭据字段（哈希必填、长度上限、修改时间不得明显超前）。
2. 校验失败时不发生任何存储调用。
3. 删除一律为逻辑删除，读取只返回未删除记录。
"""

import logging
from datetime import datetime, timedelta, timezone

from ucr_api.core.config import get_settings
from ucr_api.core.errors import ConstraintError, ValidationError
from ucr_api.records import CredentialRecord
from ucr_api.repositories.protocols import CredentialStore

logger = logging.getLogger(__name__)

PASSWORD_HASH_MAX_LENGTH = 255
SALT_MAX_LENGTH = 64


def _as_utc(value: datetime) -> datetime:
    """无时区的时间按 UTC 解释。"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def require_positive_id(value: int, message: str = "id must be greater than 0") -> None:
    """校验记录 ID 大于 0。"""
    if value is None or value <= 0:
        raise ConstraintError(message)


def validate_credential(
    credential: CredentialRecord | None,
    *,
    now: datetime | None = None,
    clock_skew: timedelta | None = None,
) -> None:
    """校验凭据字段，不合法时抛出 ValidationError。

    哈希只校验存在性与长度，不校验内容；盐值为空白时视为未提供。
    """
    if credential is None:
        raise ValidationError("credential must not be null")

    password_hash = credential.password_hash
    if password_hash is None or not password_hash.strip():
        raise ValidationError("password hash must not be blank", field="password_hash")
    if len(password_hash) > PASSWORD_HASH_MAX_LENGTH:
        raise ValidationError(
            f"password hash exceeds the maximum length ({PASSWORD_HASH_MAX_LENGTH})",
            field="password_hash",
        )

    salt = credential.salt
    if salt is not None and salt.strip() and len(salt) > SALT_MAX_LENGTH:
        raise ValidationError(f"salt exceeds the maximum length ({SALT_MAX_LENGTH})", field="salt")

    changed_at = credential.password_changed_at
    if changed_at is not None:
        if clock_skew is None:
            clock_skew = timedelta(seconds=get_settings().credential_clock_skew_seconds)
        reference = now or datetime.now(timezone.utc)
        if _as_utc(changed_at) > _as_utc(reference) + clock_skew:
            raise ValidationError(
                "password change time must not be in the future",
                field="password_changed_at",
            )


class CredentialService:
    """凭据协调器：校验后委托存储层持久化。"""

    def __init__(self, store: CredentialStore):
        if store is None:
            raise ValueError("credential store must not be None")
        self.store = store

    def insert(self, credential: CredentialRecord) -> CredentialRecord:
        """校验并插入凭据，成功后记录获得数据库分配的 ID。"""
        validate_credential(credential)
        self.store.insert(credential)
        logger.info("credential created id=%s", credential.id)
        return credential

    def update(self, credential: CredentialRecord) -> CredentialRecord:
        """校验并更新凭据全部可变字段。"""
        if credential is None:
            raise ValidationError("credential must not be null")
        require_positive_id(credential.id, "credential id must be greater than 0 to update")
        validate_credential(credential)
        self.store.update(credential)
        logger.info("credential updated id=%s", credential.id)
        return credential

    def delete(self, credential_id: int) -> None:
        """逻辑删除凭据；不存在或已删除时抛出 NotFoundError。"""
        require_positive_id(credential_id)
        self.store.soft_delete(credential_id)
        logger.info("credential soft-deleted id=%s", credential_id)

    def get_by_id(self, credential_id: int) -> CredentialRecord | None:
        require_positive_id(credential_id)
        return self.store.get_by_id(credential_id)

    def get_all(self) -> list[CredentialRecord]:
        return self.store.get_all()
