"""用户账号存储实现。"""

from sqlalchemy import Select, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ucr_api.core.errors import ConflictError, NotFoundError, RegistryError
from ucr_api.models.account import UserAccount
from ucr_api.records import AccountRecord
from ucr_api.repositories.credential import credential_to_record


def account_to_record(row: UserAccount) -> AccountRecord:
    """将账号行（含 LEFT JOIN 带出的凭据）映射为记录。"""
    credential = None
    # 已逻辑删除的凭据视同未关联。
    if row.credential is not None and not row.credential.deleted:
        credential = credential_to_record(row.credential)
    return AccountRecord(
        id=row.id,
        username=row.username,
        email=row.email,
        active=row.active,
        registered_at=row.registered_at,
        credential=credential,
        deleted=row.deleted,
    )


class AccountRepository:
    """基于 SQLAlchemy 会话的账号存储，每次写操作独立提交。"""

    def __init__(self, db: Session):
        self.db = db

    def _active_accounts(self) -> Select:
        return (
            select(UserAccount)
            .where(UserAccount.deleted.is_(False))
            .execution_options(populate_existing=True)
        )

    def insert(self, record: AccountRecord) -> int:
        """插入账号并回填数据库分配的 ID。"""
        row = UserAccount(
            username=record.username,
            email=record.email,
            active=record.active,
            registered_at=record.registered_at,
            credential_id=record.credential_id,
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("account violates a uniqueness or reference constraint") from exc

        if not row.id:
            raise RegistryError("account insert did not return an id")
        record.id = row.id
        return row.id

    def update(self, record: AccountRecord) -> None:
        """更新账号字段与凭据外键，不修改逻辑删除标记。"""
        statement = (
            update(UserAccount)
            .where(UserAccount.id == record.id)
            .where(UserAccount.deleted.is_(False))
            .values(
                username=record.username,
                email=record.email,
                active=record.active,
                registered_at=record.registered_at,
                credential_id=record.credential_id,
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = self.db.execute(statement)
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("account violates a uniqueness or reference constraint") from exc
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFoundError("account", record.id)
        self.db.commit()

    def soft_delete(self, account_id: int) -> None:
        """将账号标记为已删除，关联凭据保持不变。"""
        result = self.db.execute(
            update(UserAccount)
            .where(UserAccount.id == account_id)
            .where(UserAccount.deleted.is_(False))
            .values(deleted=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFoundError("account", account_id)
        self.db.commit()

    def get_by_id(self, account_id: int) -> AccountRecord | None:
        row = self.db.execute(self._active_accounts().where(UserAccount.id == account_id)).scalar_one_or_none()
        return account_to_record(row) if row else None

    def get_all(self) -> list[AccountRecord]:
        rows = self.db.execute(self._active_accounts().order_by(UserAccount.id)).scalars().all()
        return [account_to_record(row) for row in rows]

    def find_by_username(self, username: str) -> AccountRecord | None:
        """按用户名精确匹配（区分大小写）。"""
        row = self.db.execute(
            self._active_accounts().where(UserAccount.username == username.strip())
        ).scalar_one_or_none()
        return account_to_record(row) if row else None

    def find_by_email(self, email: str) -> AccountRecord | None:
        """按邮箱精确匹配（区分大小写）。"""
        row = self.db.execute(
            self._active_accounts().where(UserAccount.email == email.strip())
        ).scalar_one_or_none()
        return account_to_record(row) if row else None

    def find_by_credential_id(self, credential_id: int) -> AccountRecord | None:
        """查找当前引用该凭据的未删除账号。"""
        row = self.db.execute(
            self._active_accounts().where(UserAccount.credential_id == credential_id)
        ).scalars().first()
        return account_to_record(row) if row else None
