"""访问凭据存储实现。"""

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ucr_api.core.errors import ConflictError, NotFoundError, RegistryError
from ucr_api.models.credential import AccessCredential
from ucr_api.records import CredentialRecord


def credential_to_record(row: AccessCredential) -> CredentialRecord:
    """将凭据行映射为记录。"""
    return CredentialRecord(
        id=row.id,
        password_hash=row.password_hash,
        salt=row.salt,
        password_changed_at=row.password_changed_at,
        must_reset=row.must_reset,
        deleted=row.deleted,
    )


class CredentialRepository:
    """基于 SQLAlchemy 会话的凭据存储，每次写操作独立提交。"""

    def __init__(self, db: Session):
        self.db = db

    def insert(self, record: CredentialRecord) -> int:
        """插入凭据并回填数据库分配的 ID。"""
        row = AccessCredential(
            password_hash=record.password_hash,
            salt=record.salt,
            password_changed_at=record.password_changed_at,
            must_reset=record.must_reset,
        )
        self.db.add(row)
        try:
            self.db.commit()
        except IntegrityError as exc:
            self.db.rollback()
            raise ConflictError("credential violates a database constraint") from exc

        if not row.id:
            raise RegistryError("credential insert did not return an id")
        record.id = row.id
        return row.id

    def update(self, record: CredentialRecord) -> None:
        """更新全部可变字段，不修改逻辑删除标记。"""
        result = self.db.execute(
            update(AccessCredential)
            .where(AccessCredential.id == record.id)
            .where(AccessCredential.deleted.is_(False))
            .values(
                password_hash=record.password_hash,
                salt=record.salt,
                password_changed_at=record.password_changed_at,
                must_reset=record.must_reset,
            )
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFoundError("credential", record.id)
        self.db.commit()

    def soft_delete(self, credential_id: int) -> None:
        """将凭据标记为已删除。"""
        result = self.db.execute(
            update(AccessCredential)
            .where(AccessCredential.id == credential_id)
            .where(AccessCredential.deleted.is_(False))
            .values(deleted=True)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            self.db.rollback()
            raise NotFoundError("credential", credential_id)
        self.db.commit()

    def get_by_id(self, credential_id: int) -> CredentialRecord | None:
        row = self.db.execute(
            select(AccessCredential)
            .where(AccessCredential.id == credential_id)
            .where(AccessCredential.deleted.is_(False))
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        return credential_to_record(row) if row else None

    def get_all(self) -> list[CredentialRecord]:
        rows = (
            self.db.execute(
                select(AccessCredential)
                .where(AccessCredential.deleted.is_(False))
                .order_by(AccessCredential.id)
                .execution_options(populate_existing=True)
            )
            .scalars()
            .all()
        )
        return [credential_to_record(row) for row in rows]
