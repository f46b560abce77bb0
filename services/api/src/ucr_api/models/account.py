"""用户账号模型。"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Index, String, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ucr_api.models.base import Base, IntegerPrimaryKeyMixin, SoftDeleteMixin, TimestampMixin
from ucr_api.models.credential import AccessCredential


class UserAccount(Base, IntegerPrimaryKeyMixin, SoftDeleteMixin, TimestampMixin):
    """用户账号实体，单向关联至多一条访问凭据。"""

    __tablename__ = "user_accounts"
    __table_args__ = (
        # 唯一性只在未删除记录范围内生效，已删除账号的用户名/邮箱可被复用。
        Index(
            "uk_user_accounts_username_active",
            "username",
            unique=True,
            sqlite_where=text("deleted = 0"),
            postgresql_where=text("deleted = false"),
        ),
        Index(
            "uk_user_accounts_email_active",
            "email",
            unique=True,
            sqlite_where=text("deleted = 0"),
            postgresql_where=text("deleted = false"),
        ),
    )

    # 登录用户名，未删除账号内全局唯一。
    username: Mapped[str] = mapped_column(String(30), nullable=False)
    # 联系邮箱，未删除账号内全局唯一。
    email: Mapped[str] = mapped_column(String(120), nullable=False)
    # 账号启用状态。
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    # 注册时间，可为空。
    registered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    # 关联凭据 ID；不设置级联删除，账号删除后凭据仍保留。
    credential_id: Mapped[int | None] = mapped_column(ForeignKey("access_credentials.id"), index=True)

    # 读取账号时通过 LEFT JOIN 一并加载凭据，凭据侧不声明 backref。
    credential: Mapped[AccessCredential | None] = relationship(lazy="joined", innerjoin=False)
