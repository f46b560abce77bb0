"""访问凭据模型。"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, String
from sqlalchemy.orm import Mapped, mapped_column

from ucr_api.models.base import Base, IntegerPrimaryKeyMixin, SoftDeleteMixin, TimestampMixin


class AccessCredential(Base, IntegerPrimaryKeyMixin, SoftDeleteMixin, TimestampMixin):
    """账号的认证凭据，不持有指向账号的反向引用。"""

    __tablename__ = "access_credentials"

    # 口令哈希，由调用方预先计算，不存明文。
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 可选盐值。
    salt: Mapped[str | None] = mapped_column(String(64))
    # 最近一次修改口令时间。
    password_changed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True))
    # 下次使用时是否必须重置口令。
    must_reset: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
