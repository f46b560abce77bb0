"""对象映射基础模型与通用混入。"""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, MetaData, false, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """全局对象映射声明基类。"""

    metadata = MetaData(
        naming_convention={
            # 统一约束/索引命名规范。
            "pk": "pk_%(table_name)s",
            "ix": "ix_%(table_name)s_%(column_0_name)s",
            "uq": "uk_%(table_name)s_%(column_0_name)s",
            "ck": "ck_%(table_name)s_%(constraint_name)s",
            "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
        }
    )


class IntegerPrimaryKeyMixin:
    """提供数据库自增整数主键字段。"""

    # 新建记录 id 由数据库分配，分配后不再变化。
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True, comment="主键 ID。")


class SoftDeleteMixin:
    """提供逻辑删除标记字段。"""

    # 逻辑删除后所有按 ID 查询/列表/检索均不再返回该记录。
    deleted: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false(), comment="逻辑删除标记。"
    )


class TimestampMixin:
    """提供创建时间与更新时间字段。"""

    # 记录创建时间。
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, comment="创建时间。"
    )
    # 记录最后更新时间，更新时自动刷新。
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
        comment="更新时间。",
    )
