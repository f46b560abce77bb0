"""业务异常定义。

所有协调层失败均以 RegistryError 子类抛出：
1. ValidationError：输入缺失、格式或长度不合法，调用方可自行修正，不会发生任何写库。
2. ConstraintError：调用结构不合法，例如更新时 ID 不大于 0。
3. ConflictError：唯一性冲突或归属关系不匹配。
4. NotFoundError：更新/删除目标不存在或已被逻辑删除。
"""

from typing import Any


class RegistryError(Exception):
    """账号凭据服务统一异常基类。"""

    code = "REGISTRY_ERROR"
    http_status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_details(self) -> dict[str, Any]:
        """构造可序列化的错误细节。"""
        return {"status_code": self.http_status, "reason": self.code.lower()}


class ValidationError(RegistryError):
    """字段校验失败。"""

    code = "VALIDATION_ERROR"
    http_status = 422

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def to_details(self) -> dict[str, Any]:
        details = super().to_details()
        if self.field:
            details["field"] = self.field
        return details


class ConstraintError(RegistryError):
    """调用参数在结构上不合法。"""

    code = "CONSTRAINT_ERROR"
    http_status = 400


class ConflictError(RegistryError):
    """唯一性或归属关系冲突。"""

    code = "CONFLICT"
    http_status = 409


class NotFoundError(RegistryError):
    """目标记录不存在或已逻辑删除。"""

    code = "NOT_FOUND"
    http_status = 404

    def __init__(self, resource_type: str, resource_id: int | str, message: str | None = None):
        super().__init__(message or f"{resource_type} '{resource_id}' not found")
        self.resource_type = resource_type
        self.resource_id = resource_id

    def to_details(self) -> dict[str, Any]:
        details = super().to_details()
        details["resource_type"] = self.resource_type
        details["resource_id"] = self.resource_id
        return details
