"""路由模块导出集合。"""

from . import accounts, credentials, health

__all__ = [
    "accounts",
    "credentials",
    "health",
]
