"""ORM 模型导出集合。"""

from ucr_api.models.account import UserAccount
from ucr_api.models.credential import AccessCredential

__all__ = [
    "AccessCredential",
    "UserAccount",
]
