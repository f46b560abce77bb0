"""存储层导出集合。"""

from ucr_api.repositories.account import AccountRepository, account_to_record
from ucr_api.repositories.credential import CredentialRepository, credential_to_record
from ucr_api.repositories.protocols import AccountStore, CredentialStore

__all__ = [
    "AccountRepository",
    "AccountStore",
    "CredentialRepository",
    "CredentialStore",
    "account_to_record",
    "credential_to_record",
]
