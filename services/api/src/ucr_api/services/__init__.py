"""服务层能力导出集合。"""

from ucr_api.services.account_service import (
    EMAIL_MAX_LENGTH,
    USERNAME_MAX_LENGTH,
    AccountService,
    is_valid_email,
    normalize_account,
    validate_account,
)
from ucr_api.services.credential_service import (
    PASSWORD_HASH_MAX_LENGTH,
    SALT_MAX_LENGTH,
    CredentialService,
    require_positive_id,
    validate_credential,
)

__all__ = [
    "AccountService",
    "CredentialService",
    "EMAIL_MAX_LENGTH",
    "PASSWORD_HASH_MAX_LENGTH",
    "SALT_MAX_LENGTH",
    "USERNAME_MAX_LENGTH",
    "is_valid_email",
    "normalize_account",
    "require_positive_id",
    "validate_account",
    "validate_credential",
]
