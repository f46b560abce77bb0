from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from ucr_api.core.errors import ConflictError, ConstraintError, NotFoundError, ValidationError
from ucr_api.models.base import Base
from ucr_api.models.account import UserAccount
from ucr_api.records import AccountRecord, CredentialRecord
from ucr_api.repositories import AccountRepository, CredentialRepository
from ucr_api.services import AccountService, CredentialService, is_valid_email


@pytest.fixture
def db_session() -> Session:
    engine = create_engine("sqlite+pysqlite:///:memory:", future=True)
    Base.metadata.create_all(engine)
    local_session = sessionmaker(bind=engine, autoflush=False, autocommit=False, class_=Session)
    db = local_session()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def service(db_session: Session) -> AccountService:
    return AccountService(AccountRepository(db_session), CredentialService(CredentialRepository(db_session)))


def _account(username: str = "alice", email: str = "alice@example.com", **kwargs) -> AccountRecord:
    return AccountRecord(username=username, email=email, **kwargs)


def test_insert_without_credential(service: AccountService):
    account = service.insert(_account(active=True))

    assert account.id > 0
    assert account.registered_at is not None
    listed = service.get_all()
    assert [item.id for item in listed] == [account.id]
    assert listed[0].credential is None
    assert listed[0].username == "alice"


def test_insert_keeps_supplied_registration_time(service: AccountService):
    registered_at = datetime(2023, 3, 4, 5, 6, 7)
    account = service.insert(_account(registered_at=registered_at))

    assert service.get_by_id(account.id).registered_at == registered_at


def test_insert_with_new_credential_persists_credential_first(service: AccountService):
    credential = CredentialRecord(password_hash="hash-value", salt="s", must_reset=True)
    account = service.insert(_account(credential=credential))

    assert credential.id > 0
    fetched = service.get_by_id(account.id)
    assert fetched.credential is not None
    assert fetched.credential.id == credential.id
    assert fetched.credential.password_hash == "hash-value"
    assert fetched.credential.must_reset is True


def test_insert_with_existing_credential_updates_it(service: AccountService):
    credential = service.credential_service.insert(CredentialRecord(password_hash="first"))
    credential.password_hash = "second"

    account = service.insert(_account(credential=credential))

    fetched = service.get_by_id(account.id)
    assert fetched.credential.id == credential.id
    assert fetched.credential.password_hash == "second"
    assert len(service.credential_service.get_all()) == 1


def test_insert_trims_username_and_email(service: AccountService):
    account = service.insert(_account(username="  alice  ", email=" alice@example.com "))

    fetched = service.get_by_id(account.id)
    assert fetched.username == "alice"
    assert fetched.email == "alice@example.com"


def test_duplicate_username_after_trimming_conflicts(service: AccountService):
    service.insert(_account())

    with pytest.raises(ConflictError):
        service.insert(_account(username=" alice ", email="other@example.com"))


def test_duplicate_email_conflicts(service: AccountService):
    service.insert(_account())

    with pytest.raises(ConflictError):
        service.insert(_account(username="bob", email="alice@example.com"))


def test_username_match_is_case_sensitive(service: AccountService):
    service.insert(_account())

    other = service.insert(_account(username="Alice", email="alice2@example.com"))
    assert other.id > 0


def test_conflicting_insert_does_not_persist_credential(service: AccountService):
    service.insert(_account())

    with pytest.raises(ConflictError):
        service.insert(_account(email="x@example.com", credential=CredentialRecord(password_hash="h")))
    assert service.credential_service.get_all() == []


def test_update_with_unchanged_identifier_succeeds(service: AccountService):
    account = service.insert(_account())
    account.active = False

    service.update(account)

    fetched = service.get_by_id(account.id)
    assert fetched.active is False
    assert fetched.username == "alice"


def test_update_to_other_accounts_username_conflicts(service: AccountService):
    service.insert(_account())
    bob = service.insert(_account(username="bob", email="bob@example.com"))

    bob.username = "alice"
    with pytest.raises(ConflictError):
        service.update(bob)


@pytest.mark.parametrize("account_id", [0, -1])
def test_update_requires_positive_id(service: AccountService, account_id):
    with pytest.raises(ConstraintError):
        service.update(_account(id=account_id))


def test_update_unknown_account_raises_not_found(service: AccountService):
    with pytest.raises(NotFoundError):
        service.update(_account(id=77))


def test_update_attaches_new_credential(service: AccountService):
    account = service.insert(_account())
    account.credential = CredentialRecord(password_hash="attached")

    service.update(account)

    fetched = service.get_by_id(account.id)
    assert fetched.credential is not None
    assert fetched.credential.id == account.credential.id


def test_deleted_account_identifiers_can_be_reused(service: AccountService):
    first = service.insert(_account())
    service.delete(first.id)

    second = service.insert(_account())

    assert second.id != first.id
    assert service.get_by_id(first.id) is None
    assert service.find_by_username("alice").id == second.id


def test_delete_account_keeps_credential(service: AccountService):
    credential = CredentialRecord(password_hash="kept")
    account = service.insert(_account(credential=credential))

    service.delete(account.id)

    assert service.get_by_id(account.id) is None
    assert service.get_all() == []
    assert service.credential_service.get_by_id(credential.id) is not None


def test_delete_twice_raises_not_found(service: AccountService):
    account = service.insert(_account())
    service.delete(account.id)

    with pytest.raises(NotFoundError):
        service.delete(account.id)


def test_delete_requires_positive_id(service: AccountService):
    with pytest.raises(ConstraintError):
        service.delete(0)


@pytest.mark.parametrize(
    "email",
    ["user@example.com", "first.last+tag@mail.example.org", "a_b%c-d@sub-domain.example.io"],
)
def test_valid_email_formats(email):
    assert is_valid_email(email)


@pytest.mark.parametrize(
    "email",
    ["user@@example", "user@", "user@example", "@example.com", "user@example.c", "us er@example.com", "usér@example.com"],
)
def test_invalid_email_formats_rejected(service: AccountService, email):
    with pytest.raises(ValidationError) as exc:
        service.insert(_account(email=email))
    assert exc.value.field == "email"


def test_field_length_limits(service: AccountService):
    service.insert(_account(username="u" * 30))
    with pytest.raises(ValidationError) as exc:
        service.insert(_account(username="u" * 31, email="other@example.com"))
    assert exc.value.field == "username"

    long_email = f"{'e' * 109}@example.com"
    assert len(long_email) == 121
    with pytest.raises(ValidationError) as exc:
        service.insert(_account(username="bob", email=long_email))
    assert exc.value.field == "email"


@pytest.mark.parametrize("username", ["", "   ", None])
def test_blank_username_rejected(service: AccountService, username):
    with pytest.raises(ValidationError):
        service.insert(_account(username=username))


def test_invalid_attached_credential_rejected_before_writes(service: AccountService):
    with pytest.raises(ValidationError):
        service.insert(_account(credential=CredentialRecord(password_hash="  ")))
    assert service.get_all() == []
    assert service.credential_service.get_all() == []


def test_find_by_username_and_email(service: AccountService):
    account = service.insert(_account())

    assert service.find_by_username(" alice ").id == account.id
    assert service.find_by_email("alice@example.com").id == account.id
    assert service.find_by_username("nobody") is None
    assert service.find_by_email("nobody@example.com") is None


@pytest.mark.parametrize("value", ["", "   ", None])
def test_find_rejects_blank_input(service: AccountService, value):
    with pytest.raises(ValidationError):
        service.find_by_username(value)
    with pytest.raises(ValidationError):
        service.find_by_email(value)


def test_find_by_email_rejects_malformed_address(service: AccountService):
    with pytest.raises(ValidationError):
        service.find_by_email("not-an-email")


def test_get_by_id_requires_positive_id(service: AccountService):
    with pytest.raises(ConstraintError):
        service.get_by_id(-5)


def test_soft_deleted_credential_is_not_loaded_with_account(service: AccountService, db_session: Session):
    credential = CredentialRecord(password_hash="h")
    account = service.insert(_account(credential=credential))

    service.credential_service.delete(credential.id)

    assert service.get_by_id(account.id).credential is None
    row = db_session.get(UserAccount, account.id)
    assert row.credential_id == credential.id


def test_update_account_credential_requires_ownership(service: AccountService):
    owned = CredentialRecord(password_hash="owned")
    account = service.insert(_account(credential=owned))
    stranger = service.credential_service.insert(CredentialRecord(password_hash="stranger"))

    owned.password_hash = "rotated"
    service.update_account_credential(account.id, owned)
    assert service.credential_service.get_by_id(owned.id).password_hash == "rotated"

    stranger.password_hash = "hijack"
    with pytest.raises(ConflictError):
        service.update_account_credential(account.id, stranger)
    assert service.credential_service.get_by_id(stranger.id).password_hash == "stranger"


def test_update_account_credential_unknown_account(service: AccountService):
    with pytest.raises(NotFoundError):
        service.update_account_credential(99, CredentialRecord(password_hash="h", id=1))


def test_service_requires_collaborators(db_session: Session):
    with pytest.raises(ValueError):
        AccountService(AccountRepository(db_session), None)
    with pytest.raises(ValueError):
        AccountService(None, CredentialService(CredentialRepository(db_session)))


def test_account_repr_hides_credential_contents():
    account = _account(credential=CredentialRecord(password_hash="super-secret-hash", id=5))
    text = repr(account)
    assert "super-secret-hash" not in text
    assert "CredentialRecord(id=5)" in text


def test_credential_cannot_be_shared_between_accounts(service: AccountService, db_session: Session):
    credential = CredentialRecord(password_hash="shared")
    alice = service.insert(_account(credential=credential))

    with pytest.raises(ConflictError, match="another account"):
        service.insert(
            _account(
                username="bob",
                email="bob@example.com",
                credential=CredentialRecord(password_hash="shared", id=credential.id),
            )
        )
    assert service.find_by_username("bob") is None

    bob = service.insert(_account(username="bob", email="bob@example.com"))
    bob.credential = CredentialRecord(password_hash="shared", id=credential.id)
    with pytest.raises(ConflictError, match="another account"):
        service.update(bob)

    service.detach_and_delete_credential(alice.id, credential.id)
    assert db_session.get(UserAccount, bob.id).credential_id is None


def test_credential_released_by_deleted_account_can_be_reattached(service: AccountService):
    credential = CredentialRecord(password_hash="reused")
    first = service.insert(_account(credential=credential))
    service.delete(first.id)

    second = service.insert(
        _account(username="bob", email="bob@example.com", credential=CredentialRecord(password_hash="reused", id=credential.id))
    )

    assert service.get_by_id(second.id).credential.id == credential.id
