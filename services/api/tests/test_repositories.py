from datetime import datetime

import pytest
from sqlalchemy import create_engine, select
from sqlalchemy.orm import Session, sessionmaker

import ucr_api.models  # noqa: F401
from ucr_api.core.errors import ConflictError, NotFoundError
from ucr_api.models.account import UserAccount
from ucr_api.models.base import Base
from ucr_api.records import AccountRecord, CredentialRecord
from ucr_api.repositories import AccountRepository, CredentialRepository
from ucr_api.services import AccountService, CredentialService


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


def test_account_insert_assigns_id_and_get_all_orders_by_id(db_session: Session):
    repository = AccountRepository(db_session)
    first = AccountRecord(username="b", email="b@example.com")
    second = AccountRecord(username="a", email="a@example.com")

    repository.insert(first)
    repository.insert(second)

    assert first.id > 0 and second.id > first.id
    assert [item.id for item in repository.get_all()] == [first.id, second.id]


def test_duplicate_active_username_maps_integrity_error_to_conflict(db_session: Session):
    repository = AccountRepository(db_session)
    repository.insert(AccountRecord(username="alice", email="alice@example.com"))

    with pytest.raises(ConflictError):
        repository.insert(AccountRecord(username="alice", email="other@example.com"))

    # 回滚后会话仍可继续使用。
    assert len(repository.get_all()) == 1


def test_partial_unique_index_ignores_deleted_rows(db_session: Session):
    repository = AccountRepository(db_session)
    first = AccountRecord(username="alice", email="alice@example.com")
    repository.insert(first)
    repository.soft_delete(first.id)

    second = AccountRecord(username="alice", email="alice@example.com")
    repository.insert(second)

    assert repository.find_by_username("alice").id == second.id
    rows = db_session.execute(select(UserAccount).order_by(UserAccount.id)).scalars().all()
    assert [(row.id, row.deleted) for row in rows] == [(first.id, True), (second.id, False)]


def test_update_of_deleted_account_raises_not_found(db_session: Session):
    repository = AccountRepository(db_session)
    account = AccountRecord(username="alice", email="alice@example.com")
    repository.insert(account)
    repository.soft_delete(account.id)

    account.active = False
    with pytest.raises(NotFoundError):
        repository.update(account)
    with pytest.raises(NotFoundError):
        repository.soft_delete(account.id)


def test_account_read_loads_credential_and_skips_deleted_one(db_session: Session):
    credentials = CredentialRepository(db_session)
    accounts = AccountRepository(db_session)
    credential = CredentialRecord(password_hash="hash", salt="salt", password_changed_at=datetime(2024, 5, 1))
    credentials.insert(credential)
    account = AccountRecord(username="alice", email="alice@example.com", credential=credential)
    accounts.insert(account)

    loaded = accounts.get_by_id(account.id)
    assert loaded.credential == credential

    credentials.soft_delete(credential.id)

    assert accounts.get_by_id(account.id).credential is None
    assert accounts.find_by_email("alice@example.com").credential is None


def test_find_is_exact_and_case_sensitive(db_session: Session):
    repository = AccountRepository(db_session)
    repository.insert(AccountRecord(username="alice", email="alice@example.com"))

    assert repository.find_by_username(" alice ") is not None
    assert repository.find_by_username("ALICE") is None
    assert repository.find_by_username("ali") is None
    assert repository.find_by_email("Alice@example.com") is None


def test_credential_get_all_excludes_deleted(db_session: Session):
    repository = CredentialRepository(db_session)
    kept = CredentialRecord(password_hash="kept")
    dropped = CredentialRecord(password_hash="dropped")
    repository.insert(kept)
    repository.insert(dropped)

    repository.soft_delete(dropped.id)

    assert [item.id for item in repository.get_all()] == [kept.id]
    assert repository.get_by_id(dropped.id) is None


def test_end_to_end_attach_then_detach(db_session: Session):
    credential_service = CredentialService(CredentialRepository(db_session))
    account_service = AccountService(AccountRepository(db_session), credential_service)

    account = account_service.insert(AccountRecord(username="alice", email="alice@example.com", active=True))
    assert account.id > 0
    listed = account_service.get_all()
    assert [item.id for item in listed] == [account.id]
    assert listed[0].credential is None

    credential = credential_service.insert(CredentialRecord(password_hash="abc123def456", must_reset=False))
    account.credential = credential
    account_service.update(account)
    assert account_service.get_by_id(account.id).credential.id == credential.id

    account_service.detach_and_delete_credential(account.id, credential.id)

    assert account_service.get_by_id(account.id).credential is None
    assert credential_service.get_by_id(credential.id) is None
    assert credential_service.get_all() == []
    row = db_session.get(UserAccount, account.id)
    assert row.credential_id is None


def test_detach_with_other_credential_changes_nothing(db_session: Session):
    credential_service = CredentialService(CredentialRepository(db_session))
    account_service = AccountService(AccountRepository(db_session), credential_service)
    owned = CredentialRecord(password_hash="owned")
    account = account_service.insert(AccountRecord(username="alice", email="alice@example.com", credential=owned))
    other = credential_service.insert(CredentialRecord(password_hash="other"))

    with pytest.raises(ConflictError):
        account_service.detach_and_delete_credential(account.id, other.id)

    assert account_service.get_by_id(account.id).credential.id == owned.id
    assert credential_service.get_by_id(other.id) is not None
    assert credential_service.get_by_id(owned.id) is not None
