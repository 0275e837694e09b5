"""
Unit tests for the account service and token codec.
"""
from datetime import timedelta
from unittest.mock import Mock
import uuid

import jwt
import pytest
from sqlalchemy.exc import SQLAlchemyError

from rest_auth.auth import decode_token, encode_token, hash_password, verify_password
from rest_auth.errors import CreationError, InvalidToken, NotFoundError, PasswordMismatch, TokenExpired
from rest_auth.models import Account, Role
from rest_auth.schemas import AccountCreate
from rest_auth.constants import ERR_FIND_USER
from rest_auth.service import AccountService, normalize_email


@pytest.fixture
def account(service):
    return service.create_account("test", "test@test.ru", "pw123456")


def test_hash_password_uses_fresh_salt():
    first = hash_password("pw123456")
    second = hash_password("pw123456")
    assert first != second
    assert verify_password("pw123456", first)
    assert verify_password("pw123456", second)
    assert not verify_password("wrong", first)


def test_verify_password_rejects_unknown_hash_format():
    assert verify_password("pw123456", "not-a-hash") is False


def test_create_account_defaults_to_user(service, account, db_session):
    assert account.role == Role.USER
    assert account.name == "test"
    assert not hasattr(account, "password_hash")

    stored = db_session.query(Account).filter(Account.id == account.id).one()
    assert stored.password_hash != "pw123456"
    assert verify_password("pw123456", stored.password_hash)
    assert stored.created_at is not None and stored.updated_at is not None


def test_create_account_duplicate_email(service, account, db_session):
    with pytest.raises(CreationError):
        service.create_account("other", "test@test.ru", "pw654321")
    assert db_session.query(Account).filter(Account.email == "test@test.ru").count() == 1


def test_create_account_unique_constraint_race(service, account, db_session, monkeypatch):
    # Simulate a concurrent insert that slipped past the up-front lookup
    monkeypatch.setattr(service, "find_by_email", lambda email: None)
    with pytest.raises(CreationError):
        service.create_account("other", "test@test.ru", "pw654321")
    assert db_session.query(Account).filter(Account.email == "test@test.ru").count() == 1


def test_register_password_mismatch(service, db_session):
    data = AccountCreate(name="test", email="mismatch@test.ru", password="pw123456", passwordOld="pw000000")
    with pytest.raises(PasswordMismatch):
        service.register(data)
    assert db_session.query(Account).count() == 0


def test_find_by_email_returns_full_record(service, account):
    found = service.find_by_email("test@test.ru")
    assert isinstance(found, Account)
    assert found.password_hash
    assert service.find_by_email("nobody@test.ru") is None


def test_find_by_id(service, account):
    found = service.find_by_id(account.id)
    assert found.id == account.id
    assert found.email == "test@test.ru"
    assert service.find_by_id(str(uuid.uuid4())) is None


def test_delete_by_id(service, account):
    deleted = service.delete_by_id(account.id)
    assert deleted.id == account.id
    assert service.find_by_id(account.id) is None

    with pytest.raises(NotFoundError):
        service.delete_by_id(account.id)


def test_set_role_and_is_role(service, account):
    updated = service.set_role(account.id, Role.ADMIN)
    assert updated.role == Role.ADMIN
    assert service.is_role(account.id, Role.ADMIN) is True
    assert service.is_role(account.id, Role.USER) is False

    service.set_role(account.id, Role.USER)
    assert service.is_role(account.id, Role.USER) is True
    assert service.is_role(account.id, Role.ADMIN) is False


def test_set_role_unknown_id(service):
    with pytest.raises(NotFoundError):
        service.set_role(str(uuid.uuid4()), Role.ADMIN)


def test_is_role_absent_account(service):
    assert service.is_role(str(uuid.uuid4()), Role.ADMIN) is False


def test_is_role_lookup_failure_is_false(settings):
    db = Mock()
    db.query.side_effect = SQLAlchemyError("boom")
    assert AccountService(db, settings).is_role("some-id", Role.ADMIN) is False
    db.rollback.assert_called_once()


def test_list_page(service):
    ids = [service.create_account(f"user{i}", f"user{i}@test.ru", "pw123456").id for i in range(4)]
    assert [a.id for a in service.list_page(0, 2)] == ids[:2]
    assert [a.id for a in service.list_page(2, 2)] == ids[2:]
    assert service.list_page(10, 2) == []


def test_login_success_issues_pair_for_account(service, account, settings):
    tokens = service.login("test@test.ru", "pw123456")
    assert tokens is not None

    payload = service.verify_token(tokens.token, settings.JWT_SECRET)
    assert payload["id"] == account.id
    assert payload["iss"] == settings.HOST

    refresh_payload = service.verify_token(tokens.refresh_token, settings.REFRESH_JWT_SECRET)
    assert refresh_payload["id"] == account.id


def test_login_failures_return_none(service, account):
    assert service.login("test@test.ru", "wrong-password") is None
    assert service.login("nobody@test.ru", "pw123456") is None


def test_token_pair_uses_distinct_secrets(service, settings):
    tokens = service.issue_token_pair({"id": "abc"})
    with pytest.raises(InvalidToken):
        service.verify_token(tokens.token, settings.REFRESH_JWT_SECRET)
    with pytest.raises(InvalidToken):
        service.verify_token(tokens.refresh_token, settings.JWT_SECRET)


def test_token_accepted_before_expiry_and_rejected_after(settings):
    valid = encode_token({"id": "abc"}, settings.JWT_SECRET, settings.HOST, timedelta(minutes=5))
    assert decode_token(valid, settings.JWT_SECRET, settings.HOST)["id"] == "abc"

    expired = encode_token({"id": "abc"}, settings.JWT_SECRET, settings.HOST, timedelta(seconds=-1))
    with pytest.raises(TokenExpired):
        decode_token(expired, settings.JWT_SECRET, settings.HOST)


def test_verify_token_rejects_wrong_issuer(service, settings):
    token = encode_token({"id": "abc"}, settings.JWT_SECRET, "someone-else", timedelta(minutes=5))
    with pytest.raises(InvalidToken):
        service.verify_token(token, settings.JWT_SECRET)


def test_verify_token_requires_id_claim(service, settings):
    token = encode_token({"sub": "abc"}, settings.JWT_SECRET, settings.HOST, timedelta(minutes=5))
    with pytest.raises(InvalidToken):
        service.verify_token(token, settings.JWT_SECRET)


def test_verify_token_requires_expiration(service, settings):
    token = jwt.encode({"id": "abc", "iss": settings.HOST}, settings.JWT_SECRET, algorithm="HS256")
    with pytest.raises(InvalidToken):
        service.verify_token(token, settings.JWT_SECRET)


def test_refresh_keeps_account_id(service, account):
    tokens = service.login("test@test.ru", "pw123456")
    refreshed = service.refresh(tokens.refresh_token)
    payload = service.verify_token(refreshed.token, service.settings.JWT_SECRET)
    assert payload["id"] == account.id


def test_email_lookup_normalizes_domain(service):
    created = service.create_account("test", "Mixed@Example.COM", "pw123456")
    assert created.email == "Mixed@example.com"
    assert service.find_by_email("Mixed@Example.COM").id == created.id
    assert service.login("Mixed@EXAMPLE.com", "pw123456") is not None

    with pytest.raises(CreationError):
        service.create_account("other", "Mixed@example.com", "pw654321")


def test_normalize_email_keeps_non_email_values():
    assert normalize_email("not-an-email") == "not-an-email"
    assert normalize_email("User@Example.COM") == "User@example.com"


def test_authenticate_returns_account(service, account):
    found = service.authenticate("test@test.ru", "pw123456")
    assert found.id == account.id
    assert service.authenticate("test@test.ru", "wrong-password") is None
    assert service.authenticate("nobody@test.ru", "pw123456") is None


def test_errors_default_and_custom_messages():
    assert NotFoundError().message == ERR_FIND_USER
    assert NotFoundError(None).message == ERR_FIND_USER
    assert NotFoundError("custom").message == "custom"
    assert TokenExpired().status_code == 401
