"""Unit tests for Basic-auth verification"""

import base64

import pytest

from corppay_gateway.domain.auth import Authenticator, CredentialStore
from corppay_gateway.domain.exceptions import (
    BadEncodingAuthError,
    CorpMismatchError,
    InvalidCredentialsError,
    MalformedAuthError,
    MissingOrMalformedAuthError,
)
from corppay_gateway.domain.models import Credential
from tests.conftest import basic_auth


@pytest.fixture
def authenticator(credentials) -> Authenticator:
    return Authenticator(CredentialStore(credentials))


def test_authenticate_returns_corp_id(authenticator: Authenticator):
    """Valid credentials resolve to the registered corp"""
    assert authenticator.authenticate(basic_auth("Test", "Welcome@123")) == "TMW01"
    assert authenticator.authenticate(basic_auth("Finance", "Fin@2023"), "TMW04") == "TMW04"


@pytest.mark.parametrize("header", [None, "", "Bearer abc", "basic VGVzdDpXZWxjb21lQDEyMw==", "Basic"])
def test_missing_or_wrong_scheme(authenticator: Authenticator, header):
    """Absent header or non-Basic scheme is rejected before decoding"""
    with pytest.raises(MissingOrMalformedAuthError):
        authenticator.authenticate(header)


def test_bad_base64(authenticator: Authenticator):
    """Invalid base64 payload"""
    with pytest.raises(BadEncodingAuthError) as exc_info:
        authenticator.authenticate("Basic !!!not-base64!!!")
    assert exc_info.value.error_code.value == "ER004"


def test_non_utf8_payload(authenticator: Authenticator):
    """Decodes as base64 but not as UTF-8 text"""
    token = base64.b64encode(b"\xff\xfe:\xfd").decode("ascii")
    with pytest.raises(BadEncodingAuthError):
        authenticator.authenticate(f"Basic {token}")


def test_missing_separator(authenticator: Authenticator):
    token = base64.b64encode(b"TestWelcome@123").decode("ascii")
    with pytest.raises(MalformedAuthError):
        authenticator.authenticate(f"Basic {token}")


def test_more_than_one_separator(authenticator: Authenticator):
    token = base64.b64encode(b"Test:Welcome:123").decode("ascii")
    with pytest.raises(MalformedAuthError):
        authenticator.authenticate(f"Basic {token}")


@pytest.mark.parametrize(
    "username,password",
    [("Test", "wrong"), ("test", "Welcome@123"), ("Nobody", "Welcome@123"), ("Test", "welcome@123")],
)
def test_invalid_credentials_are_case_sensitive(authenticator: Authenticator, username, password):
    with pytest.raises(InvalidCredentialsError):
        authenticator.authenticate(basic_auth(username, password))


def test_corp_mismatch(authenticator: Authenticator):
    """Identity established but claimed Corp_ID belongs to another corp"""
    with pytest.raises(CorpMismatchError) as exc_info:
        authenticator.authenticate(basic_auth("Test", "Welcome@123"), "TMW02")
    assert exc_info.value.error_code.value == "ER003"


def test_credential_store_rejects_duplicate_usernames():
    with pytest.raises(ValueError):
        CredentialStore([Credential("Test", "a", "TMW01"), Credential("Test", "b", "TMW02")])


def test_credential_store_lookup(credentials):
    store = CredentialStore(credentials)
    assert len(store) == 4
    assert store.lookup("Admin", "Admin@123").corp_id == "TMW02"
    assert store.lookup("Admin", "admin@123") is None
