"""Basic-auth verification against the registered credential store"""

import base64
import hmac
from typing import Dict, Iterable, Optional

from corppay_gateway.domain.exceptions import (
    BadEncodingAuthError,
    CorpMismatchError,
    InvalidCredentialsError,
    MalformedAuthError,
    MissingOrMalformedAuthError,
)
from corppay_gateway.domain.models import Credential

BASIC_PREFIX = "Basic "


class CredentialStore:
    """Read-only lookup of registered (username, password, corp_id) triples"""

    def __init__(self, credentials: Iterable[Credential]):
        self._by_username: Dict[str, Credential] = {}
        for credential in credentials:
            if credential.username in self._by_username:
                raise ValueError(f"Duplicate username in credential store: {credential.username}")
            self._by_username[credential.username] = credential

    def lookup(self, username: str, password: str) -> Optional[Credential]:
        """Return the credential matching both fields exactly, or None"""
        credential = self._by_username.get(username)
        if credential is None:
            return None
        if not hmac.compare_digest(credential.password.encode("utf-8"), password.encode("utf-8")):
            return None
        return credential

    def __len__(self) -> int:
        return len(self._by_username)


class Authenticator:
    """Decodes a Basic Authorization header and resolves the caller's corp"""

    def __init__(self, store: CredentialStore):
        self.store = store

    def authenticate(self, authorization: Optional[str], expected_corp_id: Optional[str] = None) -> str:
        """
        Verify a Basic credential and return the caller's corp ID.

        Args:
            authorization: Raw Authorization header value
            expected_corp_id: Corp_ID claimed in the request header, if known

        Raises:
            MissingOrMalformedAuthError: header absent or not "Basic <payload>"
            BadEncodingAuthError: payload is not base64 encoded UTF-8
            MalformedAuthError: decoded text lacks exactly one ':' separator
            InvalidCredentialsError: no matching registered user
            CorpMismatchError: user belongs to another corp than expected_corp_id
        """
        if not authorization or not authorization.startswith(BASIC_PREFIX):
            raise MissingOrMalformedAuthError("Invalid LDAP Format", "LDAP ID or Password not found")

        encoded = authorization[len(BASIC_PREFIX):].strip()
        try:
            decoded = base64.b64decode(encoded, validate=True).decode("utf-8")
        except ValueError as e:
            raise BadEncodingAuthError("Invalid Base64 encoding in Authorization Header", str(e)) from e

        if decoded.count(":") != 1:
            raise MalformedAuthError(
                "Malformed Authorization Header",
                "Expected exactly one ':' separator between username and password",
            )

        username, password = decoded.split(":")
        credential = self.store.lookup(username, password)
        if credential is None:
            raise InvalidCredentialsError("LDAP ID or Password is wrong")

        if expected_corp_id is not None and expected_corp_id != credential.corp_id:
            raise CorpMismatchError("LDAP to CORP Mismatched", "LDAP ID and CORP ID do not match")

        return credential.corp_id
